"""Decode CSV lines from a file or stdin and print JSON records. Use --help for usage."""

import argparse
import json
import logging
import sys
import time
from contextlib import nullcontext
from pathlib import Path

from dotenv import load_dotenv

from coders.csv_decoder import CAMUS_MESSAGE_TIMESTAMP_INDEX, CAMUS_MESSAGE_TIMESTAMP_PARSE
from coders.factory import create_decoder
from coders.message import Message
from config.config import load_properties
from core.errors import PipelineError
from core.logging import LogContext, format_decode_summary, log_exception, setup_logging

# Placeholder logger until setup_logging() is called in main()
logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "csv"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m coders",
        description="Decode CSV records the way the ETL job does and print them as JSON lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Decode a file using column 2 as the timestamp
  python -m coders events.csv --index 2

  # Decode stdin with properties from a YAML file
  cat events.csv | python -m coders --config src/config/decoder.yaml --topic clicks

  # Stamp records with wall-clock time
  python -m coders events.csv --no-parse
        """,
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="CSV file to decode, one record per line (default: stdin)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML properties file",
    )
    parser.add_argument(
        "--topic",
        default=DEFAULT_TOPIC,
        help=f"Topic name passed to the decoder (default: {DEFAULT_TOPIC})",
    )
    parser.add_argument(
        "--index",
        help="Override camus.message.timestamp.index",
    )
    parser.add_argument(
        "--no-parse",
        action="store_true",
        help="Set camus.message.timestamp.parse to false",
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also write JSON logs under ./logs",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict[str, str]:
    overrides = {}
    if args.index is not None:
        overrides[CAMUS_MESSAGE_TIMESTAMP_INDEX] = args.index
    if args.no_parse:
        overrides[CAMUS_MESSAGE_TIMESTAMP_PARSE] = "false"
    return overrides


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    setup_logging(
        name="coders",
        stage="decode",
        topic=args.topic,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
        log_to_file=args.log_file,
    )

    try:
        props = load_properties(config_path=args.config, overrides=_overrides_from_args(args))
        decoder = create_decoder(props, args.topic)
    except PipelineError as e:
        log_exception(logger, e, "Unable to set up decoder", include_traceback=args.verbose)
        return 1

    try:
        source = nullcontext(sys.stdin.buffer) if args.input == "-" else open(args.input, "rb")
    except OSError as e:
        log_exception(logger, e, "Unable to open input", include_traceback=args.verbose)
        return 1

    processed = 0
    defaulted = 0
    start = time.perf_counter()

    with LogContext(stage="decode", topic=args.topic), source as stream:
        for offset, line in enumerate(stream):
            line = line.rstrip(b"\r\n")
            if not line:
                continue

            record = decoder.decode(
                Message(payload=line, topic=args.topic, partition=0, offset=offset)
            )
            print(json.dumps(record.to_dict(), ensure_ascii=False))

            processed += 1
            if record.timestamp == 0:
                defaulted += 1

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        format_decode_summary(processed, defaulted, duration_ms),
        extra={
            "records_processed": processed,
            "records_defaulted": defaulted,
            "duration_ms": duration_ms,
        },
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
