"""
CSV message decoder that stamps each record with a timestamp column.

Each payload is one CSV line. The decoder reads the configured column as an
epoch-millisecond timestamp and wraps the untouched payload text with it:

    camus.message.timestamp.index   zero-based column (default "0")
    camus.message.timestamp.parse   "false" stamps records with wall-clock
                                    time instead (default "true")

Decoding never raises. Every failure is logged and replaced with a default:

    payload not UTF-8           platform default decoding
    payload not bytes-like      empty text
    parse flag unreadable       extraction stays enabled
    index unreadable/negative   column 0
    column missing/non-integer  timestamp 0
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

from coders.decoder import MessageDecoder
from coders.message import DecodedRecord
from coders.parsing import describe_value, decode_text, parse_bool, parse_int, split_fields
from core.logging.utilities import log_with_context
from core.types import DecodeFallback

logger = logging.getLogger(__name__)

CAMUS_MESSAGE_TIMESTAMP_INDEX = "camus.message.timestamp.index"
DEFAULT_TIMESTAMP_INDEX = "0"
CAMUS_MESSAGE_TIMESTAMP_PARSE = "camus.message.timestamp.parse"
DEFAULT_TIMESTAMP_PARSE = "true"

# Timestamp used when the configured column cannot be read
UNPARSED_TIMESTAMP = 0


def current_time_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class CsvTimestampConfig:
    """Resolved decoder settings, fixed for the life of a job."""

    timestamp_index: int = 0
    timestamp_parse: bool = True

    @classmethod
    def from_properties(cls, props: Mapping[str, Any], topic_name: str = "") -> "CsvTimestampConfig":
        """
        Resolve settings from host properties, defaulting anything malformed.

        Malformed values are logged as warnings and never raised.
        """
        raw_parse = props.get(CAMUS_MESSAGE_TIMESTAMP_PARSE, DEFAULT_TIMESTAMP_PARSE)
        parse_result = parse_bool(raw_parse)
        if not parse_result.ok:
            log_with_context(
                logger,
                logging.WARNING,
                "Unable to parse boolean, falling back to default true",
                fallback=DecodeFallback.BOOLEAN.value,
                property=CAMUS_MESSAGE_TIMESTAMP_PARSE,
                value=describe_value(raw_parse),
                default=DEFAULT_TIMESTAMP_PARSE,
                message_topic=topic_name,
            )

        raw_index = props.get(CAMUS_MESSAGE_TIMESTAMP_INDEX, DEFAULT_TIMESTAMP_INDEX)
        index_result = parse_int(raw_index)
        # Negative indexes are treated as malformed rather than counted from the end
        if index_result.ok and index_result.value >= 0:
            timestamp_index = index_result.value
        else:
            timestamp_index = int(DEFAULT_TIMESTAMP_INDEX)
            log_with_context(
                logger,
                logging.WARNING,
                "Unable to parse index, falling back to default 0",
                fallback=DecodeFallback.INDEX.value,
                property=CAMUS_MESSAGE_TIMESTAMP_INDEX,
                value=describe_value(raw_index),
                default=DEFAULT_TIMESTAMP_INDEX,
                message_topic=topic_name,
            )

        return cls(
            timestamp_index=timestamp_index,
            timestamp_parse=parse_result.or_default(True),
        )


class CsvStringMessageDecoder(MessageDecoder):
    """
    Decodes CSV payloads into DecodedRecord(payload, timestamp).

    Configuration is resolved once in init() into an immutable
    CsvTimestampConfig, so decode() is safe to call from many threads.
    """

    def __init__(self) -> None:
        super().__init__()
        self.config = CsvTimestampConfig()

    def init(self, props: Mapping[str, Any], topic_name: str) -> None:
        super().init(props, topic_name)
        self.config = CsvTimestampConfig.from_properties(self.props, topic_name)
        logger.debug(
            "CSV decoder initialized",
            extra={
                "message_topic": topic_name,
                "timestamp_index": self.config.timestamp_index,
                "timestamp_parse": self.config.timestamp_parse,
            },
        )

    def decode(self, message: Any) -> DecodedRecord:
        """
        Decode one message.

        Accepts a Message, any host message object exposing ``payload``
        (and optionally ``topic``, ``partition``, ``offset``), or a bare
        bytes/str payload.
        """
        if message is None or isinstance(message, (bytes, bytearray, memoryview, str)):
            payload = message
            log_fields = {"message_topic": self.topic_name}
        else:
            payload = getattr(message, "payload", message)
            log_fields = {
                "message_topic": getattr(message, "topic", None) or self.topic_name,
                "message_partition": getattr(message, "partition", None),
                "message_offset": getattr(message, "offset", None),
            }

        text_result = decode_text(payload)
        text = text_result.value
        if not text_result.ok:
            log_with_context(
                logger,
                logging.ERROR,
                "Unable to decode payload as UTF-8, falling back to system default",
                fallback=DecodeFallback.ENCODING.value,
                error_message=text_result.error,
                payload_size=len(payload) if isinstance(payload, (bytes, bytearray, str)) else None,
                **log_fields,
            )

        if not self.config.timestamp_parse:
            return DecodedRecord(payload=text, timestamp=current_time_millis())

        return DecodedRecord(payload=text, timestamp=self._extract_timestamp(text, log_fields))

    def _extract_timestamp(self, text: str, log_fields: dict[str, Any]) -> int:
        columns = split_fields(text)
        index = self.config.timestamp_index

        if index >= len(columns):
            log_with_context(
                logger,
                logging.ERROR,
                "Timestamp index out of range for CSV row, using timestamp 0",
                fallback=DecodeFallback.TIMESTAMP.value,
                timestamp_index=index,
                column_count=len(columns),
                **log_fields,
            )
            return UNPARSED_TIMESTAMP

        result = parse_int(columns[index])
        if not result.ok:
            log_with_context(
                logger,
                logging.ERROR,
                "Unable to parse Long from CSV of given index",
                fallback=DecodeFallback.TIMESTAMP.value,
                timestamp_index=index,
                error_message=result.error,
                **log_fields,
            )
        return result.or_default(UNPARSED_TIMESTAMP)
