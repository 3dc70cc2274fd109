"""Tests for the CSV timestamp decoder."""

import logging
import threading
import time
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from coders.csv_decoder import (
    CAMUS_MESSAGE_TIMESTAMP_INDEX,
    CAMUS_MESSAGE_TIMESTAMP_PARSE,
    CsvStringMessageDecoder,
    CsvTimestampConfig,
)
from coders.message import DecodedRecord, Message


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _decoder(index=None, parse=None, topic="events") -> CsvStringMessageDecoder:
    props = {}
    if index is not None:
        props[CAMUS_MESSAGE_TIMESTAMP_INDEX] = index
    if parse is not None:
        props[CAMUS_MESSAGE_TIMESTAMP_PARSE] = parse
    decoder = CsvStringMessageDecoder()
    decoder.init(props, topic)
    return decoder


# =========================================================================
# CsvTimestampConfig
# =========================================================================


class TestCsvTimestampConfig:
    def test_defaults_when_properties_absent(self):
        config = CsvTimestampConfig.from_properties({})
        assert config == CsvTimestampConfig(timestamp_index=0, timestamp_parse=True)

    def test_reads_index_and_parse(self):
        config = CsvTimestampConfig.from_properties(
            {CAMUS_MESSAGE_TIMESTAMP_INDEX: "3", CAMUS_MESSAGE_TIMESTAMP_PARSE: "false"}
        )
        assert config.timestamp_index == 3
        assert config.timestamp_parse is False

    def test_accepts_native_values(self):
        config = CsvTimestampConfig.from_properties(
            {CAMUS_MESSAGE_TIMESTAMP_INDEX: 2, CAMUS_MESSAGE_TIMESTAMP_PARSE: False}
        )
        assert config.timestamp_index == 2
        assert config.timestamp_parse is False

    def test_parse_flag_is_case_insensitive(self):
        config = CsvTimestampConfig.from_properties({CAMUS_MESSAGE_TIMESTAMP_PARSE: " FALSE "})
        assert config.timestamp_parse is False

    def test_malformed_index_falls_back_to_zero(self, caplog):
        with caplog.at_level(logging.WARNING, logger="coders.csv_decoder"):
            config = CsvTimestampConfig.from_properties({CAMUS_MESSAGE_TIMESTAMP_INDEX: "two"})

        assert config.timestamp_index == 0
        assert "Unable to parse index" in caplog.text
        assert caplog.records[0].fallback == "index"

    def test_negative_index_falls_back_to_zero(self, caplog):
        with caplog.at_level(logging.WARNING, logger="coders.csv_decoder"):
            config = CsvTimestampConfig.from_properties({CAMUS_MESSAGE_TIMESTAMP_INDEX: "-1"})

        assert config.timestamp_index == 0
        assert "Unable to parse index" in caplog.text

    def test_malformed_parse_flag_falls_back_to_true(self, caplog):
        with caplog.at_level(logging.WARNING, logger="coders.csv_decoder"):
            config = CsvTimestampConfig.from_properties({CAMUS_MESSAGE_TIMESTAMP_PARSE: "maybe"})

        assert config.timestamp_parse is True
        assert "Unable to parse boolean" in caplog.text
        assert caplog.records[0].fallback == "boolean"

    def test_overlong_index_falls_back_to_zero(self, caplog):
        with caplog.at_level(logging.WARNING, logger="coders.csv_decoder"):
            config = CsvTimestampConfig.from_properties({CAMUS_MESSAGE_TIMESTAMP_INDEX: "9" * 5000})

        assert config.timestamp_index == 0
        assert caplog.records[0].fallback == "index"
        assert len(caplog.records[0].value) < 200

    def test_huge_native_index_falls_back_to_zero(self):
        config = CsvTimestampConfig.from_properties({CAMUS_MESSAGE_TIMESTAMP_INDEX: 10**5000})
        assert config.timestamp_index == 0

    def test_is_immutable(self):
        config = CsvTimestampConfig()
        with pytest.raises(AttributeError):
            config.timestamp_index = 4


# =========================================================================
# init
# =========================================================================


class TestInit:
    def test_captures_props_and_topic(self):
        decoder = _decoder(index="1", topic="clicks")

        assert decoder.topic_name == "clicks"
        assert decoder.props == {CAMUS_MESSAGE_TIMESTAMP_INDEX: "1"}
        assert decoder.config.timestamp_index == 1

    def test_never_raises_on_bad_values(self):
        decoder = _decoder(index="x", parse="y")
        assert decoder.config == CsvTimestampConfig()

    def test_props_are_copied(self):
        props = {CAMUS_MESSAGE_TIMESTAMP_INDEX: "1"}
        decoder = CsvStringMessageDecoder()
        decoder.init(props, "clicks")

        props[CAMUS_MESSAGE_TIMESTAMP_INDEX] = "5"
        assert decoder.props[CAMUS_MESSAGE_TIMESTAMP_INDEX] == "1"
        assert decoder.config.timestamp_index == 1

    def test_uninitialized_decoder_uses_defaults(self):
        record = CsvStringMessageDecoder().decode(Message(payload=b"1620000000000,a"))
        assert record.timestamp == 1620000000000


# =========================================================================
# decode
# =========================================================================


class TestDecodeTimestampColumn:
    def test_first_column_timestamp(self):
        record = _decoder(index="0").decode(Message(payload=b"1620000000000,foo,bar"))
        assert record == DecodedRecord(payload="1620000000000,foo,bar", timestamp=1620000000000)

    def test_second_column_timestamp(self):
        record = _decoder(index="1").decode(Message(payload=b"foo,1620000000000,bar"))
        assert record.timestamp == 1620000000000

    def test_last_column_timestamp(self):
        record = _decoder(index="2").decode(Message(payload=b"foo,bar,1620000000000"))
        assert record.timestamp == 1620000000000

    def test_whitespace_around_fields_is_ignored(self):
        record = _decoder(index="1").decode(Message(payload=b"foo ,  1620000000000  , bar"))
        assert record.timestamp == 1620000000000

    def test_trailing_newline_is_ignored_for_parsing(self):
        record = _decoder(index="1").decode(Message(payload=b"foo,1620000000000\n"))
        assert record.timestamp == 1620000000000
        assert record.payload == "foo,1620000000000\n"

    def test_negative_timestamp(self):
        record = _decoder().decode(Message(payload=b"-5000,foo"))
        assert record.timestamp == -5000

    def test_accepts_bare_bytes(self):
        record = _decoder(index="1").decode(b"foo,1620000000000")
        assert record.timestamp == 1620000000000

    def test_accepts_bytearray_payload(self):
        record = _decoder().decode(Message(payload=bytearray(b"1620000000000,x")))
        assert record.timestamp == 1620000000000

    def test_malformed_index_uses_column_zero(self):
        record = _decoder(index="abc").decode(Message(payload=b"1620000000000,foo"))
        assert record.timestamp == 1620000000000


class TestDecodeFallbacks:
    def test_index_out_of_range_returns_zero(self, caplog):
        decoder = _decoder(index="5")

        with caplog.at_level(logging.ERROR, logger="coders.csv_decoder"):
            record = decoder.decode(Message(payload=b"foo,bar", topic="events", partition=1, offset=7))

        assert record == DecodedRecord(payload="foo,bar", timestamp=0)
        assert "out of range" in caplog.text
        log = caplog.records[0]
        assert log.fallback == "timestamp"
        assert log.column_count == 2
        assert log.message_offset == 7

    def test_non_numeric_column_returns_zero(self, caplog):
        with caplog.at_level(logging.ERROR, logger="coders.csv_decoder"):
            record = _decoder(index="0").decode(Message(payload=b"foo,bar"))

        assert record.timestamp == 0
        assert "Unable to parse Long" in caplog.text

    def test_malformed_index_and_non_numeric_first_column_returns_zero(self):
        record = _decoder(index="nope").decode(Message(payload=b"foo,bar"))
        assert record.timestamp == 0

    @pytest.mark.parametrize(
        "payload",
        [b"", b"1.5e12,foo", b"1_620_000,foo", b"0x10,foo", b"99999999999999999999,foo"],
    )
    def test_unparseable_values_return_zero(self, payload):
        assert _decoder().decode(Message(payload=payload)).timestamp == 0

    def test_none_payload_returns_empty_text(self):
        record = _decoder().decode(Message(payload=None))
        assert record == DecodedRecord(payload="", timestamp=0)

    def test_invalid_utf8_falls_back_to_platform_decoding(self, caplog):
        payload = b"1620000000000,caf\xe9"

        with patch("coders.parsing.platform_encoding", return_value="latin-1"):
            with caplog.at_level(logging.ERROR, logger="coders.csv_decoder"):
                record = _decoder().decode(Message(payload=payload))

        assert record.payload == "1620000000000,café"
        assert record.timestamp == 1620000000000
        assert "falling back to system default" in caplog.text
        assert caplog.records[0].fallback == "encoding"

    def test_overlong_digit_column_returns_zero(self, caplog):
        with caplog.at_level(logging.ERROR, logger="coders.csv_decoder"):
            record = _decoder().decode(Message(payload=b"1" * 5000 + b",foo"))

        assert record.timestamp == 0
        assert "Unable to parse Long" in caplog.text

    def test_host_message_object_is_read_by_attribute(self):
        message = SimpleNamespace(payload=b"1620000000000,foo", topic="clicks", partition=3, offset=9)
        record = _decoder().decode(message)
        assert record == DecodedRecord(payload="1620000000000,foo", timestamp=1620000000000)

    def test_host_message_without_position_fields(self):
        record = _decoder(index="1").decode(SimpleNamespace(payload=b"foo,1620000000000"))
        assert record.timestamp == 1620000000000

    def test_non_bytes_payload_decodes_to_empty_text(self, caplog):
        with caplog.at_level(logging.ERROR, logger="coders.csv_decoder"):
            record = _decoder().decode(SimpleNamespace(payload=12345))

        assert record == DecodedRecord(payload="", timestamp=0)
        assert caplog.records[0].fallback == "encoding"

    def test_object_without_payload_never_raises(self):
        record = _decoder().decode(object())
        assert record == DecodedRecord(payload="", timestamp=0)

    def test_decode_never_raises_for_odd_input(self):
        decoder = _decoder(index="3")
        for payload in (b",,,", b"   ", b"\xff\xfe\x00", b"a,b,c,\xe2\x82"):
            assert isinstance(decoder.decode(Message(payload=payload)), DecodedRecord)


class TestDecodeWithoutParsing:
    def test_uses_wall_clock_time(self):
        decoder = _decoder(parse="false")

        before = _now_ms()
        record = decoder.decode(Message(payload=b"1620000000000,foo"))
        after = _now_ms()

        assert before <= record.timestamp <= after

    def test_payload_unchanged(self):
        record = _decoder(parse="false", index="9").decode(Message(payload=b"anything at all"))
        assert record.payload == "anything at all"

    def test_does_not_log_column_failures(self, caplog):
        with caplog.at_level(logging.ERROR, logger="coders.csv_decoder"):
            _decoder(parse="false", index="9").decode(Message(payload=b"foo"))

        assert caplog.records == []


class TestPayloadRoundTrip:
    @pytest.mark.parametrize(
        "text",
        ["1620000000000,foo,bar", " padded , fields ", "ünïcödé,1", "", "a,,b,"],
    )
    def test_payload_equals_utf8_decoding(self, text):
        record = _decoder().decode(Message(payload=text.encode("utf-8")))
        assert record.payload == text


class TestConcurrentDecode:
    def test_threads_share_one_decoder(self):
        decoder = _decoder(index="1")
        results = {}

        def work(n):
            record = decoder.decode(Message(payload=f"row{n},{1620000000000 + n}".encode()))
            results[n] = record.timestamp

        threads = [threading.Thread(target=work, args=(n,)) for n in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {n: 1620000000000 + n for n in range(20)}
