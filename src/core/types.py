"""
Core types and protocols used across modules.

This module provides base types, enums, and protocol definitions that are
shared across the decoders to ensure consistency and type safety.
"""

from enum import Enum
from typing import Any, Mapping, Protocol


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Environment failures (I/O) that may succeed when rerun
        PERMANENT: Non-retriable failures (bad configuration, missing classes)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class DecodeFallback(Enum):
    """
    Recoverable decode failures and the default each one falls back to.

    None of these abort a record. They are logged and replaced:
        ENCODING: payload is not UTF-8, platform default decoding used
        BOOLEAN: timestamp parse flag unreadable, extraction stays enabled
        INDEX: timestamp column index unreadable, column 0 used
        TIMESTAMP: column missing or not an integer, timestamp 0 used
    """

    ENCODING = "encoding"
    BOOLEAN = "boolean"
    INDEX = "index"
    TIMESTAMP = "timestamp"


class Decoder(Protocol):
    """
    Protocol for message decoders invoked by the host ETL job.

    The host calls init() once per job and decode() once per record.
    """

    def init(self, props: Mapping[str, Any], topic_name: str) -> None:
        """
        Capture configuration for the topic being decoded.

        Args:
            props: Property name to value mapping supplied by the host
            topic_name: Topic the decoder is bound to
        """
        ...

    def decode(self, message: Any) -> Any:
        """
        Decode one message into the record handed back to the host.

        Args:
            message: Message carrying a raw byte payload

        Returns:
            Decoded record value
        """
        ...


__all__ = [
    "DecodeFallback",
    "Decoder",
    "ErrorCategory",
]
