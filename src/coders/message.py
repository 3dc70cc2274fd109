"""Message and decoded record types exchanged with the host ETL job."""

from dataclasses import dataclass
from typing import Any

__all__ = [
    "Message",
    "DecodedRecord",
    "from_consumer_record",
]


@dataclass(frozen=True)
class Message:
    """Raw message handed to a decoder.

    Only ``payload`` is decoded. The transport fields are carried for log
    context; ``timestamp`` is the broker timestamp and is never used as the
    record timestamp.
    """

    payload: bytes | None
    topic: str = ""
    partition: int = -1
    offset: int = -1
    key: bytes | None = None
    timestamp: int | None = None


@dataclass(frozen=True)
class DecodedRecord:
    """Decoded payload text plus its resolved epoch-millisecond timestamp."""

    payload: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {"payload": self.payload, "timestamp": self.timestamp}


def from_consumer_record(record) -> Message:
    """Convert a Kafka ConsumerRecord (aiokafka or kafka-python) to Message."""
    return Message(
        payload=record.value,
        topic=record.topic,
        partition=record.partition,
        offset=record.offset,
        key=getattr(record, "key", None),
        timestamp=getattr(record, "timestamp", None),
    )
