"""Base class for message decoders loaded by the host ETL job."""

from abc import ABC, abstractmethod
from typing import Any, Mapping

from coders.message import DecodedRecord, Message


class MessageDecoder(ABC):
    """
    Decoder lifecycle expected by the host.

    The host constructs the decoder with no arguments, calls init() once per
    job, then calls decode() for every record. Subclasses must not mutate
    shared state in decode(); it may run on several threads at once.
    """

    def __init__(self) -> None:
        self.props: Mapping[str, Any] = {}
        self.topic_name: str = ""

    def init(self, props: Mapping[str, Any], topic_name: str) -> None:
        """
        Capture host properties and the topic being decoded.

        Args:
            props: Property name to value mapping
            topic_name: Topic this decoder instance serves
        """
        self.props = dict(props)
        self.topic_name = topic_name

    @abstractmethod
    def decode(self, message: Message) -> DecodedRecord:
        """Decode one message. Implementations must not raise."""
        ...
