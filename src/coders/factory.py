"""
Decoder factory: resolve, construct, and initialize the decoder for a topic.

The decoder class comes from host properties, most specific first:

    camus.message.decoder.class.<topic>
    camus.message.decoder.class

A value is either a short name registered with register_decoder() or a dotted
``module.ClassName`` path. With neither property set the CSV decoder is used.
"""

import importlib
import logging
from typing import Any, Mapping

from coders.csv_decoder import CsvStringMessageDecoder
from coders.decoder import MessageDecoder
from core.errors import DecoderNotFoundError
from core.types import Decoder

logger = logging.getLogger(__name__)

CAMUS_MESSAGE_DECODER_CLASS = "camus.message.decoder.class"

DEFAULT_DECODER_CLASS: type[MessageDecoder] = CsvStringMessageDecoder

# Short names usable in place of a dotted class path
DECODER_REGISTRY: dict[str, type[MessageDecoder]] = {
    "csv": CsvStringMessageDecoder,
    "CsvStringMessageDecoder": CsvStringMessageDecoder,
}


def register_decoder(name: str, decoder_class: type[MessageDecoder]) -> None:
    """Register a decoder class under a short name."""
    if not (isinstance(decoder_class, type) and issubclass(decoder_class, MessageDecoder)):
        raise TypeError(f"{decoder_class!r} is not a MessageDecoder subclass")
    DECODER_REGISTRY[name] = decoder_class


def get_decoder_class_name(props: Mapping[str, Any], topic_name: str) -> str | None:
    """Return the configured decoder class for a topic, or None if unset."""
    for key in (f"{CAMUS_MESSAGE_DECODER_CLASS}.{topic_name}", CAMUS_MESSAGE_DECODER_CLASS):
        value = props.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def load_decoder_class(class_path: str) -> type[MessageDecoder]:
    """
    Resolve a registered short name or dotted path to a decoder class.

    Raises:
        DecoderNotFoundError: If the class cannot be imported or is not a
            MessageDecoder subclass
    """
    if class_path in DECODER_REGISTRY:
        return DECODER_REGISTRY[class_path]

    module_name, _, class_name = class_path.rpartition(".")
    if not module_name:
        raise DecoderNotFoundError(class_path)

    try:
        module = importlib.import_module(module_name)
        decoder_class = getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise DecoderNotFoundError(class_path, cause=e) from e

    if not (isinstance(decoder_class, type) and issubclass(decoder_class, MessageDecoder)):
        raise DecoderNotFoundError(
            class_path,
            cause=TypeError(f"{class_name} is not a MessageDecoder subclass"),
        )
    return decoder_class


def create_decoder(props: Mapping[str, Any], topic_name: str) -> Decoder:
    """
    Build and initialize the decoder configured for a topic.

    Args:
        props: Host properties
        topic_name: Topic the decoder will serve

    Returns:
        Initialized decoder instance

    Raises:
        DecoderNotFoundError: If a configured decoder class cannot be loaded
    """
    class_path = get_decoder_class_name(props, topic_name)
    decoder_class = load_decoder_class(class_path) if class_path else DEFAULT_DECODER_CLASS

    decoder = decoder_class()
    decoder.init(props, topic_name)

    logger.info(
        "Created decoder for topic",
        extra={
            "message_topic": topic_name,
            "decoder_class": f"{decoder_class.__module__}.{decoder_class.__qualname__}",
        },
    )
    return decoder
