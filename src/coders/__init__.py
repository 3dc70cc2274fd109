"""
Message decoders for the Kafka-to-HDFS ETL job.

The host constructs a decoder, calls init(props, topic_name) once, then
decode(message) for each record:

    >>> from coders import Message, create_decoder
    >>> decoder = create_decoder({"camus.message.timestamp.index": "1"}, "clicks")
    >>> decoder.decode(Message(payload=b"foo,1620000000000,bar")).timestamp
    1620000000000
"""

from coders.csv_decoder import CsvStringMessageDecoder, CsvTimestampConfig
from coders.decoder import MessageDecoder
from coders.factory import create_decoder, load_decoder_class, register_decoder
from coders.message import DecodedRecord, Message, from_consumer_record

__all__ = [
    "CsvStringMessageDecoder",
    "CsvTimestampConfig",
    "DecodedRecord",
    "Message",
    "MessageDecoder",
    "create_decoder",
    "from_consumer_record",
    "load_decoder_class",
    "register_decoder",
]
