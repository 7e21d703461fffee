from typing import Any
from typing import BinaryIO
from typing import Optional
from typing import Type

from google.protobuf.message import DecodeError
from google.protobuf.message import EncodeError
from google.protobuf.message import Message as PBMessage

from mimecodec.codecs.adapt import is_message_type
from mimecodec.codecs.base import BufferedDecoder
from mimecodec.codecs.base import BufferedEncoder
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Marshaler
from mimecodec.errors import CodecError


class ProtobufCodec(Marshaler):
    """
    Protobuf ↔ bytes codec.

    Decoding needs a generated Message class: either the ``type_`` passed
    at decode time or the ``message_type`` given to the constructor.
    """

    def __init__(self, message_type: Optional[Type[PBMessage]] = None):
        self._message_type = message_type

    def content_type(self, value: Any) -> str:
        return "application/x-protobuf"

    def marshal(self, value: Any) -> bytes:
        if not isinstance(value, PBMessage):
            raise CodecError(
                f"protobuf: expected a protobuf message, got {type(value)}"
            )
        try:
            return value.SerializeToString()
        except EncodeError as e:
            raise CodecError(f"protobuf: {e}") from e

    def unmarshal(self, data: bytes, type_: Any = None) -> PBMessage:
        message_type = type_ or self._message_type
        if not is_message_type(message_type):
            raise CodecError(
                "protobuf: decode target must be a protobuf message class, "
                f"got {message_type!r}"
            )
        msg = message_type()
        try:
            msg.ParseFromString(data)
        except DecodeError as e:
            raise CodecError(f"protobuf: {e}") from e
        return msg

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return BufferedEncoder(self, stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return BufferedDecoder(self, stream)
