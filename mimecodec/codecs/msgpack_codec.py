import datetime
import decimal
import uuid
from typing import Any
from typing import BinaryIO

import msgpack
from msgpack.exceptions import UnpackException

from mimecodec.codecs.adapt import convert
from mimecodec.codecs.adapt import to_builtins
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Marshaler
from mimecodec.errors import CodecError


def _default(obj: Any) -> Any:
    if isinstance(obj, (datetime.date, datetime.time)):
        return obj.isoformat()
    if isinstance(obj, (decimal.Decimal, uuid.UUID)):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"can't serialize {type(obj).__name__}")


class MsgpackEncoder(Encoder):
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._packer = msgpack.Packer(default=_default, use_bin_type=True)

    def encode(self, value: Any) -> None:
        obj = to_builtins(value, mode="python")
        try:
            data = self._packer.pack(obj)
        except (TypeError, ValueError, OverflowError) as e:
            raise CodecError(f"msgpack: {e}") from e
        self._stream.write(data)


class MsgpackDecoder(Decoder):
    def __init__(self, stream: BinaryIO) -> None:
        self._unpacker = msgpack.Unpacker(stream, raw=False)

    def decode(self, type_: Any = None) -> Any:
        try:
            obj = self._unpacker.unpack()
        except (UnpackException, ValueError) as e:
            raise CodecError(f"msgpack: {e!r}") from e
        return convert(obj, type_)


class MsgpackCodec(Marshaler):
    """
    MessagePack ↔ bytes codec with a real streaming encoder/decoder.
    """

    def content_type(self, value: Any) -> str:
        return "application/x-msgpack; charset=utf-8"

    def marshal(self, value: Any) -> bytes:
        obj = to_builtins(value, mode="python")
        try:
            return msgpack.packb(obj, default=_default, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as e:
            raise CodecError(f"msgpack: {e}") from e

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        try:
            obj = msgpack.unpackb(data, raw=False)
        except (UnpackException, ValueError) as e:
            raise CodecError(f"msgpack: {e!r}") from e
        return convert(obj, type_)

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return MsgpackEncoder(stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return MsgpackDecoder(stream)
