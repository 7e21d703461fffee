import tomllib
from typing import Any
from typing import BinaryIO

import tomli_w

from mimecodec.codecs.adapt import convert
from mimecodec.codecs.adapt import to_builtins
from mimecodec.codecs.base import BufferedDecoder
from mimecodec.codecs.base import BufferedEncoder
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Marshaler
from mimecodec.errors import CodecError


class TOMLCodec(Marshaler):
    """
    TOML ↔ bytes codec: ``tomllib`` reads, ``tomli_w`` writes.
    Only table-like values can be encoded; ``None`` fields are dropped.
    """

    def content_type(self, value: Any) -> str:
        return "application/toml; charset=utf-8"

    def marshal(self, value: Any) -> bytes:
        obj = _drop_none(to_builtins(value))
        if not isinstance(obj, dict):
            raise CodecError(
                f"toml: can't encode {type(value).__name__} as a table"
            )
        try:
            return tomli_w.dumps(obj).encode("utf-8")
        except TypeError as e:
            raise CodecError(f"toml: {e}") from e

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        try:
            obj = tomllib.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            raise CodecError(f"toml: {e}") from e
        return convert(obj, type_)

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return BufferedEncoder(self, stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return BufferedDecoder(self, stream)


def _drop_none(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _drop_none(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list):
        return [_drop_none(v) for v in obj if v is not None]
    return obj
