import decimal
import json
from typing import Any
from typing import BinaryIO

from mimecodec.codecs.adapt import convert
from mimecodec.codecs.adapt import to_builtins
from mimecodec.codecs.base import BufferedDecoder
from mimecodec.codecs.base import BufferedEncoder
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Marshaler
from mimecodec.errors import CodecError


class JSONCodec(Marshaler):
    """
    JSON ↔ bytes codec.

    ``use_number`` decodes floats as ``decimal.Decimal`` so no precision is
    lost before the value reaches its target type.
    ``disallow_unknown_fields`` rejects keys the target type doesn't declare.
    """

    def __init__(
        self, use_number: bool = False, disallow_unknown_fields: bool = False
    ) -> None:
        self.use_number = use_number
        self.disallow_unknown_fields = disallow_unknown_fields

    def content_type(self, value: Any) -> str:
        return "application/json; charset=utf-8"

    def marshal(self, value: Any) -> bytes:
        obj = to_builtins(value)
        try:
            # compact output, utf-8 encoded
            return json.dumps(
                obj, separators=(",", ":"), ensure_ascii=False
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise CodecError(f"json: {e}") from e

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        try:
            obj = json.loads(
                data.decode("utf-8"),
                parse_float=decimal.Decimal if self.use_number else None,
            )
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CodecError(f"json: {e}") from e
        return convert(obj, type_, forbid_unknown=self.disallow_unknown_fields)

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return BufferedEncoder(self, stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return BufferedDecoder(self, stream)

    def __repr__(self) -> str:
        return (
            f"JSONCodec(use_number={self.use_number}, "
            f"disallow_unknown_fields={self.disallow_unknown_fields})"
        )
