from typing import Any
from typing import BinaryIO

import yaml

from mimecodec.codecs.adapt import convert
from mimecodec.codecs.adapt import to_builtins
from mimecodec.codecs.base import BufferedDecoder
from mimecodec.codecs.base import BufferedEncoder
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Marshaler
from mimecodec.errors import CodecError


class YAMLCodec(Marshaler):
    """
    YAML ↔ bytes codec (PyYAML safe loader/dumper).
    """

    def content_type(self, value: Any) -> str:
        return "application/x-yaml; charset=utf-8"

    def marshal(self, value: Any) -> bytes:
        try:
            text = yaml.safe_dump(
                to_builtins(value), sort_keys=False, allow_unicode=True
            )
        except yaml.YAMLError as e:
            raise CodecError(f"yaml: {e}") from e
        return text.encode("utf-8")

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        try:
            obj = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise CodecError(f"yaml: {e}") from e
        return convert(obj, type_)

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return BufferedEncoder(self, stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return BufferedDecoder(self, stream)
