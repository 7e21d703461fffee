import uuid
from typing import Any
from typing import BinaryIO
from typing import Callable
from typing import Dict
from typing import Mapping
from typing import Optional

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser
from python_multipart.multipart import parse_options_header

from mimecodec.codecs.base import BufferedDecoder
from mimecodec.codecs.base import BufferedEncoder
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Fields
from mimecodec.codecs.base import FormCodec
from mimecodec.codecs.base import Marshaler
from mimecodec.codecs.form_codec import WWWFormCodec
from mimecodec.errors import CodecError


class MultipartFormCodec(Marshaler, FormCodec):
    """
    multipart/form-data codec wrapping a form codec.

    Binding hands it the text fields of an already parsed body through
    ``decode``; ``marshal``/``unmarshal`` handle raw bodies and only carry
    text fields.
    """

    def __init__(
        self,
        codec: Optional[WWWFormCodec] = None,
        boundary: Optional[str] = None,
    ) -> None:
        self.codec = codec or WWWFormCodec()
        self.boundary = boundary or uuid.uuid4().hex

    def content_type(self, value: Any) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def marshal(self, value: Any) -> bytes:
        parts = []
        for name, values in self.codec.encode(value).items():
            disposition = f'form-data; name="{_quote(name)}"'
            for v in values:
                parts.append(
                    f"--{self.boundary}\r\n"
                    f"Content-Disposition: {disposition}\r\n\r\n"
                    f"{v}\r\n"
                )
        parts.append(f"--{self.boundary}--\r\n")
        return "".join(parts).encode("utf-8")

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        return self.decode(_parse_body(data), type_)

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return BufferedEncoder(self, stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return BufferedDecoder(self, stream)

    def decode(self, fields: Mapping[str, Any], type_: Any = None) -> Any:
        return self.codec.decode(fields, type_)

    def __repr__(self) -> str:
        return f"MultipartFormCodec({self.codec!r})"


def _quote(name: str) -> str:
    return name.replace("\\", "\\\\").replace('"', '\\"')


class _FieldCollector:
    """
    python-multipart callbacks gathering the text fields of a body, laid out
    like Starlette's ``MultiPartParser``. File parts are skipped.
    """

    def __init__(self) -> None:
        self.fields: Fields = {}
        self.finished = False
        self._header_field = b""
        self._header_value = b""
        self._disposition = b""
        self._data = bytearray()

    def callbacks(self) -> Dict[str, Callable[..., None]]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_end": self.on_end,
        }

    def on_part_begin(self) -> None:
        self._disposition = b""
        self._data = bytearray()

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._data.extend(data[start:end])

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        if self._header_field.lower() == b"content-disposition":
            self._disposition = self._header_value
        self._header_field = b""
        self._header_value = b""

    def on_part_end(self) -> None:
        _, options = parse_options_header(self._disposition)
        if b"name" not in options or b"filename" in options:
            return
        name = options[b"name"].decode("utf-8", errors="replace")
        try:
            value = bytes(self._data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError(f"multipart: field {name!r}: {e}") from e
        self.fields.setdefault(name, []).append(value)

    def on_end(self) -> None:
        self.finished = True


def _parse_body(data: bytes) -> Fields:
    # the boundary is whatever the body opens with
    first_line = data.lstrip(b"\r\n").split(b"\r\n", 1)[0]
    if not first_line.startswith(b"--") or len(first_line) < 3:
        raise CodecError("multipart: body doesn't start with a boundary")

    collector = _FieldCollector()
    parser = MultipartParser(first_line[2:], collector.callbacks())
    try:
        parser.write(data)
        parser.finalize()
    except MultipartParseError as e:
        raise CodecError(f"multipart: {e}") from e
    if not collector.finished:
        raise CodecError("multipart: body ends before the closing boundary")
    return collector.fields
