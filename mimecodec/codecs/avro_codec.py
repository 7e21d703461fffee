import io
from typing import Any
from typing import BinaryIO
from typing import Dict

from fastavro import parse_schema
from fastavro import schemaless_reader
from fastavro import schemaless_writer

from mimecodec.codecs.adapt import convert
from mimecodec.codecs.adapt import to_builtins
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Marshaler
from mimecodec.errors import CodecError

_AVRO_ERRORS = (ValueError, TypeError, KeyError, EOFError, StopIteration)


class AvroEncoder(Encoder):
    def __init__(self, schema: Any, stream: BinaryIO) -> None:
        self._schema = schema
        self._stream = stream

    def encode(self, value: Any) -> None:
        record = to_builtins(value, mode="python")
        try:
            schemaless_writer(self._stream, self._schema, record)
        except _AVRO_ERRORS as e:
            raise CodecError(f"avro: {e!r}") from e


class AvroDecoder(Decoder):
    def __init__(self, schema: Any, stream: BinaryIO) -> None:
        self._schema = schema
        self._stream = stream

    def decode(self, type_: Any = None) -> Any:
        try:
            # fastavro schemaless_reader wants both writer_schema and reader_schema
            obj = schemaless_reader(self._stream, self._schema, self._schema)
        except _AVRO_ERRORS as e:
            raise CodecError(f"avro: {e!r}") from e
        return convert(obj, type_)


class AvroCodec(Marshaler):
    """
    Avro ↔ bytes codec using a fastavro schema.
    """

    def __init__(self, schema: Dict[str, Any]):
        # schema should be a Python dict representing your Avro schema
        # (e.g. loaded from JSON).
        self._parsed_schema = parse_schema(schema)

    def content_type(self, value: Any) -> str:
        return "application/avro"

    def marshal(self, value: Any) -> bytes:
        buf = io.BytesIO()
        self.new_encoder(buf).encode(value)
        return buf.getvalue()

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        # directly seed the buffer with a memoryview
        return self.new_decoder(io.BytesIO(memoryview(data))).decode(type_)

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return AvroEncoder(self._parsed_schema, stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return AvroDecoder(self._parsed_schema, stream)
