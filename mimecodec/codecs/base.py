from typing import Any
from typing import BinaryIO
from typing import Dict
from typing import List
from typing import Mapping
from typing import Protocol
from typing import runtime_checkable

# Field multimap as produced by query strings, form bodies and path params.
Fields = Dict[str, List[str]]


@runtime_checkable
class Encoder(Protocol):
    """Writes encoded values to the stream it was created over."""

    def encode(self, value: Any) -> None: ...


@runtime_checkable
class Decoder(Protocol):
    """Reads one value from the stream it was created over."""

    def decode(self, type_: Any = None) -> Any: ...


@runtime_checkable
class Marshaler(Protocol):
    """
    Marshaler protocol: the capability set every registered codec provides.

    ``type_`` is the decode target (pydantic model, dataclass, protobuf
    message class, builtin type...). ``None`` returns plain builtins.
    """

    def content_type(self, value: Any) -> str:
        """
        Content-Type header emitted when rendering ``value``.
        """
        ...

    def marshal(self, value: Any) -> bytes:
        """
        Convert a Python value into bytes.
        """
        ...

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        """
        Convert bytes back into a value of ``type_``.
        """
        ...

    def new_encoder(self, stream: BinaryIO) -> Encoder: ...

    def new_decoder(self, stream: BinaryIO) -> Decoder: ...


@runtime_checkable
class FormMarshaler(Marshaler, Protocol):
    """
    Marshaler that also maps values to and from field multimaps.
    Required for the query slot.
    """

    def decode(
        self, fields: Mapping[str, Any], type_: Any = None
    ) -> Any: ...

    def encode(self, value: Any) -> Fields: ...


@runtime_checkable
class UriMarshaler(FormMarshaler, Protocol):
    """
    FormMarshaler that can also fill in a path template.
    Required for the uri slot.
    """

    def encode_url(
        self, template: str, value: Any, include_query: bool = False
    ) -> str: ...


@runtime_checkable
class FormCodec(Protocol):
    """Decodes the text fields of a parsed multipart/form-data body."""

    def decode(
        self, fields: Mapping[str, Any], type_: Any = None
    ) -> Any: ...


class BufferedEncoder(Encoder):
    """
    Encoder that marshals each value in one piece and writes it out.
    """

    def __init__(self, marshaler: Marshaler, stream: BinaryIO) -> None:
        self._marshaler = marshaler
        self._stream = stream

    def encode(self, value: Any) -> None:
        self._stream.write(self._marshaler.marshal(value))


class BufferedDecoder(Decoder):
    """
    Decoder that reads the rest of the stream and unmarshals it.
    """

    def __init__(self, marshaler: Marshaler, stream: BinaryIO) -> None:
        self._marshaler = marshaler
        self._stream = stream

    def decode(self, type_: Any = None) -> Any:
        return self._marshaler.unmarshal(self._stream.read(), type_)
