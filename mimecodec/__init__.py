from .codecs.base import Decoder
from .codecs.base import Encoder
from .codecs.base import FormCodec
from .codecs.base import FormMarshaler
from .codecs.base import Marshaler
from .codecs.base import UriMarshaler
from .config import EncodingConfig
from .encoding import Encoding
from .errors import CapabilityMismatchError
from .errors import CodecError
from .errors import EncodingError
from .errors import InvalidArgumentError
from .errors import ProtectedMimeError
from .errors import UnsupportedCapabilityError
from .log_config import configure_logging
from .mime import MIME_AVRO
from .mime import MIME_HTML
from .mime import MIME_JSON
from .mime import MIME_MSGPACK
from .mime import MIME_MSGPACK2
from .mime import MIME_MULTIPART_POST_FORM
from .mime import MIME_PLAIN
from .mime import MIME_POST_FORM
from .mime import MIME_PROTOBUF
from .mime import MIME_QUERY
from .mime import MIME_TOML
from .mime import MIME_URI
from .mime import MIME_WILDCARD
from .mime import MIME_XML
from .mime import MIME_XML2
from .mime import MIME_YAML
from .negotiation import parse_accept_header
from .registry import CodecRegistry

__all__ = [
    "Encoding",
    "EncodingConfig",
    "CodecRegistry",
    "Encoder",
    "Decoder",
    "Marshaler",
    "FormMarshaler",
    "UriMarshaler",
    "FormCodec",
    "EncodingError",
    "InvalidArgumentError",
    "CapabilityMismatchError",
    "ProtectedMimeError",
    "UnsupportedCapabilityError",
    "CodecError",
    "configure_logging",
    "parse_accept_header",
    "MIME_QUERY",
    "MIME_URI",
    "MIME_WILDCARD",
    "MIME_JSON",
    "MIME_HTML",
    "MIME_XML",
    "MIME_XML2",
    "MIME_PLAIN",
    "MIME_POST_FORM",
    "MIME_MULTIPART_POST_FORM",
    "MIME_PROTOBUF",
    "MIME_MSGPACK",
    "MIME_MSGPACK2",
    "MIME_YAML",
    "MIME_TOML",
    "MIME_AVRO",
]
