from .avro_codec import AvroCodec
from .base import Decoder
from .base import Encoder
from .base import FormCodec
from .base import FormMarshaler
from .base import Marshaler
from .base import UriMarshaler
from .form_codec import WWWFormCodec
from .json_codec import JSONCodec
from .msgpack_codec import MsgpackCodec
from .multipart_codec import MultipartFormCodec
from .protobuf_codec import ProtobufCodec
from .toml_codec import TOMLCodec
from .xml_codec import XMLCodec
from .yaml_codec import YAMLCodec

__all__ = [
    "Encoder",
    "Decoder",
    "Marshaler",
    "FormMarshaler",
    "UriMarshaler",
    "FormCodec",
    "JSONCodec",
    "WWWFormCodec",
    "MultipartFormCodec",
    "XMLCodec",
    "YAMLCodec",
    "TOMLCodec",
    "MsgpackCodec",
    "ProtobufCodec",
    "AvroCodec",
]
