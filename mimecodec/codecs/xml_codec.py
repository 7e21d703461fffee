import xml.etree.ElementTree as ET
from typing import Any
from typing import BinaryIO
from typing import Dict
from typing import Optional

from mimecodec.codecs.adapt import convert
from mimecodec.codecs.adapt import field_types
from mimecodec.codecs.adapt import is_sequence
from mimecodec.codecs.adapt import to_builtins
from mimecodec.codecs.base import BufferedDecoder
from mimecodec.codecs.base import BufferedEncoder
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Marshaler
from mimecodec.errors import CodecError


class XMLCodec(Marshaler):
    """
    XML ↔ bytes codec using ElementTree.

    Values become child elements of a root element named ``root`` (or after
    the value's type). Repeated elements decode into lists. Attributes are
    ignored.
    """

    def __init__(self, root: Optional[str] = None) -> None:
        self.root = root

    def content_type(self, value: Any) -> str:
        return "application/xml; charset=utf-8"

    def marshal(self, value: Any) -> bytes:
        root = ET.Element(self._root_tag(value))
        _build(root, to_builtins(value))
        return ET.tostring(root, encoding="unicode").encode("utf-8")

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise CodecError(f"xml: {e}") from e
        return convert(_shape(_parse(root), type_), type_)

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return BufferedEncoder(self, stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return BufferedDecoder(self, stream)

    def _root_tag(self, value: Any) -> str:
        if self.root:
            return self.root
        if isinstance(value, (dict, list, tuple)):
            return "root"
        return type(value).__name__


def _build(parent: ET.Element, obj: Any) -> None:
    if isinstance(obj, dict):
        for key, item in obj.items():
            if item is None:
                continue
            if isinstance(item, list):
                for v in item:
                    _build(ET.SubElement(parent, str(key)), v)
            else:
                _build(ET.SubElement(parent, str(key)), item)
    elif isinstance(obj, list):
        for v in obj:
            _build(ET.SubElement(parent, "item"), v)
    elif isinstance(obj, bool):
        parent.text = "true" if obj else "false"
    elif obj is not None:
        parent.text = str(obj)


def _parse(elem: ET.Element) -> Any:
    children = list(elem)
    if not children:
        return elem.text or ""
    out: Dict[str, Any] = {}
    for child in children:
        value = _parse(child)
        if child.tag not in out:
            out[child.tag] = value
        elif isinstance(out[child.tag], list):
            out[child.tag].append(value)
        else:
            out[child.tag] = [out[child.tag], value]
    return out


def _shape(data: Any, type_: Any) -> Any:
    # a sequence field with a single element parses as a scalar
    if not isinstance(data, dict):
        return data
    annotations = field_types(type_)
    for key, annotation in annotations.items():
        if key not in data:
            continue
        if is_sequence(annotation) and not isinstance(data[key], list):
            data[key] = [data[key]]
        elif isinstance(data[key], dict):
            data[key] = _shape(data[key], annotation)
    return data
