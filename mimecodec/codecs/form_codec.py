"""
application/x-www-form-urlencoded codec, also used for query strings and
path parameters.

Nested fields use dotted keys (``sub.name=x``). A field annotated as a
sequence keeps every value sent for it; any other field takes the first.
"""

import json
import re
from typing import Any
from typing import BinaryIO
from typing import Dict
from typing import Mapping
from urllib.parse import parse_qs
from urllib.parse import quote
from urllib.parse import urlencode

from mimecodec.codecs.adapt import convert
from mimecodec.codecs.adapt import field_types
from mimecodec.codecs.adapt import is_sequence
from mimecodec.codecs.adapt import to_builtins
from mimecodec.codecs.base import BufferedDecoder
from mimecodec.codecs.base import BufferedEncoder
from mimecodec.codecs.base import Decoder
from mimecodec.codecs.base import Encoder
from mimecodec.codecs.base import Fields
from mimecodec.codecs.base import UriMarshaler
from mimecodec.errors import CodecError

# {name} or {sub.name}, with an optional "=pattern" suffix that is ignored
_PLACEHOLDER = re.compile(r"\{([^{}=]+)(?:=[^{}]*)?\}")


def to_fields(raw: Mapping[str, Any]) -> Fields:
    """
    Normalise a query/form/path mapping into a ``{key: [values]}`` multimap.

    Starlette multi-dicts keep every value; file uploads are dropped.
    """
    fields: Fields = {}
    if hasattr(raw, "multi_items"):
        for key, value in raw.multi_items():
            if isinstance(value, str):
                fields.setdefault(key, []).append(value)
        return fields
    for key, value in raw.items():
        if isinstance(value, str):
            fields[key] = [value]
        elif isinstance(value, (list, tuple)):
            fields[key] = [str(v) for v in value]
        elif value is not None:
            fields[key] = [_scalar(value)]
    return fields


class WWWFormCodec(UriMarshaler):
    """
    Form ↔ bytes codec; implements the query and uri capabilities too.
    """

    def content_type(self, value: Any) -> str:
        return "application/x-www-form-urlencoded; charset=utf-8"

    def marshal(self, value: Any) -> bytes:
        return urlencode(self.encode(value), doseq=True).encode("utf-8")

    def unmarshal(self, data: bytes, type_: Any = None) -> Any:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError(f"form: {e}") from e
        return self.decode(parse_qs(text, keep_blank_values=True), type_)

    def new_encoder(self, stream: BinaryIO) -> Encoder:
        return BufferedEncoder(self, stream)

    def new_decoder(self, stream: BinaryIO) -> Decoder:
        return BufferedDecoder(self, stream)

    def decode(self, fields: Mapping[str, Any], type_: Any = None) -> Any:
        return convert(_unflatten(to_fields(fields), type_), type_)

    def encode(self, value: Any) -> Fields:
        obj = to_builtins(value)
        if not isinstance(obj, dict):
            raise CodecError(
                f"form: can't encode {type(value).__name__} as form fields"
            )
        fields: Fields = {}
        _flatten(obj, "", fields)
        return fields

    def encode_url(
        self, template: str, value: Any, include_query: bool = False
    ) -> str:
        """
        Fill ``{field}`` placeholders in ``template`` from ``value``.

        With ``include_query`` the fields not used by the template are
        appended as a query string.
        """
        fields = self.encode(value)
        used = set()

        def _sub(m: re.Match) -> str:
            key = m.group(1).strip()
            used.add(key)
            values = fields.get(key)
            return quote(values[0], safe="") if values else ""

        url = _PLACEHOLDER.sub(_sub, template)
        if include_query:
            rest = {k: v for k, v in fields.items() if k not in used}
            if rest:
                sep = "&" if "?" in url else "?"
                url = f"{url}{sep}{urlencode(rest, doseq=True)}"
        return url

    def __repr__(self) -> str:
        return "WWWFormCodec()"


def _unflatten(fields: Fields, type_: Any) -> Dict[str, Any]:
    annotations = field_types(type_)
    out: Dict[str, Any] = {}
    nested: Dict[str, Fields] = {}
    for key, values in fields.items():
        if not values:
            continue
        head, _, rest = key.partition(".")
        if rest:
            nested.setdefault(head, {})[rest] = values
            continue
        annotation = annotations.get(key)
        if is_sequence(annotation) or (annotation is None and len(values) > 1):
            out[key] = list(values)
        else:
            out[key] = values[0]
    for head, sub in nested.items():
        if head in out:
            raise CodecError(
                f"form: field {head!r} has both a value and nested fields"
            )
        out[head] = _unflatten(sub, annotations.get(head))
    return out


def _flatten(obj: Dict[str, Any], prefix: str, out: Fields) -> None:
    for key, item in obj.items():
        name = f"{prefix}{key}"
        if item is None:
            continue
        if isinstance(item, dict):
            _flatten(item, f"{name}.", out)
        elif isinstance(item, (list, tuple)):
            out[name] = [_scalar(v) for v in item if v is not None]
        else:
            out[name] = [_scalar(item)]


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)

