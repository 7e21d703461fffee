"""
Conversion between codec-level builtins (dicts, lists, scalars) and the
typed values callers bind into or render from.

pydantic handles models, dataclasses, TypedDicts and plain builtins;
protobuf messages go through ``json_format`` so they use their canonical
JSON mapping.
"""

import collections.abc
import dataclasses
import decimal
import types
import typing
from functools import lru_cache
from typing import Any
from typing import Dict
from typing import Optional

from google.protobuf import json_format
from google.protobuf.message import Message as PBMessage
from pydantic import BaseModel
from pydantic import PydanticSchemaGenerationError
from pydantic import TypeAdapter
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from mimecodec.errors import CodecError

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)


@lru_cache(maxsize=512)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


def is_message_type(type_: Any) -> bool:
    return isinstance(type_, type) and issubclass(type_, PBMessage)


def to_builtins(value: Any, mode: str = "json") -> Any:
    """
    Dump ``value`` to plain builtins.

    ``mode="json"`` yields JSON-compatible scalars only; ``mode="python"``
    keeps bytes, datetimes and friends for codecs that carry them natively.
    """
    if isinstance(value, PBMessage):
        return json_format.MessageToDict(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode=mode, by_alias=True)
    # untyped Decimals come from use_number decoding and stay numbers
    value = plain_numbers(value)
    try:
        return _adapter(type(value)).dump_python(
            value, mode=mode, by_alias=True
        )
    except (PydanticSchemaGenerationError, PydanticSerializationError) as e:
        raise CodecError(
            f"can't dump value of type {type(value).__name__}: {e}"
        ) from e


def convert(data: Any, type_: Any = None, forbid_unknown: bool = False) -> Any:
    """
    Validate decoded builtins into ``type_``; ``None``/``Any`` passes through.
    """
    if type_ is None or type_ is Any:
        return data
    if is_message_type(type_):
        msg = type_()
        try:
            json_format.ParseDict(
                plain_numbers(data),
                msg,
                ignore_unknown_fields=not forbid_unknown,
            )
        except (json_format.ParseError, TypeError, AttributeError) as e:
            raise CodecError(str(e)) from e
        return msg
    if forbid_unknown:
        _check_unknown_fields(data, type_)
    try:
        return _adapter(type_).validate_python(data)
    except ValidationError as e:
        raise CodecError(str(e)) from e
    except PydanticSchemaGenerationError as e:
        raise CodecError(f"unsupported decode target {type_!r}: {e}") from e


def field_types(type_: Any) -> Dict[str, Any]:
    """
    Map of field key -> annotation for models, dataclasses and TypedDicts.
    Unknown or unstructured types give an empty map.
    """
    type_ = unwrap_optional(type_)
    if isinstance(type_, type) and issubclass(type_, BaseModel):
        return {
            (f.alias or name): f.annotation
            for name, f in type_.model_fields.items()
        }
    if dataclasses.is_dataclass(type_) and isinstance(type_, type):
        hints = typing.get_type_hints(type_)
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(type_)}
    if typing.is_typeddict(type_):
        return dict(typing.get_type_hints(type_))
    return {}


def unwrap_optional(annotation: Any) -> Any:
    """``Optional[X]`` -> ``X``; other annotations are returned as is."""
    args = typing.get_args(annotation)
    if args and _is_union(annotation):
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1:
            return rest[0]
    return annotation


def is_sequence(annotation: Optional[Any]) -> bool:
    if annotation is None:
        return False
    if _is_union(annotation):
        return any(is_sequence(a) for a in typing.get_args(annotation))
    origin = typing.get_origin(annotation) or annotation
    if origin in (str, bytes):
        return False
    return origin in _SEQUENCE_ORIGINS


def _is_union(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    return origin is typing.Union or origin is types.UnionType


def _check_unknown_fields(data: Any, type_: Any, path: str = "") -> None:
    type_ = unwrap_optional(type_)
    if isinstance(data, list):
        if is_sequence(type_):
            item_type = (typing.get_args(type_) or (Any,))[0]
            for i, item in enumerate(data):
                _check_unknown_fields(item, item_type, f"{path}{i}.")
        return
    if not isinstance(data, dict):
        return
    fields = field_types(type_)
    if not fields:
        return
    if isinstance(type_, type) and issubclass(type_, BaseModel):
        # accept both the alias and the attribute name
        for name, f in type_.model_fields.items():
            fields.setdefault(name, f.annotation)
    unknown = sorted(f"{path}{k}" for k in data if k not in fields)
    if unknown:
        raise CodecError(
            f"unknown field(s) {', '.join(unknown)} for "
            f"{getattr(type_, '__name__', type_)}"
        )
    for key, value in data.items():
        _check_unknown_fields(value, fields[key], f"{path}{key}.")


def plain_numbers(data: Any) -> Any:
    """
    Turn ``Decimal`` values (from ``use_number`` decoding) back into
    ints and floats, recursing into dicts and lists.
    """
    if isinstance(data, decimal.Decimal):
        if data.is_finite() and data == data.to_integral_value():
            return int(data)
        return float(data)
    if isinstance(data, dict):
        return {k: plain_numbers(v) for k, v in data.items()}
    if isinstance(data, list):
        return [plain_numbers(v) for v in data]
    return data
