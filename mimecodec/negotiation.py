"""
Codec selection from ``Content-Type`` and ``Accept`` header values.

Matching is exact against the registry's MIME types, first match wins and
anything unmatched falls back to the wildcard marshaler. ``Accept`` quality
weights are not honoured.
"""

import re
from typing import Any
from typing import Dict
from typing import Iterable
from typing import List
from typing import Tuple

from mimecodec.codecs.base import Marshaler
from mimecodec.log_config import logger
from mimecodec.mime import MIME_WILDCARD
from mimecodec.registry import CodecRegistry

CONTENT_TYPE_HEADER = "Content-Type"
ACCEPT_HEADER = "Accept"

_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_MEDIA_TYPE = re.compile(rf"{_TOKEN}(?:/{_TOKEN})?")
_PARAM = re.compile(
    rf';[ \t]*({_TOKEN})[ \t]*=[ \t]*({_TOKEN}|"(?:[^"\\]|\\.)*")[ \t]*'
)
_QUOTED_PAIR = re.compile(r"\\(.)")


def parse_accept_header(header: str) -> List[str]:
    """
    Split an Accept header value on commas, trimming whitespace.

    >>> parse_accept_header("application/json,text/plain,   */*")
    ['application/json', 'text/plain', '*/*']
    """
    return [value.strip() for value in header.split(",")]


def parse_media_type(value: str) -> Tuple[str, Dict[str, str]]:
    """
    Split a Content-Type value into its lowercased media type and parameters.

    Raises ``ValueError`` when the value is empty or malformed.
    """
    base, sep, rest = value.partition(";")
    media_type = base.strip().lower()
    if not media_type:
        raise ValueError("no media type")
    if not _MEDIA_TYPE.fullmatch(media_type):
        raise ValueError(f"invalid media type {media_type!r}")

    params: Dict[str, str] = {}
    rest = sep + rest
    pos = 0
    while pos < len(rest):
        m = _PARAM.match(rest, pos)
        if m is None:
            # tolerate trailing semicolons
            if rest[pos:].strip(" \t;"):
                raise ValueError(f"invalid media parameter in {value!r}")
            break
        key, raw = m.group(1).lower(), m.group(2)
        if key in params:
            raise ValueError(f"duplicate parameter {key!r} in {value!r}")
        if raw.startswith('"'):
            raw = _QUOTED_PAIR.sub(r"\1", raw[1:-1])
        params[key] = raw
        pos = m.end()
    return media_type, params


def header_values(headers: Any, name: str) -> List[str]:
    """
    Every value of a header, in the order the transport supplied them.

    Accepts Starlette ``Headers``, httpx ``Headers`` or a plain mapping.
    """
    if headers is None:
        return []
    if hasattr(headers, "getlist"):
        return list(headers.getlist(name))
    if hasattr(headers, "get_list"):
        return list(headers.get_list(name))
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            if isinstance(value, (list, tuple)):
                return list(value)
            return [value]
    return []


def inbound_for_content_types(
    registry: CodecRegistry, values: Iterable[str]
) -> Tuple[str, Marshaler]:
    """
    The Content-Type and marshaler for a list of Content-Type values.

    The first value whose media type is registered wins; unparseable values
    are skipped. With no match the wildcard type and marshaler are returned.
    """
    for value in values:
        try:
            media_type, _ = parse_media_type(value)
        except ValueError as e:
            logger.debug("Skipping Content-Type %r: %s", value, e)
            continue
        marshaler = registry.lookup(media_type)
        if marshaler is not None:
            return media_type, marshaler
    return MIME_WILDCARD, registry.wildcard


def outbound_for_accepts(
    registry: CodecRegistry, values: Iterable[str]
) -> Marshaler:
    """
    The marshaler for a list of Accept values.

    Each value may list several media ranges; the first one registered
    wins, regardless of any ``q=`` weight. With no match, the wildcard.
    """
    for value in values:
        for candidate in parse_accept_header(value):
            marshaler = registry.lookup(candidate)
            if marshaler is not None:
                return marshaler
    return registry.wildcard
