import httpx
import pytest
from starlette.datastructures import Headers

from mimecodec.mime import MIME_JSON
from mimecodec.mime import MIME_WILDCARD
from mimecodec.negotiation import header_values
from mimecodec.negotiation import inbound_for_content_types
from mimecodec.negotiation import outbound_for_accepts
from mimecodec.negotiation import parse_accept_header
from mimecodec.negotiation import parse_media_type
from mimecodec.registry import CodecRegistry


@pytest.fixture
def registry(marshalers):
    registry = CodecRegistry.with_defaults()
    registry.register("application/x-0", marshalers[0])
    registry.register("application/x-1", marshalers[1])
    return registry


@pytest.mark.parametrize(
    "header",
    [
        "application/json, text/plain, */*",
        "application/json,text/plain,   */*",
    ],
)
def test_parse_accept_header(header):
    assert parse_accept_header(header) == [
        "application/json",
        "text/plain",
        "*/*",
    ]


def test_parse_accept_header_keeps_parameters():
    assert parse_accept_header("text/html;q=0.9 , application/json") == [
        "text/html;q=0.9",
        "application/json",
    ]


def test_parse_media_type():
    assert parse_media_type("application/x-1; charset=UTF-8") == (
        "application/x-1",
        {"charset": "UTF-8"},
    )
    assert parse_media_type(" Application/JSON ") == ("application/json", {})
    assert parse_media_type('multipart/form-data; boundary="a;b"') == (
        "multipart/form-data",
        {"boundary": "a;b"},
    )
    assert parse_media_type("text/plain;") == ("text/plain", {})


@pytest.mark.parametrize(
    "value",
    [
        "",
        "   ",
        "application/",
        "/json",
        "application/json; charset",
        "application/json; charset=utf-8; charset=latin-1",
        "text/plain; =x",
    ],
)
def test_parse_media_type_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_media_type(value)


@pytest.mark.parametrize(
    "content_type,want_mime,want",
    [
        ("application/x-0", "application/x-0", 0),
        ("application/x-1; charset=UTF-8", "application/x-1", 1),
    ],
)
def test_inbound_not_wildcard(registry, marshalers, content_type, want_mime, want):
    mime, marshaler = inbound_for_content_types(registry, [content_type])
    assert mime == want_mime
    assert marshaler is marshalers[want]


def test_inbound_unknown_is_wildcard(registry):
    mime, marshaler = inbound_for_content_types(registry, ["application/unknown"])
    assert mime == MIME_WILDCARD
    assert marshaler is registry.wildcard


def test_inbound_no_header_is_wildcard(registry):
    assert inbound_for_content_types(registry, []) == (
        MIME_WILDCARD,
        registry.wildcard,
    )


def test_inbound_first_registered_value_wins(registry):
    mime, marshaler = inbound_for_content_types(
        registry, ["application/unknown", MIME_JSON, "application/x-0"]
    )
    assert mime == MIME_JSON
    assert marshaler is registry.get(MIME_JSON)


def test_inbound_skips_malformed_values(registry, marshalers):
    mime, marshaler = inbound_for_content_types(
        registry, ["application/", "application/x-1"]
    )
    assert mime == "application/x-1"
    assert marshaler is marshalers[1]


@pytest.mark.parametrize(
    "accept,want",
    [
        ("application/x-0", 0),
        ("application/x-1", 1),
        ("text/html, application/x-1, application/x-0", 1),
        # weights are ignored: first registered candidate wins
        ("application/x-0;q=0.1, application/x-1;q=0.9, application/x-1", 1),
        ("application/x-0, application/x-1;q=1.0", 0),
    ],
)
def test_outbound_not_wildcard(registry, marshalers, accept, want):
    assert outbound_for_accepts(registry, [accept]) is marshalers[want]


def test_outbound_first_match_across_values(registry, marshalers):
    marshaler = outbound_for_accepts(
        registry, ["text/html", "application/x-1", "application/x-0"]
    )
    assert marshaler is marshalers[1]


def test_outbound_unknown_is_wildcard(registry):
    assert outbound_for_accepts(registry, ["application/unknown"]) is (
        registry.wildcard
    )
    assert outbound_for_accepts(registry, ["*/*"]) is registry.wildcard
    assert outbound_for_accepts(registry, []) is registry.wildcard


def test_header_values_sources():
    raw = [(b"content-type", b"a/b"), (b"content-type", b"c/d")]
    assert header_values(Headers(raw=raw), "Content-Type") == ["a/b", "c/d"]

    headers = httpx.Headers([("Accept", "a/b"), ("Accept", "c/d")])
    assert header_values(headers, "accept") == ["a/b", "c/d"]

    assert header_values({"content-type": "a/b"}, "Content-Type") == ["a/b"]
    assert header_values({"Accept": ["a/b", "c/d"]}, "accept") == [
        "a/b",
        "c/d",
    ]
    assert header_values({}, "Accept") == []
    assert header_values(None, "Accept") == []
