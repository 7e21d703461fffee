import io

from fastapi.testclient import TestClient

from mimecodec.codecs.json_codec import JSONCodec
from mimecodec.codecs.msgpack_codec import MsgpackCodec
from mimecodec.codecs.yaml_codec import YAMLCodec
from mimecodec.mime import MIME_MSGPACK
from mimecodec.mime import MIME_MULTIPART_POST_FORM
from mimecodec.mime import MIME_YAML

from helpers import Item


def test_fastapi_roundtrip(fastapi_app, caplog):
    caplog.set_level("DEBUG")
    with TestClient(fastapi_app) as client:
        resp = client.post("/items/", json={"id": "foo", "name": "bar"})
        assert resp.status_code == 201
        assert resp.headers["content-type"] == "application/json; charset=utf-8"
        assert resp.json() == {"id": "foo", "name": "bar"}

        resp = client.get("/items/", params={"id": "foo", "name": "bar"})
        assert resp.status_code == 200
        assert resp.json() == [{"id": "foo", "name": "bar"}]

        resp = client.get("/items/foo/bar")
        assert resp.json() == {"id": "foo", "name": "bar"}

    assert "Binding POST /items/ as 'application/json'" in caplog.text


def test_fastapi_form_bodies(fastapi_app):
    with TestClient(fastapi_app) as client:
        resp = client.post("/items/", data={"id": "foo", "name": "bar"})
        assert resp.status_code == 201
        assert resp.json() == {"id": "foo", "name": "bar"}

        resp = client.post(
            "/items/",
            data={"id": "foo", "name": "bar"},
            files={"upload": ("a.txt", b"ignored", "text/plain")},
        )
        assert resp.status_code == 201
        assert resp.json() == {"id": "foo", "name": "bar"}


def test_fastapi_negotiates_msgpack(fastapi_app, encoding):
    codec = MsgpackCodec()
    encoding.register(MIME_MSGPACK, codec)

    with TestClient(fastapi_app) as client:
        resp = client.post(
            "/items/",
            content=codec.marshal(Item(id="foo", name="bar")),
            headers={"Content-Type": MIME_MSGPACK, "Accept": MIME_MSGPACK},
        )
    assert resp.status_code == 201
    assert resp.headers["content-type"] == "application/x-msgpack; charset=utf-8"
    decoded = codec.new_decoder(io.BytesIO(resp.content)).decode(Item)
    assert decoded == Item(id="foo", name="bar")
    assert encoding.decode_response(resp, Item) == Item(id="foo", name="bar")


def test_fastapi_accept_falls_back_to_wildcard(fastapi_app, encoding):
    with TestClient(fastapi_app) as client:
        resp = client.get(
            "/items/foo/bar", headers={"Accept": MIME_YAML + ", text/html"}
        )
        assert resp.headers["content-type"] == "application/json; charset=utf-8"

        encoding.register(MIME_YAML, YAMLCodec())
        resp = client.get(
            "/items/foo/bar", headers={"Accept": MIME_YAML + ", text/html"}
        )
        assert resp.headers["content-type"] == "application/x-yaml; charset=utf-8"
        assert resp.content == b"id: foo\nname: bar\n"


def test_fastapi_bad_payloads(fastapi_app):
    with TestClient(fastapi_app) as client:
        resp = client.post(
            "/items/",
            content=b'{"id": ',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400

        resp = client.post("/items/", json={"id": "foo"})
        assert resp.status_code == 400

        # strict wildcard codec for an unknown Content-Type
        resp = client.post(
            "/items/",
            content=b'{"id":"foo","name":"bar","extra":true}',
            headers={"Content-Type": "application/vnd.unknown"},
        )
        assert resp.status_code == 400
        assert "extra" in resp.json()["detail"]

        resp = client.get("/items/", params={"name": "bar"})
        assert resp.status_code == 400


def test_fastapi_multipart_needs_form_codec(fastapi_app, encoding):
    encoding.register(MIME_MULTIPART_POST_FORM, JSONCodec())
    with TestClient(fastapi_app) as client:
        resp = client.post(
            "/items/",
            data={"id": "foo", "name": "bar"},
            files={"upload": ("a.txt", b"x", "text/plain")},
        )
    assert resp.status_code == 415


def test_fastapi_render_failure_is_500(fastapi_app, caplog):
    caplog.set_level("ERROR")
    with TestClient(fastapi_app) as client:
        resp = client.get("/broken")
    assert resp.status_code == 500
    assert "detail" in resp.json()
    assert "CodecError on GET /broken" in caplog.text


def test_fastapi_render_none(fastapi_app):
    with TestClient(fastapi_app) as client:
        resp = client.delete("/items/foo")
    assert resp.status_code == 204
    assert resp.content == b""
