import logging
from typing import Sequence
from typing import Tuple

import pytest
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request

from mimecodec.encoding import Encoding
from mimecodec.fastapi_utils import bind_dependency
from mimecodec.fastapi_utils import install_exception_handlers
from mimecodec.fastapi_utils import uri_dependency

from helpers import DummyMarshaler
from helpers import Item
from helpers import Opaque


# Level set by mimecodec.log_config, captured before test modules (which may
# import main and change it) are collected.
_MIMECODEC_LOG_LEVEL = logging.getLogger("mimecodec").level


@pytest.fixture(autouse=True)
def _restore_mimecodec_log_level():
    # importing main sets the "mimecodec" logger level; keep tests isolated
    logger = logging.getLogger("mimecodec")
    logger.setLevel(_MIMECODEC_LOG_LEVEL)
    yield
    logger.setLevel(_MIMECODEC_LOG_LEVEL)


@pytest.fixture
def encoding():
    return Encoding()


@pytest.fixture
def marshalers():
    return [DummyMarshaler(0), DummyMarshaler(1)]


@pytest.fixture
def make_request():
    def _make(
        method: str = "GET",
        path: str = "/",
        query_string: str = "",
        headers: Sequence[Tuple[str, str]] = (),
        body: bytes = b"",
    ) -> Request:
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "server": ("example.com", 80),
            "root_path": "",
            "path": path,
            "query_string": query_string.encode("latin-1"),
            "headers": [
                (k.lower().encode("latin-1"), v.encode("latin-1"))
                for k, v in headers
            ],
        }

        async def receive():
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


# FastAPI app fixture for the integration test
@pytest.fixture
def fastapi_app(encoding):
    app = FastAPI()
    install_exception_handlers(app)

    @app.post("/items/")
    async def create_item(
        request: Request, item: Item = Depends(bind_dependency(encoding, Item))
    ):
        return encoding.render(request, item, status_code=201)

    @app.get("/items/")
    async def search_items(
        request: Request, item: Item = Depends(bind_dependency(encoding, Item))
    ):
        return encoding.render(request, [item])

    @app.get("/items/{id}/{name}")
    async def get_item(
        request: Request, item: Item = Depends(uri_dependency(encoding, Item))
    ):
        return encoding.render(request, item)

    @app.delete("/items/{id}")
    async def delete_item(request: Request, id: str):
        return encoding.render(request, None, status_code=204)

    @app.get("/broken")
    async def broken(request: Request):
        return encoding.render(request, Opaque())

    return app
