import logging
from typing import Dict
from typing import List
from typing import Optional

import uvicorn
from fastapi import Depends
from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi import Response
from google.protobuf.struct_pb2 import Struct
from pydantic import BaseModel

from mimecodec import Encoding
from mimecodec import EncodingConfig
from mimecodec import configure_logging
from mimecodec.codecs import MsgpackCodec
from mimecodec.codecs import ProtobufCodec
from mimecodec.codecs import XMLCodec
from mimecodec.codecs import YAMLCodec
from mimecodec.fastapi_utils import bind_dependency
from mimecodec.fastapi_utils import install_exception_handlers
from mimecodec.fastapi_utils import uri_dependency
from mimecodec.mime import MIME_MSGPACK
from mimecodec.mime import MIME_MSGPACK2
from mimecodec.mime import MIME_PROTOBUF
from mimecodec.mime import MIME_XML
from mimecodec.mime import MIME_XML2
from mimecodec.mime import MIME_YAML

# Configure logging level
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("mimecodec")
logger.setLevel(logging.INFO)

# ─────────────────────────────────────────────────────────────────────────────
# 0. Payload models
# ─────────────────────────────────────────────────────────────────────────────


class Book(BaseModel):
    id: str
    title: str
    tags: List[str] = []


class BookQuery(BaseModel):
    tag: Optional[str] = None
    limit: int = 10


class BookPath(BaseModel):
    id: str


# ─────────────────────────────────────────────────────────────────────────────
# 1. Encoding setup
# ─────────────────────────────────────────────────────────────────────────────

cfg = EncodingConfig(json_logging=False)
configure_logging(cfg.json_logging)

encoding = Encoding(config=cfg)
encoding.register(MIME_XML, XMLCodec())
encoding.register(MIME_XML2, XMLCodec())
encoding.register(MIME_YAML, YAMLCodec())
encoding.register(MIME_MSGPACK, MsgpackCodec())
encoding.register(MIME_MSGPACK2, MsgpackCodec())
encoding.register(MIME_PROTOBUF, ProtobufCodec(Struct))

books: Dict[str, Book] = {}

# ─────────────────────────────────────────────────────────────────────────────
# 2. FastAPI app
# ─────────────────────────────────────────────────────────────────────────────

app: FastAPI = FastAPI()
install_exception_handlers(app)


@app.post("/books/")
async def create_book(
    request: Request, book: Book = Depends(bind_dependency(encoding, Book))
) -> Response:
    books[book.id] = book
    location = encoding.encode_url("/books/{id}", book)
    response = encoding.render(request, book, status_code=201)
    response.headers["Location"] = location
    return response


@app.get("/books/")
async def list_books(
    request: Request,
    query: BookQuery = Depends(bind_dependency(encoding, BookQuery)),
) -> Response:
    found = [b for b in books.values() if query.tag is None or query.tag in b.tags]
    return encoding.render(request, found[: query.limit])


@app.get("/books/{id}")
async def get_book(
    request: Request, path: BookPath = Depends(uri_dependency(encoding, BookPath))
) -> Response:
    book = books.get(path.id)
    if book is None:
        raise HTTPException(status_code=404, detail="book not found")
    return encoding.render(request, book)


@app.put("/books/{id}/meta")
async def put_meta(
    request: Request,
    path: BookPath = Depends(uri_dependency(encoding, BookPath)),
    meta: Struct = Depends(bind_dependency(encoding, Struct)),
) -> Response:
    # free-form metadata, any registered Content-Type (protobuf included)
    if path.id not in books:
        raise HTTPException(status_code=404, detail="book not found")
    return encoding.render(request, meta)


@app.delete("/books/{id}")
async def delete_book(
    request: Request, path: BookPath = Depends(uri_dependency(encoding, BookPath))
) -> Response:
    books.pop(path.id, None)
    return encoding.render(request, None, status_code=204)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
