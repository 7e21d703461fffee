from typing import List
from typing import Optional

from pydantic import BaseModel

from mimecodec.codecs.base import BufferedDecoder
from mimecodec.codecs.base import BufferedEncoder


class Item(BaseModel):
    id: str
    name: str


class Sub(BaseModel):
    name: str


class Search(BaseModel):
    id: int
    tags: List[str] = []
    sub: Optional[Sub] = None
    active: bool = False


class Opaque:
    """Not something pydantic knows how to dump."""


class DummyMarshaler:
    """
    Marshaler that only carries an identity; every codec call fails.
    """

    def __init__(self, n: int) -> None:
        self.n = n

    def content_type(self, value):
        return f"application/x-{self.n}"

    def marshal(self, value):
        raise NotImplementedError

    def unmarshal(self, data, type_=None):
        raise NotImplementedError

    def new_encoder(self, stream):
        return BufferedEncoder(self, stream)

    def new_decoder(self, stream):
        return BufferedDecoder(self, stream)

    def __repr__(self):
        return f"DummyMarshaler({self.n})"
