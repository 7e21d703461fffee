import io
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Tuple

import httpx
from fastapi import Request
from fastapi import Response
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from mimecodec.codecs.base import Fields
from mimecodec.codecs.base import FormCodec
from mimecodec.codecs.base import Marshaler
from mimecodec.config import EncodingConfig
from mimecodec.errors import CodecError
from mimecodec.errors import UnsupportedCapabilityError
from mimecodec.log_config import logger
from mimecodec.mime import MIME_MULTIPART_POST_FORM
from mimecodec.negotiation import ACCEPT_HEADER
from mimecodec.negotiation import CONTENT_TYPE_HEADER
from mimecodec.negotiation import header_values
from mimecodec.negotiation import inbound_for_content_types
from mimecodec.negotiation import outbound_for_accepts
from mimecodec.registry import CodecRegistry


class Encoding:
    """
    Binds requests into typed values and renders values into responses,
    picking the marshaler from the request headers.

    Binding:
      - retrieval methods (GET, HEAD) bind from the query string;
      - multipart/form-data binds the parsed text fields;
      - everything else decodes the body with the Content-Type marshaler.

    Rendering uses the first registered MIME type in Accept, falling back
    to the wildcard marshaler.
    """

    def __init__(
        self,
        registry: Optional[CodecRegistry] = None,
        config: Optional[EncodingConfig] = None,
    ) -> None:
        self.config = config or EncodingConfig()
        self.registry = registry or CodecRegistry.with_defaults(
            use_number=self.config.json_use_number,
            wildcard_disallow_unknown_fields=(
                self.config.wildcard_disallow_unknown_fields
            ),
        )

    def register(self, mime: str, marshaler: Marshaler) -> None:
        self.registry.register(mime, marshaler)

    def get(self, mime: str) -> Marshaler:
        return self.registry.get(mime)

    def delete(self, mime: str) -> None:
        self.registry.delete(mime)

    def inbound_for_request(self, request: Request) -> Tuple[str, Marshaler]:
        """
        The Content-Type and marshaler used to decode this request's body.
        """
        return inbound_for_content_types(
            self.registry, header_values(request.headers, CONTENT_TYPE_HEADER)
        )

    def outbound_for_request(self, request: Request) -> Marshaler:
        """The marshaler used to render a response to this request."""
        return outbound_for_accepts(
            self.registry, header_values(request.headers, ACCEPT_HEADER)
        )

    def inbound_for_response(self, response: httpx.Response) -> Marshaler:
        """The marshaler used to decode a received response's body."""
        _, marshaler = inbound_for_content_types(
            self.registry, header_values(response.headers, CONTENT_TYPE_HEADER)
        )
        return marshaler

    async def bind(self, request: Request, type_: Any = None) -> Any:
        """
        Decode the request into ``type_`` according to its method and
        Content-Type. Codec errors propagate unchanged.
        """
        if request.method.upper() in self.config.retrieval_methods:
            return self.bind_query(request, type_)

        content_type, marshaler = self.inbound_for_request(request)
        logger.debug(
            "Binding %s %s as '%s' with %r",
            request.method,
            request.url.path,
            content_type,
            marshaler,
        )
        if content_type == MIME_MULTIPART_POST_FORM:
            if not isinstance(marshaler, FormCodec):
                raise UnsupportedCapabilityError(
                    f"not supported marshaler({content_type}): {marshaler!r}"
                )
            try:
                form = await request.form(
                    max_part_size=self.config.max_multipart_memory
                )
            except (MultiPartException, HTTPException) as e:
                # HTTPException when the request runs inside an ASGI app
                raise CodecError(f"multipart: {e}") from e
            try:
                return marshaler.decode(form, type_)
            finally:
                await form.close()

        body = await request.body()
        return marshaler.new_decoder(io.BytesIO(body)).decode(type_)

    def bind_query(self, request: Request, type_: Any = None) -> Any:
        """Decode the URL query parameters with the query marshaler."""
        return self.registry.query.decode(request.query_params, type_)

    def bind_uri(self, params: Mapping[str, Any], type_: Any = None) -> Any:
        """
        Decode path parameters (e.g. ``request.path_params``) with the uri
        marshaler.
        """
        return self.registry.uri.decode(params, type_)

    def render(
        self, request: Request, value: Any, status_code: int = 200
    ) -> Response:
        """
        Build the response for ``value`` using the Accept-negotiated
        marshaler. ``None`` renders an empty body.
        """
        if value is None:
            return Response(status_code=status_code)
        marshaler = self.outbound_for_request(request)
        data = marshaler.marshal(value)
        return Response(
            content=data,
            status_code=status_code,
            headers={"Content-Type": marshaler.content_type(value)},
        )

    def decode_response(
        self, response: httpx.Response, type_: Any = None
    ) -> Any:
        """Decode a received response's body according to its Content-Type."""
        return self.inbound_for_response(response).unmarshal(
            response.content, type_
        )

    def encode(self, mime: str, value: Any) -> bytes:
        return self.registry.get(mime).marshal(value)

    def encode_query(self, value: Any) -> Fields:
        return self.registry.query.encode(value)

    def encode_url(
        self, template: str, value: Any, include_query: bool = False
    ) -> str:
        """
        Fill a path template such as ``/shelves/{shelf}/books/{book.id}``
        from ``value``, optionally appending the other fields as a query.
        """
        return self.registry.uri.encode_url(template, value, include_query)
