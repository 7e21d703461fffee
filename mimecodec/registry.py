from typing import Dict
from typing import Optional

from mimecodec.codecs.base import FormMarshaler
from mimecodec.codecs.base import Marshaler
from mimecodec.codecs.base import UriMarshaler
from mimecodec.codecs.form_codec import WWWFormCodec
from mimecodec.codecs.json_codec import JSONCodec
from mimecodec.codecs.multipart_codec import MultipartFormCodec
from mimecodec.errors import CapabilityMismatchError
from mimecodec.errors import InvalidArgumentError
from mimecodec.errors import ProtectedMimeError
from mimecodec.log_config import logger
from mimecodec.mime import MIME_JSON
from mimecodec.mime import MIME_MULTIPART_POST_FORM
from mimecodec.mime import MIME_POST_FORM
from mimecodec.mime import MIME_QUERY
from mimecodec.mime import MIME_URI
from mimecodec.mime import MIME_WILDCARD
from mimecodec.mime import RESERVED_MIMES


class CodecRegistry:
    """
    A registry of marshalers, keyed by case-sensitive MIME type.

    The wildcard, query and uri marshalers live in dedicated slots that are
    always populated: they can be overridden through ``register`` but never
    deleted. Lookups for unregistered MIME types fall back to the wildcard.

    Meant to be configured once and then only read; ``register`` and
    ``delete`` must not race with readers.
    """

    def __init__(
        self,
        wildcard: Marshaler,
        query: FormMarshaler,
        uri: UriMarshaler,
    ) -> None:
        self._map: Dict[str, Marshaler] = {}
        self._wildcard: Marshaler = wildcard
        self._query: FormMarshaler = query
        self._uri: UriMarshaler = uri

    @classmethod
    def with_defaults(
        cls,
        use_number: bool = True,
        wildcard_disallow_unknown_fields: bool = True,
    ) -> "CodecRegistry":
        """
        Registry populated with the built-in marshalers:

            application/x-www-form-urlencoded -> WWWFormCodec
            multipart/form-data               -> MultipartFormCodec
            application/json                  -> JSONCodec
            query / uri                       -> WWWFormCodec
            *                                 -> strict JSONCodec
        """
        registry = cls(
            wildcard=JSONCodec(
                use_number=use_number,
                disallow_unknown_fields=wildcard_disallow_unknown_fields,
            ),
            query=WWWFormCodec(),
            uri=WWWFormCodec(),
        )
        registry._map[MIME_POST_FORM] = WWWFormCodec()
        registry._map[MIME_MULTIPART_POST_FORM] = MultipartFormCodec(
            WWWFormCodec()
        )
        registry._map[MIME_JSON] = JSONCodec(
            use_number=use_number, disallow_unknown_fields=False
        )
        return registry

    @property
    def wildcard(self) -> Marshaler:
        return self._wildcard

    @property
    def query(self) -> FormMarshaler:
        return self._query

    @property
    def uri(self) -> UriMarshaler:
        return self._uri

    def supported_types(self) -> list[str]:
        return list(self._map)

    def is_registered(self, mime: str) -> bool:
        return mime.split(";", 1)[0].strip() in self._map

    def __contains__(self, mime: object) -> bool:
        return mime in self._map or mime in RESERVED_MIMES

    def register(self, mime: str, marshaler: Marshaler) -> None:
        """
        Register a marshaler for a case-sensitive MIME type ("*" for the
        fallback). Registering an existing MIME type overrides it.
        """
        if not mime:
            raise InvalidArgumentError("empty MIME type")
        if marshaler is None:
            raise InvalidArgumentError("marshaler should not be None")
        if not isinstance(marshaler, Marshaler):
            raise CapabilityMismatchError(
                f"{marshaler!r} doesn't implement Marshaler"
            )

        if mime == MIME_QUERY:
            if not isinstance(marshaler, FormMarshaler):
                raise CapabilityMismatchError(
                    f"{marshaler!r} should implement FormMarshaler"
                )
            self._query = marshaler
        elif mime == MIME_URI:
            if not isinstance(marshaler, UriMarshaler):
                raise CapabilityMismatchError(
                    f"{marshaler!r} should implement UriMarshaler"
                )
            self._uri = marshaler
        elif mime == MIME_WILDCARD:
            self._wildcard = marshaler
        else:
            self._map[mime] = marshaler
        logger.debug("Registered %r for MIME '%s'", marshaler, mime)

    def get(self, mime: str) -> Marshaler:
        """
        Marshaler for a MIME type; unregistered types get the wildcard.
        """
        if mime == MIME_QUERY:
            return self._query
        if mime == MIME_URI:
            return self._uri
        if mime == MIME_WILDCARD:
            return self._wildcard
        return self._map.get(mime, self._wildcard)

    def lookup(self, mime: str) -> Optional[Marshaler]:
        """Exact entry for a non-reserved MIME type, without fallback."""
        return self._map.get(mime)

    def delete(self, mime: str) -> None:
        """
        Remove a MIME type. The wildcard, query and uri types can only be
        overridden, never removed.
        """
        if mime in RESERVED_MIMES:
            raise ProtectedMimeError(mime)
        if self._map.pop(mime, None) is not None:
            logger.debug("Deleted MIME '%s'", mime)
