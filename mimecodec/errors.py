class EncodingError(Exception):
    """
    Base class for every error raised by mimecodec.
    """


class InvalidArgumentError(EncodingError, ValueError):
    """Empty MIME type or missing marshaler passed to register()."""


class CapabilityMismatchError(EncodingError, TypeError):
    """
    A marshaler lacks the capability its MIME slot requires
    (FormMarshaler for the query slot, UriMarshaler for the uri slot).
    """


class ProtectedMimeError(EncodingError):
    """Attempt to delete one of the reserved MIME types."""

    def __init__(self, mime: str) -> None:
        super().__init__(f"MIME({mime}) can't be deleted, but you can override it")
        self.mime = mime


class UnsupportedCapabilityError(EncodingError, TypeError):
    """The negotiated marshaler can't serve the chosen binding path."""


class CodecError(EncodingError, ValueError):
    """
    A codec failed to marshal, unmarshal, encode or decode a value.
    The library exception is kept as __cause__.
    """
