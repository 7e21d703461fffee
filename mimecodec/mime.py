from typing import Final

# Pseudo-MIME used for URL query binding.
MIME_QUERY: Final[str] = "__MIME__/QUERY"
# Pseudo-MIME used for path parameter binding.
MIME_URI: Final[str] = "__MIME__/URI"
# Fallback for requests that match no registered MIME type.
MIME_WILDCARD: Final[str] = "*"

RESERVED_MIMES: Final[frozenset] = frozenset(
    {MIME_QUERY, MIME_URI, MIME_WILDCARD}
)

MIME_JSON: Final[str] = "application/json"
MIME_HTML: Final[str] = "text/html"
MIME_XML: Final[str] = "application/xml"
MIME_XML2: Final[str] = "text/xml"
MIME_PLAIN: Final[str] = "text/plain"
MIME_POST_FORM: Final[str] = "application/x-www-form-urlencoded"
MIME_MULTIPART_POST_FORM: Final[str] = "multipart/form-data"
MIME_PROTOBUF: Final[str] = "application/x-protobuf"
MIME_MSGPACK: Final[str] = "application/x-msgpack"
MIME_MSGPACK2: Final[str] = "application/msgpack"
MIME_YAML: Final[str] = "application/x-yaml"
MIME_TOML: Final[str] = "application/toml"
MIME_AVRO: Final[str] = "application/avro"

# Largest multipart body kept in memory while binding.
DEFAULT_MEMORY: Final[int] = 32 << 20
