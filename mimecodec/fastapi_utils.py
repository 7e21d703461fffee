from typing import Any
from typing import Awaitable
from typing import Callable

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi.responses import JSONResponse

from mimecodec.encoding import Encoding
from mimecodec.errors import CodecError
from mimecodec.errors import EncodingError
from mimecodec.errors import UnsupportedCapabilityError
from mimecodec.log_config import logger


def bind_dependency(
    encoding: Encoding, type_: Any = None
) -> Callable[[Request], Awaitable[Any]]:
    """
    Returns a FastAPI dependency that binds the request into ``type_``:

        @app.post("/items/")
        async def create(item: Item = Depends(bind_dependency(enc, Item))):
            ...

    Payloads that fail to decode become 400 responses, a negotiated codec
    that can't serve the request becomes 415.
    """

    async def _bind(request: Request) -> Any:
        try:
            return await encoding.bind(request, type_)
        except UnsupportedCapabilityError as e:
            raise HTTPException(status_code=415, detail=str(e)) from e
        except CodecError as e:
            logger.debug("Bind failed for %s: %s", request.url.path, e)
            raise HTTPException(status_code=400, detail=str(e)) from e

    return _bind


def uri_dependency(
    encoding: Encoding, type_: Any = None
) -> Callable[[Request], Awaitable[Any]]:
    """
    Returns a FastAPI dependency that binds ``request.path_params``.
    """

    async def _bind_uri(request: Request) -> Any:
        try:
            return encoding.bind_uri(request.path_params, type_)
        except CodecError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    return _bind_uri


def install_exception_handlers(app: FastAPI) -> None:
    """
    Map mimecodec errors escaping a route to error responses: 415 for an
    unsupported capability, 500 for the rest (e.g. a value that fails to
    render).
    """

    async def _handle(request: Request, exc: Exception) -> JSONResponse:
        status = 415 if isinstance(exc, UnsupportedCapabilityError) else 500
        logger.error(
            "%s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc,
        )
        return JSONResponse({"detail": str(exc)}, status_code=status)

    app.add_exception_handler(EncodingError, _handle)
