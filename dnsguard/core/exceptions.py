from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


# --- Configuration errors ---
class ConfigError(Exception):
    """Base class for configuration load/store failures"""


class ConfigReadError(ConfigError):
    """Configuration file exists but could not be read"""


class ConfigParseError(ConfigError):
    """Configuration file is malformed or has values of the wrong type"""


class ConfigWriteError(ConfigError):
    """Configuration could not be serialized or written.

    ``errors`` holds every failure of a persist call, so a failed config
    write does not hide a failed user filter write and vice versa.
    """

    def __init__(self, message: str, errors: Optional[List[Exception]] = None):
        super().__init__(message)
        self.errors: List[Exception] = list(errors or [])


# --- Typed domain exceptions (module-level for importability) ---
class BadRequestError(Exception):
    pass


class UnauthorizedError(Exception):
    pass


class NotFoundError(Exception):
    pass


class ConflictError(Exception):
    pass


def install_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers for the admin API."""

    @app.exception_handler(BadRequestError)
    async def _bad_request(request: Request, exc: BadRequestError):  # type: ignore[unused-ignore]
        return JSONResponse(
            status_code=HTTP_400_BAD_REQUEST,
            content={"detail": str(exc) or "Bad Request", "error": "BadRequest"},
        )

    @app.exception_handler(UnauthorizedError)
    async def _unauthorized(request: Request, exc: UnauthorizedError):  # type: ignore[unused-ignore]
        return JSONResponse(
            status_code=HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc) or "Unauthorized", "error": "Unauthorized"},
            headers={"WWW-Authenticate": "Basic"},
        )

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):  # type: ignore[unused-ignore]
        return JSONResponse(
            status_code=HTTP_404_NOT_FOUND,
            content={"detail": str(exc) or "Not Found", "error": "NotFound"},
        )

    @app.exception_handler(ConflictError)
    async def _conflict(request: Request, exc: ConflictError):  # type: ignore[unused-ignore]
        return JSONResponse(
            status_code=HTTP_409_CONFLICT,
            content={"detail": str(exc) or "Conflict", "error": "Conflict"},
        )

    @app.exception_handler(ConfigWriteError)
    async def _write_error(request: Request, exc: ConfigWriteError):  # type: ignore[unused-ignore]
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": str(exc) or "Couldn't write config",
                "error": "ConfigWriteError",
                "errors": [str(e) for e in exc.errors],
            },
        )

    # Map common Python exceptions
    @app.exception_handler(ValueError)
    async def _value_error(request: Request, exc: ValueError):  # type: ignore[unused-ignore]
        return JSONResponse(
            status_code=HTTP_400_BAD_REQUEST,
            content={"detail": str(exc) or "Bad Request", "error": "ValueError"},
        )
