"""Map domain failures onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from coursereviews.errors import HTTP_STATUS_CODES


def _handler(status_code):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": exc.messages})

    return handle


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then the more specific domain ones on top."""
    register_exception_handlers(app)
    for exc_cls, status_code in HTTP_STATUS_CODES.items():
        app.add_exception_handler(exc_cls, _handler(status_code))
