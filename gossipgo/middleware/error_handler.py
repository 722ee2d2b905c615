"""Exception handlers that render every failure as the error envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse

from gossipgo.errors import GossipGoError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _error_response(status: int, error_type: str, message: str, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={
            "status": "error",
            "error": {
                "type": error_type,
                "message": message,
                "request_id": request_id,
            },
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GossipGoError)
    async def domain_error(request: Request, exc: GossipGoError):
        if exc.status_code >= 500:
            logger.error("Domain error on %s %s: %s", request.method, request.url.path, exc.message)
        return _error_response(exc.status_code or 500, exc.error_type, exc.message, _request_id(request))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        messages = "; ".join(
            f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        return _error_response(422, "validation_error", messages, _request_id(request))

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        type_map = {
            401: "authentication_error",
            403: "forbidden",
            404: "not_found",
            405: "method_not_allowed",
            409: "conflict",
        }
        error_type = type_map.get(exc.status_code, "http_error")
        return _error_response(exc.status_code, error_type, str(exc.detail), _request_id(request))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(500, "internal_error", "An unexpected error occurred", _request_id(request))
