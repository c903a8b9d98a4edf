"""
Render every error as ``{"success": false, "error": {code, message, details}}``.

Registered in ``main.create_app``. Typed errors raised by services carry their
own status and code; routing errors (404/405) and request body validation are
wrapped into the same envelope so clients parse one shape.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import BaseAPIException, InternalServerError

logger = logging.getLogger("rewardapi")


def _error_body(code: str, message: str, details=None) -> dict:
    return {
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
    }


def _where(request: Request) -> str:
    return f"{request.method} {request.url.path}"


async def handle_api_error(request: Request, exc: BaseAPIException):
    # 5xx are our fault (store down), 4xx are the caller's
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"{_where(request)} -> {exc.status_code} {exc.error_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.detail)


async def handle_routing_error(request: Request, exc: StarletteHTTPException):
    logger.info(f"{_where(request)} -> {exc.status_code}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(f"HTTP_{exc.status_code}", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def _plain_errors(errors) -> list:
    # pydantic v2 keeps the raw ValueError under ctx["error"]
    return [
        {
            "loc": list(err.get("loc", ())),
            "msg": err.get("msg"),
            "type": err.get("type"),
        }
        for err in errors
    ]


async def handle_request_validation(request: Request, exc: RequestValidationError):
    errors = _plain_errors(exc.errors())
    logger.info(f"{_where(request)} -> 422 invalid request: {errors}")
    return JSONResponse(
        status_code=422,
        content=_error_body("VALIDATION_001", "Validation failed", {"errors": errors}),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"{_where(request)} -> unhandled {type(exc).__name__}")
    internal = InternalServerError()
    return JSONResponse(status_code=internal.status_code, content=internal.detail)
