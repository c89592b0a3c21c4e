import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

_DEFAULT_CODES = {
    400: "bad_request",
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    503: "unavailable",
}


def error_response(status_code: int, code: str, message: str, details=None):
    return JSONResponse(
        status_code=status_code,
        content={"code": code, "message": message, "details": details},
    )


def _split_detail(status_code: int, detail):
    """Turn an HTTPException detail into (code, message, details).

    Services raise either a plain message or a dict carrying its own code.
    """
    code = _DEFAULT_CODES.get(status_code, f"http_{status_code}")
    if isinstance(detail, dict):
        return (
            detail.get("code", code),
            detail.get("message", "Request failed"),
            detail.get("details"),
        )
    if isinstance(detail, str):
        return code, detail, None
    return code, "Request failed", detail


def _validation_details(exc: RequestValidationError) -> list[dict]:
    # ctx is dropped; it can hold exception instances.
    details = []
    for err in exc.errors():
        details.append(
            {
                "loc": list(err.get("loc", ())),
                "msg": err.get("msg"),
                "type": err.get("type"),
            }
        )
    return jsonable_encoder(details)


def register_error_handlers(app) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code, message, details = _split_detail(exc.status_code, exc.detail)
        return error_response(exc.status_code, code, message, details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return error_response(
            422, "validation_error", "Validation error", _validation_details(exc)
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "internal_error", "Internal server error")
