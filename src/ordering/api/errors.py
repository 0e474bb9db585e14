"""Rendering of ordering errors as HTTP responses.

Every error leaves the API as ``{"error": {"code", "message", "details"}}``
with a status code chosen by its category.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ordering.errors import ErrorCategory, InvalidRequestError, OrderingError

STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.UNAUTHORIZED: 403,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.INTERNAL: 500,
}


def error_response(exc: OrderingError) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_CATEGORY.get(exc.category, 500),
        content={"error": exc.to_dict()},
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(OrderingError)
    async def handle_ordering_error(_request: Request, exc: OrderingError):
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_request: Request, exc: RequestValidationError):
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"] if part not in ("body", "query", "path")) or "request"
        return error_response(InvalidRequestError(field, first["msg"]))
