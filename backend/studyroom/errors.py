# backend/studyroom/errors.py
"""
Problem+json error envelope.

Every error response, whether raised by the booking engine, by FastAPI
routing or by request validation, has the shape:

    {"type", "title", "status", "detail", "instance", "code"?, "errors"?}

Endpoints marked with ``reports_invalid_input`` report body validation
failures as 400 INVALID_INPUT, the same code the booking engine uses.
"""

from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from studyroom.core.exceptions import DomainException

_TITLES = {
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}

PROBLEM_MEDIA_TYPE = "application/problem+json"

F = TypeVar("F", bound=Callable[..., Any])


def problem_response(
    request: Request,
    status: int,
    detail: Optional[str] = None,
    code: Optional[str] = None,
    errors: Optional[Any] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {
        "type": "about:blank",
        "title": _TITLES.get(status, "Error"),
        "status": status,
        "detail": detail or "",
        "instance": request.url.path,
    }
    if code:
        body["code"] = code
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(
        body,
        status_code=status,
        headers=dict(headers) if headers else None,
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _from_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    # Domain exceptions converted with to_http_exception() carry a dict detail
    if isinstance(detail, dict):
        return problem_response(
            request,
            exc.status_code,
            detail=detail.get("message"),
            code=detail.get("code"),
            errors=detail.get("details"),
            headers=exc.headers,
        )
    return problem_response(
        request,
        exc.status_code,
        detail=None if detail is None else str(detail),
        headers=exc.headers,
    )


INVALID_INPUT_ATTRIBUTE = "__invalid_input_on_validation__"


def reports_invalid_input(endpoint: F) -> F:
    """Render request validation failures on ``endpoint`` as 400 INVALID_INPUT."""
    setattr(endpoint, INVALID_INPUT_ATTRIBUTE, True)
    return endpoint


def _field_path(error: Mapping[str, Any]) -> str:
    # loc is ("body", "student1", "class"); the leading source is not a field
    loc = [str(part) for part in error.get("loc", ())]
    if len(loc) > 1 and loc[0] in ("body", "query", "path"):
        loc = loc[1:]
    return ".".join(loc) or "body"


def _invalid_input_response(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = _field_path(first)
    message = first.get("msg", "Invalid request")
    return problem_response(
        request,
        400,
        detail=f"{field}: {message}",
        code="INVALID_INPUT",
        errors={"field": field},
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        return _from_http_exception(request, exc.to_http_exception())

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _from_http_exception(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _from_http_exception(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        endpoint = request.scope.get("endpoint")
        if getattr(endpoint, INVALID_INPUT_ATTRIBUTE, False):
            return _invalid_input_response(request, exc)
        return problem_response(
            request,
            422,
            detail="Request validation failed",
            code="VALIDATION_ERROR",
            errors=exc.errors(),
        )
