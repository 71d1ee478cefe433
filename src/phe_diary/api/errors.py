"""Exception handlers rendering failures as JSON envelopes."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from phe_diary.errors import PheDiaryError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to an app."""
    app.add_exception_handler(PheDiaryError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)


async def _handle_domain_error(request: Request, exc: PheDiaryError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


async def _handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    issues = [
        {"path": _field_path(error.get("loc", ())), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    summary = ", ".join(
        f"{issue['path']}: {issue['message']}" if issue["path"] else issue["message"]
        for issue in issues
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": f"Validation failed: {summary}",
            "errors": issues,
        },
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error", extra={"path": request.url.path}, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error"},
    )


def _field_path(loc: tuple[object, ...] | list[object]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in {"body", "query", "path"}:
        parts = parts[1:]
    return ".".join(parts)
