"""FastAPI exception handlers for pagination errors."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .exceptions import SqlCursorPaginationQueryError, ErrUnexpected
from .problem_details import create_problem_response, to_problem_detail

logger = logging.getLogger(__name__)


async def pagination_query_error_handler(
    request: Request,
    exc: SqlCursorPaginationQueryError
) -> JSONResponse:
    """Handle errors caused by the pagination request itself."""
    logger.info(
        f"Pagination query error: {exc.code} - {exc.message}",
        extra={
            "status_code": exc.status,
            "path": str(request.url.path),
            "method": request.method,
            "code": exc.code
        }
    )
    problem = to_problem_detail(exc, request)
    return create_problem_response(
        status=problem.status,
        title=problem.title,
        detail=problem.detail,
        request=request,
        code=exc.code
    )


async def unexpected_error_handler(
    request: Request,
    exc: ErrUnexpected
) -> JSONResponse:
    """Handle contract violations by the host application."""
    logger.error(
        f"Unexpected pagination error: {exc.message}",
        extra={
            "path": str(request.url.path),
            "method": request.method,
            "code": exc.code
        },
        exc_info=exc
    )
    problem = to_problem_detail(exc, request)
    return create_problem_response(
        status=problem.status,
        title=problem.title,
        detail=problem.detail,
        request=request,
        code=exc.code
    )


def register_exception_handlers(app):
    """Register the pagination exception handlers with a FastAPI app."""
    app.add_exception_handler(SqlCursorPaginationQueryError, pagination_query_error_handler)
    app.add_exception_handler(ErrUnexpected, unexpected_error_handler)
