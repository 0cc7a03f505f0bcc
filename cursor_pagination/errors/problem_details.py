"""Problem Details (RFC 9457) rendering for pagination errors."""

from typing import Optional, Any
from pydantic import BaseModel, Field
from fastapi import Request
from fastapi.responses import JSONResponse

from .exceptions import SqlCursorPaginationError, ErrUnexpected


class ProblemDetail(BaseModel):
    """Problem Details as defined in RFC 9457."""

    type: str = Field(default="about:blank", description="A URI reference that identifies the problem type")
    title: str = Field(description="A short, human-readable summary of the problem type")
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(default=None, description="A human-readable explanation specific to this occurrence")
    instance: Optional[str] = Field(default=None, description="A URI reference that identifies the specific occurrence")

    # Allow additional properties for extensions
    model_config = {"extra": "allow"}


def to_problem_detail(
    exc: SqlCursorPaginationError,
    request: Optional[Request] = None
) -> ProblemDetail:
    """Convert a pagination error to a ProblemDetail.

    Unexpected errors are host bugs, so their message is not exposed.

    Args:
        exc: The pagination error
        request: Optional request used to fill in ``instance``

    Returns:
        ProblemDetail carrying the error ``code`` as an extension
    """
    detail = "An unexpected error occurred" if isinstance(exc, ErrUnexpected) else exc.message
    return ProblemDetail(
        title=exc.title,
        status=exc.status,
        detail=detail,
        instance=str(request.url.path) if request else None,
        code=exc.code
    )


def create_problem_response(
    status: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: str = "about:blank",
    instance: Optional[str] = None,
    request: Optional[Request] = None,
    **extensions: Any
) -> JSONResponse:
    """Create a Problem Details response."""
    if instance is None and request:
        instance = str(request.url.path)

    problem = ProblemDetail(
        type=type_uri,
        title=title,
        status=status,
        detail=detail,
        instance=instance,
        **extensions
    )

    return JSONResponse(
        status_code=status,
        content=problem.model_dump(exclude_none=True),
        headers={"Content-Type": "application/problem+json"}
    )
