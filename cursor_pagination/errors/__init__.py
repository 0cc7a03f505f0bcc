"""Error handling module for cursor pagination.

The FastAPI problem-details rendering lives in ``problem_details`` and
``handlers`` and is imported from there explicitly.
"""

from .exceptions import (
    SqlCursorPaginationError,
    SqlCursorPaginationQueryError,
    ErrUnexpected,
    ErrInvalidQuery,
    ErrInvalidCursorSecret,
    ErrInvalidPlaceholder,
    ErrFirstOrLastRequired,
    ErrFirstNotInteger,
    ErrLastNotInteger,
    ErrFirstOutOfRange,
    ErrLastOutOfRange,
    ErrFirstNotGreaterThanLast,
    ErrBeforeCursorInvalid,
    ErrAfterCursorInvalid,
    ErrTooManyNodes,
    ErrBeforeCursorWrongQuery,
    ErrAfterCursorWrongQuery,
    ErrBeforeCursorWrongSortConfig,
    ErrAfterCursorWrongSortConfig
)

__all__ = [
    "SqlCursorPaginationError",
    "SqlCursorPaginationQueryError",
    "ErrUnexpected",
    "ErrInvalidQuery",
    "ErrInvalidCursorSecret",
    "ErrInvalidPlaceholder",
    "ErrFirstOrLastRequired",
    "ErrFirstNotInteger",
    "ErrLastNotInteger",
    "ErrFirstOutOfRange",
    "ErrLastOutOfRange",
    "ErrFirstNotGreaterThanLast",
    "ErrBeforeCursorInvalid",
    "ErrAfterCursorInvalid",
    "ErrTooManyNodes",
    "ErrBeforeCursorWrongQuery",
    "ErrAfterCursorWrongQuery",
    "ErrBeforeCursorWrongSortConfig",
    "ErrAfterCursorWrongSortConfig"
]
