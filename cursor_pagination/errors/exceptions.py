"""Exceptions raised by the pagination engine.

Two families exist. Query errors (``SqlCursorPaginationQueryError``) are caused
by the request itself and can be reported back to whoever supplied it.
``ErrUnexpected`` signals a programming error in the host application and should
fail the request loudly.
"""

from typing import Optional


class SqlCursorPaginationError(Exception):
    """Base exception for all pagination errors."""

    status: int = 500
    title: str = "Internal Server Error"

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class ErrUnexpected(SqlCursorPaginationError):
    """Host application broke a contract (crypto missing, bad rows, ...)."""

    def __init__(self, message: str):
        super().__init__("ErrUnexpected", message)


class SqlCursorPaginationQueryError(SqlCursorPaginationError):
    """Base exception for errors caused by the pagination request."""

    status = 400
    title = "Bad Request"


class ErrInvalidQuery(SqlCursorPaginationQueryError):
    """The query or setup failed schema validation."""

    def __init__(self, detail: str):
        super().__init__("ErrInvalidQuery", detail)


class ErrInvalidCursorSecret(SqlCursorPaginationQueryError):
    """The secret used to build the cursor keys is unusable."""

    def __init__(self, detail: str = "Cursor secret must be at least 30 characters"):
        super().__init__("ErrInvalidCursorSecret", detail)


class ErrInvalidPlaceholder(SqlCursorPaginationQueryError):
    """A placeholder token contains characters outside the allowed grammar."""

    def __init__(self, placeholder: Optional[object] = None):
        super().__init__(
            "ErrInvalidPlaceholder",
            f"Invalid placeholder: {placeholder!r}"
        )


class ErrFirstOrLastRequired(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__("ErrFirstOrLastRequired", "One of `first`/`last` required")


class ErrFirstNotInteger(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__("ErrFirstNotInteger", "`first` must be an integer")


class ErrLastNotInteger(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__("ErrLastNotInteger", "`last` must be an integer")


class ErrFirstOutOfRange(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__("ErrFirstOutOfRange", "`first` must be > 0")


class ErrLastOutOfRange(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__("ErrLastOutOfRange", "`last` must be > 0")


class ErrFirstNotGreaterThanLast(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__("ErrFirstNotGreaterThanLast", "`first` must be > `last`")


class ErrBeforeCursorInvalid(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__("ErrBeforeCursorInvalid", "`before_cursor` invalid")


class ErrAfterCursorInvalid(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__("ErrAfterCursorInvalid", "`after_cursor` invalid")


class ErrTooManyNodes(SqlCursorPaginationQueryError):
    """More rows were requested than ``max_nodes`` allows."""

    def __init__(self, max_nodes: float):
        self.max_nodes = max_nodes
        super().__init__(
            "ErrTooManyNodes",
            f"Too many nodes requested. The limit is {max_nodes}"
        )


class ErrBeforeCursorWrongQuery(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__(
            "ErrBeforeCursorWrongQuery",
            "`before_cursor` created for different query"
        )


class ErrAfterCursorWrongQuery(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__(
            "ErrAfterCursorWrongQuery",
            "`after_cursor` created for different query"
        )


class ErrBeforeCursorWrongSortConfig(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__(
            "ErrBeforeCursorWrongSortConfig",
            "`before_cursor` cursor created for different sort configuration"
        )


class ErrAfterCursorWrongSortConfig(SqlCursorPaginationQueryError):
    def __init__(self):
        super().__init__(
            "ErrAfterCursorWrongSortConfig",
            "`after_cursor` cursor created for different sort configuration"
        )
