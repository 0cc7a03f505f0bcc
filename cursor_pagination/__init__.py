"""Relative cursor pagination for SQL queries with encrypted cursors."""

from .errors import (
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
from .models import Cursor, CursorField, Order, SortField
from .pagination import (
    CursorSecret,
    CursorEdge,
    CursorPageInfo,
    Edge,
    Fragment,
    FragmentBuilder,
    PageInfo,
    PaginationQuery,
    PaginationResult,
    PaginationSetup,
    QueryContent,
    RawCursor,
    RawEdge,
    RawFragment,
    build_cursor_secret,
    decrypt_cursor,
    encrypt_cursor,
    generate_secret,
    raw_cursor,
    with_pagination,
    with_pagination_without_cursors
)

__version__ = "1.0.0"

__all__ = [
    "Cursor",
    "CursorField",
    "Order",
    "SortField",
    "CursorSecret",
    "CursorEdge",
    "CursorPageInfo",
    "Edge",
    "Fragment",
    "FragmentBuilder",
    "PageInfo",
    "PaginationQuery",
    "PaginationResult",
    "PaginationSetup",
    "QueryContent",
    "RawCursor",
    "RawEdge",
    "RawFragment",
    "build_cursor_secret",
    "decrypt_cursor",
    "encrypt_cursor",
    "generate_secret",
    "raw_cursor",
    "with_pagination",
    "with_pagination_without_cursors",
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
