"""Pagination module for cursor-based pagination."""

from .secret import (
    CursorSecret,
    build_cursor_secret,
    generate_secret,
    get_cursor_secret
)
from .cursor import (
    BoundaryCursor,
    RawCursor,
    ResolvedCursor,
    build_cursor,
    decrypt_cursor,
    encrypt_cursor,
    raw_cursor,
    resolve_cursor
)
from .query_builder import (
    Fragment,
    FragmentBuilder,
    QueryBuilder,
    RawFragment
)
from .engine import (
    CursorEdge,
    CursorPageInfo,
    Edge,
    PageInfo,
    PaginationQuery,
    PaginationResult,
    PaginationSetup,
    QueryContent,
    RawEdge,
    with_pagination,
    with_pagination_without_cursors
)

__all__ = [
    "CursorSecret",
    "build_cursor_secret",
    "generate_secret",
    "get_cursor_secret",
    "BoundaryCursor",
    "RawCursor",
    "ResolvedCursor",
    "build_cursor",
    "decrypt_cursor",
    "encrypt_cursor",
    "raw_cursor",
    "resolve_cursor",
    "Fragment",
    "FragmentBuilder",
    "QueryBuilder",
    "RawFragment",
    "CursorEdge",
    "CursorPageInfo",
    "Edge",
    "PageInfo",
    "PaginationQuery",
    "PaginationResult",
    "PaginationSetup",
    "QueryContent",
    "RawEdge",
    "with_pagination",
    "with_pagination_without_cursors"
]
