"""FastAPI integration for cursor pagination."""

from .params import PaginationParams, pagination_params
from .responses import (
    Connection,
    ConnectionEdge,
    ConnectionPageInfo,
    create_link_header
)

__all__ = [
    "PaginationParams",
    "pagination_params",
    "Connection",
    "ConnectionEdge",
    "ConnectionPageInfo",
    "create_link_header"
]
