"""Response models for paginated FastAPI endpoints."""

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..pagination import CursorPageInfo, PageInfo, PaginationResult


class ConnectionPageInfo(BaseModel):
    """Page info serialized with camelCase keys."""

    has_next_page: bool = Field(description="Whether items follow the page (for `first` requests)")
    has_previous_page: bool = Field(description="Whether items precede the page (for `last` requests)")
    start_cursor: Optional[str] = Field(default=None, description="Cursor of the first edge")
    end_cursor: Optional[str] = Field(default=None, description="Cursor of the last edge")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConnectionEdge(BaseModel):
    """A node and its cursor."""

    node: Any = Field(description="The row")
    cursor: Optional[str] = Field(default=None, description="Opaque cursor of the row")


class Connection(BaseModel):
    """Response model for a page of items."""

    edges: List[ConnectionEdge] = Field(description="List of edges")
    page_info: ConnectionPageInfo = Field(description="Pagination metadata")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "edges": [{"node": {"id": 1, "first_name": "Anika"}, "cursor": "gT2Y...Q.Xw9k...a1"}],
                "pageInfo": {
                    "hasNextPage": True,
                    "hasPreviousPage": False,
                    "startCursor": "gT2Y...Q.Xw9k...a1",
                    "endCursor": "gT2Y...Q.Xw9k...a1"
                }
            }
        }
    )

    @classmethod
    def from_result(cls, result: PaginationResult) -> "Connection":
        """Build the response from a pagination result."""
        page_info: PageInfo = result.page_info
        start_cursor = page_info.start_cursor if isinstance(page_info, CursorPageInfo) else None
        end_cursor = page_info.end_cursor if isinstance(page_info, CursorPageInfo) else None
        return cls(
            edges=[
                ConnectionEdge(node=edge.node, cursor=getattr(edge, "cursor", None))
                for edge in result.edges
            ],
            page_info=ConnectionPageInfo(
                has_next_page=page_info.has_next_page,
                has_previous_page=page_info.has_previous_page,
                start_cursor=start_cursor,
                end_cursor=end_cursor
            )
        )


def create_link_header(
    base_url: str,
    params: Dict[str, Any],
    page_info: PageInfo
) -> Optional[str]:
    """Create Link header for pagination as per RFC 8288.

    Args:
        base_url: Base URL for the resource
        params: Query parameters to carry over (page size etc.)
        page_info: Page info of the current page

    Returns:
        Link header value or None if no links
    """
    if not isinstance(page_info, CursorPageInfo):
        return None

    links = []

    if page_info.has_next_page and page_info.end_cursor:
        next_params = {**params, "after": page_info.end_cursor}
        links.append(f'<{base_url}?{urlencode(next_params)}>; rel="next"')

    if page_info.has_previous_page and page_info.start_cursor:
        prev_params = {**params, "before": page_info.start_cursor}
        links.append(f'<{base_url}?{urlencode(prev_params)}>; rel="prev"')

    return ", ".join(links) if links else None
