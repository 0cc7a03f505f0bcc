"""Query parameters for paginated FastAPI endpoints."""

from typing import Annotated, Optional, Sequence, Union

from fastapi import Query
from pydantic import BaseModel, Field

from ..models import SortField
from ..pagination import PaginationQuery


class PaginationParams(BaseModel):
    """Query parameters for relative pagination."""

    first: Optional[int] = Field(default=None, description="Number of items from the start of the window")
    last: Optional[int] = Field(default=None, description="Number of items from the end of the window")
    after: Optional[str] = Field(default=None, description="Cursor the window starts after")
    before: Optional[str] = Field(default=None, description="Cursor the window ends before")

    def to_query(self, sort_fields: Sequence[Union[SortField, dict]]) -> PaginationQuery:
        """Build the pagination query for the given sort order.

        Range checks on ``first``/``last`` are left to the pagination engine
        so they surface as pagination query errors.
        """
        return PaginationQuery(
            first=self.first,
            last=self.last,
            after_cursor=self.after,
            before_cursor=self.before,
            sort_fields=list(sort_fields)
        )


async def pagination_params(
    first: Annotated[Optional[int], Query(description="Number of items from the start of the window")] = None,
    last: Annotated[Optional[int], Query(description="Number of items from the end of the window")] = None,
    after: Annotated[Optional[str], Query(description="Cursor the window starts after")] = None,
    before: Annotated[Optional[str], Query(description="Cursor the window ends before")] = None
) -> PaginationParams:
    """FastAPI dependency collecting the pagination query parameters."""
    return PaginationParams(first=first, last=last, after=after, before=before)
