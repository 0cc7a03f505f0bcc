"""Relative (keyset) pagination over a caller-supplied SQL query.

The engine validates the page request, builds the ``ORDER BY`` and ``WHERE``
fragments, hands them to ``run_query`` together with a ``limit``, and turns
the returned rows into edges with cursors and page info.
"""

import asyncio
import inspect
import logging
import math
from typing import (
    Any,
    Awaitable,
    Callable,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    ValidationError,
    field_validator,
)

from ..config import get_settings
from ..errors import (
    ErrAfterCursorInvalid,
    ErrAfterCursorWrongQuery,
    ErrAfterCursorWrongSortConfig,
    ErrBeforeCursorInvalid,
    ErrBeforeCursorWrongQuery,
    ErrBeforeCursorWrongSortConfig,
    ErrFirstNotGreaterThanLast,
    ErrFirstNotInteger,
    ErrFirstOrLastRequired,
    ErrFirstOutOfRange,
    ErrInvalidQuery,
    ErrLastNotInteger,
    ErrLastOutOfRange,
    ErrTooManyNodes,
    ErrUnexpected,
)
from ..models import Cursor, Order, QueryName, SortField, SortFields
from .cursor import build_cursor, encrypt_cursor, resolve_cursor
from .query_builder import FragmentBuilder, QueryBuilder
from .secret import CursorSecret

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MAX_SAFE_INTEGER = 2 ** 53 - 1

Count = Union[StrictInt, StrictFloat]


class QueryContent:
    """Everything ``run_query`` must include in its query.

    Reading ``limit`` and rendering each fragment builder is tracked; the
    engine fails the call if any of them was left out.
    """

    def __init__(
        self,
        limit: float,
        order_by_fragment_builder: FragmentBuilder,
        where_fragment_builder: FragmentBuilder
    ):
        self._limit = limit
        self.order_by_fragment_builder = order_by_fragment_builder
        self.where_fragment_builder = where_fragment_builder
        self.limit_requested = False

    @property
    def limit(self) -> Union[int, float]:
        """Maximum number of rows to fetch; ``math.inf`` means no ``LIMIT``."""
        self.limit_requested = True
        return self._limit


Rows = Sequence[Mapping[str, Any]]

RunQuery = Callable[
    [QueryContent],
    Union[Awaitable[Rows], Rows]
]


class PaginationQuery(BaseModel):
    """The page being requested."""

    first: Optional[Count] = Field(default=None, description="Rows to take from the start of the window")
    last: Optional[Count] = Field(default=None, description="Rows to take from the end of the window")
    # None, an encoded string or a RawCursor; checked by resolve_cursor()
    before_cursor: Optional[Any] = Field(default=None, description="Window ends before this cursor")
    after_cursor: Optional[Any] = Field(default=None, description="Window starts after this cursor")
    sort_fields: SortFields = Field(description="Sort order; must include a unique field")

    model_config = ConfigDict(frozen=True)


class PaginationSetup(BaseModel):
    """How the page is fetched and how cursors are produced."""

    run_query: RunQuery = Field(description="Runs the query built from QueryContent")
    query_name: QueryName = Field(description="Unique name of the query, cursors are bound to it")
    max_nodes: Count = Field(default_factory=lambda: get_settings().max_nodes)
    cursor_generation_concurrency: StrictInt = Field(
        default_factory=lambda: get_settings().cursor_generation_concurrency,
        ge=1
    )
    cursor_secret: Optional[CursorSecret] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("max_nodes")
    @classmethod
    def validate_max_nodes(cls, v):
        """Validate max nodes is positive."""
        if not v > 0:
            raise ValueError("max_nodes must be greater than 0")
        return v


class Edge(BaseModel):
    """A result row."""

    node: Any


class CursorEdge(Edge):
    """A result row with its encoded cursor."""

    cursor: str


class RawEdge(Edge):
    """A result row with its unencrypted cursor, for trusted reuse."""

    raw_cursor: Cursor
    cursor: Optional[str] = None


class PageInfo(BaseModel):
    """Whether more rows exist around the page.

    ``has_next_page`` is only set for ``first`` requests and
    ``has_previous_page`` only for ``last`` requests.
    """

    has_next_page: bool
    has_previous_page: bool


class CursorPageInfo(PageInfo):
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None


class PaginationResult(BaseModel):
    """A page of rows."""

    edges: List[Union[CursorEdge, Edge]]
    page_info: Union[CursorPageInfo, PageInfo]
    edges_with_raw_cursor: List[RawEdge] = Field(default_factory=list, exclude=True)


def _validate_input(model: Type[ModelT], value: Any) -> ModelT:
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        messages = []
        for error in e.errors():
            loc = " -> ".join(str(x) for x in error["loc"])
            messages.append(f"{loc}: {error['msg']}" if loc else error["msg"])
        raise ErrInvalidQuery(f"Invalid {model.__name__}: " + "; ".join(messages)) from e


def _is_count(value: Union[int, float]) -> bool:
    if value == math.inf:
        return True
    if isinstance(value, float) and not value.is_integer():
        return False
    return abs(value + 1) <= MAX_SAFE_INTEGER


def _normalize_count(value: Union[int, float]) -> Union[int, float]:
    return value if value == math.inf else int(value)


def _take_first(rows: List[Any], count: Union[int, float]) -> List[Any]:
    return rows if count == math.inf else rows[:count]


def _take_last(rows: List[Any], count: Union[int, float]) -> List[Any]:
    return rows if count == math.inf else rows[-count:]


def _check_cursor(
    cursor: Cursor,
    query_name: str,
    sort_fields: Sequence[SortField],
    wrong_query: Type[Exception],
    wrong_sort_config: Type[Exception]
) -> None:
    if cursor.query_name != query_name:
        logger.warning(f"Rejected cursor for query '{cursor.query_name}' used with '{query_name}'")
        raise wrong_query()

    names = [sort_field.name for sort_field in sort_fields]
    if len(cursor.fields) != len(names) or set(cursor.field_names) != set(names):
        logger.warning(f"Rejected cursor with fields {list(cursor.field_names)}, expected {names}")
        raise wrong_sort_config()


def build_order_by(sort_fields: Sequence[SortField], flip: bool) -> QueryBuilder:
    """Build the ``ORDER BY`` fragment, reversed when ``flip`` is set."""
    order_by = QueryBuilder()
    for i, sort_field in enumerate(sort_fields):
        if i > 0:
            order_by.append_text(", ")
        order = sort_field.order.flipped(flip)
        order_by.append_text(f"{sort_field.quoted_name} {order.value.upper()}")
    return order_by


def _append_boundary(
    where: QueryBuilder,
    sort_fields: Sequence[SortField],
    cursor: Cursor,
    is_before: bool
) -> None:
    values = cursor.values_by_field()
    for i in range(len(sort_fields)):
        if i > 0:
            where.append_text(" OR ")
        where.append_text("(")
        for j, sort_field in enumerate(sort_fields[:i + 1]):
            if j > 0:
                where.append_text(" AND ")
            if j == i:
                sign = ">" if sort_field.order.flipped(is_before) is Order.ASC else "<"
            else:
                sign = "="
            where.append_text(f"{sort_field.quoted_name} {sign} ").append_value(values[sort_field.name])
        where.append_text(")")


def build_where(
    sort_fields: Sequence[SortField],
    before_cursor: Optional[Cursor],
    after_cursor: Optional[Cursor]
) -> QueryBuilder:
    """Build the ``WHERE`` fragment restricting rows to the window.

    For each boundary the rows kept are those equal on every higher priority
    field and strictly past the cursor on one field. With both boundaries the
    two conditions are combined with ``AND``.
    """
    where = QueryBuilder()
    if before_cursor is None and after_cursor is None:
        where.append_text("1 = 1")
        return where

    where.append_text("(")
    if after_cursor is not None:
        where.append_text("(")
        _append_boundary(where, sort_fields, after_cursor, is_before=False)
        where.append_text(")")
    if before_cursor is not None:
        if after_cursor is not None:
            where.append_text(" AND ")
        where.append_text("(")
        _append_boundary(where, sort_fields, before_cursor, is_before=True)
        where.append_text(")")
    where.append_text(")")
    return where


async def _encrypt_cursors(
    cursors: Sequence[Cursor],
    cursor_secret: CursorSecret,
    concurrency: int
) -> List[str]:
    semaphore = asyncio.Semaphore(concurrency)

    async def encrypt(cursor: Cursor) -> str:
        async with semaphore:
            return await asyncio.to_thread(encrypt_cursor, cursor, cursor_secret)

    # gather keeps input order regardless of completion order
    return list(await asyncio.gather(*(encrypt(cursor) for cursor in cursors)))


async def _paginate(
    query: PaginationQuery,
    setup: PaginationSetup,
    cursor_secret: Optional[CursorSecret]
) -> PaginationResult:
    first = query.first
    last = query.last
    sort_fields = query.sort_fields
    query_name = setup.query_name

    if first is None and last is None:
        raise ErrFirstOrLastRequired()
    if first is not None and not _is_count(first):
        raise ErrFirstNotInteger()
    if last is not None and not _is_count(last):
        raise ErrLastNotInteger()
    if first is not None and first <= 0:
        raise ErrFirstOutOfRange()
    if last is not None and last <= 0:
        raise ErrLastOutOfRange()
    if first is not None and last is not None and first <= last:
        raise ErrFirstNotGreaterThanLast()

    first = _normalize_count(first) if first is not None else None
    last = _normalize_count(last) if last is not None else None

    resolved_before = resolve_cursor(query.before_cursor, cursor_secret)
    if not resolved_before.success:
        raise ErrBeforeCursorInvalid()
    before_cursor = resolved_before.cursor

    resolved_after = resolve_cursor(query.after_cursor, cursor_secret)
    if not resolved_after.success:
        raise ErrAfterCursorInvalid()
    after_cursor = resolved_after.cursor

    if before_cursor is not None:
        _check_cursor(before_cursor, query_name, sort_fields, ErrBeforeCursorWrongQuery, ErrBeforeCursorWrongSortConfig)
    if after_cursor is not None:
        _check_cursor(after_cursor, query_name, sort_fields, ErrAfterCursorWrongQuery, ErrAfterCursorWrongSortConfig)

    requested_count = first if first is not None else last
    if requested_count > setup.max_nodes:
        raise ErrTooManyNodes(setup.max_nodes)

    # One extra row tells whether there is another page
    limit = requested_count + 1

    # Only `last` given: scan backwards and reverse the rows afterwards
    flip = first is None

    logger.debug(
        f"Paginating '{query_name}' first={first} last={last} limit={limit} "
        f"before={before_cursor is not None} after={after_cursor is not None}"
    )

    content = QueryContent(
        limit=limit,
        order_by_fragment_builder=build_order_by(sort_fields, flip).get_fragment_builder(),
        where_fragment_builder=build_where(sort_fields, before_cursor, after_cursor).get_fragment_builder(),
    )

    rows_with_extra = setup.run_query(content)
    if inspect.isawaitable(rows_with_extra):
        rows_with_extra = await rows_with_extra

    if not content.limit_requested:
        raise ErrUnexpected("You need to request the limit from `limit` and add it to the query")
    if not content.order_by_fragment_builder.used:
        raise ErrUnexpected(
            "You need to request the `ORDER BY` fragment from `order_by_fragment_builder` and add it to the query"
        )
    if not content.where_fragment_builder.used:
        raise ErrUnexpected(
            "You need to request the `WHERE` fragment from `where_fragment_builder` and add it to the query"
        )

    if (
        isinstance(rows_with_extra, (str, bytes, Mapping))
        or not isinstance(rows_with_extra, Sequence)
        or not all(isinstance(row, Mapping) for row in rows_with_extra)
    ):
        raise ErrUnexpected("`run_query` must return a sequence of mappings")

    if len(rows_with_extra) > limit:
        logger.error(f"Query '{query_name}' returned {len(rows_with_extra)} rows with a limit of {limit}")
        raise ErrUnexpected("Query returned too many rows. Did you forget to add the `LIMIT`?")

    rows = _take_first(list(rows_with_extra), requested_count)
    overflowed = len(rows_with_extra) > requested_count

    if flip:
        rows.reverse()

    first_nodes = _take_first(rows, first) if first is not None else rows
    last_nodes = _take_last(first_nodes, last) if last is not None else first_nodes

    has_next_page = overflowed if first is not None else False
    # Compares slice lengths only; with both first and last set this can miss
    # a previous page that lies outside the fetched window
    if last is not None:
        has_previous_page = overflowed if flip else len(last_nodes) < len(first_nodes)
    else:
        has_previous_page = False

    raw_cursors = []
    seen_cursors = set()
    for node in last_nodes:
        cursor = build_cursor(node, query_name, sort_fields)
        serialized = cursor.model_dump_json()
        if serialized in seen_cursors:
            raise ErrUnexpected(
                "Duplicate cursor. Cursors must be unique. Ensure you are including a unique field "
                "in `sort_fields`. E.g. the primary `id` field"
            )
        seen_cursors.add(serialized)
        raw_cursors.append(cursor)

    if cursor_secret is None:
        raw_edges = [RawEdge(node=node, raw_cursor=cursor) for node, cursor in zip(last_nodes, raw_cursors)]
        edges = [Edge(node=node) for node in last_nodes]
        page_info = PageInfo(has_next_page=has_next_page, has_previous_page=has_previous_page)
    else:
        encoded = await _encrypt_cursors(raw_cursors, cursor_secret, setup.cursor_generation_concurrency)
        raw_edges = [
            RawEdge(node=node, raw_cursor=cursor, cursor=encoded_cursor)
            for node, cursor, encoded_cursor in zip(last_nodes, raw_cursors, encoded)
        ]
        edges = [CursorEdge(node=node, cursor=encoded_cursor) for node, encoded_cursor in zip(last_nodes, encoded)]
        page_info = CursorPageInfo(
            has_next_page=has_next_page,
            has_previous_page=has_previous_page,
            start_cursor=encoded[0] if encoded else None,
            end_cursor=encoded[-1] if encoded else None,
        )

    logger.debug(
        f"Query '{query_name}' returned {len(edges)} edges "
        f"(has_next_page={has_next_page}, has_previous_page={has_previous_page})"
    )
    return PaginationResult(edges=edges, page_info=page_info, edges_with_raw_cursor=raw_edges)


async def with_pagination(
    query: Union[PaginationQuery, Mapping[str, Any]],
    setup: Union[PaginationSetup, Mapping[str, Any]]
) -> PaginationResult:
    """Fetch a page of rows with encrypted cursors.

    Args:
        query: The requested page (``first``/``last``, boundaries, sort fields)
        setup: ``run_query``, ``query_name``, ``cursor_secret`` and limits

    Returns:
        PaginationResult with ``cursor`` on every edge and start/end cursors
        in the page info

    Raises:
        SqlCursorPaginationQueryError: If the request is invalid
        ErrUnexpected: If ``run_query`` broke its contract, the sort fields
            do not identify rows uniquely, or no ``cursor_secret`` is set
    """
    query = _validate_input(PaginationQuery, query)
    setup = _validate_input(PaginationSetup, setup)
    if setup.cursor_secret is None:
        raise ErrUnexpected(
            "`cursor_secret` is required. Use `with_pagination_without_cursors()` to paginate without cursors"
        )
    return await _paginate(query, setup, setup.cursor_secret)


async def with_pagination_without_cursors(
    query: Union[PaginationQuery, Mapping[str, Any]],
    setup: Union[PaginationSetup, Mapping[str, Any]]
) -> PaginationResult:
    """Fetch a page of rows without encrypted cursors.

    Edges only carry ``node`` and boundaries must be ``RawCursor`` values;
    string cursors are rejected. Raw cursors are still available through
    ``edges_with_raw_cursor``.
    """
    query = _validate_input(PaginationQuery, query)
    setup = _validate_input(PaginationSetup, setup)
    return await _paginate(query, setup, None)
