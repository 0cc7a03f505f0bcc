"""Pytest configuration and shared fixtures for the cursor pagination tests."""

import asyncio
import logging
import math
import sqlite3
from typing import Any, Dict, List

import pytest

from cursor_pagination import (
    Order,
    PaginationResult,
    QueryContent,
    SortField,
    build_cursor_secret,
    with_pagination,
    with_pagination_without_cursors,
)


# Keep pagination debug logs out of the test output
logging.getLogger("cursor_pagination").setLevel(logging.WARNING)

TEST_SECRET = "0" * 30
TEST_QUERY_NAME = "TestQuery"

MOCK_ROWS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "admin": False,
        "created_at": 1662538189,
        "email": "rhoncus.donec@aol.edu",
        "first_name": "Anika",
        "last_name": "Duncan",
    },
    {
        "id": 2,
        "admin": False,
        "created_at": 1679712324,
        "email": "ut.nisi@yahoo.org",
        "first_name": "Jermaine",
        "last_name": "O'connor",
    },
    {
        "id": 3,
        "admin": True,
        "created_at": 1647959350,
        "email": "eu@hotmail.ca",
        "first_name": "Joseph",
        "last_name": "Rhodes",
    },
    {
        "id": 4,
        "admin": False,
        "created_at": 1604543417,
        "email": "purus.accumsan@icloud.com",
        "first_name": "Cooper",
        "last_name": "Molina",
    },
    {
        "id": 5,
        "admin": True,
        "created_at": 1631332719,
        "email": "diam.vel@outlook.edu",
        "first_name": "Anika",
        "last_name": "Molina",
    },
]


def default_sort_fields() -> List[SortField]:
    return [
        SortField(name="first_name", order=Order.ASC),
        SortField(name="last_name", order=Order.DESC),
        SortField(name="id", order=Order.ASC),
    ]


@pytest.fixture(scope="session")
def cursor_secret():
    """Cursor secret shared by all tests."""
    return asyncio.run(build_cursor_secret(TEST_SECRET))


@pytest.fixture
def db():
    """In-memory SQLite database holding the users table."""
    # TestClient runs endpoints outside the test thread
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute(
        """CREATE TABLE users (
               id INTEGER NOT NULL,
               created_at INTEGER NOT NULL,
               first_name TEXT NOT NULL,
               last_name TEXT NOT NULL,
               email TEXT NOT NULL,
               admin BOOLEAN NOT NULL
           )"""
    )
    conn.executemany(
        """INSERT INTO users (id, created_at, first_name, last_name, email, admin)
           VALUES (:id, :created_at, :first_name, :last_name, :email, :admin)""",
        MOCK_ROWS
    )
    yield conn
    conn.close()


@pytest.fixture
def run_query(db):
    """``run_query`` selecting users with the fragments it is given."""
    queries: List[Dict[str, Any]] = []

    async def _run_query(content: QueryContent) -> List[Dict[str, Any]]:
        where = content.where_fragment_builder.with_array_bindings()
        order_by = content.order_by_fragment_builder.with_array_bindings()
        limit = content.limit

        sql = (
            "SELECT id, admin, created_at, first_name, last_name, email, email AS email_alias "
            f"FROM users WHERE {where.sql} ORDER BY {order_by.sql}"
        )
        bindings = list(where.bindings) + list(order_by.bindings)
        if limit != math.inf:
            sql += " LIMIT ?"
            bindings.append(limit)

        queries.append({"sql": sql, "bindings": bindings})
        return [dict(row) for row in db.execute(sql, bindings).fetchall()]

    _run_query.queries = queries
    return _run_query


@pytest.fixture
def paginate(run_query, cursor_secret):
    """Run ``with_pagination`` with test defaults that can be overridden."""

    async def _paginate(query=None, setup=None, cursors=True) -> PaginationResult:
        query_input = {"sort_fields": default_sort_fields(), **(query or {})}
        setup_input = {
            "cursor_secret": cursor_secret if cursors else None,
            "max_nodes": math.inf,
            "query_name": TEST_QUERY_NAME,
            "run_query": run_query,
            **(setup or {}),
        }
        if cursors:
            return await with_pagination(query_input, setup_input)
        return await with_pagination_without_cursors(query_input, setup_input)

    return _paginate
