"""Integration tests for a FastAPI endpoint paginating SQLite rows."""

import pytest
from fastapi import Depends, FastAPI, Request, Response
from fastapi.testclient import TestClient

from cursor_pagination import Order, SortField, with_pagination
from cursor_pagination.api import Connection, PaginationParams, create_link_header, pagination_params
from cursor_pagination.errors.handlers import register_exception_handlers


SORT_FIELDS = [
    SortField(name="first_name", order=Order.ASC),
    SortField(name="last_name", order=Order.DESC),
    SortField(name="id", order=Order.ASC),
]


@pytest.fixture
def client(run_query, cursor_secret):
    """Test client for an app listing users."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/users", response_model=Connection)
    async def list_users(
        request: Request,
        response: Response,
        params: PaginationParams = Depends(pagination_params)
    ):
        result = await with_pagination(
            params.to_query(SORT_FIELDS),
            {"run_query": run_query, "query_name": "ListUsers", "cursor_secret": cursor_secret, "max_nodes": 3}
        )
        page_size = {key: value for key, value in {"first": params.first, "last": params.last}.items() if value}
        link = create_link_header(str(request.url).split("?")[0], page_size, result.page_info)
        if link:
            response.headers["Link"] = link
        return Connection.from_result(result)

    @app.get("/broken")
    async def broken(params: PaginationParams = Depends(pagination_params)):
        def run_without_limit(content):
            content.order_by_fragment_builder.with_array_bindings()
            content.where_fragment_builder.with_array_bindings()
            return []

        await with_pagination(
            params.to_query(SORT_FIELDS),
            {"run_query": run_without_limit, "query_name": "Broken", "cursor_secret": cursor_secret}
        )

    return TestClient(app)


class TestListEndpoint:
    """Test a paginated endpoint."""

    def test_first_page(self, client):
        """Test the response body and Link header."""
        response = client.get("/users", params={"first": 2})

        assert response.status_code == 200
        body = response.json()
        assert [edge["node"]["id"] for edge in body["edges"]] == [5, 1]
        assert body["pageInfo"]["hasNextPage"] is True
        assert body["pageInfo"]["hasPreviousPage"] is False
        assert body["pageInfo"]["endCursor"] == body["edges"][-1]["cursor"]
        assert 'rel="next"' in response.headers["Link"]

    def test_follow_cursors(self, client):
        """Test paging forward through the endCursor."""
        first = client.get("/users", params={"first": 2}).json()

        second = client.get("/users", params={"first": 2, "after": first["pageInfo"]["endCursor"]}).json()
        third = client.get("/users", params={"first": 2, "after": second["pageInfo"]["endCursor"]}).json()

        assert [edge["node"]["id"] for edge in second["edges"]] == [4, 2]
        assert [edge["node"]["id"] for edge in third["edges"]] == [3]
        assert third["pageInfo"]["hasNextPage"] is False

    def test_last_page(self, client):
        """Test paging backwards produces a prev link."""
        response = client.get("/users", params={"last": 2})

        assert [edge["node"]["id"] for edge in response.json()["edges"]] == [2, 3]
        assert 'rel="prev"' in response.headers["Link"]


class TestErrorResponses:
    """Test pagination errors rendered as Problem Details."""

    @pytest.mark.parametrize("params,code", [
        ({}, "ErrFirstOrLastRequired"),
        ({"first": 0}, "ErrFirstOutOfRange"),
        ({"last": -1}, "ErrLastOutOfRange"),
        ({"first": 2, "last": 3}, "ErrFirstNotGreaterThanLast"),
        ({"first": 4}, "ErrTooManyNodes"),
        ({"first": 1, "after": "garbage"}, "ErrAfterCursorInvalid"),
        ({"last": 1, "before": "abc.def"}, "ErrBeforeCursorInvalid"),
    ])
    def test_query_errors(self, client, params, code):
        """Test invalid requests return 400 with the error code."""
        response = client.get("/users", params=params)

        assert response.status_code == 400
        assert response.headers["content-type"] == "application/problem+json"
        body = response.json()
        assert body["code"] == code
        assert body["status"] == 400
        assert body["instance"] == "/users"

    def test_unexpected_error(self, client):
        """Test contract violations return a generic 500."""
        response = client.get("/broken", params={"first": 1})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "ErrUnexpected"
        assert body["detail"] == "An unexpected error occurred"
