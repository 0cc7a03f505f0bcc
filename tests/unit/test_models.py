"""Tests for sort field and cursor models."""

import math

import pytest
from pydantic import TypeAdapter, ValidationError

from cursor_pagination.models import (
    Cursor,
    CursorField,
    Order,
    SortField,
    SortFields,
    field_value_to_string,
    quote_field,
)


class TestOrder:
    """Test Order enum."""

    def test_flipped(self):
        """Test flipping the order."""
        assert Order.ASC.flipped() is Order.DESC
        assert Order.DESC.flipped() is Order.ASC
        assert Order.ASC.flipped(False) is Order.ASC


class TestSortField:
    """Test SortField model."""

    def test_alias_defaults_to_last_segment(self):
        """Test the alias is derived from a qualified name."""
        sort_field = SortField(name="users.id", order="asc")

        assert sort_field.alias == "id"
        assert sort_field.order is Order.ASC
        assert sort_field.quoted_name == "`users`.`id`"

    def test_explicit_alias(self):
        """Test an explicit alias is kept."""
        sort_field = SortField(name="email", alias="email_alias", order=Order.DESC)

        assert sort_field.alias == "email_alias"

    def test_empty_alias(self):
        """Test an explicitly empty alias is rejected rather than defaulted."""
        with pytest.raises(ValidationError):
            SortField(name="id", alias="", order="asc")

    def test_none_alias_defaults(self):
        """Test a None alias falls back to the last name segment."""
        assert SortField(name="users.id", alias=None, order="asc").alias == "id"

    @pytest.mark.parametrize("name", ["", "a-b", "a b", "`a`", "a;", "a\n"])
    def test_invalid_name(self, name):
        """Test names outside the identifier grammar are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            SortField(name=name, order="asc")
        assert "Invalid field name" in str(exc_info.value)

    def test_invalid_order(self):
        """Test unknown orders are rejected."""
        with pytest.raises(ValidationError):
            SortField(name="id", order="up")

    def test_sort_fields_unique(self):
        """Test duplicate names are rejected."""
        adapter = TypeAdapter(SortFields)

        with pytest.raises(ValidationError) as exc_info:
            adapter.validate_python([
                {"name": "id", "order": "asc"},
                {"name": "id", "order": "desc"},
            ])
        assert "Duplicate sort fields are not allowed" in str(exc_info.value)

    def test_sort_fields_not_empty(self):
        """Test at least one sort field is required."""
        with pytest.raises(ValidationError):
            TypeAdapter(SortFields).validate_python([])


class TestHelpers:
    """Test quoting and value rendering helpers."""

    def test_quote_field(self):
        """Test every segment is quoted."""
        assert quote_field("id") == "`id`"
        assert quote_field("a.b.c") == "`a`.`b`.`c`"

    @pytest.mark.parametrize("value,expected", [
        ("x", "x"),
        (True, "1"),
        (False, "0"),
        (42, "42"),
        (-3, "-3"),
        (1.0, "1"),
        (0.25, "0.25"),
    ])
    def test_field_value_to_string(self, value, expected):
        """Test values render to their bound form."""
        assert field_value_to_string(value) == expected


class TestCursor:
    """Test Cursor model."""

    def test_values_by_field(self):
        """Test field lookup and order."""
        cursor = Cursor(
            query_name="Q",
            fields=[
                {"field": "users.name", "value": "Anika"},
                {"field": "id", "value": 5},
            ]
        )

        assert cursor.field_names == ("users.name", "id")
        assert cursor.values_by_field() == {"users.name": "Anika", "id": 5}

    def test_values_keep_their_type(self):
        """Test booleans are not coerced to integers."""
        cursor = Cursor(query_name="Q", fields=[{"field": "admin", "value": True}])

        assert cursor.fields[0].value is True

    @pytest.mark.parametrize("value", [None, [1], {"a": 1}, math.nan, math.inf])
    def test_unsupported_values(self, value):
        """Test values outside the supported kinds are rejected."""
        with pytest.raises(ValidationError):
            CursorField(field="id", value=value)

    def test_empty_query_name(self):
        """Test an empty query name is rejected."""
        with pytest.raises(ValidationError):
            Cursor(query_name="", fields=[{"field": "id", "value": 1}])

    def test_no_fields(self):
        """Test a cursor needs at least one field."""
        with pytest.raises(ValidationError):
            Cursor(query_name="Q", fields=[])

    def test_duplicate_fields(self):
        """Test a field may only appear once."""
        with pytest.raises(ValidationError):
            Cursor(
                query_name="Q",
                fields=[{"field": "id", "value": 1}, {"field": "id", "value": 2}]
            )

    def test_extra_keys_forbidden(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ValidationError):
            Cursor(query_name="Q", fields=[{"field": "id", "value": 1}], extra=True)

    def test_json_round_trip(self):
        """Test the JSON form parses back to an equal cursor."""
        cursor = Cursor(query_name="Q", fields=[{"field": "id", "value": 1}, {"field": "n", "value": 1.5}])

        assert Cursor.model_validate_json(cursor.model_dump_json()) == cursor
