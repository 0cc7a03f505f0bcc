"""Pydantic models for cursor pagination."""

from .fields import (
    FieldName,
    FieldValue,
    Order,
    Placeholder,
    QueryName,
    SortField,
    SortFields,
    field_value_to_string,
    quote_field
)
from .cursor import Cursor, CursorField

__all__ = [
    "FieldName",
    "FieldValue",
    "Order",
    "Placeholder",
    "QueryName",
    "SortField",
    "SortFields",
    "field_value_to_string",
    "quote_field",
    "Cursor",
    "CursorField"
]
