"""Pydantic models for cursors."""

from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .fields import FieldName, FieldValue, QueryName


class CursorField(BaseModel):
    """Value of one sort field at the boundary row."""

    field: FieldName = Field(description="Qualified sort field name")
    value: FieldValue = Field(description="Value of the field in the boundary row")

    model_config = ConfigDict(frozen=True, extra="forbid")


class Cursor(BaseModel):
    """Decoded cursor bound to the query it was produced for.

    ``fields`` keeps the sort field order, so the JSON encoding of a cursor is
    stable and can be authenticated.
    """

    query_name: QueryName = Field(description="Name of the query the cursor belongs to")
    fields: Tuple[CursorField, ...] = Field(min_length=1, description="Sort field values in sort order")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "query_name": "ListUsers",
                "fields": [
                    {"field": "first_name", "value": "Anika"},
                    {"field": "id", "value": 5}
                ]
            }
        }
    )

    @field_validator("fields")
    @classmethod
    def validate_unique_fields(cls, v):
        """Reject cursors naming the same field twice."""
        names = [cursor_field.field for cursor_field in v]
        if len(set(names)) != len(names):
            raise ValueError("Duplicate cursor fields are not allowed")
        return v

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(cursor_field.field for cursor_field in self.fields)

    def values_by_field(self) -> Dict[str, FieldValue]:
        """Map each field name to its boundary value."""
        return {cursor_field.field: cursor_field.value for cursor_field in self.fields}
