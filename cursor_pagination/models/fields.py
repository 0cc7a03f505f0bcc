"""Pydantic models for sort fields and field values."""

import re
from enum import Enum
from typing import Annotated, Any, List, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    StringConstraints,
    model_validator,
)
from pydantic.types import confloat


_FIELD_NAME_RE = re.compile(r"^[a-zA-Z0-9_]*(\.[a-zA-Z0-9_]*)*$")
_PLACEHOLDER_RE = re.compile(r"^[a-zA-Z0-9_?:]+$")


def _check_field_name(value: str) -> str:
    if not value or not _FIELD_NAME_RE.fullmatch(value):
        raise ValueError("Invalid field name")
    return value


def _check_placeholder(value: str) -> str:
    if not _PLACEHOLDER_RE.fullmatch(value):
        raise ValueError("Placeholder may only contain letters, digits, '_', '?' and ':'")
    return value


FieldName = Annotated[StrictStr, AfterValidator(_check_field_name)]
QueryName = Annotated[str, StringConstraints(strict=True, min_length=1)]
Placeholder = Annotated[StrictStr, AfterValidator(_check_placeholder)]

# bool first so True/False never validate as integers
FieldValue = Union[
    StrictBool,
    StrictInt,
    confloat(strict=True, allow_inf_nan=False),
    StrictStr,
]


class Order(str, Enum):
    """Sort direction of a field."""

    ASC = "asc"
    DESC = "desc"

    def flipped(self, flip: bool = True) -> "Order":
        """Return the opposite order when ``flip`` is set."""
        if not flip:
            return self
        return Order.DESC if self is Order.ASC else Order.ASC


class SortField(BaseModel):
    """A column the page is ordered by.

    ``name`` is what goes into the SQL and may be qualified (``users.id``).
    ``alias`` is the key used to read the value off a result row and defaults
    to the last segment of ``name``.
    """

    name: FieldName = Field(description="Column name, optionally dot-qualified")
    alias: str = Field(min_length=1, description="Key of the value in a result row")
    order: Order = Field(description="Sort direction")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {"name": "users.id", "alias": "id", "order": "asc"}
        }
    )

    @model_validator(mode="before")
    @classmethod
    def default_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("alias") is None and isinstance(data.get("name"), str):
            data = {**data, "alias": data["name"].rsplit(".", 1)[-1]}
        return data

    @property
    def quoted_name(self) -> str:
        """Name with every dot segment quoted."""
        return quote_field(self.name)


def _check_unique_names(sort_fields: List[SortField]) -> List[SortField]:
    seen = set()
    for sort_field in sort_fields:
        if sort_field.name in seen:
            raise ValueError("Duplicate sort fields are not allowed")
        seen.add(sort_field.name)
    return sort_fields


SortFields = Annotated[
    List[SortField],
    Field(min_length=1),
    AfterValidator(_check_unique_names),
]


def quote_field(name: str) -> str:
    """Quote each dot segment of a field name with backticks."""
    return ".".join(f"`{part}`" for part in name.split("."))


def field_value_to_string(value: Union[bool, int, float, str]) -> str:
    """Render a field value the way it is bound into SQL."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
