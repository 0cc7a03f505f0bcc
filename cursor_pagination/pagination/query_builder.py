"""SQL fragment building for cursor pagination.

``QueryBuilder`` collects literal SQL text and bound values. Values are never
inlined; ``FragmentBuilder`` renders the collected parts with placeholders in
the format the caller's database layer expects.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..errors import ErrInvalidPlaceholder
from ..models import FieldValue, Placeholder, field_value_to_string

logger = logging.getLogger(__name__)

T = TypeVar("T")

PlaceholderFn = Callable[[int], str]

_placeholder_adapter = TypeAdapter(Placeholder)

# Marks the position of a bound value among the text parts
_VALUE = object()


class Fragment(BaseModel):
    """SQL text with placeholders and the values bound to them."""

    sql: str = Field(description="SQL containing placeholders")
    bindings: Union[List[str], Dict[str, str]] = Field(
        description="Values in placeholder order, or keyed by placeholder name"
    )


class RawFragment(BaseModel):
    """Literal SQL segments surrounding each bound value."""

    strings: List[str] = Field(description="len(bindings) + 1 literal segments")
    bindings: List[str] = Field(description="Bound values in order")


def _validate_placeholder(placeholder: Any) -> str:
    try:
        return _placeholder_adapter.validate_python(placeholder)
    except ValidationError as e:
        raise ErrInvalidPlaceholder(placeholder) from e


class FragmentBuilder:
    """Read-only view over a finished ``QueryBuilder``.

    Each render method marks the builder as ``used``; the pagination engine
    checks this to make sure ``run_query`` included the fragment.
    """

    def __init__(
        self,
        parts: Sequence[Any],
        bindings: Sequence[str],
        on_usage: Optional[Callable[[], None]] = None
    ):
        self._parts = tuple(parts)
        self._bindings = tuple(bindings)
        self._on_usage = on_usage
        self.used = False

    def _mark_used(self) -> None:
        if self.used:
            return
        self.used = True
        if self._on_usage is not None:
            self._on_usage()

    def _strings(self) -> List[str]:
        strings = []
        current = []
        for part in self._parts:
            if part is _VALUE:
                strings.append("".join(current))
                current = []
            else:
                current.append(part)
        strings.append("".join(current))
        return strings

    def with_array_bindings(self, placeholder: Union[str, PlaceholderFn] = "?") -> Fragment:
        """Render with positional placeholders.

        Args:
            placeholder: Placeholder token, or a function receiving the index
                of the binding and returning the token (e.g. ``lambda i: f":{i}"``)

        Returns:
            Fragment whose ``bindings`` is a list in placeholder order

        Raises:
            ErrInvalidPlaceholder: If a token contains characters other than
                letters, digits, ``_``, ``?`` and ``:``
        """
        if not callable(placeholder):
            placeholder = _validate_placeholder(placeholder)

        index = 0
        sql = []
        for part in self._parts:
            if part is _VALUE:
                if callable(placeholder):
                    sql.append(_validate_placeholder(placeholder(index)))
                else:
                    sql.append(placeholder)
                index += 1
            else:
                sql.append(part)

        self._mark_used()
        return Fragment(sql="".join(sql), bindings=list(self._bindings))

    def with_object_bindings(self, placeholder: PlaceholderFn) -> Fragment:
        """Render with named placeholders.

        Identical values share one placeholder, so ``placeholder`` is called
        with a counter of distinct values and must return unique names.

        Returns:
            Fragment whose ``bindings`` maps placeholder name to value

        Raises:
            ErrInvalidPlaceholder: If a generated name is not a valid token
        """
        index = 0
        sql = []
        bindings: Dict[str, str] = {}
        value_to_name: Dict[str, str] = {}
        for part in self._parts:
            if part is _VALUE:
                value = self._bindings[index]
                name = value_to_name.get(value)
                if name is None:
                    name = _validate_placeholder(placeholder(len(value_to_name)))
                    value_to_name[value] = name
                    bindings[name] = value
                sql.append(name)
                index += 1
            else:
                sql.append(part)

        self._mark_used()
        return Fragment(sql="".join(sql), bindings=bindings)

    def to_template(self, compose: Callable[..., T]) -> T:
        """Pass the fragment to a template-style composition function.

        ``compose`` is called as ``compose(strings, *bindings)`` where
        ``strings`` holds the literal segments around each binding.
        """
        strings = self._strings()
        self._mark_used()
        return compose(strings, *self._bindings)

    def to_raw(self) -> RawFragment:
        """Return the literal segments and bindings."""
        strings = self._strings()
        self._mark_used()
        return RawFragment(strings=strings, bindings=list(self._bindings))


class QueryBuilder:
    """Accumulates SQL text and bound values."""

    def __init__(self):
        self._parts: List[Any] = []
        self._bindings: List[str] = []

    def append_text(self, text: str) -> "QueryBuilder":
        self._parts.append(text)
        return self

    def append_value(self, value: FieldValue) -> "QueryBuilder":
        self._parts.append(_VALUE)
        self._bindings.append(field_value_to_string(value))
        return self

    def get_fragment_builder(self, on_usage: Optional[Callable[[], None]] = None) -> FragmentBuilder:
        """Freeze the collected parts into a ``FragmentBuilder``."""
        logger.debug(f"Built fragment with {len(self._bindings)} bindings")
        return FragmentBuilder(self._parts, self._bindings, on_usage)
