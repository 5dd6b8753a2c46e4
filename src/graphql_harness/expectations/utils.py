"""Comparison helpers for JSON values returned by the server."""

from __future__ import annotations

from enum import Enum
from numbers import Number
from typing import Any, Iterable, Union


class ComparisonType(str, Enum):
    """Comparisons accepted by ``field_compare``."""

    EQUALS = "equals"
    NOT_EQUAL = "not_equal"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_EQUAL = "greater_than_equal"
    LESS_THAN_EQUAL = "less_than_equal"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def ordered(self) -> bool:
        return self not in (ComparisonType.EQUALS, ComparisonType.NOT_EQUAL)

    @classmethod
    def from_string(cls, value: Union[str, "ComparisonType"]) -> "ComparisonType":
        """Resolve a name, short alias (``gte``) or symbol (``>=``).

        Raises:
            ValueError: If value is not a recognized comparison
        """
        if isinstance(value, ComparisonType):
            return value
        found = _ALIASES.get(str(value).lower().strip())
        if found is None:
            raise ValueError(
                f"Unsupported comparison type: '{value}'. "
                f"Supported: {', '.join(f'{kind.value} ({kind.symbol})' for kind in cls)}"
            )
        return found


_SYMBOLS = {
    ComparisonType.EQUALS: "==",
    ComparisonType.NOT_EQUAL: "!=",
    ComparisonType.GREATER_THAN: ">",
    ComparisonType.LESS_THAN: "<",
    ComparisonType.GREATER_THAN_EQUAL: ">=",
    ComparisonType.LESS_THAN_EQUAL: "<=",
}

_ALIASES: dict[str, ComparisonType] = {
    **{kind.value: kind for kind in ComparisonType},
    **{symbol: kind for kind, symbol in _SYMBOLS.items()},
    "eq": ComparisonType.EQUALS,
    "ne": ComparisonType.NOT_EQUAL,
    "not_equals": ComparisonType.NOT_EQUAL,
    "gt": ComparisonType.GREATER_THAN,
    "lt": ComparisonType.LESS_THAN,
    "gte": ComparisonType.GREATER_THAN_EQUAL,
    "lte": ComparisonType.LESS_THAN_EQUAL,
}


def value_kind(value: Any) -> str:
    """Classify a JSON scalar for ordering: ``string``, ``number`` or ``other``.

    Booleans are not numbers here, even though Python treats them as ints.
    """
    if isinstance(value, str):
        return "string"
    if isinstance(value, Number) and not isinstance(value, bool):
        return "number"
    return "other"


def ordering_kind(values: Iterable[Any]) -> str:
    """Common ordering kind of ``values``, or ``mixed`` if they differ.

    An empty sequence is ``string`` (trivially ordered).
    """
    kinds = {value_kind(value) for value in values}
    if not kinds:
        return "string"
    if len(kinds) > 1 or "other" in kinds:
        return "mixed"
    return kinds.pop()


def json_equal(left: Any, right: Any) -> bool:
    """Equality of JSON values where a boolean only equals a boolean.

    ``1 == 1.0`` still holds; ``true == 1`` and ``false == 0`` do not.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(json_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    return left == right


def compare(actual: Any, expected: Any, comparison: Union[ComparisonType, str]) -> bool:
    """Compare ``actual`` against ``expected``.

    Equality works on any JSON value, null included, and never equates a
    boolean with a number. Ordered comparisons need two strings (code-point
    order) or two numbers.

    Raises:
        ValueError: If the comparison is unknown
        TypeError: If an ordered comparison gets null or mismatched kinds

    Examples:
        >>> compare(7, 5, "gt")
        True
        >>> compare(None, 0, "!=")
        True
    """
    kind = ComparisonType.from_string(comparison)
    if kind == ComparisonType.EQUALS:
        return json_equal(actual, expected)
    if kind == ComparisonType.NOT_EQUAL:
        return not json_equal(actual, expected)

    if actual is None:
        raise TypeError(f"cannot apply '{kind.symbol}' to null")
    if ordering_kind((actual, expected)) == "mixed":
        raise TypeError(
            f"cannot order {actual!r} ({type(actual).__name__}) "
            f"against {expected!r} ({type(expected).__name__})"
        )

    if kind == ComparisonType.GREATER_THAN:
        return actual > expected
    if kind == ComparisonType.LESS_THAN:
        return actual < expected
    if kind == ComparisonType.GREATER_THAN_EQUAL:
        return actual >= expected
    return actual <= expected
