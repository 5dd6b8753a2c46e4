"""Build expectations from declarative (JSON) definitions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from ..errors import BuildError
from .base import DataPredicate, Expectation
from .predicates import (
    AllMatch,
    ArrayLengthEquals,
    ArrayNonEmpty,
    ContainsSubstring,
    ErrorMessageIncludes,
    FieldCompare,
    FieldEquals,
    HasFields,
    IsNull,
    IsSorted,
    NotNull,
    ResultKind,
    StatusEquals,
)


def _require(config: Mapping[str, Any], key: str, expectation_type: str) -> Any:
    if key not in config:
        raise BuildError(f"Expectation '{expectation_type}' requires '{key}'")
    return config[key]


def _build_all_match(config: Mapping[str, Any]) -> Expectation:
    predicate = create_expectation_from_definition(_require(config, "predicate", "all_match"))
    if not isinstance(predicate, DataPredicate):
        raise BuildError("all_match predicate must inspect element data (e.g. contains_substring, field_equals)")
    return AllMatch(path=config.get("path", ""), predicate=predicate)


_BUILDERS: dict[str, Callable[[Mapping[str, Any]], Expectation]] = {
    "status_equals": lambda c: StatusEquals(int(_require(c, "status", "status_equals"))),
    "result_kind": lambda c: ResultKind(_require(c, "kind", "result_kind")),
    "field_equals": lambda c: FieldEquals(
        path=_require(c, "path", "field_equals"),
        expected=_require(c, "expected", "field_equals"),
    ),
    "field_compare": lambda c: FieldCompare(
        path=_require(c, "path", "field_compare"),
        expected=_require(c, "expected", "field_compare"),
        comparison=c.get("comparison", "equals"),
    ),
    "is_null": lambda c: IsNull(path=_require(c, "path", "is_null")),
    "not_null": lambda c: NotNull(path=_require(c, "path", "not_null")),
    "has_fields": lambda c: HasFields(
        path=c.get("path", ""),
        fields=tuple(_require(c, "fields", "has_fields")),
        exact=bool(c.get("exact", False)),
    ),
    "array_length_equals": lambda c: ArrayLengthEquals(
        path=_require(c, "path", "array_length_equals"),
        length=int(_require(c, "length", "array_length_equals")),
        last_page=bool(c.get("last_page", False)),
    ),
    "array_non_empty": lambda c: ArrayNonEmpty(path=_require(c, "path", "array_non_empty")),
    "is_sorted": lambda c: IsSorted(
        path=_require(c, "path", "is_sorted"),
        field=_require(c, "field", "is_sorted"),
        order=c.get("order", "asc"),
    ),
    "contains_substring": lambda c: ContainsSubstring(
        path=c.get("path", ""),
        substring=_require(c, "substring", "contains_substring"),
        fields=tuple(c.get("fields", ())),
        case_sensitive=bool(c.get("case_sensitive", True)),
    ),
    "all_match": _build_all_match,
    "error_message_includes": lambda c: ErrorMessageIncludes(
        substring=_require(c, "substring", "error_message_includes"),
        index=int(c.get("index", 0)),
    ),
}

# camelCase spellings used by scenario files ported from JavaScript suites
_ALIASES = {
    "statusEquals": "status_equals",
    "fieldEquals": "field_equals",
    "arrayLengthEquals": "array_length_equals",
    "arrayNonEmpty": "array_non_empty",
    "isSorted": "is_sorted",
    "allMatch": "all_match",
    "containsSubstring": "contains_substring",
    "isNull": "is_null",
    "notNull": "not_null",
    "errorMessageIncludes": "error_message_includes",
}

SUPPORTED_EXPECTATION_TYPES = tuple(_BUILDERS)


def create_expectation_from_definition(definition: Mapping[str, Any]) -> Expectation:
    """Create an expectation from its declarative definition.

    Args:
        definition: Mapping with a ``type`` key and type-specific parameters,
            e.g. ``{"type": "array_length_equals", "path": "albums.data", "length": 5}``

    Returns:
        Expectation instance

    Raises:
        BuildError: If the type is unsupported or parameters are invalid
    """
    if not isinstance(definition, Mapping):
        raise BuildError(f"Expectation definition must be an object; got {type(definition).__name__}")

    raw_type = definition.get("type")
    if not raw_type:
        raise BuildError("Expectation definition requires a 'type'")
    expectation_type = _ALIASES.get(raw_type, raw_type)

    builder = _BUILDERS.get(expectation_type)
    if builder is None:
        raise BuildError(
            f"Unsupported expectation type: '{raw_type}'. "
            f"Supported types: {', '.join(SUPPORTED_EXPECTATION_TYPES)}"
        )

    try:
        return builder(definition)
    except (TypeError, ValueError) as exc:
        if isinstance(exc, BuildError):
            raise
        raise BuildError(f"Invalid '{expectation_type}' expectation: {exc}") from exc
