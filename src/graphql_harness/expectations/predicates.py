"""Leaf predicates of the assertion engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from ..errors import AssertionFailure, BuildError
from ..results import RESULT_KINDS, GraphQLErrors, NormalizedResult
from .base import DataPredicate, Expectation
from .paths import PathError, parse_path, resolve_path
from .utils import ComparisonType, compare, json_equal, ordering_kind


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_string(cls, value: Union[str, "SortOrder"]) -> "SortOrder":
        if isinstance(value, SortOrder):
            return value
        normalized = str(value).lower().strip()
        aliases = {"asc": cls.ASC, "ascending": cls.ASC, "desc": cls.DESC, "descending": cls.DESC}
        if normalized not in aliases:
            raise BuildError(f"Unsupported sort order: '{value}'. Supported: asc, desc")
        return aliases[normalized]


def _validated_path(path: str) -> str:
    parse_path(path)
    return path


@dataclass(frozen=True)
class StatusEquals(Expectation):
    """HTTP status of the response equals ``status``."""

    label: ClassVar[str] = "status_equals"

    status: int

    def check(self, result: NormalizedResult) -> None:
        if result.status_code != self.status:
            self.fail(f"expected status {self.status}, got {result.status_code}", expected=self.status, actual=result.status_code)


@dataclass(frozen=True)
class ResultKind(Expectation):
    """Result normalized to the given variant (success, graphql_errors, transport_error)."""

    label: ClassVar[str] = "result_kind"

    kind: str

    def __post_init__(self) -> None:
        if self.kind not in RESULT_KINDS:
            raise BuildError(f"Unknown result kind '{self.kind}'. Supported: {', '.join(RESULT_KINDS)}")

    def check(self, result: NormalizedResult) -> None:
        if result.kind != self.kind:
            self.fail(f"expected {self.kind}, got {result.kind}", expected=self.kind, actual=result.kind)


@dataclass(frozen=True)
class FieldEquals(DataPredicate):
    label: ClassVar[str] = "field_equals"

    path: str
    expected: Any

    def __post_init__(self) -> None:
        _validated_path(self.path)

    def check_value(self, root: Any) -> None:
        actual = self.lookup(root)
        if not json_equal(actual, self.expected):
            self.fail(f"expected {self.expected!r}, got {actual!r}", expected=self.expected, actual=actual)


@dataclass(frozen=True)
class FieldCompare(DataPredicate):
    """Compare the value at ``path`` using a comparison type (``gt``, ``<=``, ...)."""

    label: ClassVar[str] = "field_compare"

    path: str
    expected: Any
    comparison: str = "equals"

    def __post_init__(self) -> None:
        _validated_path(self.path)
        try:
            ComparisonType.from_string(self.comparison)
        except ValueError as exc:
            raise BuildError(str(exc)) from exc

    def check_value(self, root: Any) -> None:
        actual = self.lookup(root)
        try:
            ok = compare(actual, self.expected, self.comparison)
        except TypeError as exc:
            self.fail(str(exc), expected=self.expected, actual=actual)
        if not ok:
            self.fail(
                f"expected value {self.comparison} {self.expected!r}, got {actual!r}",
                expected=self.expected,
                actual=actual,
            )


@dataclass(frozen=True)
class IsNull(DataPredicate):
    """Value at ``path`` is present and null (absent records are nulled fields)."""

    label: ClassVar[str] = "is_null"

    path: str

    def __post_init__(self) -> None:
        _validated_path(self.path)

    def check_value(self, root: Any) -> None:
        actual = self.lookup(root)
        if actual is not None:
            self.fail(f"expected null, got {actual!r}", expected=None, actual=actual)


@dataclass(frozen=True)
class NotNull(DataPredicate):
    label: ClassVar[str] = "not_null"

    path: str

    def __post_init__(self) -> None:
        _validated_path(self.path)

    def check_value(self, root: Any) -> None:
        if self.lookup(root) is None:
            self.fail("expected a non-null value, got null", actual=None)


@dataclass(frozen=True)
class HasFields(DataPredicate):
    """Object at ``path`` has the given keys (exactly those keys when ``exact``)."""

    label: ClassVar[str] = "has_fields"

    path: str
    fields: tuple[str, ...]
    exact: bool = False

    def __post_init__(self) -> None:
        _validated_path(self.path)
        object.__setattr__(self, "fields", tuple(self.fields))

    def check_value(self, root: Any) -> None:
        actual = self.lookup(root)
        if not isinstance(actual, dict):
            self.fail(f"expected an object, got {type(actual).__name__}", actual=actual)
        missing = [name for name in self.fields if name not in actual]
        if missing:
            self.fail(f"missing fields {missing}", expected=list(self.fields), actual=sorted(actual))
        if self.exact:
            extra = [name for name in actual if name not in self.fields]
            if extra:
                self.fail(f"unexpected fields {extra}", expected=list(self.fields), actual=list(actual))


def _require_list(predicate: DataPredicate, root: Any) -> list:
    actual = predicate.lookup(root)
    if not isinstance(actual, list):
        predicate.fail(f"expected an array, got {type(actual).__name__}", actual=actual)
    return actual


@dataclass(frozen=True)
class ArrayLengthEquals(DataPredicate):
    """Array at ``path`` has exactly ``length`` items.

    A shorter array fails unless ``last_page`` is set, in which case any
    non-empty page of at most ``length`` items passes.
    """

    label: ClassVar[str] = "array_length_equals"

    path: str
    length: int
    last_page: bool = False

    def __post_init__(self) -> None:
        _validated_path(self.path)
        if self.length < 0:
            raise BuildError(f"array_length_equals: length must be >= 0, got {self.length}")

    def check_value(self, root: Any) -> None:
        actual = len(_require_list(self, root))
        if actual == self.length:
            return
        if self.last_page and 0 < actual < self.length:
            return
        if actual < self.length and not self.last_page:
            self.fail(
                f"expected {self.length} items, got a short page of {actual} "
                "(set last_page for an intentional final page)",
                expected=self.length,
                actual=actual,
            )
        self.fail(f"expected {self.length} items, got {actual}", expected=self.length, actual=actual)


@dataclass(frozen=True)
class ArrayNonEmpty(DataPredicate):
    label: ClassVar[str] = "array_non_empty"

    path: str

    def __post_init__(self) -> None:
        _validated_path(self.path)

    def check_value(self, root: Any) -> None:
        if not _require_list(self, root):
            self.fail("expected a non-empty array, got []", actual=[])


@dataclass(frozen=True)
class IsSorted(DataPredicate):
    """Values of ``field`` across the array at ``path`` are in ``order``.

    The extracted sequence must equal its own stable sort: code-point order
    for strings, numeric order for numbers, reversed ordering for ``desc``.
    """

    label: ClassVar[str] = "is_sorted"

    path: str
    field: str
    order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        _validated_path(self.path)
        _validated_path(self.field)
        object.__setattr__(self, "order", SortOrder.from_string(self.order))

    def describe(self) -> str:
        return f"{self.label}(path={self.path!r}, field={self.field!r}, order={self.order.value})"

    def check_value(self, root: Any) -> None:
        items = _require_list(self, root)
        values = []
        for index, item in enumerate(items):
            try:
                values.append(resolve_path(item, self.field))
            except PathError as exc:
                self.fail(f"element [{index}]: path {exc}")

        if None in values:
            self.fail(f"cannot order null value at element [{values.index(None)}]", actual=values)
        if ordering_kind(values) == "mixed":
            self.fail("cannot order values of mixed types", actual=values)

        expected = sorted(values, reverse=self.order == SortOrder.DESC)
        for index, (actual_value, expected_value) in enumerate(zip(values, expected)):
            if actual_value != expected_value:
                self.fail(
                    f"out of {self.order.value} order at element [{index}]: "
                    f"got {actual_value!r}, expected {expected_value!r}",
                    expected=expected,
                    actual=values,
                )


@dataclass(frozen=True)
class ContainsSubstring(DataPredicate):
    """String at ``path`` contains ``substring``.

    With ``fields``, the value must be an object and at least one of the named
    fields must contain the substring (search across name, email, ...).
    """

    label: ClassVar[str] = "contains_substring"

    path: str
    substring: str
    fields: tuple[str, ...] = ()
    case_sensitive: bool = True

    def __post_init__(self) -> None:
        _validated_path(self.path)
        object.__setattr__(self, "fields", tuple(self.fields))
        if not isinstance(self.substring, str):
            raise BuildError("contains_substring: substring must be a string")

    def _contains(self, text: str) -> bool:
        if self.case_sensitive:
            return self.substring in text
        return self.substring.lower() in text.lower()

    def check_value(self, root: Any) -> None:
        actual = self.lookup(root)
        if not self.fields:
            if not isinstance(actual, str):
                self.fail(f"expected a string, got {type(actual).__name__}", actual=actual)
            if not self._contains(actual):
                self.fail(f"{actual!r} does not contain {self.substring!r}", expected=self.substring, actual=actual)
            return

        if not isinstance(actual, dict):
            self.fail(f"expected an object, got {type(actual).__name__}", actual=actual)
        candidates = {name: actual.get(name) for name in self.fields}
        if not any(isinstance(text, str) and self._contains(text) for text in candidates.values()):
            self.fail(
                f"none of {list(self.fields)} contains {self.substring!r}",
                expected=self.substring,
                actual=candidates,
            )


@dataclass(frozen=True)
class AllMatch(DataPredicate):
    """Every element of the array at ``path`` satisfies ``predicate``.

    The sub-predicate's path is relative to each element.
    """

    label: ClassVar[str] = "all_match"

    path: str
    predicate: DataPredicate

    def __post_init__(self) -> None:
        _validated_path(self.path)
        if not isinstance(self.predicate, DataPredicate):
            raise BuildError("all_match requires a data predicate to apply to each element")

    def describe(self) -> str:
        return f"{self.label}(path={self.path!r}, predicate={self.predicate.describe()})"

    def check_value(self, root: Any) -> None:
        for index, item in enumerate(_require_list(self, root)):
            try:
                self.predicate.check_value(item)
            except AssertionFailure as failure:
                self.fail(f"element [{index}] does not match: {failure}", actual=item)


@dataclass(frozen=True)
class ErrorMessageIncludes(Expectation):
    """Message of ``errors[index]`` contains ``substring``."""

    label: ClassVar[str] = "error_message_includes"

    substring: str
    index: int = 0

    def check(self, result: NormalizedResult) -> None:
        if not isinstance(result, GraphQLErrors):
            self.fail(f"expected GraphQL errors, got {result.kind}", actual=result.kind)
        if self.index >= len(result.errors) or self.index < -len(result.errors):
            self.fail(f"no error at index {self.index} ({len(result.errors)} errors)", actual=result.messages)
        message = result.errors[self.index].message
        if self.substring not in message:
            self.fail(f"{message!r} does not include {self.substring!r}", expected=self.substring, actual=message)
