"""Expectation interface, verdicts and the evaluation entry points."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, ClassVar, NoReturn, Optional

from ..errors import AssertionFailure
from ..results import GraphQLErrors, NormalizedResult, Success, TransportError
from .paths import PathError, resolve_path


class Outcome(str, Enum):
    """Scenario outcome."""

    PASS = "pass"
    FAIL = "fail"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Verdict:
    """Outcome of evaluating expectations (or running a scenario).

    Attributes:
        outcome: pass, fail or cancelled
        failure_detail: Diagnostic for the first failure
        predicate: Description of the predicate that failed, if any
    """

    outcome: Outcome
    failure_detail: Optional[str] = None
    predicate: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.outcome == Outcome.PASS

    @classmethod
    def passing(cls) -> "Verdict":
        return cls(Outcome.PASS)

    @classmethod
    def failing(cls, detail: str, predicate: Optional[str] = None) -> "Verdict":
        return cls(Outcome.FAIL, failure_detail=detail, predicate=predicate)

    @classmethod
    def cancelled(cls, detail: Optional[str] = None) -> "Verdict":
        return cls(Outcome.CANCELLED, failure_detail=detail)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "failure_detail": self.failure_detail,
            "predicate": self.predicate,
        }


class Expectation(ABC):
    """Declarative assertion over a normalized result.

    Subclasses raise :class:`AssertionFailure` from :meth:`check` when the
    condition does not hold.
    """

    label: ClassVar[str] = "expectation"

    @abstractmethod
    def check(self, result: NormalizedResult) -> None:
        """Raise AssertionFailure if the result does not satisfy this expectation."""

    def describe(self) -> str:
        if not is_dataclass(self):
            return self.label
        params = []
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None or value is False or value == ():
                continue
            params.append(f"{item.name}={value!r}")
        return f"{self.label}({', '.join(params)})"

    def fail(self, message: str, *, expected: Any = None, actual: Any = None) -> NoReturn:
        raise AssertionFailure(
            f"{self.describe()}: {message}",
            predicate=self.describe(),
            expected=expected,
            actual=actual,
        )


class DataPredicate(Expectation):
    """Expectation that inspects a JSON value rather than the whole result.

    At the top level the value is the result's ``data``; inside
    ``all_match`` it is each array element.
    """

    path: str

    @abstractmethod
    def check_value(self, root: Any) -> None:
        """Raise AssertionFailure if ``root`` does not satisfy the predicate."""

    def check(self, result: NormalizedResult) -> None:
        self.check_value(self.require_data(result))

    def require_data(self, result: NormalizedResult) -> Any:
        if isinstance(result, Success):
            return result.data
        if isinstance(result, GraphQLErrors):
            first = result.errors[0].message if result.errors else "<no message>"
            self.fail(f"expected data but server reported errors: {first}", actual=result.messages)
        if isinstance(result, TransportError):
            self.fail(
                f"expected data but transport failed (status {result.status}): {result.detail}",
                actual=result.status,
            )
        self.fail(f"unsupported result type {type(result).__name__}")

    def lookup(self, root: Any, path: Optional[str] = None) -> Any:
        try:
            return resolve_path(root, self.path if path is None else path)
        except PathError as exc:
            self.fail(f"path {exc}")


@dataclass(frozen=True)
class AllOf(Expectation):
    """Conjunction of expectations, checked left to right."""

    label: ClassVar[str] = "all_of"

    expectations: tuple[Expectation, ...]

    def check(self, result: NormalizedResult) -> None:
        for expectation in self.expectations:
            expectation.check(result)

    def describe(self) -> str:
        return " and ".join(expectation.describe() for expectation in self.expectations) or self.label


def evaluate(result: NormalizedResult, expectation: Expectation) -> Verdict:
    """Evaluate one expectation (possibly composite) against a result.

    Returns:
        Passing verdict, or a failing verdict describing the first failure
    """
    try:
        expectation.check(result)
    except AssertionFailure as failure:
        return Verdict.failing(str(failure), predicate=failure.predicate or expectation.describe())
    return Verdict.passing()


def evaluate_all(result: NormalizedResult, expectations: Iterable[Expectation]) -> Verdict:
    """Evaluate expectations in declared order, stopping at the first failure."""
    items: Sequence[Expectation] = tuple(expectations)
    return evaluate(result, AllOf(tuple(items)))
