"""Scenario data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence, Union

from ..errors import BuildError
from ..expectations import Expectation
from ..operations import AnyOperation, Operation, RawOperation


class Category(str, Enum):
    """What a scenario exercises."""

    LISTING = "listing"
    PAGINATION = "pagination"
    SORTING = "sorting"
    SEARCH = "search"
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    ERROR_HANDLING = "error_handling"

    @classmethod
    def from_string(cls, value: Union[str, "Category"]) -> "Category":
        if isinstance(value, Category):
            return value
        normalized = str(value).lower().strip().replace("-", "_").replace(" ", "_")
        if normalized in ("error", "errors"):
            normalized = "error_handling"
        for category in cls:
            if category.value == normalized:
                return category
        raise BuildError(
            f"Unknown scenario category: '{value}'. "
            f"Supported: {', '.join(category.value for category in cls)}"
        )


def qualify(resource: str, name: str) -> str:
    """Return ``resource/name`` unless ``name`` is already qualified."""
    return name if "/" in name else f"{resource}/{name}"


@dataclass(frozen=True)
class Scenario:
    """Named, self-contained test case binding one operation to its expectations.

    Attributes:
        name: Scenario name, unique within its resource group
        resource: Resource group (e.g. ``albums``, ``users``)
        category: What the scenario exercises
        operation: Operation to send (typed or raw text)
        expectations: Expectations evaluated left to right
        expect_transport_failure: Evaluate expectations even when the result
            is a transport error (e.g. a non-200 status is the expected
            outcome). Otherwise a transport error fails the scenario.
        description: Human-readable description
        endpoint: Per-scenario endpoint override
        timeout: Per-scenario timeout override in seconds
        metadata: Free-form metadata copied into the scenario's report entry
    """

    name: str
    resource: str
    category: Category
    operation: AnyOperation
    expectations: Sequence[Expectation] = ()
    expect_transport_failure: bool = False
    description: str = ""
    endpoint: Optional[str] = None
    timeout: Optional[float] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate scenario after initialization.

        Raises:
            BuildError: If names are empty, the operation has the wrong type,
                or an expectation is not an Expectation instance.
        """
        for attr in ("name", "resource"):
            value = getattr(self, attr)
            if not value or not str(value).strip():
                raise BuildError(f"Scenario.{attr} cannot be empty")
            if "/" in value:
                raise BuildError(f"Scenario.{attr} cannot contain '/': {value!r}")

        object.__setattr__(self, "category", Category.from_string(self.category))

        if not isinstance(self.operation, (Operation, RawOperation)):
            raise BuildError(
                f"Scenario '{self.name}' operation must be an Operation or RawOperation, "
                f"got {type(self.operation).__name__}"
            )

        expectations = tuple(self.expectations)
        for expectation in expectations:
            if not isinstance(expectation, Expectation):
                raise BuildError(
                    f"Scenario '{self.name}' has a non-expectation entry: {expectation!r}"
                )
        object.__setattr__(self, "expectations", expectations)

        if self.timeout is not None and self.timeout <= 0:
            raise BuildError(f"Scenario '{self.name}' timeout must be positive")

    @property
    def qualified_name(self) -> str:
        return f"{self.resource}/{self.name}"

    def dependencies(self) -> tuple[str, ...]:
        """Qualified names of scenarios whose results feed this one's arguments."""
        return tuple(
            dict.fromkeys(qualify(self.resource, ref.scenario) for ref in self.operation.references())
        )
