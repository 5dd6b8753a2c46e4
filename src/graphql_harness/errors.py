"""Exception hierarchy for the harness.

Transport failures and server-reported GraphQL errors are *results*, not
exceptions (see :mod:`graphql_harness.results`). The classes here cover
misconfiguration and assertion failures only.
"""

from __future__ import annotations

from typing import Any, Optional


class HarnessError(Exception):
    """Base class for all harness errors."""


class BuildError(HarnessError, ValueError):
    """Operation or scenario definition is malformed.

    Fatal to the scenario that owns the definition, never to the whole run.
    """


class HarnessLoadError(HarnessError, ValueError):
    """A scenario file could not be read or parsed."""


class RegistryError(HarnessError):
    """Invalid registry contents. Fatal to the whole run."""


class DuplicateScenarioError(RegistryError):
    """A scenario name was registered twice within the same resource group."""

    def __init__(self, qualified_name: str):
        super().__init__(
            f"Scenario '{qualified_name}' is already registered. "
            "Scenario names must be unique within a resource group."
        )
        self.qualified_name = qualified_name


class UnresolvedDependencyError(RegistryError):
    """A scenario binds an input to a scenario that is not registered before it."""

    def __init__(self, qualified_name: str, dependency: str):
        super().__init__(
            f"Scenario '{qualified_name}' depends on '{dependency}', "
            "which must be registered before it."
        )
        self.qualified_name = qualified_name
        self.dependency = dependency


class AssertionFailure(HarnessError, AssertionError):
    """Raised by a predicate whose condition does not hold.

    Attributes:
        predicate: Label of the failing predicate
        expected: Expected value (if meaningful)
        actual: Observed value (if meaningful)
    """

    def __init__(
        self,
        message: str,
        *,
        predicate: Optional[str] = None,
        expected: Any = None,
        actual: Any = None,
    ):
        super().__init__(message)
        self.predicate = predicate
        self.expected = expected
        self.actual = actual
