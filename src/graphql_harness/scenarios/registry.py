"""Scenario registry: named scenarios grouped by resource and category."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Optional, Union

from ..errors import DuplicateScenarioError, UnresolvedDependencyError
from .scenario import Category, Scenario, qualify

if TYPE_CHECKING:
    import httpx

    from ..config import HarnessConfig
    from ..orchestrator import RunReport
    from ..runtime import RunObserver

logger = logging.getLogger(__name__)


class ScenarioRegistry:
    """Ordered, read-only-after-build collection of scenarios.

    Misconfiguration (duplicate names, bindings to unknown scenarios) is
    rejected at registration time, before any network traffic.

    ```python
    registry = ScenarioRegistry()
    registry.register(create_user)
    registry.register(delete_user)  # binds createUser.id from create_user
    report = await registry.run("https://graphqlzero.almansi.me/api")
    ```
    """

    def __init__(self, scenarios: Iterable[Scenario] = ()):
        self._scenarios: dict[str, Scenario] = {}
        self.extend(scenarios)

    def register(self, scenario: Scenario) -> Scenario:
        """Register a scenario.

        Raises:
            DuplicateScenarioError: If the name is taken within its resource group
            UnresolvedDependencyError: If a result binding names a scenario
                that is not registered yet
        """
        key = scenario.qualified_name
        if key in self._scenarios:
            raise DuplicateScenarioError(key)

        for dependency in scenario.dependencies():
            if dependency not in self._scenarios:
                raise UnresolvedDependencyError(key, dependency)

        self._scenarios[key] = scenario
        logger.debug("Registered scenario %s (%s)", key, scenario.category.value)
        return scenario

    def extend(self, scenarios: Iterable[Scenario]) -> "ScenarioRegistry":
        for scenario in scenarios:
            self.register(scenario)
        return self

    @property
    def scenarios(self) -> list[Scenario]:
        """Scenarios in registration order."""
        return list(self._scenarios.values())

    def get(self, name: str, resource: Optional[str] = None) -> Scenario:
        """Look up a scenario by qualified name (or bare name plus resource).

        Raises:
            KeyError: If no such scenario is registered
        """
        key = qualify(resource, name) if resource else name
        return self._scenarios[key]

    def __len__(self) -> int:
        return len(self._scenarios)

    def __iter__(self) -> Iterator[Scenario]:
        return iter(self.scenarios)

    def __contains__(self, name: object) -> bool:
        return name in self._scenarios

    @property
    def resources(self) -> list[str]:
        return list(dict.fromkeys(scenario.resource for scenario in self._scenarios.values()))

    def groups(self) -> dict[str, dict[Category, list[Scenario]]]:
        """Scenarios organized by resource, then category (registration order kept)."""
        grouped: dict[str, dict[Category, list[Scenario]]] = {}
        for scenario in self._scenarios.values():
            grouped.setdefault(scenario.resource, {}).setdefault(scenario.category, []).append(scenario)
        return grouped

    def select(
        self,
        resources: Optional[Iterable[str]] = None,
        categories: Optional[Iterable[Union[str, Category]]] = None,
        names: Optional[Iterable[str]] = None,
    ) -> "ScenarioRegistry":
        """Return a new registry narrowed by resource, category and/or name.

        Declared dependencies of selected scenarios are always included so
        that result bindings stay resolvable.
        """
        wanted_resources = set(resources) if resources else None
        wanted_categories = {Category.from_string(c) for c in categories} if categories else None
        wanted_names = set(names) if names else None

        selected: set[str] = set()
        for key, scenario in self._scenarios.items():
            if wanted_resources is not None and scenario.resource not in wanted_resources:
                continue
            if wanted_categories is not None and scenario.category not in wanted_categories:
                continue
            if wanted_names is not None and not ({scenario.name, key} & wanted_names):
                continue
            selected.add(key)

        pending = list(selected)
        while pending:
            for dependency in self._scenarios[pending.pop()].dependencies():
                if dependency not in selected:
                    selected.add(dependency)
                    pending.append(dependency)

        return ScenarioRegistry(s for key, s in self._scenarios.items() if key in selected)

    async def run(
        self,
        endpoint: Optional[str] = None,
        *,
        config: Optional["HarnessConfig"] = None,
        observers: Iterable["RunObserver"] = (),
        http_client: Optional["httpx.AsyncClient"] = None,
    ) -> "RunReport":
        """Run every scenario and return the ordered report.

        Args:
            endpoint: Endpoint override (defaults to the config's endpoint)
            config: Harness configuration
            observers: Observers notified of scenario progress
            http_client: Shared HTTP client (managed by caller)
        """
        from ..config import HarnessConfig
        from ..orchestrator import HarnessRunner

        run_config = config or HarnessConfig()
        if endpoint:
            run_config = run_config.with_endpoint(endpoint)

        runner = HarnessRunner(self, run_config, http_client=http_client)
        for observer in observers:
            runner.add_observer(observer)
        return await runner.run()
