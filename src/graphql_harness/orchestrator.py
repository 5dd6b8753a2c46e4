"""Harness orchestrator: runs a scenario registry and builds the report."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, overload

import httpx

from .config import HarnessConfig
from .errors import BuildError
from .expectations import Outcome, PathError, Verdict, evaluate_all, resolve_path
from .operations import ResultRef
from .results import NormalizedResult, Success, TransportError, normalize
from .runtime import RunContext, RunObserver
from .scenarios import Scenario, ScenarioRegistry, qualify
from .transport import TransportClient

logger = logging.getLogger(__name__)


@dataclass
class ScenarioResult:
    """Result of executing a single scenario.

    Attributes:
        scenario_name: Scenario name
        resource: Resource group
        category: Scenario category value
        verdict: Pass, fail or cancelled, with the first failure's diagnostic
        result: Normalized result (None if nothing was sent)
        operation_text: Rendered operation (None if building failed)
        endpoint: Endpoint the operation was sent to
        execution_time_ms: Duration of the scenario in milliseconds
        description: Scenario description
        metadata: Scenario metadata, copied from the definition
    """

    scenario_name: str
    resource: str
    category: str
    verdict: Verdict
    result: Optional[NormalizedResult] = None
    operation_text: Optional[str] = None
    endpoint: Optional[str] = None
    execution_time_ms: Optional[int] = None
    description: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        return f"{self.resource}/{self.scenario_name}"

    @property
    def success(self) -> bool:
        return self.verdict.passed

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "scenario": self.qualified_name,
            "resource": self.resource,
            "category": self.category,
            "description": self.description,
            **self.verdict.to_dict(),
            "operation": self.operation_text,
            "endpoint": self.endpoint,
            "execution_time_ms": self.execution_time_ms,
            "result": self.result.to_dict() if self.result is not None else None,
            "metadata": self.metadata,
        }


@dataclass
class RunReport(Sequence[ScenarioResult]):
    """Ordered scenario results of one run, in registration order."""

    run_id: str
    results: list[ScenarioResult]
    started_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    duration_ms: Optional[int] = None

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self.results)

    def __iter__(self):  # pragma: no cover - trivial
        return iter(self.results)

    @overload
    def __getitem__(self, index: int) -> ScenarioResult: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[ScenarioResult]: ...

    def __getitem__(self, index):  # pragma: no cover - trivial
        return self.results[index]

    def verdicts(self) -> list[tuple[str, Verdict]]:
        """Ordered ``(qualified scenario name, verdict)`` pairs."""
        return [(result.qualified_name, result.verdict) for result in self.results]

    def count_outcome(self, outcome: Outcome) -> int:
        return sum(1 for result in self.results if result.verdict.outcome == outcome)

    @property
    def passed(self) -> int:
        return self.count_outcome(Outcome.PASS)

    @property
    def failed(self) -> int:
        return self.count_outcome(Outcome.FAIL)

    @property
    def cancelled(self) -> int:
        return self.count_outcome(Outcome.CANCELLED)

    @property
    def success(self) -> bool:
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        """Non-zero iff any scenario failed."""
        return 0 if self.success else 1

    def get(self, qualified_name: str) -> Optional[ScenarioResult]:
        for result in self.results:
            if result.qualified_name == qualified_name:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "started_at": self.started_at,
            "duration_ms": self.duration_ms,
            "summary": {
                "total": len(self.results),
                "passed": self.passed,
                "failed": self.failed,
                "cancelled": self.cancelled,
            },
            "scenarios": [result.to_dict() for result in self.results],
        }


class HarnessRunner:
    """Runs every scenario of a registry concurrently.

    Scenarios run as independent asyncio tasks bounded by
    ``config.max_concurrent_runs``. A scenario that binds inputs from earlier
    results waits for those scenarios before taking a slot. ``cancel()``
    aborts in-flight scenarios; they are reported as cancelled.

    ```python
    runner = HarnessRunner(registry, HarnessConfig(endpoint=url))
    runner.add_observer(ConsoleObserver())
    report = await runner.run()
    ```
    """

    def __init__(
        self,
        registry: ScenarioRegistry,
        config: Optional[HarnessConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[TransportClient] = None,
    ):
        """Initialize runner.

        Args:
            registry: Scenarios to run
            config: Harness configuration
            http_client: Shared HTTP client (managed by caller)
            transport: Pre-built transport client (managed by caller); takes
                precedence over ``http_client``
        """
        self.registry = registry
        self.config = config or HarnessConfig()
        self.observers: list[RunObserver] = []
        self._http_client = http_client
        self._transport = transport
        self._tasks: dict[str, asyncio.Task] = {}

    def add_observer(self, observer: RunObserver) -> None:
        self.observers.append(observer)

    def cancel(self, name: Optional[str] = None) -> int:
        """Cancel one in-flight scenario (by qualified name) or all of them.

        Returns:
            Number of tasks that were cancelled
        """
        if name is None:
            targets = list(self._tasks.values())
        else:
            task = self._tasks.get(name)
            targets = [task] if task is not None else []

        cancelled = 0
        for task in targets:
            if not task.done():
                task.cancel()
                cancelled += 1
        return cancelled

    async def run(self) -> RunReport:
        """Run all scenarios and return the report in registration order."""
        context = RunContext(observers=list(self.observers))
        scenarios = self.registry.scenarios
        start = time.perf_counter()

        owns_transport = self._transport is None
        transport = self._transport or TransportClient(
            endpoint=self.config.endpoint,
            timeout=self.config.timeout_seconds,
            fail_on_status=self.config.fail_on_status,
            headers=self.config.headers,
            http_client=self._http_client,
        )

        await context.notify_status(f"Running {len(scenarios)} scenario(s) against {self.config.endpoint}")
        semaphore = asyncio.Semaphore(self.config.max_concurrent_runs)
        self._tasks = {}
        try:
            for scenario in scenarios:
                self._tasks[scenario.qualified_name] = asyncio.create_task(
                    self._run_single(scenario, transport, semaphore, context),
                    name=scenario.qualified_name,
                )
            outcomes = await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        finally:
            if owns_transport:
                await transport.aclose()

        results: list[ScenarioResult] = []
        for scenario, outcome in zip(scenarios, outcomes):
            if isinstance(outcome, ScenarioResult):
                results.append(outcome)
                continue

            if isinstance(outcome, asyncio.CancelledError):
                result = self._result(scenario, Verdict.cancelled("Scenario run was cancelled"))
            else:
                result = self._result(scenario, Verdict.failing(f"{type(outcome).__name__}: {outcome}"))
            context.record(result)
            await context.notify_scenario_result(result)
            results.append(result)

        report = RunReport(
            run_id=context.run_id,
            results=results,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )
        logger.info(
            "Run %s finished: %d passed, %d failed, %d cancelled",
            report.run_id,
            report.passed,
            report.failed,
            report.cancelled,
        )
        return report

    async def _run_single(
        self,
        scenario: Scenario,
        transport: TransportClient,
        semaphore: asyncio.Semaphore,
        context: RunContext,
    ) -> ScenarioResult:
        """Run a single scenario.

        Never raises except for cancellation: every other failure becomes a
        failing verdict for this scenario only.
        """
        start = time.perf_counter()
        endpoint = scenario.endpoint or self.config.endpoint
        operation_text: Optional[str] = None
        normalized: Optional[NormalizedResult] = None

        try:
            dependencies = await self._await_dependencies(scenario)
            cancelled = [name for name, result in dependencies.items() if result is None]
            if cancelled:
                verdict = Verdict.cancelled(f"dependency '{cancelled[0]}' was cancelled")
            else:
                operation = scenario.operation.bind(self._resolve_bindings(scenario, dependencies))
                operation_text = operation.render()

                async with semaphore:
                    await context.notify_scenario_start(scenario, operation_text)
                    raw = await transport.send(operation_text, endpoint=endpoint, timeout=scenario.timeout)

                normalized = normalize(raw)
                if isinstance(normalized, TransportError) and not scenario.expect_transport_failure:
                    verdict = Verdict.failing(
                        f"transport error (status {normalized.status}): {normalized.detail}",
                        predicate="transport",
                    )
                else:
                    verdict = evaluate_all(normalized, scenario.expectations)

        except BuildError as exc:
            verdict = Verdict.failing(f"build error: {exc}", predicate="build")
        except httpx.HTTPStatusError as exc:
            verdict = Verdict.failing(
                f"transport error (status {exc.response.status_code}): {exc}",
                predicate="transport",
            )
        except Exception as exc:
            logger.exception("Scenario %s raised", scenario.qualified_name)
            verdict = Verdict.failing(f"{type(exc).__name__}: {exc}")

        result = self._result(
            scenario,
            verdict,
            result=normalized,
            operation_text=operation_text,
            endpoint=endpoint,
            execution_time_ms=int((time.perf_counter() - start) * 1000),
        )
        context.record(result)
        await context.notify_scenario_result(result)
        return result

    async def _await_dependencies(self, scenario: Scenario) -> dict[str, Optional[ScenarioResult]]:
        """Wait for declared dependencies; a cancelled dependency maps to None."""
        tasks = {name: self._tasks[name] for name in scenario.dependencies() if name in self._tasks}
        missing = [name for name in scenario.dependencies() if name not in tasks]
        if missing:
            raise BuildError(f"dependency '{missing[0]}' is not part of this run")
        if tasks:
            await asyncio.wait(tasks.values())

        resolved: dict[str, Optional[ScenarioResult]] = {}
        for name, task in tasks.items():
            if task.cancelled():
                resolved[name] = None
            else:
                dependency = task.result()
                resolved[name] = None if dependency.verdict.outcome == Outcome.CANCELLED else dependency
        return resolved

    def _resolve_bindings(
        self,
        scenario: Scenario,
        dependencies: dict[str, Optional[ScenarioResult]],
    ) -> dict[ResultRef, Any]:
        values: dict[ResultRef, Any] = {}
        for ref in scenario.operation.references():
            name = qualify(scenario.resource, ref.scenario)
            dependency = dependencies[name]
            if dependency is None or not dependency.verdict.passed:
                raise BuildError(f"dependency '{name}' did not pass")
            if not isinstance(dependency.result, Success):
                raise BuildError(f"dependency '{name}' produced no data")
            try:
                values[ref] = resolve_path(dependency.result.data, ref.path)
            except PathError as exc:
                raise BuildError(f"cannot bind {name}:{ref.path}: {exc}") from exc
        return values

    @staticmethod
    def _result(scenario: Scenario, verdict: Verdict, **kwargs: Any) -> ScenarioResult:
        return ScenarioResult(
            scenario_name=scenario.name,
            resource=scenario.resource,
            category=scenario.category.value,
            verdict=verdict,
            description=scenario.description,
            metadata=dict(scenario.metadata),
            **kwargs,
        )
