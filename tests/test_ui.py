import asyncio

from rich.console import Console
from tqdm import tqdm

from graphql_harness.expectations import Outcome, Verdict
from graphql_harness.operations import Operation
from graphql_harness.orchestrator import ScenarioResult
from graphql_harness.scenarios import Scenario
from graphql_harness.ui import ConsoleObserver, QuietObserver


def _scenario(name: str) -> Scenario:
    return Scenario(name=name, resource="albums", category="read", operation=Operation.query("album", {"id": 1}, ["id"]))


def _result(name: str, verdict: Verdict, operation_text=None) -> ScenarioResult:
    return ScenarioResult(
        scenario_name=name,
        resource="albums",
        category="read",
        verdict=verdict,
        operation_text=operation_text,
    )


def test_quiet_observer_clears_active_count_for_cancelled_scenarios() -> None:
    observer = QuietObserver(total=2, progress_bar=tqdm(total=2, disable=True))

    async def scenario():
        await observer.on_scenario_start(_scenario("read_album"), "query { album(id: 1) { id } }")
        await observer.on_scenario_start(_scenario("read_missing_album"), "query { album(id: 0) { id } }")
        # Cancelled mid-flight: the result carries no operation text
        await observer.on_scenario_result(_result("read_album", Verdict.cancelled("Scenario run was cancelled")))
        await observer.on_scenario_result(
            _result("read_missing_album", Verdict.passing(), operation_text="query { album(id: 0) { id } }")
        )

    asyncio.run(scenario())
    observer.close()

    assert observer.started == set()
    assert observer.counts[Outcome.CANCELLED] == 1
    assert observer.counts[Outcome.PASS] == 1
    assert "active" not in observer.progress_bar.desc


def test_console_observer_prints_diagnostics() -> None:
    console = Console(record=True, width=200)
    observer = ConsoleObserver(console=console, show_operations=True)

    async def scenario():
        await observer.on_scenario_start(_scenario("read_album"), "query { album(id: 1) { id } }")
        await observer.on_scenario_result(_result("read_album", Verdict.failing("expected 'x', got [bracketed]")))

    asyncio.run(scenario())
    output = console.export_text()

    assert "albums/read_album" in output
    assert "query { album(id: 1) { id } }" in output
    assert "FAIL" in output
    assert "expected 'x', got [bracketed]" in output
