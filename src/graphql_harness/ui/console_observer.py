"""Console observer for displaying scenario execution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.markup import escape

from ..expectations import Outcome
from ..runtime import RunObserver

if TYPE_CHECKING:
    from ..orchestrator import ScenarioResult
    from ..scenarios import Scenario

_OUTCOME_STYLES = {
    Outcome.PASS: "[bold green]✓ PASS[/bold green]",
    Outcome.FAIL: "[bold red]✗ FAIL[/bold red]",
    Outcome.CANCELLED: "[yellow]- CANCELLED[/yellow]",
}


class ConsoleObserver(RunObserver):
    """Observer that prints one line per scenario event using Rich."""

    def __init__(self, console: Optional[Console] = None, show_operations: bool = False):
        """Initialize console observer.

        Args:
            console: Rich console instance (created if not provided)
            show_operations: Also print the rendered operation of each scenario
        """
        self.console = console or Console()
        self.show_operations = show_operations

    async def on_scenario_start(self, scenario: "Scenario", operation_text: str) -> None:
        self.console.print(f"[cyan]→[/cyan] [bold]{escape(scenario.qualified_name)}[/bold] [dim]({scenario.category.value})[/dim]")
        if self.show_operations:
            self.console.print(f"  [dim]{escape(operation_text)}[/dim]")

    async def on_scenario_result(self, result: "ScenarioResult") -> None:
        """Display the verdict, with the diagnostic for non-passing scenarios."""
        timing = f" [dim]{result.execution_time_ms} ms[/dim]" if result.execution_time_ms is not None else ""
        self.console.print(f"{_OUTCOME_STYLES[result.verdict.outcome]} {escape(result.qualified_name)}{timing}")
        if result.verdict.failure_detail:
            self.console.print(f"  [red]{escape(result.verdict.failure_detail)}[/red]")

    async def on_status(self, message: str, level: str = "info") -> None:
        """Display status message."""
        if level == "error":
            self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")
        elif level == "warning":
            self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
        else:
            self.console.print(f"[dim]{escape(message)}[/dim]")
