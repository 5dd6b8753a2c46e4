"""Run summary rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..expectations import Outcome

if TYPE_CHECKING:
    from ..orchestrator import RunReport

_STATUS = {
    Outcome.PASS: "[green]PASS[/green]",
    Outcome.FAIL: "[red]FAIL[/red]",
    Outcome.CANCELLED: "[yellow]CANCELLED[/yellow]",
}


def summary_table(report: "RunReport") -> Table:
    """Build a table with one row per scenario, in registration order."""
    table = Table(title="Scenario Results", show_lines=False)
    table.add_column("Scenario")
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Detail", overflow="fold")

    for result in report:
        table.add_row(
            escape(result.qualified_name),
            result.category,
            _STATUS[result.verdict.outcome],
            str(result.execution_time_ms) if result.execution_time_ms is not None else "-",
            escape(result.verdict.failure_detail or ""),
        )
    return table


def print_summary(console: Console, report: "RunReport") -> None:
    console.print()
    console.print(summary_table(report))
    console.rule("[bold]Summary[/bold]")
    console.print(f"Total scenarios: {len(report)}")
    console.print(f"Passed: [green]{report.passed}[/green]")
    console.print(f"Failed: [red]{report.failed}[/red]")
    if report.cancelled:
        console.print(f"Cancelled: [yellow]{report.cancelled}[/yellow]")
    if report.duration_ms is not None:
        console.print(f"[dim]Duration: {report.duration_ms} ms[/dim]")
