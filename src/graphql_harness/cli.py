"""Main CLI entry point for the GraphQL contract harness."""

import asyncio
import logging
import signal
from contextlib import suppress
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import HarnessConfig
from .constants import DEFAULT_ENDPOINT, DEFAULT_MAX_CONCURRENT_RUNS, DEFAULT_TIMEOUT_SECONDS, RESULTS_ROOT
from .errors import HarnessError
from .loader import HarnessLoader
from .orchestrator import HarnessRunner, RunReport
from .scenarios import ScenarioRegistry
from .session import SessionManager
from .ui import ConsoleObserver, QuietObserver, print_summary

app = typer.Typer(help="Run GraphQL contract scenarios against an endpoint")
console = Console()

UI_MODES = ("plain", "quiet")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_registry(
    harness_path: Path,
    resources: Optional[list[str]] = None,
    categories: Optional[list[str]] = None,
    names: Optional[list[str]] = None,
) -> ScenarioRegistry:
    """Load and filter scenarios, printing a red error and exiting on failure."""
    if not harness_path.exists():
        console.print(f"[red]Error:[/red] Path not found: {escape(str(harness_path))}")
        raise typer.Exit(1)

    try:
        registry = HarnessLoader().load(harness_path).build_registry()
        if resources or categories or names:
            registry = registry.select(resources=resources, categories=categories, names=names)
    except HarnessError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if not len(registry):
        console.print("[red]Error:[/red] No scenarios selected")
        raise typer.Exit(1)
    return registry


@app.command()
def run(
    harness_path: Path = typer.Argument(
        ...,
        help="Path to a scenario JSON file or a directory of JSON files",
    ),
    endpoint: Optional[str] = typer.Option(
        None,
        "--endpoint",
        help=f"GraphQL endpoint (default: GRAPHQL_HARNESS_ENDPOINT or {DEFAULT_ENDPOINT})",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help=f"Per-call timeout in seconds (default: {DEFAULT_TIMEOUT_SECONDS:g})",
    ),
    max_concurrent_runs: Optional[int] = typer.Option(
        None,
        "--max-concurrent-runs",
        help=f"Maximum number of scenarios in flight (default: {DEFAULT_MAX_CONCURRENT_RUNS})",
    ),
    ui: str = typer.Option(
        "plain",
        "--ui",
        help="UI mode: plain (one line per scenario), quiet (progress bar + summary only)",
    ),
    resource: Optional[list[str]] = typer.Option(
        None,
        "--resource",
        help="Only run this resource group (can be specified multiple times)",
    ),
    category: Optional[list[str]] = typer.Option(
        None,
        "--category",
        help="Only run this category (can be specified multiple times)",
    ),
    name: Optional[list[str]] = typer.Option(
        None,
        "--name",
        help="Only run this scenario, bare or resource/name (can be specified multiple times)",
    ),
    show_operations: bool = typer.Option(
        False,
        "--show-operations",
        help="Print each rendered operation in plain mode",
    ),
    fail_on_status: bool = typer.Option(
        False,
        "--fail-on-status",
        help="Treat any non-2xx HTTP status as a transport failure",
    ),
    results_root: Optional[Path] = typer.Option(
        None,
        "--results-root",
        help=f"Directory for saved reports (default: GRAPHQL_HARNESS_RESULTS_ROOT or {RESULTS_ROOT})",
    ),
    save: bool = typer.Option(
        True,
        "--save/--no-save",
        help="Save the JSON report to a session directory",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Path to .env file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Run scenarios and report a verdict per scenario.

    Exits with status 1 if any scenario fails.
    """
    load_dotenv(override=False)
    if env_file:
        load_dotenv(env_file, override=True)
    _configure_logging(verbose)

    if ui not in UI_MODES:
        console.print(f"[red]Error:[/red] Unknown UI mode '{escape(ui)}'. Supported: {', '.join(UI_MODES)}")
        raise typer.Exit(1)

    registry = _load_registry(harness_path, resource, category, name)

    try:
        config = HarnessConfig.from_env(endpoint, timeout, max_concurrent_runs, fail_on_status)
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    try:
        report = asyncio.run(
            run_harness(
                registry=registry,
                config=config,
                ui_mode=ui,
                show_operations=show_operations,
            )
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)

    print_summary(console, report)

    if save:
        session_mgr = SessionManager(results_root or RESULTS_ROOT)
        session_name = harness_path.name if harness_path.is_dir() else harness_path.stem
        session_dir = session_mgr.create_session_dir(f"{session_name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}")
        report_path = session_mgr.save_report(
            session_dir,
            report,
            metadata={"endpoint": config.endpoint, "harness_path": str(harness_path)},
        )
        console.print(f"[dim]Report saved to {escape(str(report_path))}[/dim]")

    raise typer.Exit(report.exit_code)


async def run_harness(
    registry: ScenarioRegistry,
    config: HarnessConfig,
    ui_mode: str = "plain",
    show_operations: bool = False,
) -> RunReport:
    """Run the registry with the chosen UI; SIGINT cancels in-flight scenarios."""
    runner = HarnessRunner(registry, config)

    quiet_observer: Optional[QuietObserver] = None
    if ui_mode == "quiet":
        console.print(f"[dim]Running {len(registry)} scenario(s) against {escape(config.endpoint)}...[/dim]")
        quiet_observer = QuietObserver(total=len(registry))
        runner.add_observer(quiet_observer)
    else:
        runner.add_observer(ConsoleObserver(console=console, show_operations=show_operations))

    loop = asyncio.get_running_loop()
    handler_installed = False
    with suppress(NotImplementedError, RuntimeError):
        loop.add_signal_handler(signal.SIGINT, runner.cancel)
        handler_installed = True

    try:
        return await runner.run()
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
        if quiet_observer is not None:
            quiet_observer.close()


@app.command("list")
def list_scenarios(
    harness_path: Path = typer.Argument(
        ...,
        help="Path to a scenario JSON file or a directory of JSON files",
    ),
    resource: Optional[list[str]] = typer.Option(None, "--resource", help="Filter by resource group"),
    category: Optional[list[str]] = typer.Option(None, "--category", help="Filter by category"),
) -> None:
    """List scenarios grouped by resource and category, in execution order."""
    registry = _load_registry(harness_path, resource, category)

    table = Table(title=f"Scenarios ({len(registry)})")
    table.add_column("Scenario")
    table.add_column("Category")
    table.add_column("Kind")
    table.add_column("Depends on")

    for scenario in registry:
        kind = getattr(scenario.operation.kind, "value", None) or "raw"
        table.add_row(
            escape(scenario.qualified_name),
            scenario.category.value,
            kind,
            escape(", ".join(scenario.dependencies())) or "-",
        )
    console.print(table)


if __name__ == "__main__":
    app()
