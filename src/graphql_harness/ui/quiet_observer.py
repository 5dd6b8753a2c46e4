"""Quiet observer - progress bar only, no per-scenario lines."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from tqdm import tqdm

from ..expectations import Outcome
from ..runtime import RunObserver

if TYPE_CHECKING:
    from ..orchestrator import ScenarioResult
    from ..scenarios import Scenario


class QuietObserver(RunObserver):
    """Observer that advances a tqdm progress bar with pass/fail totals."""

    def __init__(self, total: int, progress_bar: Optional[tqdm] = None):
        self.progress_bar = progress_bar or tqdm(
            total=total,
            desc="Running scenarios...",
            unit="scenario",
            dynamic_ncols=True,
            leave=True,
        )
        self.counts = {outcome: 0 for outcome in Outcome}
        self.started: set[str] = set()

    def _refresh(self) -> None:
        parts = []
        if self.started:
            parts.append(f"{len(self.started)} active")
        parts.append(f"pass {self.counts[Outcome.PASS]}")
        parts.append(f"fail {self.counts[Outcome.FAIL]}")
        if self.counts[Outcome.CANCELLED]:
            parts.append(f"cancelled {self.counts[Outcome.CANCELLED]}")
        self.progress_bar.set_description(f"Running scenarios... ({' | '.join(parts)})")

    async def on_scenario_start(self, scenario: "Scenario", operation_text: str) -> None:
        self.started.add(scenario.qualified_name)
        self._refresh()

    async def on_scenario_result(self, result: "ScenarioResult") -> None:
        self.started.discard(result.qualified_name)
        self.counts[result.verdict.outcome] += 1
        self._refresh()
        self.progress_bar.update(1)

    async def on_status(self, message: str, level: str = "info") -> None:
        """Suppress status output."""
        pass

    def close(self) -> None:
        self.progress_bar.close()
