"""Runtime context for a harness run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

from .events import RunObserver

if TYPE_CHECKING:
    from ..orchestrator import ScenarioResult
    from ..scenarios import Scenario

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


@dataclass
class RunContext:
    """State shared by every scenario task of one run.

    ``results`` fills in completion order, keyed by qualified scenario name.
    """

    run_id: str = field(default_factory=lambda: uuid4().hex)
    observers: list[RunObserver] = field(default_factory=list)
    results: dict[str, "ScenarioResult"] = field(default_factory=dict)

    def record(self, result: "ScenarioResult") -> None:
        self.results[result.qualified_name] = result

    async def notify_scenario_start(self, scenario: "Scenario", operation_text: str) -> None:
        for observer in self.observers:
            await observer.on_scenario_start(scenario, operation_text)

    async def notify_scenario_result(self, result: "ScenarioResult") -> None:
        for observer in self.observers:
            await observer.on_scenario_result(result)

    async def notify_status(self, message: str, level: str = "info") -> None:
        """Log a status line and forward it to observers."""
        logger.log(_LOG_LEVELS.get(level, logging.INFO), message)
        for observer in self.observers:
            await observer.on_status(message, level)
