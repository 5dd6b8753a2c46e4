"""Observer pattern for harness execution events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..orchestrator import ScenarioResult
    from ..scenarios import Scenario


class RunObserver(ABC):
    """Observer interface for scenario execution events."""

    @abstractmethod
    async def on_scenario_start(self, scenario: "Scenario", operation_text: str) -> None:
        """Called right before a scenario's operation is sent.

        Args:
            scenario: Scenario being executed
            operation_text: Rendered operation
        """

    @abstractmethod
    async def on_scenario_result(self, result: "ScenarioResult") -> None:
        """Called once per scenario with its verdict (pass, fail or cancelled).

        Args:
            result: Scenario result
        """

    @abstractmethod
    async def on_status(self, message: str, level: str = "info") -> None:
        """Called for status updates.

        Args:
            message: Status message
            level: Log level (info, warning, error)
        """


class NoOpObserver(RunObserver):
    """No-op observer that does nothing."""

    async def on_scenario_start(self, scenario: "Scenario", operation_text: str) -> None:
        pass

    async def on_scenario_result(self, result: "ScenarioResult") -> None:
        pass

    async def on_status(self, message: str, level: str = "info") -> None:
        pass
