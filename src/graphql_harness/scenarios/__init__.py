"""Scenario definitions and registry."""

from .registry import ScenarioRegistry
from .scenario import Category, Scenario, qualify

__all__ = [
    "Category",
    "Scenario",
    "ScenarioRegistry",
    "qualify",
]
