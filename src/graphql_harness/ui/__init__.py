"""UI components for the CLI."""

from .console_observer import ConsoleObserver
from .quiet_observer import QuietObserver
from .summary import print_summary, summary_table

__all__ = ["ConsoleObserver", "QuietObserver", "print_summary", "summary_table"]
