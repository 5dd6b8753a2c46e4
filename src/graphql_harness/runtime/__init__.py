"""Runtime context and observer interfaces."""

from .context import RunContext
from .events import NoOpObserver, RunObserver

__all__ = ["RunContext", "RunObserver", "NoOpObserver"]
