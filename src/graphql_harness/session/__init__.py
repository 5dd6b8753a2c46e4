"""Session persistence for harness runs."""

from .manager import SessionManager

__all__ = ["SessionManager"]
