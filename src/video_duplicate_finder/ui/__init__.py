"""Terminal UI components for video duplicate finder."""

from .app import DuplicateResolverApp, run_interactive
from .coordinator import DuplicateFinder
from .report import ReportPrinter
from .session import GroupSession, InteractiveSession

__all__ = [
    "DuplicateFinder",
    "DuplicateResolverApp",
    "GroupSession",
    "InteractiveSession",
    "ReportPrinter",
    "run_interactive",
]
