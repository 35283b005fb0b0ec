"""Core functionality for video duplicate finder."""

from .actions import Action, ActionApplier, ApplyResult, KeepAction, QuitAction, SkipAction
from .config import UserConfig
from .errors import ConfigurationError, DuplicateFinderError, TerminalError
from .grouper import DuplicateGrouper
from .models import ApplicationConfig, DuplicateGroup, FileInfo, PatternMatch
from .parser import FilenameNormalizer, PatternMatcher
from .scanner import VideoFileScanner

__all__ = [
    "Action",
    "ActionApplier",
    "ApplicationConfig",
    "ApplyResult",
    "ConfigurationError",
    "DuplicateFinderError",
    "DuplicateGroup",
    "DuplicateGrouper",
    "FileInfo",
    "FilenameNormalizer",
    "KeepAction",
    "PatternMatch",
    "PatternMatcher",
    "QuitAction",
    "SkipAction",
    "TerminalError",
    "UserConfig",
    "VideoFileScanner",
]
