"""Exceptions raised by the duplicate finder."""


class DuplicateFinderError(Exception):
    """Base class for fatal duplicate finder errors."""


class ConfigurationError(DuplicateFinderError):
    """Invalid configuration, such as a broken regex pattern or a missing root path."""


class TerminalError(DuplicateFinderError):
    """The interactive terminal could not be acquired."""
