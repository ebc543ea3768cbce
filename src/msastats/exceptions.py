"""Custom exceptions for msastats."""

from typing import Iterable


class MSAStatsError(Exception):
    """Base exception for msastats."""

    pass


class ConfigurationError(MSAStatsError):
    """Raised when an output destination or log file cannot be opened."""

    def __init__(self, destination: str, message: str = ""):
        self.destination = destination
        text = f"Cannot open file {destination}"
        if message:
            text += f": {message}"
        super().__init__(text)


class UnknownStatisticError(MSAStatsError):
    """Raised when a statistic name is not found in the registry."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = list(available)
        message = f"Unknown statistic: {name}"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class DegenerateAlignmentError(MSAStatsError):
    """Raised when an alignment cannot be scored (empty, or too few symbols/sequences)."""

    pass
