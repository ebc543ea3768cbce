"""
msastats: per-column conservation statistics for multiple sequence alignments

Turns an alignment into a numeric profile (one score per column, or their
mean) using Henikoff-weighted entropy, the Valdar trident score and simpler
count-based column statistics.
"""

__version__ = "1.0.0"

from msastats.config import StatisticConfig
from msastats.exceptions import (
    ConfigurationError,
    DegenerateAlignmentError,
    MSAStatsError,
    UnknownStatisticError,
)
from msastats.logging import setup_logging

__all__ = [
    "StatisticConfig",
    "ConfigurationError",
    "DegenerateAlignmentError",
    "MSAStatsError",
    "UnknownStatisticError",
    "setup_logging",
    "__version__",
]
