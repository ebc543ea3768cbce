"""
msastats Configuration Module

Read-only settings consumed by the statistics when they render their result,
plus the trident parameters used when the default registry is built.

Configuration Priority (highest to lowest):
1. Explicit arguments (command line)
2. Environment variables
3. Defaults

A field passed as None (the dataclass default) is unset: it is filled from
the environment, then from the defaults below. Any value passed explicitly,
including one equal to the default, wins over the environment.

Environment Variables:
    MSASTATS_OUTPUT             - Output file ("-" for stdout)
    MSASTATS_GLOBAL             - Print the mean over all columns (1/true/yes)
    MSASTATS_VERBOSE            - Log sequence weights and progress (1/true/yes)
    MSASTATS_MATRIX             - Substitution matrix for the trident score
    MSASTATS_TRIDENT_EXPONENTS  - Trident exponents "a,b,c"
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "-"
DEFAULT_MATRIX = "JONES"
DEFAULT_TRIDENT_EXPONENTS = (1.0, 0.5, 3.0)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _parse_flag(name: str, value: str) -> Optional[bool]:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    logger.warning(f"Ignoring invalid boolean for {name}: {value!r}")
    return None


def _parse_exponents(raw: str) -> Optional[Tuple[float, float, float]]:
    try:
        values = tuple(float(part) for part in raw.split(","))
    except ValueError:
        values = ()
    if len(values) != 3:
        logger.warning(f"Ignoring invalid MSASTATS_TRIDENT_EXPONENTS: {raw!r}")
        return None
    return values


@dataclass
class StatisticConfig:
    """
    Statistic output configuration.

    Attributes:
        output_name: Destination file for the statistic ("-" writes to stdout)
        global_mode: Emit one line holding the mean over all columns
        verbose: Log sequence weights while computing
        substitution_matrix: Biopython matrix name for the stereochemical score
        trident_exponents: Exponents (a, b, c) of the trident score
    """

    output_name: Optional[str] = None
    global_mode: Optional[bool] = None
    verbose: Optional[bool] = None

    # Trident parameters (Valdar 2002)
    substitution_matrix: Optional[str] = None
    trident_exponents: Optional[Tuple[float, float, float]] = None

    def __post_init__(self):
        """Fill unset fields from the environment, then from the defaults."""
        self._load_from_environment()

        if self.output_name is None:
            self.output_name = DEFAULT_OUTPUT
        if self.global_mode is None:
            self.global_mode = False
        if self.verbose is None:
            self.verbose = False
        if self.substitution_matrix is None:
            self.substitution_matrix = DEFAULT_MATRIX
        if self.trident_exponents is None:
            self.trident_exponents = DEFAULT_TRIDENT_EXPONENTS

    def _load_from_environment(self) -> None:
        """Load unset fields from environment variables."""

        if self.output_name is None and os.environ.get("MSASTATS_OUTPUT"):
            self.output_name = os.environ["MSASTATS_OUTPUT"]

        if self.global_mode is None and "MSASTATS_GLOBAL" in os.environ:
            self.global_mode = _parse_flag("MSASTATS_GLOBAL", os.environ["MSASTATS_GLOBAL"])

        if self.verbose is None and "MSASTATS_VERBOSE" in os.environ:
            self.verbose = _parse_flag("MSASTATS_VERBOSE", os.environ["MSASTATS_VERBOSE"])

        if self.substitution_matrix is None and os.environ.get("MSASTATS_MATRIX"):
            self.substitution_matrix = os.environ["MSASTATS_MATRIX"]

        if self.trident_exponents is None and os.environ.get("MSASTATS_TRIDENT_EXPONENTS"):
            self.trident_exponents = _parse_exponents(os.environ["MSASTATS_TRIDENT_EXPONENTS"])

    def validate(self) -> Tuple[bool, list]:
        """
        Validate configuration.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []

        if not self.output_name:
            errors.append("Output destination is empty. Use '-' for stdout.")

        if len(self.trident_exponents) != 3:
            errors.append(f"Trident needs exactly 3 exponents, got {len(self.trident_exponents)}")
        elif any(exp < 0 for exp in self.trident_exponents):
            errors.append(f"Trident exponents must be non-negative: {self.trident_exponents}")

        if not self.substitution_matrix:
            errors.append("No substitution matrix configured for the trident score.")

        return len(errors) == 0, errors

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "output_name": self.output_name,
            "global_mode": self.global_mode,
            "verbose": self.verbose,
            "substitution_matrix": self.substitution_matrix,
            "trident_exponents": list(self.trident_exponents),
        }
