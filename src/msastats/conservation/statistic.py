"""Base classes and output contract for alignment statistics."""

import logging
import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Sequence, TextIO

from ..config import StatisticConfig
from ..exceptions import ConfigurationError, DegenerateAlignmentError
from .models import MSAlignment

logger = logging.getLogger(__name__)


class Statistic(ABC):
    """Abstract base class for alignment statistics.

    A statistic is used in two steps: ``compute`` fills the instance from an
    alignment, then ``print_statistic`` writes the result where the
    configuration says.
    """

    name: str = "base"
    description: str = ""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    @abstractmethod
    def compute(self, msa: MSAlignment) -> None:
        """
        Compute the statistic.

        Any previous result held by the instance is discarded.

        Args:
            msa: Alignment to score. It is only read.

        Raises:
            DegenerateAlignmentError: If the alignment cannot be scored.
        """
        pass

    @abstractmethod
    def print_statistic(self, msa: MSAlignment, config: StatisticConfig) -> None:
        """
        Write the computed result to ``config.output_name``.

        Raises:
            ConfigurationError: If the destination cannot be opened.
        """
        pass


def format_value(value: float) -> str:
    """Plain decimal text that parses back to the same float.

    Integral values lose their trailing ".0" (``0``, ``1``); negative zero
    is written as ``0``.
    """
    text = repr(float(value) + 0.0)
    if text.endswith(".0"):
        text = text[:-2]
    return text


@contextmanager
def open_destination(name: str) -> Iterator[TextIO]:
    """Open an output destination for writing; "-" is stdout."""
    if name == "-":
        yield sys.stdout
        sys.stdout.flush()
        return

    try:
        handle = open(name, "w")
    except OSError as e:
        raise ConfigurationError(name, e.strerror or str(e)) from e
    with handle:
        yield handle


def write_column_values(values: Sequence[float], config: StatisticConfig) -> None:
    """Write per-column values, or their mean in global mode.

    Args:
        values: One value per alignment column, in column order
        config: Output destination and mode

    Raises:
        ConfigurationError: If the destination cannot be opened
        DegenerateAlignmentError: If a mean is requested over zero columns
    """
    if config.global_mode and not values:
        raise DegenerateAlignmentError("Cannot average a statistic over zero columns")

    with open_destination(config.output_name) as out:
        if config.global_mode:
            out.write(format_value(sum(values) / len(values)) + "\n")
        else:
            for value in values:
                out.write(format_value(value) + "\n")

    logger.debug(f"Wrote {1 if config.global_mode else len(values)} value(s) to {config.output_name}")


class ColumnStatistic(Statistic):
    """A statistic holding one value per alignment column."""

    def __init__(self, verbose: bool = False):
        super().__init__(verbose=verbose)
        self.values: List[float] = []
        self._computed = False

    def compute(self, msa: MSAlignment) -> None:
        """Reset and fill ``values`` from ``column_values``."""
        self._computed = False
        self.values = []
        self.values = list(self.column_values(msa))
        self._computed = True

    @abstractmethod
    def column_values(self, msa: MSAlignment) -> List[float]:
        """Return the value of every column, in column order."""
        pass

    def print_statistic(self, msa: MSAlignment, config: StatisticConfig) -> None:
        """Write one line per column, or their mean in global mode."""
        if not self._computed:
            raise RuntimeError(f"Statistic '{self.name}' printed before compute()")
        write_column_values(self.values, config)

    @property
    def mean(self) -> float:
        """Arithmetic mean of the column values."""
        if not self.values:
            raise DegenerateAlignmentError("No column values to average")
        return sum(self.values) / len(self.values)
