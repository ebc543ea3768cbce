"""
Trident conservation statistic (Valdar 2002).

Three sub-scores are computed for every column x, each in [0, 1] with 0
meaning fully conserved:

- t(x): weighted Shannon entropy, as in the ``wentropy`` statistic
- r(x): stereochemical variability of the residue types present, measured
  on the rows of a substitution matrix (``scores.stereochemical_score``)
- g(x): fraction of gaps

and combined as

    score(x) = (1 - t(x))^a * (1 - r(x))^b * (1 - g(x))^c

so 1 is a fully conserved, gap-free column. Valdar's defaults are a = 1,
b = 0.5, c = 3 with the PET91 mutation data matrix ("JONES" in Biopython).
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from ..config import DEFAULT_MATRIX, DEFAULT_TRIDENT_EXPONENTS
from ..exceptions import DegenerateAlignmentError
from .models import MSAlignment
from .scores import (
    entropy_normalizer,
    gap_fraction,
    load_substitution_matrix,
    stereochemical_scale,
    stereochemical_score,
    weighted_entropy,
    weighted_probability_table,
)
from .statistic import ColumnStatistic
from .weights import henikoff_weights
from .wentropy import log_sequence_weights

logger = logging.getLogger(__name__)


def _conserved_fraction(value: float) -> float:
    # 1 - x, kept inside [0, 1] so fractional exponents stay real
    return min(1.0, max(0.0, 1.0 - value))


class TridentStatistic(ColumnStatistic):
    """Trident score combining entropy, stereochemistry and gaps."""

    name = "trident"
    description = "Valdar trident score: entropy x stereochemistry x gaps"

    def __init__(
        self,
        exponents: Tuple[float, float, float] = DEFAULT_TRIDENT_EXPONENTS,
        matrix_name: str = DEFAULT_MATRIX,
        verbose: bool = False,
    ):
        super().__init__(verbose=verbose)
        if len(exponents) != 3:
            raise ValueError(f"Trident needs exponents (a, b, c), got {exponents}")
        self.exponents = tuple(float(e) for e in exponents)
        self.matrix_name = matrix_name
        self.matrix_alphabet, self.matrix = load_substitution_matrix(matrix_name)
        self.matrix_scale = stereochemical_scale(self.matrix)

        self.weights: Optional[np.ndarray] = None
        self.entropy: List[float] = []
        self.stereochemical: List[float] = []
        self.gaps: List[float] = []

    def column_values(self, msa: MSAlignment) -> List[float]:
        self.entropy, self.stereochemical, self.gaps = [], [], []

        alphabet = msa.alphabet
        if not alphabet:
            raise DegenerateAlignmentError("Alignment has an empty alphabet")
        normalizer = entropy_normalizer(len(alphabet), msa.num_sequences)

        self.weights = henikoff_weights(msa)
        if self.verbose:
            log_sequence_weights(msa, self.weights)

        probabilities = weighted_probability_table(msa, self.weights, alphabet)
        a, b, c = self.exponents

        scores = []
        for x in range(msa.alignment_length):
            column = msa.get_column(x)
            t = weighted_entropy(probabilities[x]) / normalizer
            r = stereochemical_score(column, self.matrix_alphabet, self.matrix, self.matrix_scale)
            g = gap_fraction(column)

            self.entropy.append(t)
            self.stereochemical.append(r)
            self.gaps.append(g)
            scores.append(
                _conserved_fraction(t) ** a
                * _conserved_fraction(r) ** b
                * _conserved_fraction(g) ** c
            )

        logger.debug(
            f"Trident over {msa.alignment_length} columns with {self.matrix_name}, "
            f"exponents {self.exponents}"
        )
        return scores
