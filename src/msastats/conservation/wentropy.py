"""
Weighted entropy statistic.

Sequences are first weighted by the position-based scheme of Henikoff &
Henikoff (1994). The score of column x is then the weighted Shannon
entropy of Valdar (2002), equations 50-52:

    p(x, a) = sum of w_j over sequences j with symbol a at column x
    t(x)    = lambda * -sum_a p(x, a) ln p(x, a)
    lambda  = 1 / ln(min(K, N))

K is the alphabet size and N the number of sequences. Scores lie in [0, 1];
0 means a single symbol fills the column.
"""

import logging
from typing import List, Optional

import numpy as np

from ..exceptions import DegenerateAlignmentError
from .models import MSAlignment
from .scores import entropy_normalizer, weighted_entropy, weighted_probability_table
from .statistic import ColumnStatistic
from .weights import henikoff_weights

logger = logging.getLogger(__name__)


def log_sequence_weights(msa: MSAlignment, weights: np.ndarray) -> None:
    """Log one weight per line, right-aligned in a 10-character field."""
    logger.info("Seq weights :")
    for seq, weight in enumerate(weights):
        logger.info(f"{weight:10g}  {msa.sequences[seq].id}")


class WeightedEntropyStatistic(ColumnStatistic):
    """Weighted Shannon entropy of every alignment column."""

    name = "wentropy"
    description = "Henikoff-weighted Shannon entropy per column (Valdar 2002)"

    def __init__(self, verbose: bool = False):
        super().__init__(verbose=verbose)
        self.weights: Optional[np.ndarray] = None
        self.probabilities: Optional[np.ndarray] = None

    def column_values(self, msa: MSAlignment) -> List[float]:
        alphabet = msa.alphabet
        if not alphabet:
            raise DegenerateAlignmentError("Alignment has an empty alphabet")
        normalizer = entropy_normalizer(len(alphabet), msa.num_sequences)

        self.weights = henikoff_weights(msa)
        if self.verbose:
            log_sequence_weights(msa, self.weights)

        self.probabilities = weighted_probability_table(msa, self.weights, alphabet)
        return [weighted_entropy(row) / normalizer for row in self.probabilities]
