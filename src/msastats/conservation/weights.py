"""
Position-based sequence weights (Henikoff & Henikoff, 1994).

For sequence i of an alignment with L columns:

    w_i = 1/L * sum_x 1 / (k_x * n_{x,i})

where k_x is the number of symbol types in column x and n_{x,i} the number
of sequences sharing sequence i's symbol at column x. Weights lie in (0, 1]
and sum to 1 over all sequences.
"""

from collections import Counter

import numpy as np

from ..exceptions import DegenerateAlignmentError
from .models import MSAlignment


def henikoff_weights(msa: MSAlignment) -> np.ndarray:
    """Calculate the weight of every sequence in the alignment.

    Args:
        msa: Alignment to weight

    Returns:
        Array of length ``msa.num_sequences``

    Raises:
        DegenerateAlignmentError: If the alignment has no rows or no columns
    """
    n_seq = msa.num_sequences
    n_col = msa.alignment_length
    if n_seq == 0 or n_col == 0:
        raise DegenerateAlignmentError(
            f"Cannot weight an alignment of {n_seq} sequences x {n_col} columns"
        )

    weights = np.zeros(n_seq, dtype=float)
    for x in range(n_col):
        k = msa.distinct_symbol_count(x)
        counts = Counter(msa.symbol_at(seq, x) for seq in range(n_seq))
        for seq in range(n_seq):
            weights[seq] += 1.0 / (k * counts[msa.symbol_at(seq, x)])

    return weights / n_col
