"""
Unweighted per-column statistics.

Simple column profiles computed from raw symbol counts, without sequence
weighting. They share the printing behaviour of every column statistic.
"""

import math
from typing import List

from ..exceptions import DegenerateAlignmentError
from .models import MSAlignment
from .scores import gap_fraction, percent_identity, shannon_entropy
from .statistic import ColumnStatistic


class ShannonEntropyStatistic(ColumnStatistic):
    """Shannon entropy of raw symbol counts, scaled by log2(min(K, N))."""

    name = "entropy"
    description = "Unweighted Shannon entropy per column, gaps counted as a symbol"

    def column_values(self, msa: MSAlignment) -> List[float]:
        bound = min(len(msa.alphabet), msa.num_sequences)
        if bound < 2:
            raise DegenerateAlignmentError(
                f"Entropy normalization needs at least 2 symbols and 2 sequences, got {bound}"
            )
        if msa.alignment_length == 0:
            raise DegenerateAlignmentError("Alignment has no columns")

        max_entropy = math.log2(bound)
        return [
            shannon_entropy(msa.column_counts(x), include_gaps=True) / max_entropy
            for x in range(msa.alignment_length)
        ]


class PercentIdentityStatistic(ColumnStatistic):
    """Fraction of residues matching the column consensus (gaps excluded)."""

    name = "identity"
    description = "Fraction of non-gap residues equal to the column consensus"

    def column_values(self, msa: MSAlignment) -> List[float]:
        if msa.num_sequences == 0 or msa.alignment_length == 0:
            raise DegenerateAlignmentError("Alignment is empty")
        return [
            percent_identity(msa.column_counts(x))[0]
            for x in range(msa.alignment_length)
        ]


class GapFractionStatistic(ColumnStatistic):
    """Fraction of gap symbols per column."""

    name = "gaps"
    description = "Fraction of sequences with a gap at each column"

    def column_values(self, msa: MSAlignment) -> List[float]:
        if msa.num_sequences == 0 or msa.alignment_length == 0:
            raise DegenerateAlignmentError("Alignment is empty")
        return [gap_fraction(msa.get_column(x)) for x in range(msa.alignment_length)]
