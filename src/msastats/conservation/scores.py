"""
Column-level score calculations shared by the statistics.

This module provides the arithmetic behind the per-column statistics:
- Weighted symbol probabilities and weighted Shannon entropy (Valdar 2002)
- Plain Shannon entropy and percent identity from symbol counts
- Gap fraction
- Stereochemical variability from a substitution matrix (Valdar 2002)
"""

import math
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
from Bio.Align import substitution_matrices

from ..exceptions import DegenerateAlignmentError
from .models import GAP_SYMBOLS, MSAlignment


def entropy_normalizer(alphabet_size: int, num_sequences: int) -> float:
    """Maximum reachable entropy ln(min(K, N)) used to scale entropies to [0, 1].

    Raises:
        DegenerateAlignmentError: If min(K, N) < 2, where the scale is undefined
    """
    bound = min(alphabet_size, num_sequences)
    if bound < 2:
        raise DegenerateAlignmentError(
            f"Entropy normalization needs at least 2 symbols and 2 sequences "
            f"(alphabet size {alphabet_size}, {num_sequences} sequences)"
        )
    return float(np.log(bound))


def weighted_probability_table(
    msa: MSAlignment,
    weights: np.ndarray,
    alphabet: str,
) -> np.ndarray:
    """Sum sequence weights per symbol for every column.

    Args:
        msa: Alignment to read
        weights: One weight per sequence
        alphabet: Ordered symbols; defines the table's second axis

    Returns:
        Array of shape (alignment_length, len(alphabet)) where entry [x, a]
        is the total weight of sequences holding ``alphabet[a]`` at column x
    """
    index = {symbol: i for i, symbol in enumerate(alphabet)}
    table = np.zeros((msa.alignment_length, len(alphabet)), dtype=float)
    for x in range(msa.alignment_length):
        for seq in range(msa.num_sequences):
            table[x, index[msa.symbol_at(seq, x)]] += weights[seq]
    return table


def weighted_entropy(probabilities: np.ndarray) -> float:
    """Shannon entropy -sum(p ln p) of one row of a probability table.

    Zero entries are skipped (0 ln 0 = 0). The row is divided by its total,
    which is 1 for Henikoff weights, so a column holding a single symbol
    scores exactly 0.
    """
    total = probabilities.sum()
    if total <= 0:
        return 0.0
    p = probabilities[probabilities > 0] / total
    return float(0.0 - np.sum(p * np.log(p)))


def shannon_entropy(
    residue_counts: Dict[str, int],
    include_gaps: bool = False,
) -> float:
    """Calculate Shannon entropy for a position from raw counts.

    Shannon entropy H = -sum(p_i * log2(p_i)) where p_i is the frequency
    of symbol i. Lower entropy means higher conservation.

    Args:
        residue_counts: Dictionary mapping symbols to their counts
        include_gaps: Whether to include gap characters in the calculation

    Returns:
        Shannon entropy in bits
    """
    if include_gaps:
        counts = dict(residue_counts)
    else:
        counts = {k: v for k, v in residue_counts.items() if k not in GAP_SYMBOLS}

    if not counts:
        return 0.0

    total = sum(counts.values())
    if total == 0:
        return 0.0

    entropy = 0.0
    for count in counts.values():
        freq = count / total
        if freq > 0:
            entropy -= freq * math.log2(freq)

    return entropy


def percent_identity(
    residue_counts: Dict[str, int],
    include_gaps: bool = False,
) -> Tuple[float, Optional[str]]:
    """Calculate percent identity (frequency of most common residue).

    Args:
        residue_counts: Dictionary mapping symbols to their counts
        include_gaps: Whether to include gaps in total count

    Returns:
        Tuple of (percent_identity, consensus_residue)
        percent_identity: Fraction (0-1) matching most common residue
        consensus_residue: The most common non-gap residue (ties broken alphabetically)
    """
    non_gap_counts = {k: v for k, v in residue_counts.items() if k not in GAP_SYMBOLS}
    if not non_gap_counts:
        return 0.0, None

    consensus = min(non_gap_counts, key=lambda k: (-non_gap_counts[k], k))
    consensus_count = non_gap_counts[consensus]

    if include_gaps:
        total = sum(residue_counts.values())
    else:
        total = sum(non_gap_counts.values())

    return consensus_count / total, consensus


def gap_fraction(column: Sequence[str]) -> float:
    """Fraction of gap symbols in a column."""
    if not column:
        return 0.0
    return sum(1 for symbol in column if symbol in GAP_SYMBOLS) / len(column)


def load_substitution_matrix(name: str) -> Tuple[str, np.ndarray]:
    """Load a Biopython substitution matrix as (alphabet, square array).

    Raises:
        ValueError: If Biopython does not ship a matrix with that name
    """
    try:
        matrix = substitution_matrices.load(name)
    except FileNotFoundError as e:
        available = ", ".join(substitution_matrices.load())
        raise ValueError(f"Unknown substitution matrix {name!r}. Available: {available}") from e
    return matrix.alphabet, np.array(matrix, dtype=float)


def stereochemical_scale(matrix: np.ndarray) -> float:
    """lambda_r = 1 / sqrt(D * (max(M) - min(M))^2) for a D x D matrix."""
    spread = float(matrix.max() - matrix.min())
    if spread == 0:
        return 0.0
    return 1.0 / math.sqrt(matrix.shape[0] * spread ** 2)


def stereochemical_score(
    column: Iterable[str],
    matrix_alphabet: str,
    matrix: np.ndarray,
    scale: Optional[float] = None,
) -> float:
    """Stereochemical variability r(x) of a column (Valdar 2002, trident).

    Each residue type a present in the column is represented by its row X_a
    of the substitution matrix. The score is the mean Euclidean distance of
    those vectors to their centroid, scaled by ``stereochemical_scale``:

        r(x) = lambda_r * 1/|K_x| * sum_{a in K_x} |mean(X) - X_a|

    Gaps and symbols absent from the matrix are not counted. A column with
    no scorable residue returns 0.
    """
    index = {symbol: i for i, symbol in enumerate(matrix_alphabet)}
    present = sorted({s for s in column if s not in GAP_SYMBOLS} & set(index))
    if not present:
        return 0.0

    if scale is None:
        scale = stereochemical_scale(matrix)

    vectors = matrix[[index[a] for a in present]]
    centroid = vectors.mean(axis=0)
    distances = np.linalg.norm(vectors - centroid, axis=1)
    return float(scale * distances.mean())
