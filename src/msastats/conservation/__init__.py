"""
msastats conservation module: per-column statistics over an MSA.

Key Features:
- Parse MSA files (A3M, Stockholm, Clustal, FASTA)
- Henikoff sequence weights
- Weighted entropy and trident conservation scores (Valdar 2002)
- Plain entropy, percent identity and gap profiles
- Registry to pick a statistic by name

Example Usage:
    >>> from msastats.config import StatisticConfig
    >>> from msastats.conservation import build_default_registry, parse_msa
    >>> msa = parse_msa("family.fasta")
    >>> statistic = build_default_registry().create("wentropy")
    >>> statistic.compute(msa)
    >>> statistic.print_statistic(msa, StatisticConfig(output_name="scores.txt"))
"""

# Data models
from .models import (
    MSAFormat,
    MSAlignment,
    MSASequence,
    MSAValidationResult,
    SequenceType,
)

# MSA parsing
from .msa_parser import (
    detect_format,
    parse_a3m,
    parse_msa,
    validate_msa,
)

# Column math
from .scores import (
    entropy_normalizer,
    gap_fraction,
    load_substitution_matrix,
    percent_identity,
    shannon_entropy,
    stereochemical_score,
    weighted_entropy,
    weighted_probability_table,
)
from .weights import henikoff_weights

# Statistics
from .statistic import (
    ColumnStatistic,
    Statistic,
    format_value,
    write_column_values,
)
from .wentropy import WeightedEntropyStatistic
from .trident import TridentStatistic
from .columns import (
    GapFractionStatistic,
    PercentIdentityStatistic,
    ShannonEntropyStatistic,
)
from .registry import StatisticRegistry, build_default_registry
from .profile import build_profile_table, write_profile_table


__all__ = [
    # Models
    "MSAFormat",
    "MSAlignment",
    "MSASequence",
    "MSAValidationResult",
    "SequenceType",
    # Parsing
    "detect_format",
    "parse_a3m",
    "parse_msa",
    "validate_msa",
    # Column math
    "entropy_normalizer",
    "gap_fraction",
    "henikoff_weights",
    "load_substitution_matrix",
    "percent_identity",
    "shannon_entropy",
    "stereochemical_score",
    "weighted_entropy",
    "weighted_probability_table",
    # Statistics
    "ColumnStatistic",
    "GapFractionStatistic",
    "PercentIdentityStatistic",
    "ShannonEntropyStatistic",
    "Statistic",
    "TridentStatistic",
    "WeightedEntropyStatistic",
    "format_value",
    "write_column_values",
    # Registry and profiles
    "StatisticRegistry",
    "build_default_registry",
    "build_profile_table",
    "write_profile_table",
]
