"""
Data models for MSA conservation statistics.

This module defines the alignment structures the statistics read from. An
``MSAlignment`` is never modified by a statistic; it only answers the
read-only questions the scoring code asks (size, alphabet, symbol at a cell,
number of symbol types in a column).
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


GAP_SYMBOLS = "-."

PROTEIN_ALPHABET = "ACDEFGHIKLMNPQRSTVWY-"
NUCLEOTIDE_ALPHABET = "ACGTU-"


class MSAFormat(Enum):
    """Supported MSA file formats."""
    A3M = "a3m"
    STOCKHOLM = "stockholm"
    CLUSTAL = "clustal"
    FASTA = "fasta"


class SequenceType(Enum):
    """Type of sequences in the alignment."""
    PROTEIN = "protein"
    NUCLEOTIDE = "nucleotide"


@dataclass
class MSASequence:
    """A single sequence in the multiple sequence alignment.

    Attributes:
        id: Sequence identifier
        sequence: The aligned sequence string (including gaps)
        description: Optional description from the header
    """
    id: str
    sequence: str
    description: str = ""

    def __len__(self) -> int:
        """Return the length of the aligned sequence (including gaps)."""
        return len(self.sequence)


@dataclass
class MSAlignment:
    """A multiple sequence alignment.

    Rows are sequences, columns are aligned positions.

    Attributes:
        sequences: List of aligned sequences
        format: The format the MSA was parsed from
        sequence_type: Whether sequences are protein or nucleotide
        symbols: Explicit alphabet. When empty, the canonical alphabet of
            ``sequence_type`` is used. Symbols observed in the sequences but
            missing from the alphabet are always appended.
    """
    sequences: List[MSASequence] = field(default_factory=list)
    format: MSAFormat = MSAFormat.FASTA
    sequence_type: SequenceType = SequenceType.PROTEIN
    symbols: str = ""

    def __len__(self) -> int:
        """Return the alignment length (number of columns)."""
        if not self.sequences:
            return 0
        return len(self.sequences[0])

    @property
    def num_sequences(self) -> int:
        """Number of sequences (rows) in the alignment."""
        return len(self.sequences)

    @property
    def alignment_length(self) -> int:
        """Length of the alignment (same as __len__)."""
        return len(self)

    @property
    def alphabet(self) -> str:
        """Ordered alphabet; contains every symbol found in the alignment."""
        if self.symbols:
            base = self.symbols
        elif self.sequence_type == SequenceType.NUCLEOTIDE:
            base = NUCLEOTIDE_ALPHABET
        else:
            base = PROTEIN_ALPHABET

        observed = set()
        for seq in self.sequences:
            observed.update(seq.sequence)
        extra = sorted(observed - set(base))
        return base + "".join(extra)

    def symbol_at(self, row: int, col: int) -> str:
        """Symbol of sequence ``row`` at column ``col``."""
        return self.sequences[row].sequence[col]

    def get_column(self, column_index: int) -> List[str]:
        """Get all symbols at a specific column.

        Args:
            column_index: 0-based column index

        Returns:
            List of symbols at this column from all sequences
        """
        if column_index < 0 or column_index >= len(self):
            return []
        return [seq.sequence[column_index] for seq in self.sequences]

    def column_counts(self, column_index: int) -> Dict[str, int]:
        """Occurrences of each symbol in a column."""
        return dict(Counter(self.get_column(column_index)))

    def distinct_symbol_count(self, column_index: int) -> int:
        """Number of distinct symbol types (gaps included) in a column."""
        return len(set(self.get_column(column_index)))


@dataclass
class MSAValidationResult:
    """Result of MSA validation.

    Attributes:
        is_valid: Whether the MSA can be scored
        errors: List of critical errors
        warnings: List of non-critical warnings
        stats: Summary statistics about the MSA
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: Dict[str, object] = field(default_factory=dict)
