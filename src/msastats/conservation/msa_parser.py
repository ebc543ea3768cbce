"""
MSA file parsing for multiple sequence alignment formats.

Alignments are read from:
- A3M (ColabFold/HHblits format, parsed directly)
- Stockholm, Clustal and aligned FASTA (parsed with Biopython ``AlignIO``)

A3M uses lowercase letters for insertions relative to the first sequence.
They are removed during parsing so every row has the same length. All
remaining residues are uppercased, so lowercase columns in FASTA or
Stockholm files (e.g. Pfam insert states) count as the same symbol type
as their uppercase form.
"""

import re
from pathlib import Path
from typing import List, Optional, Union

from Bio import AlignIO

from .models import (
    GAP_SYMBOLS,
    NUCLEOTIDE_ALPHABET,
    PROTEIN_ALPHABET,
    MSAFormat,
    MSAlignment,
    MSASequence,
    MSAValidationResult,
    SequenceType,
)


_ALIGNIO_FORMATS = {
    MSAFormat.FASTA: "fasta",
    MSAFormat.STOCKHOLM: "stockholm",
    MSAFormat.CLUSTAL: "clustal",
}


def detect_format(filepath: Union[str, Path]) -> MSAFormat:
    """Detect MSA format from file extension.

    Args:
        filepath: Path to the MSA file

    Returns:
        Detected MSAFormat enum value

    Raises:
        ValueError: If format cannot be determined
    """
    path = Path(filepath)
    name_lower = path.name.lower()

    if name_lower.endswith(".a3m"):
        return MSAFormat.A3M
    if name_lower.endswith(".sto") or name_lower.endswith(".stockholm"):
        return MSAFormat.STOCKHOLM
    if name_lower.endswith(".aln") or name_lower.endswith(".clustal"):
        return MSAFormat.CLUSTAL
    if path.suffix.lower() in (".fa", ".fasta", ".faa", ".fas", ".fna"):
        return MSAFormat.FASTA

    raise ValueError(f"Cannot determine MSA format from file: {filepath}")


def parse_a3m(filepath: Union[str, Path], remove_insertions: bool = True) -> MSAlignment:
    """Parse A3M format MSA file.

    Args:
        filepath: Path to the A3M file
        remove_insertions: If True, remove lowercase insertion characters

    Returns:
        Parsed MSAlignment object

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file holds no sequences
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"A3M file not found: {filepath}")

    sequences: List[MSASequence] = []
    current_id = None
    current_desc = ""
    current_seq_parts: List[str] = []

    def flush() -> None:
        seq_str = "".join(current_seq_parts)
        if remove_insertions:
            seq_str = re.sub(r"[a-z]", "", seq_str)
        sequences.append(MSASequence(id=current_id, sequence=seq_str.upper(), description=current_desc))

    with open(path, "r") as f:
        for line in f:
            line = line.rstrip("\n\r")
            if not line or line.startswith("#"):
                continue

            if line.startswith(">"):
                if current_id is not None:
                    flush()

                header = line[1:].strip()
                parts = header.split(None, 1)
                current_id = parts[0] if parts else ""
                current_desc = parts[1] if len(parts) > 1 else ""
                current_seq_parts = []
            else:
                current_seq_parts.append(line.strip())

    if current_id is not None:
        flush()

    if not sequences:
        raise ValueError(f"No sequences found in A3M file: {filepath}")

    return MSAlignment(
        sequences=sequences,
        format=MSAFormat.A3M,
        sequence_type=_detect_sequence_type(sequences[0].sequence),
    )


def _parse_with_alignio(filepath: Union[str, Path], format: MSAFormat) -> MSAlignment:
    """Parse a FASTA, Stockholm or Clustal alignment with Biopython."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"{format.value.capitalize()} file not found: {filepath}")

    try:
        alignment = AlignIO.read(str(path), _ALIGNIO_FORMATS[format])
    except ValueError as e:
        raise ValueError(f"Failed to parse {format.value} alignment: {e}") from e

    sequences = [
        MSASequence(id=record.id, sequence=str(record.seq).upper(), description=record.description)
        for record in alignment
    ]

    if not sequences:
        raise ValueError(f"No sequences found in {format.value} file: {filepath}")

    return MSAlignment(
        sequences=sequences,
        format=format,
        sequence_type=_detect_sequence_type(sequences[0].sequence),
    )


def parse_msa(
    filepath: Union[str, Path],
    format: Optional[MSAFormat] = None,
    remove_insertions: bool = True,
) -> MSAlignment:
    """Parse MSA file with auto-format detection.

    Args:
        filepath: Path to the MSA file
        format: Optional explicit format. If None, auto-detect from extension
        remove_insertions: For A3M format, remove lowercase insertions

    Returns:
        Parsed MSAlignment object

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If format is unknown or file is malformed
    """
    if format is None:
        format = detect_format(filepath)

    if format == MSAFormat.A3M:
        return parse_a3m(filepath, remove_insertions=remove_insertions)
    if format in _ALIGNIO_FORMATS:
        return _parse_with_alignio(filepath, format)
    raise ValueError(f"Unsupported MSA format: {format}")


def validate_msa(msa: MSAlignment) -> MSAValidationResult:
    """Check that an MSA can be scored column by column.

    Checks for:
    - At least one sequence and one column
    - Consistent alignment length
    - Enough sequences for a normalized entropy (warning only)
    - Characters outside the canonical alphabets (warning only)

    Args:
        msa: MSAlignment object to validate

    Returns:
        MSAValidationResult with validation status, errors, and warnings
    """
    errors: List[str] = []
    warnings: List[str] = []
    stats = {}

    if msa.num_sequences == 0:
        errors.append("MSA has no sequences")
    elif msa.num_sequences < 2:
        warnings.append(
            f"MSA has only {msa.num_sequences} sequence; entropy-based statistics need at least 2"
        )

    if msa.sequences:
        first_len = len(msa.sequences[0])
        if first_len == 0:
            errors.append("MSA has no columns")
        inconsistent = [
            (seq.id, len(seq))
            for seq in msa.sequences
            if len(seq) != first_len
        ]
        if inconsistent:
            errors.append(
                f"Inconsistent sequence lengths: expected {first_len}, "
                f"found {inconsistent[:5]}{'...' if len(inconsistent) > 5 else ''}"
            )

    known = set(PROTEIN_ALPHABET) | set(NUCLEOTIDE_ALPHABET) | set(GAP_SYMBOLS) | set("XNBZ")
    unusual = set()
    for seq in msa.sequences:
        unusual.update(set(seq.sequence.upper()) - known)
    if unusual:
        warnings.append(f"Unusual characters found: {''.join(sorted(unusual))}")

    stats["num_sequences"] = msa.num_sequences
    stats["alignment_length"] = msa.alignment_length
    stats["alphabet_size"] = len(msa.alphabet)
    stats["sequence_type"] = msa.sequence_type.value
    stats["format"] = msa.format.value

    return MSAValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        stats=stats,
    )


def _detect_sequence_type(sequence: str) -> SequenceType:
    """Detect whether a sequence is protein or nucleotide.

    Args:
        sequence: Sequence string (may include gaps)

    Returns:
        SequenceType.PROTEIN or SequenceType.NUCLEOTIDE
    """
    clean_seq = "".join(c for c in sequence if c not in GAP_SYMBOLS).upper()

    if not clean_seq:
        return SequenceType.PROTEIN

    nucleotide_chars = set("ACGTU")
    protein_only_chars = set("EFIPQLDHKRMWY")

    if any(c in protein_only_chars for c in clean_seq):
        return SequenceType.PROTEIN

    # Mostly ACGTU: treat as nucleotide
    nuc_count = sum(1 for c in clean_seq if c in nucleotide_chars)
    if nuc_count / len(clean_seq) > 0.8:
        return SequenceType.NUCLEOTIDE

    return SequenceType.PROTEIN
