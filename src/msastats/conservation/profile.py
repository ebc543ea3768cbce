"""
Side-by-side conservation profile of an alignment.

Computes several column statistics on the same alignment and collects them
in one table, one row per alignment column.
"""

from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from .models import MSAlignment
from .scores import percent_identity
from .statistic import ColumnStatistic


def build_profile_table(
    msa: MSAlignment,
    statistics: Iterable[ColumnStatistic],
) -> pd.DataFrame:
    """Compute every statistic and return their values column by column.

    Args:
        msa: Alignment to profile
        statistics: Column statistics; each is computed here

    Returns:
        DataFrame indexed by 1-based ``position`` with a ``consensus`` column
        and one column per statistic name
    """
    positions = range(1, msa.alignment_length + 1)
    df = pd.DataFrame(index=pd.Index(positions, name="position"))
    df["consensus"] = [
        percent_identity(msa.column_counts(x))[1] or "-"
        for x in range(msa.alignment_length)
    ]

    for statistic in statistics:
        statistic.compute(msa)
        df[statistic.name] = statistic.values

    return df


def write_profile_table(df: pd.DataFrame, output_path: Union[str, Path]) -> None:
    """Write a profile table as TSV."""
    df.to_csv(output_path, sep="\t", float_format="%.6g")
