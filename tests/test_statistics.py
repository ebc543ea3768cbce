"""
Tests for msastats column statistics, output contract and registry.

Tests cover:
- Weighted entropy and trident statistics
- Unweighted entropy, identity and gap statistics
- Per-column and global output
- Statistic registry
- Profile tables
"""

import logging
import math
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from Bio.Align import substitution_matrices

# Add src to path for msastats imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from msastats.config import StatisticConfig
from msastats.conservation import (
    ColumnStatistic,
    GapFractionStatistic,
    MSAlignment,
    MSASequence,
    PercentIdentityStatistic,
    ShannonEntropyStatistic,
    StatisticRegistry,
    TridentStatistic,
    WeightedEntropyStatistic,
    build_default_registry,
    build_profile_table,
    format_value,
    parse_msa,
    write_column_values,
    write_profile_table,
)
from msastats.exceptions import (
    ConfigurationError,
    DegenerateAlignmentError,
    UnknownStatisticError,
)


def make_msa(*rows, symbols=""):
    """Build an alignment from plain row strings."""
    return MSAlignment(
        sequences=[MSASequence(id=f"seq{i}", sequence=row) for i, row in enumerate(rows)],
        symbols=symbols,
    )


def make_config(output, global_mode=False):
    """Config writing to ``output``."""
    return StatisticConfig(output_name=str(output), global_mode=global_mode)


FAMILY = ("MKV-LAW", "MKVALAW", "MRV-LGW", "MKIELAF", "LKV-LAW")


class TestWeightedEntropy:
    """Tests for the wentropy statistic."""

    def test_identical_rows_scenario(self, tmp_path):
        """Three identical rows: both columns score exactly 0."""
        msa = make_msa("AC", "AC", "AC", symbols="ACG")
        statistic = WeightedEntropyStatistic()
        statistic.compute(msa)

        assert statistic.weights.tolist() == pytest.approx([1 / 3, 1 / 3, 1 / 3])
        assert statistic.values == [0.0, 0.0]

        output = tmp_path / "out.txt"
        statistic.print_statistic(msa, make_config(output))
        assert output.read_text() == "0\n0\n"

    def test_two_different_rows_scenario(self, tmp_path):
        """Two rows differing at one column: score exactly 1."""
        msa = make_msa("A", "C", symbols="AC")
        statistic = WeightedEntropyStatistic()
        statistic.compute(msa)

        assert statistic.weights.tolist() == [0.5, 0.5]
        assert statistic.probabilities[0].tolist() == [0.5, 0.5]
        assert statistic.values == [1.0]

        output = tmp_path / "out.txt"
        statistic.print_statistic(msa, make_config(output))
        assert output.read_text() == "1\n"

    def test_scores_non_negative_and_bounded(self):
        """Column scores lie in [0, 1]."""
        statistic = WeightedEntropyStatistic()
        statistic.compute(make_msa(*FAMILY))

        assert len(statistic.values) == 7
        for value in statistic.values:
            assert 0.0 <= value <= 1.0 + 1e-12

    def test_conserved_column_is_zero(self):
        """A column with one symbol scores exactly 0, others above 0."""
        statistic = WeightedEntropyStatistic()
        statistic.compute(make_msa("AAC", "ACC", "GCC"))

        assert statistic.values[2] == 0.0
        assert statistic.values[0] > 0.0
        assert statistic.values[1] > 0.0

    def test_hand_computed_column(self):
        """Column value matches the formula on a small example."""
        statistic = WeightedEntropyStatistic()
        statistic.compute(make_msa("AAC", "ACC", "GCC", symbols="ACG"))

        # Column 0: A carries w0 + w1 = 23/36, G carries w2 = 13/36
        p = [23 / 36, 13 / 36]
        expected = -sum(q * math.log(q) for q in p) / math.log(3)
        assert statistic.values[0] == pytest.approx(expected)

    def test_compute_is_idempotent(self):
        """Computing twice gives the same result."""
        msa = make_msa(*FAMILY)
        statistic = WeightedEntropyStatistic()
        statistic.compute(msa)
        first = list(statistic.values)
        statistic.compute(msa)
        assert statistic.values == first

    def test_alignment_not_modified(self):
        """The alignment is only read."""
        msa = make_msa(*FAMILY)
        before = [seq.sequence for seq in msa.sequences]
        WeightedEntropyStatistic().compute(msa)
        assert [seq.sequence for seq in msa.sequences] == before

    def test_single_sequence_is_degenerate(self):
        """min(K, N) < 2 is rejected."""
        with pytest.raises(DegenerateAlignmentError):
            WeightedEntropyStatistic().compute(make_msa("ACD"))

    def test_single_symbol_alphabet_is_degenerate(self):
        """A one-symbol alphabet cannot be normalized."""
        with pytest.raises(DegenerateAlignmentError):
            WeightedEntropyStatistic().compute(make_msa("A", "A", symbols="A"))

    def test_empty_alignment_is_degenerate(self):
        """No rows or no columns is rejected."""
        with pytest.raises(DegenerateAlignmentError):
            WeightedEntropyStatistic().compute(MSAlignment())
        with pytest.raises(DegenerateAlignmentError):
            WeightedEntropyStatistic().compute(make_msa("", ""))

    def test_verbose_logs_weights(self, caplog):
        """Verbose mode logs the weights without changing the scores."""
        msa = make_msa("AAC", "ACC", "GCC")
        quiet = WeightedEntropyStatistic()
        quiet.compute(msa)

        loud = WeightedEntropyStatistic(verbose=True)
        with caplog.at_level(logging.INFO, logger="msastats.conservation.wentropy"):
            loud.compute(msa)

        assert "Seq weights :" in caplog.text
        assert "seq1" in caplog.text
        assert loud.values == quiet.values

    def test_quiet_mode_logs_nothing(self, caplog):
        """Weights are not logged unless verbose."""
        with caplog.at_level(logging.INFO, logger="msastats.conservation.wentropy"):
            WeightedEntropyStatistic().compute(make_msa("AC", "AG"))
        assert "Seq weights" not in caplog.text


class TestTrident:
    """Tests for the trident statistic."""

    def test_conserved_column_scores_one(self):
        """A gap-free single-residue column scores 1."""
        statistic = TridentStatistic()
        statistic.compute(make_msa("AC", "AC", "AC"))

        assert statistic.values == [1.0, 1.0]
        assert statistic.entropy == [0.0, 0.0]
        assert statistic.stereochemical == [0.0, 0.0]
        assert statistic.gaps == [0.0, 0.0]

    def test_gap_column_scores_zero(self):
        """An all-gap column scores 0."""
        statistic = TridentStatistic()
        statistic.compute(make_msa("A-", "C-", "A-"))

        assert statistic.gaps[1] == 1.0
        assert statistic.values[1] == 0.0

    def test_scores_in_unit_interval(self):
        """Every score lies in [0, 1]; sub-scores too."""
        statistic = TridentStatistic()
        statistic.compute(make_msa(*FAMILY))

        assert len(statistic.values) == 7
        for values in (statistic.values, statistic.entropy, statistic.stereochemical, statistic.gaps):
            for value in values:
                assert 0.0 <= value <= 1.0

    def test_variable_column_scores_lower(self):
        """Residue variation lowers the score."""
        statistic = TridentStatistic()
        statistic.compute(make_msa("AW", "AC", "AD"))

        assert statistic.values[0] == 1.0
        assert statistic.values[1] < 1.0
        assert statistic.stereochemical[1] > 0.0

    @staticmethod
    def jones_rows(residues):
        """Rows of the JONES matrix for ``residues``, with lambda_r."""
        matrix = substitution_matrices.load("JONES")
        rows = np.array([[matrix[a, b] for b in matrix.alphabet] for a in residues])
        values = np.array(matrix)
        scale = 1.0 / math.sqrt(len(matrix.alphabet) * (values.max() - values.min()) ** 2)
        return rows, scale

    def test_stereochemical_score_jones(self):
        """r(x) is the scaled mean distance of JONES rows to their centroid."""
        rows, scale = self.jones_rows("WCD")
        centroid = rows.mean(axis=0)
        expected = scale * np.linalg.norm(rows - centroid, axis=1).mean()

        statistic = TridentStatistic()
        statistic.compute(make_msa("W", "C", "D", "-"))

        assert len(rows[0]) == 20
        assert statistic.stereochemical[0] == pytest.approx(expected)
        assert statistic.stereochemical[0] == pytest.approx(0.1458617958295043)

    def test_default_trident_score(self):
        """Full score with JONES and exponents (1, 0.5, 3) on a mixed column."""
        # Henikoff weights W, W, C, - : 1/6, 1/6, 1/3, 1/3
        t = math.log(3) / math.log(4)
        rows, scale = self.jones_rows("WC")
        r = scale * np.linalg.norm(rows[0] - rows[1]) / 2
        g = 0.25

        statistic = TridentStatistic()
        statistic.compute(make_msa("W", "W", "C", "-"))

        assert statistic.weights.tolist() == pytest.approx([1 / 6, 1 / 6, 1 / 3, 1 / 3])
        assert statistic.entropy[0] == pytest.approx(t)
        assert statistic.stereochemical[0] == pytest.approx(r)
        assert statistic.gaps[0] == g
        assert statistic.values[0] == pytest.approx((1 - t) * math.sqrt(1 - r) * (1 - g) ** 3)

    def test_lowercase_residues_agree(self, tmp_path):
        """Entropy and stereochemistry see a mixed-case column as conserved."""
        sto_file = tmp_path / "insert.sto"
        sto_file.write_text("# STOCKHOLM 1.0\ns1 MKa\ns2 MKA\ns3 MKA\n//\n")
        msa = parse_msa(sto_file)

        trident = TridentStatistic()
        trident.compute(msa)
        wentropy = WeightedEntropyStatistic()
        wentropy.compute(msa)

        assert wentropy.values[2] == 0.0
        assert trident.entropy[2] == 0.0
        assert trident.stereochemical[2] == 0.0
        assert trident.values[2] == 1.0

    def test_entropy_only_matches_wentropy(self):
        """With exponents (1, 0, 0) trident is 1 - wentropy."""
        msa = make_msa(*FAMILY)
        wentropy = WeightedEntropyStatistic()
        wentropy.compute(msa)

        trident = TridentStatistic(exponents=(1.0, 0.0, 0.0))
        trident.compute(msa)

        assert trident.values == pytest.approx([1.0 - v for v in wentropy.values])
        assert trident.entropy == pytest.approx(wentropy.values)

    def test_gap_exponent(self):
        """With exponents (0, 0, c) the score is (1 - g)^c."""
        trident = TridentStatistic(exponents=(0.0, 0.0, 2.0))
        trident.compute(make_msa("A-", "A-", "AC", "AC"))
        assert trident.values == pytest.approx([1.0, 0.25])

    def test_compute_is_idempotent(self):
        """Sub-score lists are rebuilt on every compute."""
        msa = make_msa(*FAMILY)
        statistic = TridentStatistic()
        statistic.compute(msa)
        first = list(statistic.values)
        statistic.compute(msa)
        assert statistic.values == first
        assert len(statistic.entropy) == 7

    def test_bad_exponents(self):
        """Exactly three exponents are required."""
        with pytest.raises(ValueError):
            TridentStatistic(exponents=(1.0, 0.5))

    def test_unknown_matrix(self):
        """Unknown substitution matrices are reported."""
        with pytest.raises(ValueError, match="Unknown substitution matrix"):
            TridentStatistic(matrix_name="NOT_A_MATRIX")

    def test_degenerate(self):
        """Same degenerate-input rule as wentropy."""
        with pytest.raises(DegenerateAlignmentError):
            TridentStatistic().compute(make_msa("ACD"))


class TestCountStatistics:
    """Tests for the unweighted column statistics."""

    def test_entropy(self):
        """Two equally frequent symbols reach the maximum."""
        statistic = ShannonEntropyStatistic()
        statistic.compute(make_msa("AA", "CA", symbols="AC"))
        assert statistic.values == pytest.approx([1.0, 0.0])

    def test_entropy_degenerate(self):
        """One sequence cannot be normalized."""
        with pytest.raises(DegenerateAlignmentError):
            ShannonEntropyStatistic().compute(make_msa("AC"))

    def test_identity(self):
        """Fraction of residues matching the consensus, gaps excluded."""
        statistic = PercentIdentityStatistic()
        statistic.compute(make_msa("AC", "AC", "G-", "-C"))
        assert statistic.values == pytest.approx([2 / 3, 1.0])

    def test_gaps(self):
        """Fraction of gaps per column."""
        statistic = GapFractionStatistic()
        statistic.compute(make_msa("A-", "A.", "AC", "-C"))
        assert statistic.values == [0.25, 0.5]

    def test_empty(self):
        """Empty alignments are rejected."""
        with pytest.raises(DegenerateAlignmentError):
            GapFractionStatistic().compute(MSAlignment())
        with pytest.raises(DegenerateAlignmentError):
            PercentIdentityStatistic().compute(MSAlignment())


class TestOutput:
    """Tests for the shared per-column output contract."""

    def test_format_value(self):
        """Integral values drop the trailing .0."""
        assert format_value(0.0) == "0"
        assert format_value(-0.0) == "0"
        assert format_value(1.0) == "1"
        assert format_value(0.5) == "0.5"
        assert format_value(0.25) == "0.25"

    def test_format_value_round_trip(self):
        """Written values parse back to the same float."""
        for value in (1 / 3, math.pi / 7, 0.1, 2.5e-7, 0.9999999999999999):
            assert float(format_value(value)) == value

    def test_per_column_output(self, tmp_path):
        """One line per column, in column order."""
        output = tmp_path / "columns.txt"
        write_column_values([0.0, 0.5, 1.0], make_config(output))
        assert output.read_text() == "0\n0.5\n1\n"

    def test_global_output(self, tmp_path):
        """Exactly one line with the mean."""
        output = tmp_path / "global.txt"
        write_column_values([0.0, 0.5, 1.0], make_config(output, global_mode=True))
        assert output.read_text() == "0.5\n"

    def test_global_is_mean_of_per_column(self, tmp_path):
        """Global output equals the mean of the per-column output."""
        msa = make_msa(*FAMILY)
        statistic = WeightedEntropyStatistic()
        statistic.compute(msa)

        per_column = tmp_path / "per_column.txt"
        global_file = tmp_path / "global.txt"
        statistic.print_statistic(msa, make_config(per_column))
        statistic.print_statistic(msa, make_config(global_file, global_mode=True))

        values = [float(line) for line in per_column.read_text().splitlines()]
        assert values == statistic.values
        assert len(values) == msa.alignment_length
        assert float(global_file.read_text()) == pytest.approx(sum(values) / len(values))
        assert statistic.mean == pytest.approx(sum(values) / len(values))

    def test_stdout_output(self, capsys):
        """'-' writes to stdout."""
        write_column_values([1.0, 0.125], StatisticConfig(output_name="-"))
        assert capsys.readouterr().out == "1\n0.125\n"

    def test_unwritable_destination(self, tmp_path):
        """A destination that cannot be opened is a configuration error."""
        output = tmp_path / "missing" / "out.txt"
        with pytest.raises(ConfigurationError) as excinfo:
            write_column_values([1.0], make_config(output))
        assert excinfo.value.destination == str(output)
        assert str(output) in str(excinfo.value)

    def test_global_without_values(self, tmp_path):
        """There is no mean over zero columns."""
        output = tmp_path / "out.txt"
        with pytest.raises(DegenerateAlignmentError):
            write_column_values([], make_config(output, global_mode=True))
        assert not output.exists()

    def test_print_before_compute(self, tmp_path):
        """Printing requires a computed result."""
        with pytest.raises(RuntimeError):
            WeightedEntropyStatistic().print_statistic(MSAlignment(), make_config(tmp_path / "x"))


class TestRegistry:
    """Tests for the statistic registry."""

    def test_default_names(self):
        """Every shipped statistic is registered."""
        registry = build_default_registry()
        assert registry.names() == ["wentropy", "trident", "entropy", "identity", "gaps"]
        assert len(registry) == 5

    def test_create(self):
        """Each create returns a fresh instance of the right class."""
        registry = build_default_registry()
        first = registry.create("wentropy")
        second = registry.create("wentropy")

        assert isinstance(first, WeightedEntropyStatistic)
        assert first is not second
        assert isinstance(registry.create("trident"), TridentStatistic)

    def test_case_insensitive(self):
        """Names are matched case-insensitively."""
        registry = build_default_registry()
        assert "WEntropy" in registry
        assert isinstance(registry.create("TRIDENT"), TridentStatistic)

    def test_unknown_statistic(self, tmp_path):
        """Unknown names raise without producing output."""
        registry = build_default_registry(make_config(tmp_path / "out.txt"))
        with pytest.raises(UnknownStatisticError) as excinfo:
            registry.create("nope")

        assert excinfo.value.name == "nope"
        assert "wentropy" in excinfo.value.available
        assert list(tmp_path.iterdir()) == []

    def test_no_reregistration(self):
        """A name can only be registered once."""
        registry = StatisticRegistry()
        registry.register("gaps", GapFractionStatistic)
        with pytest.raises(ValueError):
            registry.register("GAPS", GapFractionStatistic)

    def test_config_reaches_factories(self):
        """Verbose flag and trident parameters come from the config."""
        config = StatisticConfig(verbose=True, trident_exponents=(2.0, 1.0, 1.0))
        registry = build_default_registry(config)

        assert registry.create("wentropy").verbose is True
        trident = registry.create("trident")
        assert trident.exponents == (2.0, 1.0, 1.0)
        assert trident.matrix_name == "JONES"


class TestProfileTable:
    """Tests for side-by-side profiles."""

    def test_build_profile_table(self):
        """One row per column, one column per statistic."""
        msa = make_msa(*FAMILY)
        statistics = [WeightedEntropyStatistic(), GapFractionStatistic()]

        df = build_profile_table(msa, statistics)

        assert isinstance(df, pd.DataFrame)
        assert df.index.name == "position"
        assert list(df.index) == list(range(1, 8))
        assert list(df.columns) == ["consensus", "wentropy", "gaps"]
        assert df["consensus"].tolist()[:3] == ["M", "K", "V"]
        assert df["wentropy"].tolist() == statistics[0].values

    def test_write_profile_table(self, tmp_path):
        """Tables are written as TSV."""
        df = build_profile_table(make_msa("AC", "AG"), [GapFractionStatistic()])
        output = tmp_path / "profile.tsv"
        write_profile_table(df, output)

        read_back = pd.read_csv(output, sep="\t", index_col="position")
        assert list(read_back.columns) == ["consensus", "gaps"]
        assert len(read_back) == 2

    def test_column_statistic_is_abstract(self):
        """ColumnStatistic needs column_values."""
        with pytest.raises(TypeError):
            ColumnStatistic()
