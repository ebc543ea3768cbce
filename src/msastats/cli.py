"""
msastats Command-Line Interface

Compute one conservation statistic over an alignment and write one value per
column (or their mean with --global).

Usage:
    # Weighted entropy per column to stdout
    msastats family.fasta -s wentropy

    # Mean trident score written to a file
    msastats family.sto -s trident --global -o trident.txt

    # Every statistic side by side as TSV
    msastats family.a3m --table profile.tsv

    # Sequence weights and progress kept in a log file
    msastats family.fasta -v --log-file run.log

    # Per-column output even when MSASTATS_GLOBAL=1 is set
    msastats family.fasta --no-global
"""

import argparse
import logging
import sys
from typing import List, Optional

from msastats import __version__
from msastats.config import StatisticConfig
from msastats.conservation import (
    MSAFormat,
    build_default_registry,
    build_profile_table,
    parse_msa,
    validate_msa,
    write_profile_table,
)
from msastats.exceptions import ConfigurationError, MSAStatsError
from msastats.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="msastats",
        description="Per-column conservation statistics for multiple sequence alignments.",
    )
    parser.add_argument("alignment", nargs="?", help="Alignment file (A3M, FASTA, Stockholm, Clustal)")
    parser.add_argument("-s", "--statistic", default="wentropy",
                        help="Statistic to compute (default: wentropy)")
    parser.add_argument("-o", "--output", help="Output file; '-' for stdout (default)")
    parser.add_argument("-g", "--global", dest="global_mode", action=argparse.BooleanOptionalAction,
                        help="Print the mean over all columns instead of one value per column")
    parser.add_argument("-v", "--verbose", action=argparse.BooleanOptionalAction,
                        help="Log sequence weights and progress")
    parser.add_argument("--log-file", help="Also write the run log (INFO and above) to this file")
    parser.add_argument("--format", choices=[f.value for f in MSAFormat],
                        help="Alignment format (default: from file extension)")
    parser.add_argument("--matrix", help="Substitution matrix for the trident score (default: JONES)")
    parser.add_argument("--table", help="Also write every statistic side by side to this TSV file")
    parser.add_argument("--list", action="store_true", help="List available statistics and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the msastats command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Options left out stay None and fall back to the environment
    config = StatisticConfig(
        output_name=args.output,
        global_mode=args.global_mode,
        verbose=args.verbose,
        substitution_matrix=args.matrix,
    )

    try:
        logger = setup_logging(verbose=config.verbose, log_file=args.log_file)
    except ConfigurationError as e:
        logging.getLogger("msastats").error(str(e))
        return 1

    is_valid, errors = config.validate()
    if not is_valid:
        logger.error("Configuration Errors:")
        for error in errors:
            logger.error(f"  {error}")
        return 1

    registry = build_default_registry(config)

    if args.list:
        for name in registry.names():
            print(name)
        return 0

    if not args.alignment:
        parser.error("the following arguments are required: alignment")

    try:
        statistic = registry.create(args.statistic)

        msa_format = MSAFormat(args.format) if args.format else None
        msa = parse_msa(args.alignment, format=msa_format)
        logger.info(f"Parsed {msa.num_sequences} sequences, alignment length {msa.alignment_length}")

        validation = validate_msa(msa)
        for warning in validation.warnings:
            logger.warning(warning)
        if not validation.is_valid:
            for error in validation.errors:
                logger.error(error)
            return 1

        statistic.compute(msa)
        statistic.print_statistic(msa, config)

        if args.table:
            statistics = [registry.create(name) for name in registry.names()]
            write_profile_table(build_profile_table(msa, statistics), args.table)
            logger.info(f"Profile table written to {args.table}")

    except MSAStatsError as e:
        logger.error(str(e))
        return 1
    except (OSError, ValueError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
