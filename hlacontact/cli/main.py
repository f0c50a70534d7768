# hlacontact/cli/main.py
import argparse
import json
import sys
from typing import Optional, Sequence

from ..core.context import ApplicationContext
from ..core.logging_config import LoggingManager
from ..error_handlers import handle_exceptions
from ..exceptions import ValidationError
from ..io.loaders import read_pairs, write_table
from ..models import AnalysisParameters, AnalysisResult, EntropyTable, HLADatasets, sorted_positions
from ..pipelines.analysis import HLAAnalysisService


def _add_analysis_arguments(parser: argparse.ArgumentParser) -> None:
    """Options mirroring the per-call configuration surface; unset values fall back to config"""
    parser.add_argument('--locus', choices=['A', 'B'], help='HLA locus')
    parser.add_argument('--distance', type=float, dest='distance_threshold',
                        help='Structural distance threshold (Å), matched exactly')
    parser.add_argument('--percentage', type=float, dest='percentage_threshold',
                        help='Percentage of structures a contact must exceed (0-100)')
    parser.add_argument('--interaction-type', dest='interaction_type',
                        help='Peptide, TCR, Peptide+TCR or Peptide-or-TCR')
    parser.add_argument('--min-score', type=float, dest='min_score',
                        help='Minimum contact confidence score (0-1)')
    parser.add_argument('--polymorphic-only', action='store_true', default=None,
                        dest='show_polymorphic_only',
                        help='Restrict displayed positions to polymorphic sites')
    parser.add_argument('--entropy-threshold', type=float, dest='entropy_threshold',
                        help='Minimum entropy for a polymorphic site')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='hlacontact',
                                     description='HLA class I contact position and divergence analysis')

    parser.add_argument('--config', type=str, help='Path to configuration file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (can be used multiple times)')
    parser.add_argument('--log-file', type=str, help='Log to file in addition to stderr')
    parser.add_argument('--log-dir', type=str, help='Directory for log files')
    parser.add_argument('--json', action='store_true', help='Output results as JSON')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')
    subparsers.required = True

    positions_parser = subparsers.add_parser('positions', help='Classify contact positions')
    _add_analysis_arguments(positions_parser)

    compare_parser = subparsers.add_parser('compare', help='Compare two alleles')
    _add_analysis_arguments(compare_parser)
    compare_parser.add_argument('--allele1', help='First allele (e.g. A*02:01)')
    compare_parser.add_argument('--allele2', help='Second allele (e.g. A*03:01)')

    batch_parser = subparsers.add_parser('batch', help='Divergence report for many allele pairs')
    _add_analysis_arguments(batch_parser)
    batch_parser.add_argument('--pairs', required=True, help='File with one allele pair per line')
    batch_parser.add_argument('--output', help='Write the CSV report here instead of stdout')

    entropy_parser = subparsers.add_parser('entropy', help='Per-position entropy from the sequence tables')
    entropy_parser.add_argument('--output', required=True, help='Output table (Locus;Position;Entropy)')

    return parser


def _parameters(service: HLAAnalysisService, args: argparse.Namespace) -> AnalysisParameters:
    overrides = {
        name: getattr(args, name, None)
        for name in ('locus', 'distance_threshold', 'percentage_threshold', 'interaction_type',
                     'min_score', 'show_polymorphic_only', 'entropy_threshold', 'allele1', 'allele2')
    }
    return service.default_parameters().with_overrides(**overrides)


def _print_positions(result: AnalysisResult) -> None:
    print(f"Locus {result.parameters.locus.value}: {result.total_structures} structures, "
          f"{result.contacts_considered} contacts")
    print(f"{'Position':>8}  {'Peptide %':>9}  {'TCR %':>7}  Label")
    for position in sorted_positions(result.stats):
        stats = result.stats[position]
        label = result.display_weighting.get(position)
        print(f"{str(position):>8}  {stats.peptide_percentage:9.1f}  {stats.tcr_percentage:7.1f}  "
              f"{label.value if label else ''}")
    print(f"Selected positions: {', '.join(str(p) for p in sorted_positions(result.display_weighting))}")


def _print_comparison(result: AnalysisResult) -> None:
    comparison = result.comparison
    print(f"{comparison.allele1} vs {comparison.allele2}: {comparison.mismatch_count} mismatches "
          f"over {comparison.compared_positions} positions ({comparison.mismatch_percentage:.1f}%)")
    for mismatch in comparison.mismatches:
        marker = '*' if mismatch.position in result.weighting else ' '
        print(f"  {marker}{mismatch.position:>4}  {mismatch.residue1 or '-'} -> {mismatch.residue2 or '-'}"
              f"  {mismatch.substitution_score}")
    print(f"Classical divergence: {result.divergence.classical:.2f}")
    print(f"Specific divergence:  {result.divergence.specific:.2f}")


def _require_alleles(params: AnalysisParameters, datasets: HLADatasets) -> None:
    """Both alleles must exist in the locus table; raises AlleleNotFoundError otherwise"""
    if not params.has_allele_pair:
        raise ValidationError("compare needs both --allele1 and --allele2")
    table = datasets.sequences_for(params.locus)
    for allele in (params.allele1, params.allele2):
        table.require(allele)


@handle_exceptions()
def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    context = ApplicationContext(args.config)
    logger = LoggingManager.configure(
        verbose=args.verbose > 0,
        log_file=args.log_file,
        log_dir=args.log_dir,
        component="hlacontact",
        config=context.config
    )
    logger.debug(f"Running command {args.command}")

    service = HLAAnalysisService(context.config_manager)

    if args.command == 'entropy':
        datasets = context.get_datasets()
        table = EntropyTable.from_sequence_tables(datasets.sequences)
        path = write_table(table.to_rows(), args.output, delimiter=';',
                           columns=['Locus', 'Position', 'Entropy'])
        logger.info(f"Wrote entropy for {len(table)} positions to {path}")
        print(f"Wrote entropy for {len(table)} positions to {path}")
        return 0

    params = _parameters(service, args)
    datasets = context.get_datasets()

    if args.command == 'batch':
        pairs = read_pairs(args.pairs)
        report = service.run_batch(pairs, datasets, params)
        if args.output:
            path = report.write(args.output)
            print(f"Wrote {len(report.rows)} rows to {path}")
        elif args.json:
            print(json.dumps([dict(zip(report.header, row)) for row in report.rows], indent=2))
        else:
            print(report.to_csv_text())
        return 0

    if args.command == 'compare':
        _require_alleles(params, datasets)

    entropy = context.get_entropy() if params.show_polymorphic_only else None
    result = service.analyze(datasets, params, entropy=entropy)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif args.command == 'positions':
        _print_positions(result)
    else:
        _print_comparison(result)

    return 0


if __name__ == '__main__':
    sys.exit(main())
