"""Main file for cryptobench.

Contains ExitResult, entrypoint function, and main function.
ExitResult contains values returned on failure.
Exit codes:
    0: SUCCESS
    1: NO_ACTION
    2: INVALID_WORKDIR
    3: NO_RESULTS_FOUND
    4: INVALID_MODE
    5: NO_LOCAL_SETTINGS

Entrypoint function handles parsing arguments and runs main.
Main function acts on the result of the parser and runs the program.
"""

import logging
import textwrap
from enum import IntEnum
import sys
import argparse
from pathlib import Path

logger = logging.getLogger(__name__)

from cryptobench.analysis import load_benchmark_analysis
from cryptobench.benchmark_data import ResultsNotFoundError, mode_label
from cryptobench.benchmark_helpers import compare_benchmarks, summarize_benchmarks, export_benchmarks
from cryptobench.benchmark_settings import load_local_settings

SHOW_ACTIONS = {'show', 's'}
SUMMARY_ACTIONS = {'summary', 'sum'}
EXPORT_ACTIONS = {'export', 'e'}
MODES_ACTIONS = {'modes', 'm'}

class ExitResult(IntEnum):
    SUCCESS = 0
    NO_ACTION = 1
    INVALID_WORKDIR = 2
    NO_RESULTS_FOUND = 3
    INVALID_MODE = 4
    NO_LOCAL_SETTINGS = 5

    def __str__(self):
        return self.name

def main(args: argparse.Namespace, parser: argparse.ArgumentParser) -> ExitResult:
    """Entry point for the cryptobench CLI. Loads the results and dispatches the action."""
    if args.action is None:
        logger.error("Error: No action specified.\n")
        parser.print_help()
        return ExitResult.NO_ACTION

    working_dir = Path(args.working_directory)
    if not working_dir.exists() or not working_dir.is_dir():
        logger.error(f"Error: Working directory {working_dir} does not exist or is not a directory.")
        return ExitResult.INVALID_WORKDIR

    local_settings = load_local_settings(working_dir)
    if local_settings is None:
        logger.error(f"Error: No local settings found!")
        return ExitResult.NO_LOCAL_SETTINGS

    if args.base_path is not None:
        local_settings.base_path = args.base_path
    if args.baseline is not None:
        local_settings.baseline_provider = args.baseline

    try:
        analysis = load_benchmark_analysis(local_settings)
    except ResultsNotFoundError as e:
        logger.error(f"Error: {e}")
        return ExitResult.NO_RESULTS_FOUND

    if args.action in MODES_ACTIONS:
        for mode in analysis.modes:
            logger.info(f'{mode}: {mode_label(mode)}')
        return ExitResult.SUCCESS

    mode = getattr(args, 'mode', None)
    if mode is not None and mode not in analysis.modes:
        logger.error(f"Error: Mode '{mode}' not found. Available modes: {', '.join(analysis.modes)}")
        return ExitResult.INVALID_MODE

    if args.action in SHOW_ACTIONS:
        compare_benchmarks(analysis)
    elif args.action in SUMMARY_ACTIONS:
        summarize_benchmarks(analysis, mode)
    elif args.action in EXPORT_ACTIONS:
        export_benchmarks(analysis, Path(args.output), mode)

    return ExitResult.SUCCESS

def build_parser() -> argparse.ArgumentParser:
    epilog = textwrap.dedent("""\
    Examples:
       cryptobench show
       cryptobench summary --mode thrpt
       cryptobench export comparisons.csv --mode avgt
       cryptobench modes
       cryptobench -b https://example.org/results summary
    """)

    parser = argparse.ArgumentParser(
        prog='cryptobench',
        description='Compare JMH results of two cryptography providers.',
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('--version', action='version', version='cryptobench 1.0')
    parser.add_argument('-w', '--working_directory', nargs='?', default='.', help='Directory containing .cryptobench/settings.yaml')
    parser.add_argument('-b', '--base_path', default=None, help='Directory or URL holding the results document, overrides settings')
    parser.add_argument('--baseline', default=None, help='Baseline provider name, overrides settings')

    subparsers = parser.add_subparsers(dest='action', help='Action to perform')

    subparsers.add_parser('show', aliases=['s'], help='Browse comparisons in a window')

    summary_parser = subparsers.add_parser('summary', aliases=['sum'], help='Print the comparison table')
    summary_parser.add_argument('-m', '--mode', default=None, help='Only show comparisons of this JMH mode')

    export_parser = subparsers.add_parser('export', aliases=['e'], help='Write the comparison table as CSV')
    export_parser.add_argument('output', nargs='?', default='comparisons.csv', help='CSV file to write')
    export_parser.add_argument('-m', '--mode', default=None, help='Only export comparisons of this JMH mode')

    subparsers.add_parser('modes', aliases=['m'], help='List the JMH modes present in the results')

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    return parser

def entrypoint():
    logging.basicConfig(level=logging.INFO)
    parser = build_parser()

    if len(sys.argv) == 1:
        parser.print_help()
        sys.exit(ExitResult.NO_ACTION)

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose mode enabled.")

    sys.exit(main(args, parser))

if __name__ == '__main__':
    entrypoint()
