from pathlib import Path
import logging

from cryptobench.analysis import BenchmarkAnalysis
from cryptobench.comparator import filter_by_mode
from cryptobench.util import comparison_rows, format_table, get_csv

logger = logging.getLogger(__name__)

def select_comparisons(analysis: BenchmarkAnalysis, mode: str | None):
    if mode is None:
        return analysis.comparisons
    return filter_by_mode(analysis.comparisons, mode)

def log_diagnostics(analysis: BenchmarkAnalysis) -> None:
    for index, reason in analysis.skipped:
        logger.debug(f'Skipped entry {index}: {reason}')
    if analysis.skipped:
        logger.warning(f'{len(analysis.skipped)} results were skipped.')
    if analysis.overwritten:
        logger.warning(f'{analysis.overwritten} results were replaced by a later result for the same measurement.')

def compare_benchmarks(analysis: BenchmarkAnalysis) -> int:
    """Launches gui"""
    from cryptobench.gui import show_gui

    log_diagnostics(analysis)
    return show_gui(analysis)

def summarize_benchmarks(analysis: BenchmarkAnalysis, mode: str | None = None) -> str:
    """Logs the comparison table, optionally for one mode only, and returns it."""
    comparisons = select_comparisons(analysis, mode)
    table = format_table(comparison_rows(comparisons))
    logger.info(f'\n{table}')

    paired = sum(1 for comparison in comparisons if comparison.is_paired)
    logger.info(f'{len(comparisons)} comparisons, {paired} with both providers.')
    log_diagnostics(analysis)
    return table

def export_benchmarks(analysis: BenchmarkAnalysis, output_path: Path, mode: str | None = None) -> int:
    """Writes the comparison table as CSV. Returns the number of comparisons written."""
    comparisons = select_comparisons(analysis, mode)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(get_csv(comparison_rows(comparisons)))
    logger.info(f'Wrote {len(comparisons)} comparisons to {output_path}')
    return len(comparisons)
