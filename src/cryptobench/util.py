"""Utility functions shared across cryptobench modules."""

from collections.abc import Iterable
import logging
import math

from cryptobench.benchmark_data import Comparison, mode_label

logger = logging.getLogger(__name__)

COMPARISON_COLUMNS = ['Benchmark', 'Mode', 'Baseline', 'Baseline ±', 'Alternate', 'Alternate ±', 'Unit', 'Δ (%)']

def score_to_str(score: float | None) -> str:
    return f'{score:.2F}' if score is not None and score == score else 'N/A'

def compute_delta_percentage(alternate: float | None, baseline: float | None) -> float:
    """Relative difference of the alternate score against the baseline score, in percent.

    Returns NaN when either score is missing or not positive.
    """
    if alternate is None or baseline is None or alternate <= 0.0 or baseline <= 0.0:
        return float('nan')
    log_fraction = math.fsum([math.log(alternate), -math.log(baseline)])
    return math.expm1(log_fraction) * 100.0

def comparison_row(comparison: Comparison) -> list[str]:
    delta = compute_delta_percentage(comparison.alternate_score, comparison.baseline_score)
    return [
        comparison.label,
        mode_label(comparison.jmh_mode),
        score_to_str(comparison.baseline_score),
        score_to_str(comparison.baseline_error),
        score_to_str(comparison.alternate_score),
        score_to_str(comparison.alternate_error),
        comparison.score_unit,
        score_to_str(delta),
    ]

def comparison_rows(comparisons: Iterable[Comparison]) -> list[list[str]]:
    """Table of comparisons, header row first."""
    return [list(COMPARISON_COLUMNS)] + [comparison_row(comparison) for comparison in comparisons]

def get_csv(matrix: list[list[str | float]], deliminator=',') -> bytes:
    data = b''
    for row in matrix:
        data_row = ''
        for entry in row:
            text = f'"{entry}"' if type(entry) is str else f'{entry}'
            data_row += f'{text}' if data_row == '' else f'{deliminator}{text}'

        data += f'{data_row}'.encode() if data == b'' else f'\n{data_row}'.encode()
    return data

def format_table(matrix: list[list[str]]) -> str:
    """Aligns a matrix of strings into columns for console output."""
    if len(matrix) == 0:
        logger.warning(f'No rows!')
        return ''
    widths = [max(len(row[i]) for row in matrix) for i in range(len(matrix[0]))]
    lines = ['  '.join(entry.ljust(width) for entry, width in zip(row, widths)).rstrip() for row in matrix]
    return '\n'.join(lines)
