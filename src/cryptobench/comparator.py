"""Pairs the baseline and alternate provider results of the same measurement."""

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging

from cryptobench.benchmark_data import DEFAULT, Comparison, ParsedBenchmark

logger = logging.getLogger(__name__)

BASELINE_PROVIDER = 'BC'
KEY_SEPARATOR = '|'

def comparison_key(benchmark: ParsedBenchmark) -> str:
    """Identity of a measurement regardless of the provider that ran it."""
    return KEY_SEPARATOR.join([
        benchmark.category,
        benchmark.algorithm,
        benchmark.operation,
        benchmark.variant,
        benchmark.cipher_mode or DEFAULT,
        benchmark.padding or DEFAULT,
        benchmark.hash_algorithm or DEFAULT,
        benchmark.iterations or DEFAULT,
        benchmark.jmh_mode,
    ])

def is_baseline(provider: str, baseline_provider: str = BASELINE_PROVIDER) -> bool:
    return provider.casefold() == baseline_provider.casefold()

@dataclass(slots=True)
class _Slots:
    baseline: ParsedBenchmark | None = None
    alternate: ParsedBenchmark | None = None

@dataclass(slots=True)
class PairingReport:
    """Comparisons and how many results were replaced while pairing.

    Attributes:
        comparisons: One comparison per distinct key, in first seen order.
        overwritten: Number of results replaced by a later result for the same key and side.
        overwritten_keys: Keys that had at least one result replaced.
    """
    comparisons: list[Comparison] = field(default_factory=lambda: [])
    overwritten: int = 0
    overwritten_keys: list[str] = field(default_factory=lambda: [])

def _to_comparison(key: str, slots: _Slots) -> Comparison:
    baseline, alternate = slots.baseline, slots.alternate
    reference = baseline or alternate
    assert reference is not None, f'{key} has no results'

    return Comparison(
        key=key,
        category=reference.category,
        algorithm=reference.algorithm,
        operation=reference.operation,
        variant=reference.variant,
        jmh_mode=reference.jmh_mode,
        score_unit=reference.score_unit,
        cipher_mode=reference.cipher_mode,
        padding=reference.padding,
        hash_algorithm=reference.hash_algorithm,
        iterations=reference.iterations,

        baseline_provider=baseline.provider if baseline else None,
        baseline_score=baseline.score if baseline else None,
        baseline_error=baseline.score_error if baseline else None,
        baseline_raw=baseline.raw if baseline else None,

        alternate_provider=alternate.provider if alternate else None,
        alternate_score=alternate.score if alternate else None,
        alternate_error=alternate.score_error if alternate else None,
        alternate_raw=alternate.raw if alternate else None,
    )

def pair_benchmarks(benchmarks: Iterable[ParsedBenchmark], baseline_provider: str = BASELINE_PROVIDER) -> PairingReport:
    """Groups benchmarks by comparison key and pairs the two providers.

    A result whose provider matches ``baseline_provider`` (case insensitive)
    fills the baseline side, any other provider fills the alternate side.
    When a side is filled twice for the same key the later result wins.
    """
    grouped: dict[str, _Slots] = {}
    report = PairingReport()

    for benchmark in benchmarks:
        key = comparison_key(benchmark)
        slots = grouped.setdefault(key, _Slots())
        side = 'baseline' if is_baseline(benchmark.provider, baseline_provider) else 'alternate'

        previous: ParsedBenchmark | None = getattr(slots, side)
        if previous is not None:
            report.overwritten += 1
            if key not in report.overwritten_keys:
                report.overwritten_keys.append(key)
            logger.warning(f"Duplicate {side} result for '{key}': "
                           f'{previous.provider} score {previous.score} replaced by {benchmark.provider} score {benchmark.score}')
        setattr(slots, side, benchmark)

    report.comparisons = [_to_comparison(key, slots) for key, slots in grouped.items()]
    logger.debug(f'Paired {len(report.comparisons)} comparisons, {report.overwritten} results overwritten')
    return report

def create_comparisons(benchmarks: Iterable[ParsedBenchmark], baseline_provider: str = BASELINE_PROVIDER) -> list[Comparison]:
    return pair_benchmarks(benchmarks, baseline_provider).comparisons

def filter_by_mode(comparisons: Iterable[Comparison], mode: str) -> list[Comparison]:
    return [comparison for comparison in comparisons if comparison.jmh_mode == mode]

def unique_modes(comparisons: Iterable[Comparison]) -> list[str]:
    """Distinct JMH modes, sorted."""
    return sorted({comparison.jmh_mode for comparison in comparisons})
