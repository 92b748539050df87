"""Runs the analysis pipeline: parse, compare, build and sort the hierarchy."""

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from cryptobench.benchmark_data import RawResult, ParsedBenchmark, Comparison, HierarchyNode, fetch_results
from cryptobench.benchmark_settings import LocalSettings
from cryptobench.comparator import BASELINE_PROVIDER, pair_benchmarks, unique_modes
from cryptobench.hierarchy import ROOT_LABEL, build_hierarchy
from cryptobench.parsers.jmh import parse_results, decode_results

logger = logging.getLogger(__name__)

@dataclass(slots=True)
class BenchmarkAnalysis:
    """Everything derived from one snapshot of raw results.

    Attributes:
        raw: Raw results the analysis was built from.
        parsed: Results whose benchmark names could be parsed.
        comparisons: One comparison per measurement.
        hierarchy: Sorted navigation tree over comparisons.
        skipped: (index, reason) for every entry that was rejected.
        overwritten: Results replaced by a later result for the same measurement and provider side.
    """
    raw: list[RawResult]
    parsed: list[ParsedBenchmark]
    comparisons: list[Comparison]
    hierarchy: HierarchyNode
    skipped: list[tuple[int, str]] = field(default_factory=lambda: [])
    overwritten: int = 0

    @property
    def modes(self) -> list[str]:
        return unique_modes(self.comparisons)

def analyze(
    raw_results: Sequence[RawResult],
    baseline_provider: str = BASELINE_PROVIDER,
    root_label: str = ROOT_LABEL,
    case_sensitive: bool = True
) -> BenchmarkAnalysis:
    raw = list(raw_results)
    skipped: list[tuple[int, str]] = []
    parsed = list(parse_results(raw, skipped))
    pairing = pair_benchmarks(parsed, baseline_provider)
    hierarchy = build_hierarchy(pairing.comparisons, root_label, case_sensitive)

    logger.info(f'Analyzed {len(raw)} results into {len(pairing.comparisons)} comparisons')
    return BenchmarkAnalysis(raw, parsed, pairing.comparisons, hierarchy, skipped, pairing.overwritten)

def load_benchmark_analysis(settings: LocalSettings) -> BenchmarkAnalysis:
    """Fetches results.json as configured and analyzes it.

    Entries that cannot be decoded are reported in ``skipped`` along with
    the results whose names cannot be parsed, all indexed by their position
    in the results document.

    Raises:
        ResultsNotFoundError: The results document could not be loaded.
    """
    entries = fetch_results(settings.base_path, settings.results_file)
    decode_skipped: list[tuple[int, str]] = []
    raw_results = decode_results(entries, decode_skipped)

    undecoded = {index for index, _ in decode_skipped}
    positions = [index for index in range(len(entries)) if index not in undecoded]

    analysis = analyze(raw_results, settings.baseline_provider, settings.root_label, settings.case_sensitive)
    parse_skipped = [(positions[index], reason) for index, reason in analysis.skipped]
    analysis.skipped = sorted(decode_skipped + parse_skipped)
    return analysis
