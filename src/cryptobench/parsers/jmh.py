"""Parses JMH results into ParsedBenchmark.

Benchmark names have the form ``com.benchmark.{Category}Benchmark.{Algorithm}.{operation}``.
The first two segments are a fixed namespace.
"""

from collections.abc import Iterable, Generator, Mapping
from dataclasses import dataclass, field
import logging
import re

from cryptobench.benchmark_data import (
    DEFAULT, Category, KdfAlgorithm, ParsedBenchmark, RawResult,
    MalformedBenchmarkError, MalformedResultError,
)

logger = logging.getLogger(__name__)

NAMESPACE_DEPTH = 2

# Checked in order, first match wins.
CATEGORY_MARKERS: tuple[tuple[str, Category], ...] = (
    ('Pqc', Category.PQC),
    ('Kdf', Category.KDF),
)

PBKDF2_PATTERN = re.compile(r'PBKDF2WithHmac(.+)')

def parse_category(category_segment: str) -> Category:
    for marker, category in CATEGORY_MARKERS:
        if marker in category_segment:
            return category
    return Category.SYMMETRIC

def parse_benchmark_name(benchmark: str) -> tuple[Category, str, str]:
    """Splits a benchmark name into category, algorithm and operation.

    Raises:
        MalformedBenchmarkError: The name has no category, algorithm or operation segment.
    """
    parts = benchmark.split('.')
    if len(parts) < NAMESPACE_DEPTH + 3:
        raise MalformedBenchmarkError(f"'{benchmark}' has {len(parts)} segments, expected at least {NAMESPACE_DEPTH + 3}.")

    category_segment, algorithm, operation = parts[NAMESPACE_DEPTH:NAMESPACE_DEPTH + 3]
    if algorithm == '' or operation == '':
        raise MalformedBenchmarkError(f"'{benchmark}' has an empty algorithm or operation segment.")

    return parse_category(category_segment), algorithm, operation

def extract_variant(params: Mapping[str, str], category: Category) -> str:
    match category:
        case Category.SYMMETRIC:
            key_size = params.get('keySize')
            return f'{key_size}-bit' if key_size else DEFAULT
        case Category.PQC:
            return params.get('algorithm') or DEFAULT
        case _:
            return DEFAULT

def extract_cipher_mode(params: Mapping[str, str], category: Category) -> str | None:
    """CBC, CFB128, GCM, ... from a transform such as ``AES/GCM/NoPadding``."""
    transform = params.get('transform')
    if category is not Category.SYMMETRIC or not transform:
        return None
    parts = transform.split('/')
    return parts[1] if len(parts) >= 2 else None

def extract_padding(params: Mapping[str, str], category: Category) -> str | None:
    transform = params.get('transform')
    if category is not Category.SYMMETRIC or not transform:
        return None
    parts = transform.split('/')
    return parts[2] if len(parts) >= 3 else None

def extract_hash_algorithm(params: Mapping[str, str], algorithm: str) -> str | None:
    """SHA256, SHA3-256, SM3, ... from ``PBKDF2WithHmac<hash>``."""
    value = params.get('algorithm')
    if KdfAlgorithm.of(algorithm) is not KdfAlgorithm.PBKDF2 or not value:
        return None
    hash_match = PBKDF2_PATTERN.match(value)
    return hash_match.group(1) if hash_match else value

def extract_iterations(params: Mapping[str, str], algorithm: str) -> str | None:
    match KdfAlgorithm.of(algorithm):
        case KdfAlgorithm.PBKDF2 if params.get('iterations'):
            return f"{params['iterations']} iterations"
        case KdfAlgorithm.SCRYPT if params.get('N'):
            return f"N={params['N']}"
        case _:
            return None

def parse_benchmark(result: RawResult) -> ParsedBenchmark:
    """Parses a single JMH result.

    Raises:
        MalformedBenchmarkError: See ``parse_benchmark_name``.
    """
    category, algorithm, operation = parse_benchmark_name(result.benchmark)
    params = result.params

    return ParsedBenchmark(
        category=category,
        algorithm=algorithm,
        operation=operation,
        variant=extract_variant(params, category),
        jmh_mode=result.mode,
        provider=result.provider,
        score=result.score,
        score_error=result.score_error,
        score_unit=result.score_unit,
        raw=result,
        cipher_mode=extract_cipher_mode(params, category),
        padding=extract_padding(params, category),
        hash_algorithm=extract_hash_algorithm(params, algorithm),
        iterations=extract_iterations(params, algorithm),
    )

@dataclass(slots=True)
class ParseReport:
    """Parsed benchmarks and the input positions that were rejected.

    Attributes:
        benchmarks: Parsed benchmarks, in input order.
        skipped: (index, reason) of every rejected entry.
    """
    benchmarks: list[ParsedBenchmark] = field(default_factory=lambda: [])
    skipped: list[tuple[int, str]] = field(default_factory=lambda: [])

def parse_results(results: Iterable[RawResult], skipped: list[tuple[int, str]] | None = None) -> Generator[ParsedBenchmark, None, None]:
    """Parses results one by one, skipping the ones with malformed names."""
    for index, result in enumerate(results):
        try:
            parsed = parse_benchmark(result)
        except MalformedBenchmarkError as e:
            logger.warning(f'Skipping result {index}: {e}')
            if skipped is not None:
                skipped.append((index, str(e)))
            continue
        yield parsed

def parse_benchmarks(results: Iterable[RawResult]) -> ParseReport:
    report = ParseReport()
    report.benchmarks = list(parse_results(results, report.skipped))
    return report

def decode_results(entries: Iterable[dict], skipped: list[tuple[int, str]] | None = None) -> list[RawResult]:
    """Decodes the entries of a results.json document, skipping undecodable ones."""
    results = []
    for index, entry in enumerate(entries):
        try:
            results.append(RawResult.from_dict(entry))
        except MalformedResultError as e:
            logger.warning(f'Skipping entry {index}: {e}')
            if skipped is not None:
                skipped.append((index, str(e)))
    return results
