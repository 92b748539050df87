"""Stores data from JMH benchmark runs.

Defines:
    - Category: Benchmark categories used by cryptobench.
    - KdfAlgorithm: KDF algorithms with their own hierarchy schema.
    - JmhMode: JMH measurement modes.
    - RawResult: One measurement as written to results.json.
    - ParsedBenchmark: A RawResult with its name and params normalized.
    - Comparison: Baseline and alternate provider results for one measurement.
    - HierarchyNode: One level of the navigation tree.
    - fetch_results(): Loads the raw result collection from a file or URL.
"""

from __future__ import annotations

from enum import StrEnum
from dataclasses import dataclass, field
from collections.abc import Mapping, Iterator
from pathlib import Path
import logging
import math
import json

import requests

logger = logging.getLogger(__name__)

DEFAULT = 'default'
FETCH_TIMEOUT = 30

class BenchmarkError(Exception):
    """Base class of cryptobench errors."""

class MalformedResultError(BenchmarkError, ValueError):
    """A raw result entry cannot be decoded."""

class MalformedBenchmarkError(MalformedResultError):
    """A benchmark name is missing its category, algorithm or operation."""

class ResultsNotFoundError(BenchmarkError):
    """The results document is missing or is not a list of results."""

class Category(StrEnum):
    """Benchmark categories used by cryptobench"""
    SYMMETRIC = 'Symmetric'
    KDF = 'KDF'
    PQC = 'PQC'

class KdfAlgorithm(StrEnum):
    """KDF algorithms with a dedicated hierarchy schema"""
    PBKDF2 = 'Pbkdf2'
    SCRYPT = 'Scrypt'

    @classmethod
    def of(cls, algorithm: str) -> KdfAlgorithm | None:
        try:
            return cls(algorithm)
        except ValueError:
            return None

class JmhMode(StrEnum):
    """Measurement modes written by JMH"""
    THROUGHPUT = 'thrpt'
    AVERAGE_TIME = 'avgt'
    SAMPLE = 'sample'
    SINGLE_SHOT = 'ss'

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @property
    def higher_is_better(self) -> bool:
        return self is JmhMode.THROUGHPUT

_MODE_LABELS = {
    JmhMode.THROUGHPUT: 'Throughput',
    JmhMode.AVERAGE_TIME: 'Average time',
    JmhMode.SAMPLE: 'Sampling',
    JmhMode.SINGLE_SHOT: 'Single shot',
}

def mode_label(mode: str) -> str:
    """Human readable name of a mode tag, or the tag itself when unknown."""
    try:
        return JmhMode(mode).label
    except ValueError:
        return mode

def _to_float(value, key: str) -> float:
    if isinstance(value, bool):
        raise MalformedResultError(f"'{key}' is not a number: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    try:
        # JMH writes "NaN" as a string for single shot errors.
        return float(value)
    except (TypeError, ValueError):
        raise MalformedResultError(f"'{key}' is not a number: {value!r}") from None

@dataclass(frozen=True, slots=True)
class RawResult:
    """One measurement as emitted by JMH.

    Attributes:
        benchmark: Dotted benchmark name, e.g. ``com.benchmark.KdfBenchmark.Pbkdf2.deriveKey``.
        mode: JMH mode tag.
        params: JMH ``@Param`` values, including ``providerName``.
        score: Primary metric score.
        score_error: Primary metric error bar.
        score_unit: Unit of score and score_error.
    """
    benchmark: str
    mode: str
    params: Mapping[str, str] = field(default_factory=dict, compare=False)
    score: float = math.nan
    score_error: float = math.nan
    score_unit: str = ''

    @classmethod
    def from_dict(cls, entry: dict) -> RawResult:
        """Decodes one element of a JMH results.json document."""
        if not isinstance(entry, dict):
            raise MalformedResultError(f'Expected an object, got {type(entry).__name__}.')

        def get_value(container: dict, key: str):
            try:
                return container[key]
            except KeyError:
                raise MalformedResultError(f"Missing '{key}' in result entry.") from None

        benchmark = get_value(entry, 'benchmark')
        mode = get_value(entry, 'mode')
        primary_metric = get_value(entry, 'primaryMetric')
        if not isinstance(primary_metric, dict):
            raise MalformedResultError("'primaryMetric' is not an object.")

        params = entry.get('params') or {}
        if not isinstance(params, dict):
            raise MalformedResultError("'params' is not an object.")
        return cls(
            benchmark=str(benchmark),
            mode=str(mode),
            params={str(key): str(value) for key, value in params.items()},
            score=_to_float(get_value(primary_metric, 'score'), 'score'),
            score_error=_to_float(primary_metric.get('scoreError', math.nan), 'scoreError'),
            score_unit=str(primary_metric.get('scoreUnit', '')),
        )

    @property
    def provider(self) -> str:
        return self.params.get('providerName', '')

@dataclass(frozen=True, slots=True)
class ParsedBenchmark:
    """RawResult with its benchmark name split up and its params normalized."""
    category: Category
    algorithm: str
    operation: str
    variant: str
    jmh_mode: str
    provider: str
    score: float
    score_error: float
    score_unit: str
    raw: RawResult = field(repr=False, compare=False)
    cipher_mode: str | None = None
    padding: str | None = None
    hash_algorithm: str | None = None
    iterations: str | None = None

    @property
    def id(self) -> str:
        """Identity of this single result, used for display and debugging."""
        return '-'.join([
            self.category, self.algorithm, self.operation, self.variant,
            self.cipher_mode or DEFAULT, self.padding or DEFAULT,
            self.hash_algorithm or DEFAULT, self.iterations or DEFAULT,
            self.jmh_mode, self.provider,
        ])

@dataclass(frozen=True, slots=True)
class Comparison:
    """Results of both providers for the same logical measurement.

    Either side may be missing when only one provider produced the
    measurement. ``key`` is unique within a set of comparisons.
    """
    key: str
    category: Category
    algorithm: str
    operation: str
    variant: str
    jmh_mode: str
    score_unit: str
    cipher_mode: str | None = None
    padding: str | None = None
    hash_algorithm: str | None = None
    iterations: str | None = None

    baseline_provider: str | None = None
    baseline_score: float | None = None
    baseline_error: float | None = None
    baseline_raw: RawResult | None = field(default=None, repr=False, compare=False)

    alternate_provider: str | None = None
    alternate_score: float | None = None
    alternate_error: float | None = None
    alternate_raw: RawResult | None = field(default=None, repr=False, compare=False)

    @property
    def has_baseline(self) -> bool:
        return self.baseline_raw is not None

    @property
    def has_alternate(self) -> bool:
        return self.alternate_raw is not None

    @property
    def is_paired(self) -> bool:
        return self.has_baseline and self.has_alternate

    @property
    def label(self) -> str:
        parts = [self.algorithm, self.operation]
        for attribute in (self.variant, self.cipher_mode, self.padding, self.hash_algorithm, self.iterations):
            if attribute and attribute != DEFAULT:
                parts.append(attribute)
        return ' / '.join(parts)

@dataclass(slots=True)
class HierarchyNode:
    """Node of the navigation tree.

    Attributes:
        name: Display name.
        path: Parent path joined with the encoded name, '' for the root.
        children: Child nodes, ordered by name once sorted.
        comparisons: Every comparison reachable beneath this node.
    """
    name: str
    path: str
    children: list[HierarchyNode] = field(default_factory=lambda: [])
    comparisons: list[Comparison] = field(default_factory=lambda: [])

    @property
    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def walk(self) -> Iterator[HierarchyNode]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, *names: str) -> HierarchyNode | None:
        node = self
        for name in names:
            node = next((child for child in node.children if child.name == name), None)
            if node is None:
                return None
        return node

def results_location(base_path: str | Path, results_file: str) -> str:
    base = str(base_path)
    if base.startswith(('http://', 'https://')):
        return f'{base.rstrip("/")}/{results_file}'
    return str(Path(base) / results_file)

def fetch_results(base_path: str | Path, results_file: str = 'results.json') -> list[dict]:
    """Loads the raw JMH result collection.

    Args:
        base_path: Directory, or http(s) base URL, holding the results document.
        results_file: Name of the results document.

    Returns:
        list[dict]: The undecoded result entries.

    Raises:
        ResultsNotFoundError: The document is missing, unreadable or not a JSON list.
    """
    location = results_location(base_path, results_file)
    logger.debug(f'Loading results from {location}')
    try:
        if location.startswith(('http://', 'https://')):
            response = requests.get(location, timeout=FETCH_TIMEOUT)
            response.raise_for_status()
            contents = response.json()
        else:
            with open(location, 'r', encoding='utf-8') as file_stream:
                contents = json.load(file_stream)
    except (OSError, requests.RequestException, json.JSONDecodeError) as e:
        raise ResultsNotFoundError(f'Failed to load {location}: {e}') from e

    if not isinstance(contents, list):
        raise ResultsNotFoundError(f'{location} does not contain a list of results.')
    return contents
