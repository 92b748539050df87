"""Tests for the data model and loading results.json."""

import json
import pytest
import requests
from unittest.mock import Mock, patch

from cryptobench.benchmark_data import (
    FETCH_TIMEOUT,
    Comparison,
    Category,
    JmhMode,
    KdfAlgorithm,
    HierarchyNode,
    ResultsNotFoundError,
    fetch_results,
    mode_label,
    results_location,
)

from conftest import SYMMETRIC, raw_result, raw_entry


class TestEnums:

    def test_kdf_algorithm_of(self):
        assert KdfAlgorithm.of('Pbkdf2') is KdfAlgorithm.PBKDF2
        assert KdfAlgorithm.of('Scrypt') is KdfAlgorithm.SCRYPT
        assert KdfAlgorithm.of('Argon2') is None

    def test_mode_labels(self):
        assert mode_label('thrpt') == 'Throughput'
        assert mode_label('avgt') == 'Average time'
        assert mode_label('custom') == 'custom'
        assert JmhMode.THROUGHPUT.higher_is_better
        assert not JmhMode.SINGLE_SHOT.higher_is_better

    def test_category_is_a_string(self):
        assert Category.KDF == 'KDF'
        assert f'{Category.SYMMETRIC}-x' == 'Symmetric-x'


class TestComparison:

    def comparison(self, **kwargs):
        fields = dict(key='k', category=Category.SYMMETRIC, algorithm='Aes', operation='encrypt',
                      variant='128-bit', jmh_mode='thrpt', score_unit='ops/s')
        fields.update(kwargs)
        return Comparison(**fields)

    def test_label_skips_defaults(self):
        comparison = self.comparison(cipher_mode='GCM', padding=None, hash_algorithm='default')
        assert comparison.label == 'Aes / encrypt / 128-bit / GCM'

    def test_sides(self):
        raw = raw_result(f'{SYMMETRIC}.Aes.encrypt')
        comparison = self.comparison(baseline_raw=raw, baseline_score=1.0)
        assert comparison.has_baseline
        assert not comparison.has_alternate
        assert not comparison.is_paired

    def test_immutable(self):
        with pytest.raises(AttributeError):
            self.comparison().key = 'other'


class TestHierarchyNode:

    def test_walk_and_find(self):
        leaf = HierarchyNode('c', 'a/b/c')
        root = HierarchyNode('root', '', [HierarchyNode('a', 'a', [HierarchyNode('b', 'a/b', [leaf])])])

        assert [node.name for node in root.walk()] == ['root', 'a', 'b', 'c']
        assert root.find('a', 'b', 'c') is leaf
        assert root.find('a', 'x') is None
        assert root.find() is root
        assert leaf.is_leaf


class TestFetchResults:

    def test_reads_file(self, tmp_path):
        entries = [raw_entry(f'{SYMMETRIC}.Aes.encrypt')]
        (tmp_path / 'results.json').write_text(json.dumps(entries))
        assert fetch_results(tmp_path) == entries

    def test_custom_file_name(self, tmp_path):
        (tmp_path / 'run.json').write_text('[]')
        assert fetch_results(tmp_path, 'run.json') == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ResultsNotFoundError):
            fetch_results(tmp_path)

    def test_invalid_json(self, tmp_path):
        (tmp_path / 'results.json').write_text('{not json')
        with pytest.raises(ResultsNotFoundError):
            fetch_results(tmp_path)

    def test_not_a_list(self, tmp_path):
        (tmp_path / 'results.json').write_text('{"benchmarks": []}')
        with pytest.raises(ResultsNotFoundError, match='list of results'):
            fetch_results(tmp_path)

    def test_url_location(self):
        assert results_location('https://example.org/bench/', 'results.json') == 'https://example.org/bench/results.json'
        assert results_location('http://example.org', 'results.json') == 'http://example.org/results.json'


def _mock_response(payload=None, error=None):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    if error is not None:
        response.raise_for_status.side_effect = error
    return response


class TestFetchResultsOverHttp:

    URL = 'https://example.org/bench'

    def test_reads_url(self):
        entries = [raw_entry(f'{SYMMETRIC}.Aes.encrypt')]
        with patch('cryptobench.benchmark_data.requests.get', return_value=_mock_response(entries)) as mocked_get:
            assert fetch_results(self.URL) == entries

        mocked_get.assert_called_once_with('https://example.org/bench/results.json', timeout=FETCH_TIMEOUT)

    def test_http_error(self):
        response = _mock_response(error=requests.HTTPError('404 Client Error'))
        with patch('cryptobench.benchmark_data.requests.get', return_value=response):
            with pytest.raises(ResultsNotFoundError, match='404'):
                fetch_results(self.URL)

    def test_connection_error(self):
        with patch('cryptobench.benchmark_data.requests.get', side_effect=requests.ConnectionError('refused')):
            with pytest.raises(ResultsNotFoundError, match='refused'):
                fetch_results(self.URL)

    def test_invalid_json(self):
        response = _mock_response()
        response.json.side_effect = requests.JSONDecodeError('Expecting value', '<html>', 0)
        with patch('cryptobench.benchmark_data.requests.get', return_value=response):
            with pytest.raises(ResultsNotFoundError):
                fetch_results(self.URL)

    def test_not_a_list(self):
        with patch('cryptobench.benchmark_data.requests.get', return_value=_mock_response({'benchmarks': []})):
            with pytest.raises(ResultsNotFoundError, match='list of results'):
                fetch_results(self.URL)
