"""Tests for pairing provider results into comparisons."""

from cryptobench.comparator import (
    comparison_key,
    is_baseline,
    pair_benchmarks,
    create_comparisons,
    filter_by_mode,
    unique_modes,
)
from cryptobench.parsers.jmh import parse_benchmark

from conftest import SYMMETRIC, KDF, PQC, raw_result


def parsed(*results):
    return [parse_benchmark(result) for result in results]


class TestComparisonKey:

    def test_key_fields(self):
        benchmark = parse_benchmark(raw_result(f'{SYMMETRIC}.Aes.encrypt', providerName='BC', keySize='128', transform='AES/GCM/NoPadding'))
        assert comparison_key(benchmark) == 'Symmetric|Aes|encrypt|128-bit|GCM|NoPadding|default|default|thrpt'

    def test_key_ignores_provider(self):
        bc, jostle = parsed(
            raw_result(f'{KDF}.Scrypt.deriveKey', providerName='BC', N='16384'),
            raw_result(f'{KDF}.Scrypt.deriveKey', providerName='Jostle', N='16384'),
        )
        assert comparison_key(bc) == comparison_key(jostle)

    def test_key_includes_mode(self):
        thrpt, avgt = parsed(
            raw_result(f'{PQC}.MlKem.encaps', mode='thrpt', algorithm='ML-KEM-768'),
            raw_result(f'{PQC}.MlKem.encaps', mode='avgt', algorithm='ML-KEM-768'),
        )
        assert comparison_key(thrpt) != comparison_key(avgt)

    def test_hyphenated_values_do_not_collide(self):
        mode_with_hyphen, padding_with_hyphen = parsed(
            raw_result(f'{SYMMETRIC}.Aes.encrypt', keySize='128', transform='AES/GCM-NoPadding/X'),
            raw_result(f'{SYMMETRIC}.Aes.encrypt', keySize='128', transform='AES/GCM/NoPadding-X'),
        )
        assert comparison_key(mode_with_hyphen) != comparison_key(padding_with_hyphen)
        assert len(create_comparisons([mode_with_hyphen, padding_with_hyphen])) == 2

    def test_baseline_marker_is_case_insensitive(self):
        assert is_baseline('bc')
        assert is_baseline('BC')
        assert not is_baseline('Jostle')
        assert is_baseline('jostle', baseline_provider='Jostle')


class TestPairing:

    def test_both_providers_are_paired(self):
        comparisons = create_comparisons(parsed(
            raw_result(f'{SYMMETRIC}.Aes.encrypt', score=100.0, providerName='BC', keySize='128', transform='AES/GCM/NoPadding'),
            raw_result(f'{SYMMETRIC}.Aes.encrypt', score=140.0, providerName='Jostle', keySize='128', transform='AES/GCM/NoPadding'),
        ))

        assert len(comparisons) == 1
        comparison = comparisons[0]
        assert comparison.is_paired
        assert comparison.baseline_score == 100.0
        assert comparison.alternate_score == 140.0
        assert comparison.baseline_provider == 'BC'
        assert comparison.alternate_provider == 'Jostle'
        assert comparison.cipher_mode == 'GCM'
        assert comparison.padding == 'NoPadding'

    def test_single_provider(self):
        comparisons = create_comparisons(parsed(raw_result(f'{PQC}.MlDsa.sign', score=7.0, providerName='Jostle', algorithm='ML-DSA-44')))

        comparison = comparisons[0]
        assert comparison.has_alternate
        assert not comparison.has_baseline
        assert comparison.baseline_score is None
        assert comparison.baseline_error is None
        assert comparison.baseline_raw is None
        assert comparison.alternate_score == 7.0

    def test_every_unrecognized_provider_is_alternate(self):
        comparisons = create_comparisons(parsed(raw_result(f'{PQC}.MlDsa.sign', providerName='SunJCE', algorithm='ML-DSA-44')))
        assert comparisons[0].has_alternate

    def test_reference_fields_prefer_baseline(self):
        bc, jostle = parsed(
            raw_result(f'{KDF}.Scrypt.deriveKey', score_unit='ms/op', providerName='BC', N='16384'),
            raw_result(f'{KDF}.Scrypt.deriveKey', score_unit='us/op', providerName='Jostle', N='16384'),
        )
        assert create_comparisons([jostle, bc])[0].score_unit == 'ms/op'

    def test_later_duplicate_wins(self):
        report = pair_benchmarks(parsed(
            raw_result(f'{PQC}.MlKem.keyGen', score=10.0, providerName='BC', algorithm='ML-KEM-512'),
            raw_result(f'{PQC}.MlKem.keyGen', score=12.0, providerName='Jostle', algorithm='ML-KEM-512'),
            raw_result(f'{PQC}.MlKem.keyGen', score=20.0, providerName='BC', algorithm='ML-KEM-512'),
        ))

        assert len(report.comparisons) == 1
        assert report.comparisons[0].baseline_score == 20.0
        assert report.comparisons[0].alternate_score == 12.0
        assert report.overwritten == 1
        assert report.overwritten_keys == [report.comparisons[0].key]

    def test_duplicates_are_logged(self, caplog):
        pair_benchmarks(parsed(
            raw_result(f'{PQC}.MlKem.keyGen', providerName='BC', algorithm='ML-KEM-512'),
            raw_result(f'{PQC}.MlKem.keyGen', providerName='bc', algorithm='ML-KEM-512'),
        ))
        assert 'Duplicate baseline result' in caplog.text

    def test_keys_are_unique(self, mixed_results):
        comparisons = create_comparisons(parsed(*mixed_results))
        keys = [comparison.key for comparison in comparisons]
        assert len(keys) == len(set(keys))

    def test_pairing_completeness(self, mixed_results):
        benchmarks = parsed(*mixed_results)
        comparisons = create_comparisons(benchmarks)

        providers_by_key: dict[str, set[bool]] = {}
        for benchmark in benchmarks:
            providers_by_key.setdefault(comparison_key(benchmark), set()).add(is_baseline(benchmark.provider))

        assert {comparison.key for comparison in comparisons} == set(providers_by_key)
        for comparison in comparisons:
            sides = providers_by_key[comparison.key]
            assert comparison.has_baseline or comparison.has_alternate
            assert comparison.is_paired == (sides == {True, False})

    def test_first_seen_order(self):
        comparisons = create_comparisons(parsed(
            raw_result(f'{PQC}.MlKem.keyGen', providerName='BC'),
            raw_result(f'{KDF}.Scrypt.deriveKey', providerName='BC'),
            raw_result(f'{PQC}.MlKem.keyGen', providerName='Jostle'),
        ))
        assert [comparison.algorithm for comparison in comparisons] == ['MlKem', 'Scrypt']

    def test_empty_input(self):
        report = pair_benchmarks([])
        assert report.comparisons == []
        assert report.overwritten == 0


class TestModeQueries:

    def test_filter_by_mode_keeps_order(self, mixed_results):
        comparisons = create_comparisons(parsed(*mixed_results))
        avgt = filter_by_mode(comparisons, 'avgt')

        assert all(comparison.jmh_mode == 'avgt' for comparison in avgt)
        assert avgt == [comparison for comparison in comparisons if comparison.jmh_mode == 'avgt']

    def test_unique_modes_are_sorted(self, mixed_results):
        comparisons = create_comparisons(parsed(*mixed_results))
        assert unique_modes(comparisons) == ['avgt', 'ss', 'thrpt']

    def test_unique_modes_empty(self):
        assert unique_modes([]) == []
