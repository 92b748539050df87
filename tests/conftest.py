import pytest

from cryptobench.benchmark_data import RawResult

SYMMETRIC = 'com.benchmark.SymmetricBenchmark'
KDF = 'com.benchmark.KdfBenchmark'
PQC = 'com.benchmark.PqcBenchmark'


def raw_result(benchmark, mode='thrpt', score=1.0, score_error=0.1, score_unit='ops/s', **params):
    return RawResult(benchmark, mode, params, score, score_error, score_unit)


def raw_entry(benchmark, mode='thrpt', score=1.0, score_error=0.1, score_unit='ops/s', **params):
    """Element of a results.json document, as written by JMH."""
    return {
        'benchmark': benchmark,
        'mode': mode,
        'params': params,
        'primaryMetric': {'score': score, 'scoreError': score_error, 'scoreUnit': score_unit},
    }


@pytest.fixture
def mixed_results():
    """Results from every category, with both providers for most measurements."""
    return [
        raw_result(f'{SYMMETRIC}.Aes.encrypt', score=100.0, providerName='BC', keySize='128', transform='AES/GCM/NoPadding'),
        raw_result(f'{SYMMETRIC}.Aes.encrypt', score=140.0, providerName='Jostle', keySize='128', transform='AES/GCM/NoPadding'),
        raw_result(f'{SYMMETRIC}.Aes.decrypt', mode='avgt', providerName='BC', keySize='256', transform='AES/CBC/PKCS5Padding'),
        raw_result(f'{SYMMETRIC}.Aes.decrypt', mode='avgt', providerName='Jostle', keySize='256', transform='AES/CBC/NoPadding'),
        raw_result(f'{SYMMETRIC}.Camellia.encrypt', providerName='Jostle', keySize='192', transform='Camellia/CTR/NoPadding'),
        raw_result(f'{KDF}.Pbkdf2.deriveKey', mode='avgt', providerName='BC', algorithm='PBKDF2WithHmacSHA256', iterations='10000'),
        raw_result(f'{KDF}.Pbkdf2.deriveKey', mode='avgt', providerName='Jostle', algorithm='PBKDF2WithHmacSHA256', iterations='10000'),
        raw_result(f'{KDF}.Pbkdf2.deriveKey', mode='avgt', providerName='BC', algorithm='PBKDF2WithHmacSHA3-256', iterations='1000'),
        raw_result(f'{KDF}.Scrypt.deriveKey', mode='ss', providerName='BC', N='16384'),
        raw_result(f'{KDF}.Scrypt.deriveKey', mode='ss', providerName='Jostle', N='16384'),
        raw_result(f'{PQC}.MlKem.encaps', providerName='BC', algorithm='ML-KEM-768'),
        raw_result(f'{PQC}.MlKem.encaps', providerName='Jostle', algorithm='ML-KEM-768'),
        raw_result(f'{PQC}.MlDsa.sign', providerName='Jostle', algorithm='ML-DSA-44'),
        raw_result(f'{PQC}.MlDsa.keyGen', providerName='BC', algorithm='ML-DSA-44'),
    ]
