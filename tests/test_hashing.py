import hashlib

import pytest

from evmkit.precompile.hashing import ripemd160_run, sha256_run
from evmkit.primitives.precompile_types import (
    PrecompileError,
    PrecompileErrorKind,
    calc_linear_cost,
)


@pytest.mark.parametrize("data", [b"", b"abc", bytes(range(100))])
def test_sha256_digest(data):
    result = sha256_run(data, 10_000)
    assert result.output == hashlib.sha256(data).digest()
    assert result.gas_used == calc_linear_cost(len(data), 60, 12)


def test_sha256_base_cost():
    assert sha256_run(b"", 60).gas_used == 60


def test_sha256_cost_per_started_word():
    assert sha256_run(bytes(1), 10_000).gas_used == sha256_run(bytes(32), 10_000).gas_used
    assert sha256_run(bytes(33), 10_000).gas_used - sha256_run(bytes(32), 10_000).gas_used == 12


def test_sha256_out_of_gas():
    with pytest.raises(PrecompileError) as info:
        sha256_run(b"", 59)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS


def test_ripemd160_empty():
    result = ripemd160_run(b"", 600)
    assert result.gas_used == 600
    assert result.output == bytes(12) + bytes.fromhex("9c1185a5c5e9fc54612808977ee8f548b2258d31")


def test_ripemd160_abc():
    result = ripemd160_run(b"abc", 10_000)
    assert result.output[12:] == bytes.fromhex("8eb208f7e05d987a9b044a8e98c6b087f15a0bfc")
    assert result.output[:12] == bytes(12)
    assert result.gas_used == calc_linear_cost(3, 600, 120)


def test_ripemd160_out_of_gas():
    with pytest.raises(PrecompileError) as info:
        ripemd160_run(bytes(33), calc_linear_cost(33, 600, 120) - 1)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS