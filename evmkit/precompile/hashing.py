"""SHA-256 and RIPEMD-160 precompiles."""

from __future__ import annotations

import hashlib

from Crypto.Hash import RIPEMD160

from evmkit.primitives.precompile_types import (
    PrecompileError,
    PrecompileErrorKind,
    PrecompileResult,
    calc_linear_cost,
)

SHA256_BASE = 60
SHA256_PER_WORD = 12
RIPEMD160_BASE = 600
RIPEMD160_PER_WORD = 120


def sha256_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """SHA-256 digest of the input."""
    data = bytes(data)
    cost = calc_linear_cost(len(data), SHA256_BASE, SHA256_PER_WORD)
    if cost > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    return PrecompileResult(cost, hashlib.sha256(data).digest())


def ripemd160_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """RIPEMD-160 digest of the input, left-padded with zeros to 32 bytes."""
    data = bytes(data)
    cost = calc_linear_cost(len(data), RIPEMD160_BASE, RIPEMD160_PER_WORD)
    if cost > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    digest = RIPEMD160.new(data).digest()
    return PrecompileResult(cost, bytes(12) + digest)