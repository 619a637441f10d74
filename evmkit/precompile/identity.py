"""Identity precompile: returns its input."""

from __future__ import annotations

from evmkit.primitives.precompile_types import (
    PrecompileError,
    PrecompileErrorKind,
    PrecompileResult,
    calc_linear_cost,
)

IDENTITY_BASE = 15
IDENTITY_PER_WORD = 3


def identity_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """Copy the input to the output."""
    data = bytes(data)
    cost = calc_linear_cost(len(data), IDENTITY_BASE, IDENTITY_PER_WORD)
    if cost > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    return PrecompileResult(cost, data)