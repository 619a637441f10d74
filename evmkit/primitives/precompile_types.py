"""Result, error and cost types shared by precompiled contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from evmkit.primitives.log import Log


class PrecompileErrorKind(Enum):
    """Why a precompile failed."""

    OUT_OF_GAS = "out of gas"
    BLAKE2_WRONG_LENGTH = "blake2 wrong input length"
    BLAKE2_WRONG_FINAL_INDICATOR_FLAG = "blake2 wrong final indicator flag"
    MODEXP_EXP_OVERFLOW = "modexp exponent overflow"
    MODEXP_BASE_OVERFLOW = "modexp base overflow"
    MODEXP_MOD_OVERFLOW = "modexp modulus overflow"
    BN128_FIELD_POINT_NOT_A_MEMBER = "bn128 field point not a member"
    BN128_AFFINE_G_FAILED_TO_CREATE = "bn128 affine point failed to create"
    BN128_PAIR_LENGTH = "bn128 pair input length"


class PrecompileError(Exception):
    """Raised by a precompile that cannot complete."""

    def __init__(self, kind: PrecompileErrorKind):
        super().__init__(kind.value)
        self.kind = kind

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PrecompileError):
            return self.kind is other.kind
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"PrecompileError({self.kind.name})"


class PrecompileResult(NamedTuple):
    """Gas spent and bytes returned by a successful precompile call."""

    gas_used: int
    output: bytes


def calc_linear_cost(length: int, base: int, word: int) -> int:
    """Cost of ``base`` plus ``word`` for every started 32-byte word."""
    return (length + 31) // 32 * word + base


@dataclass
class PrecompileOutput:
    """Precompile output together with emitted logs."""

    cost: int
    output: bytes
    logs: list[Log] = field(default_factory=list)

    @classmethod
    def without_logs(cls, cost: int, output: bytes) -> "PrecompileOutput":
        """Output with no logs."""
        return cls(cost, bytes(output))