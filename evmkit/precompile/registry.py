"""Sets of precompiled contracts active in each protocol version."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from types import MappingProxyType

from evmkit.precompile import blake2, bn128, hashing, identity, secp256k1
from evmkit.primitives.bits import B160
from evmkit.primitives.precompile_types import PrecompileResult
from evmkit.primitives.specification import SpecId


def u64_to_b160(value: int) -> B160:
    """Address whose last eight bytes hold ``value`` big-endian."""
    return B160.from_u64(value)


class PrecompileSpec(IntEnum):
    """Protocol versions that change the set of precompiles."""

    HOMESTEAD = 0
    BYZANTIUM = 1
    ISTANBUL = 2
    BERLIN = 3
    LATEST = 4

    @classmethod
    def from_spec_id(cls, spec_id: SpecId) -> PrecompileSpec:
        """The precompile set that applies under a protocol spec."""
        if spec_id is SpecId.LATEST:
            return cls.LATEST
        if spec_id <= SpecId.SPURIOUS_DRAGON:
            return cls.HOMESTEAD
        if spec_id <= SpecId.PETERSBURG:
            return cls.BYZANTIUM
        if spec_id <= SpecId.MUIR_GLACIER:
            return cls.ISTANBUL
        return cls.BERLIN

    def enabled(self, spec_id: int) -> bool:
        """Whether this set is active for the numbered precompile spec."""
        return int(spec_id) >= int(self)


@dataclass(frozen=True)
class Precompile:
    """A precompiled contract: a function of input bytes and gas limit."""

    function: Callable[[bytes, int], PrecompileResult]
    custom: bool = False

    def __call__(self, data: bytes, gas_limit: int) -> PrecompileResult:
        return self.function(data, gas_limit)

    def __repr__(self) -> str:
        return "Custom" if self.custom else "Standard"


class Precompiles:
    """Read-only map from address to precompile."""

    def __init__(self, fun: Mapping[B160, Precompile] | None = None):
        self.fun: Mapping[B160, Precompile] = MappingProxyType(
            {B160(address): precompile for address, precompile in (fun or {}).items()}
        )

    def _extended(self, entries: Mapping[B160, Precompile]) -> Precompiles:
        return Precompiles({**self.fun, **entries})

    @classmethod
    def homestead(cls) -> Precompiles:
        return _homestead()

    @classmethod
    def byzantium(cls) -> Precompiles:
        return _byzantium()

    @classmethod
    def istanbul(cls) -> Precompiles:
        return _istanbul()

    @classmethod
    def berlin(cls) -> Precompiles:
        return _berlin()

    @classmethod
    def latest(cls) -> Precompiles:
        return _berlin()

    @classmethod
    def for_spec(cls, spec: PrecompileSpec) -> Precompiles:
        """The shared precompile set of a version."""
        return {
            PrecompileSpec.HOMESTEAD: cls.homestead,
            PrecompileSpec.BYZANTIUM: cls.byzantium,
            PrecompileSpec.ISTANBUL: cls.istanbul,
            PrecompileSpec.BERLIN: cls.berlin,
            PrecompileSpec.LATEST: cls.latest,
        }[PrecompileSpec(spec)]()

    def addresses(self) -> Iterator[B160]:
        return iter(self.fun)

    def __iter__(self) -> Iterator[B160]:
        return iter(self.fun)

    def __contains__(self, address: object) -> bool:
        return address in self.fun

    def get(self, address: B160) -> Precompile | None:
        return self.fun.get(address)

    def __len__(self) -> int:
        return len(self.fun)

    def __repr__(self) -> str:
        return f"Precompiles({dict(self.fun)!r})"


def _standard(function: Callable[[bytes, int], PrecompileResult]) -> Precompile:
    return Precompile(function)


@lru_cache(maxsize=None)
def _homestead() -> Precompiles:
    return Precompiles(
        {
            u64_to_b160(1): _standard(secp256k1.ec_recover_run),
            u64_to_b160(2): _standard(hashing.sha256_run),
            u64_to_b160(3): _standard(hashing.ripemd160_run),
            u64_to_b160(4): _standard(identity.identity_run),
        }
    )


@lru_cache(maxsize=None)
def _byzantium() -> Precompiles:
    # EIP-196 and EIP-197: alt_bn128 addition, multiplication and pairing.
    return _homestead()._extended(
        {
            u64_to_b160(6): _standard(bn128.add_byzantium),
            u64_to_b160(7): _standard(bn128.mul_byzantium),
            u64_to_b160(8): _standard(bn128.pair_byzantium),
        }
    )


@lru_cache(maxsize=None)
def _istanbul() -> Precompiles:
    # EIP-152 BLAKE2 F, EIP-1108 cheaper alt_bn128.
    return _byzantium()._extended(
        {
            u64_to_b160(9): _standard(blake2.run),
            u64_to_b160(6): _standard(bn128.add_istanbul),
            u64_to_b160(7): _standard(bn128.mul_istanbul),
            u64_to_b160(8): _standard(bn128.pair_istanbul),
        }
    )


@lru_cache(maxsize=None)
def _berlin() -> Precompiles:
    return _istanbul()._extended({})