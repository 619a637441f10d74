"""Contract bytecode and its analysis state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from evmkit.primitives.bits import B256
from evmkit.primitives.utilities import KECCAK_EMPTY, keccak256

_CHECKED_PADDING = 33


@dataclass(frozen=True)
class JumpMap:
    """Bit map of valid jump destinations, least significant bit first."""

    bits: bytes = b""
    size: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "bits", bytes(self.bits))
        capacity = 8 * len(self.bits)
        if self.size is None:
            object.__setattr__(self, "size", capacity)
        elif not 0 <= self.size <= capacity:
            raise ValueError(f"jump map size {self.size} exceeds {capacity} bits")

    @classmethod
    def from_bytes(cls, data: bytes) -> JumpMap:
        """Build a map covering every bit of ``data``."""
        return cls(bytes(data))

    def as_bytes(self) -> bytes:
        """The raw bytes behind the map."""
        return self.bits

    def is_valid(self, pc: int) -> bool:
        """Whether ``pc`` is a valid jump destination."""
        if not 0 <= pc < self.size:
            return False
        return bool((self.bits[pc >> 3] >> (pc & 7)) & 1)

    def __repr__(self) -> str:
        binary = "".join(f"{byte:08b}" for byte in self.bits)
        return f"JumpMap(map={binary!r})"


class BytecodeState(Enum):
    """How far the bytecode has been prepared for execution."""

    RAW = "raw"
    CHECKED = "checked"
    ANALYSED = "analysed"


@dataclass(frozen=True)
class Bytecode:
    """Bytecode together with its original length and jump map where known."""

    data: bytes
    state: BytecodeState = BytecodeState.RAW
    length: int | None = None
    jump_map: JumpMap | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        if self.state is BytecodeState.RAW:
            if self.length is not None or self.jump_map is not None:
                raise ValueError("raw bytecode carries no length or jump map")
            return
        if self.length is None:
            raise ValueError(f"{self.state.value} bytecode needs a length")
        if not 0 <= self.length <= len(self.data):
            raise ValueError("length exceeds the stored bytecode")
        if self.state is BytecodeState.CHECKED and self.jump_map is not None:
            raise ValueError("checked bytecode carries no jump map")
        if self.state is BytecodeState.ANALYSED and self.jump_map is None:
            raise ValueError("analysed bytecode needs a jump map")

    @classmethod
    def new(cls) -> Bytecode:
        """Bytecode holding a single STOP opcode."""
        return cls(b"\x00", BytecodeState.ANALYSED, 0, JumpMap(b"\x00", 1))

    @classmethod
    def new_raw(cls, data: bytes) -> Bytecode:
        """Unchecked bytecode."""
        return cls(data)

    @classmethod
    def new_checked(cls, data: bytes, length: int) -> Bytecode:
        """Checked bytecode; ``data`` must already end with padding STOP bytes."""
        return cls(data, BytecodeState.CHECKED, length)

    def hash_slow(self) -> B256:
        """Keccak-256 of the original bytes."""
        if self.is_empty():
            return KECCAK_EMPTY
        return keccak256(self.original_bytes())

    def original_bytes(self) -> bytes:
        """The bytecode without any padding."""
        if self.state is BytecodeState.RAW:
            return self.data
        return self.data[: self.length]

    def __len__(self) -> int:
        if self.state is BytecodeState.RAW:
            return len(self.data)
        return self.length

    def is_empty(self) -> bool:
        """Whether the original bytecode has no bytes."""
        return len(self) == 0

    def to_checked(self) -> Bytecode:
        """Pad raw bytecode with STOP bytes; other states are returned unchanged."""
        if self.state is not BytecodeState.RAW:
            return self
        return Bytecode(
            self.data + bytes(_CHECKED_PADDING), BytecodeState.CHECKED, len(self.data)
        )

    def __repr__(self) -> str:
        return f"Bytecode(bytecode={self.data.hex()!r}, state={self.state.name})"