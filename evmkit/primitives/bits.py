"""Fixed-size byte strings: 256-bit hashes and 160-bit addresses."""

from __future__ import annotations

from typing import ClassVar

_WHITESPACE = " \r\n\t"


class HexError(ValueError):
    """Raised when a hex string cannot be decoded."""

    def __init__(self, message: str, character: str | None = None, index: int | None = None):
        super().__init__(message)
        self.character = character
        self.index = index


def encode_hex(data: bytes, skip_leading_zero: bool = False) -> str:
    """Encode bytes as a ``0x``-prefixed lower-case hex string."""
    data = bytes(data)
    if not data:
        return "0x"
    digits = data.hex()
    if skip_leading_zero and digits[0] == "0":
        digits = digits[1:]
    return "0x" + digits


def decode_hex(text: str, length: int) -> bytes:
    """Decode a hex string, with or without ``0x``, into exactly ``length`` bytes.

    Whitespace between digits is skipped but still counts towards the length check.
    """
    stripped = text.startswith("0x")
    body = text[2:] if stripped else text
    if len(body) != 2 * length:
        raise HexError(
            f"invalid length {len(body)}, expected a (both 0x-prefixed or not) "
            f"hex string with length of {2 * length}"
        )
    out = bytearray(length)
    offset = 2 if stripped else 0
    modulus = len(body) % 2
    buf = 0
    pos = 0
    for index, char in enumerate(body):
        buf = (buf << 4) & 0xFF
        if char in _WHITESPACE:
            buf >>= 4
            continue
        if "0" <= char <= "9":
            buf |= ord(char) - ord("0")
        elif "a" <= char <= "f":
            buf |= ord(char) - ord("a") + 10
        elif "A" <= char <= "F":
            buf |= ord(char) - ord("A") + 10
        else:
            raise HexError(
                f"invalid hex character: {char}, at {index + offset}",
                character=char,
                index=index + offset,
            )
        modulus += 1
        if modulus == 2:
            modulus = 0
            out[pos] = buf
            pos += 1
    return bytes(out)


class _FixedBytes(bytes):
    """Immutable byte string of a fixed size."""

    SIZE: ClassVar[int] = 0

    def __new__(cls, data: bytes | bytearray | memoryview | None = None):
        if data is None:
            data = bytes(cls.SIZE)
        if isinstance(data, int):
            raise TypeError(f"{cls.__name__} needs bytes, not an integer")
        data = bytes(data)
        if len(data) != cls.SIZE:
            raise ValueError(f"{cls.__name__} needs {cls.SIZE} bytes, got {len(data)}")
        return super().__new__(cls, data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({encode_hex(self, False)})"

    def __str__(self) -> str:
        return encode_hex(self, False)


class B256(_FixedBytes):
    """A 32-byte value."""

    SIZE = 32

    @classmethod
    def zero(cls) -> "B256":
        """The all-zero value."""
        return cls()

    @classmethod
    def from_hex(cls, text: str) -> "B256":
        """Parse a hex string of exactly 64 digits."""
        return cls(decode_hex(text, cls.SIZE))

    def to_hex(self) -> str:
        """Full ``0x``-prefixed hex form."""
        return encode_hex(self, False)

    @classmethod
    def from_int(cls, value: int) -> "B256":
        """Big-endian encoding of an unsigned 256-bit integer."""
        if not 0 <= value < 1 << 256:
            raise ValueError("value does not fit in 256 bits")
        return cls(value.to_bytes(32, "big"))

    def to_int(self) -> int:
        """Big-endian integer value."""
        return int.from_bytes(self, "big")


class B160(_FixedBytes):
    """A 20-byte value, used for addresses."""

    SIZE = 20

    @classmethod
    def zero(cls) -> "B160":
        """The all-zero address."""
        return cls()

    @classmethod
    def from_hex(cls, text: str) -> "B160":
        """Parse a hex string of exactly 40 digits."""
        return cls(decode_hex(text, cls.SIZE))

    def to_hex(self) -> str:
        """Full ``0x``-prefixed hex form."""
        return encode_hex(self, False)

    @classmethod
    def from_u64(cls, value: int) -> "B160":
        """Address whose last eight bytes hold ``value`` big-endian."""
        if not 0 <= value < 1 << 64:
            raise ValueError("value does not fit in 64 bits")
        return cls(bytes(12) + value.to_bytes(8, "big"))

    def to_b256(self) -> B256:
        """Left-pad with zeros to 32 bytes."""
        return B256(bytes(12) + bytes(self))