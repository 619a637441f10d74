"""Hard fork identifiers."""

from __future__ import annotations

from enum import IntEnum


class SpecId(IntEnum):
    """Protocol specifications, ordered by activation."""

    FRONTIER = 0
    FRONTIER_THAWING = 1
    HOMESTEAD = 2
    DAO_FORK = 3
    TANGERINE = 4
    SPURIOUS_DRAGON = 5
    BYZANTIUM = 6
    CONSTANTINOPLE = 7
    PETERSBURG = 8
    ISTANBUL = 9
    MUIR_GLACIER = 10
    BERLIN = 11
    LONDON = 12
    ARROW_GLACIER = 13
    GRAY_GLACIER = 14
    MERGE = 15
    SHANGHAI = 16
    CANCUN = 17
    LATEST = 18

    @classmethod
    def try_from_u8(cls, value: int) -> SpecId | None:
        """Return the spec with this number, or None if there is none."""
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def from_name(cls, name: str) -> SpecId:
        """Map a test-suite fork name to a spec; unknown names give LATEST."""
        return _NAMES.get(name, cls.LATEST)

    def enabled(self, other: SpecId) -> bool:
        """Whether ``other`` is active under this spec."""
        return self >= other


_NAMES = {
    "Frontier": SpecId.FRONTIER,
    "Homestead": SpecId.HOMESTEAD,
    "Tangerine": SpecId.TANGERINE,
    "Spurious": SpecId.SPURIOUS_DRAGON,
    "Byzantium": SpecId.BYZANTIUM,
    "Constantinople": SpecId.CONSTANTINOPLE,
    "Petersburg": SpecId.PETERSBURG,
    "Istanbul": SpecId.ISTANBUL,
    "MuirGlacier": SpecId.MUIR_GLACIER,
    "Berlin": SpecId.BERLIN,
    "London": SpecId.LONDON,
    "Merge": SpecId.MERGE,
    "Shanghai": SpecId.SHANGHAI,
    "Cancun": SpecId.CANCUN,
}