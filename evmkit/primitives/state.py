"""Accounts, their status flags and storage slots."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Flag

from evmkit.primitives.bits import B160, B256
from evmkit.primitives.bytecode import Bytecode
from evmkit.primitives.utilities import KECCAK_EMPTY


class AccountStatus(Flag):
    """Status flags of a loaded account."""

    LOADED = 0
    CREATED = 0b0001
    SELF_DESTRUCTED = 0b0010
    TOUCHED = 0b0100
    LOADED_AS_NOT_EXISTING = 0b1000


@dataclass
class StorageSlot:
    """A storage value with the value it had before the transaction."""

    previous_or_original_value: int = 0
    present_value: int = 0

    @classmethod
    def new(cls, original: int) -> StorageSlot:
        """A slot whose present value equals its original value."""
        return cls(original, original)

    @property
    def original_value(self) -> int:
        return self.previous_or_original_value

    def is_changed(self) -> bool:
        """Whether the present value differs from the original one."""
        return self.previous_or_original_value != self.present_value


@dataclass(eq=False)
class AccountInfo:
    """Balance, nonce and code of an account.

    Two infos are equal when balance, nonce and code hash agree; code is ignored.
    """

    balance: int = 0
    nonce: int = 0
    code_hash: B256 = KECCAK_EMPTY
    code: Bytecode | None = field(default_factory=Bytecode.new)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccountInfo):
            return NotImplemented
        return (
            self.balance == other.balance
            and self.nonce == other.nonce
            and self.code_hash == other.code_hash
        )

    __hash__ = None

    def without_code(self) -> AccountInfo:
        """A copy of this info with no code attached."""
        return dataclasses.replace(self, code=None)

    def is_empty(self) -> bool:
        """Zero balance, zero nonce and no code."""
        code_empty = self.code_hash in (KECCAK_EMPTY, B256.zero())
        return self.balance == 0 and self.nonce == 0 and code_empty

    def exists(self) -> bool:
        return not self.is_empty()

    def take_bytecode(self) -> Bytecode | None:
        """Detach and return the code, leaving None behind."""
        code, self.code = self.code, None
        return code

    @classmethod
    def from_balance(cls, balance: int) -> AccountInfo:
        return cls(balance=balance)


@dataclass
class Account:
    """An account with its cached storage and status flags."""

    info: AccountInfo = field(default_factory=AccountInfo)
    storage: dict[int, StorageSlot] = field(default_factory=dict)
    status: AccountStatus = AccountStatus.LOADED

    def mark_selfdestruct(self) -> None:
        self.status |= AccountStatus.SELF_DESTRUCTED

    def unmark_selfdestruct(self) -> None:
        self.status &= ~AccountStatus.SELF_DESTRUCTED

    def is_selfdestructed(self) -> bool:
        return AccountStatus.SELF_DESTRUCTED in self.status

    def mark_touch(self) -> None:
        self.status |= AccountStatus.TOUCHED

    def unmark_touch(self) -> None:
        self.status &= ~AccountStatus.TOUCHED

    def is_touched(self) -> bool:
        return AccountStatus.TOUCHED in self.status

    def mark_created(self) -> None:
        self.status |= AccountStatus.CREATED

    def unmark_created(self) -> None:
        self.status &= ~AccountStatus.CREATED

    def is_created(self) -> bool:
        return AccountStatus.CREATED in self.status

    def is_loaded_as_not_existing(self) -> bool:
        return AccountStatus.LOADED_AS_NOT_EXISTING in self.status

    def is_empty(self) -> bool:
        """Zero nonce, zero balance and no code."""
        return self.info.is_empty()

    @classmethod
    def new_not_existing(cls) -> Account:
        """A default account flagged as not existing in the database."""
        return cls(status=AccountStatus.LOADED_AS_NOT_EXISTING)

    @classmethod
    def from_info(cls, info: AccountInfo) -> Account:
        return cls(info=info)


State = dict[B160, Account]
Storage = dict[int, StorageSlot]
TransientStorage = dict[tuple[B160, int], int]