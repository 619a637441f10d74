"""Database interfaces the interpreter reads state from."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from evmkit.primitives.bits import B160, B256
from evmkit.primitives.bytecode import Bytecode
from evmkit.primitives.state import Account, AccountInfo


class Database(ABC):
    """Source of accounts, code, storage and block hashes."""

    @abstractmethod
    def basic(self, address: B160) -> AccountInfo | None:
        """Basic account information, or None if the account does not exist."""

    @abstractmethod
    def code_by_hash(self, code_hash: B256) -> Bytecode:
        """Account code by its hash."""

    @abstractmethod
    def storage(self, address: B160, index: int) -> int:
        """Storage value of ``address`` at ``index``."""

    @abstractmethod
    def block_hash(self, number: int) -> B256:
        """Hash of the block with the given number."""


class DatabaseCommit(ABC):
    """A database that accepts state changes."""

    @abstractmethod
    def commit(self, changes: dict[B160, Account]) -> None:
        """Apply the changed accounts."""


class StateDatabase(ABC):
    """The account-state part of a database."""

    @abstractmethod
    def basic(self, address: B160) -> AccountInfo | None:
        """Basic account information, or None if the account does not exist."""

    @abstractmethod
    def code_by_hash(self, code_hash: B256) -> Bytecode:
        """Account code by its hash."""

    @abstractmethod
    def storage(self, address: B160, index: int) -> int:
        """Storage value of ``address`` at ``index``."""


class BlockHashDatabase(ABC):
    """The block-hash part of a database."""

    @abstractmethod
    def block_hash(self, number: int) -> B256:
        """Hash of the block with the given number."""


class DatabaseComponentError(Exception):
    """A component of DatabaseComponents failed; the cause is in ``error``."""

    def __init__(self, error: BaseException):
        super().__init__(str(error))
        self.error = error


class StateComponentError(DatabaseComponentError):
    """The state component failed."""


class BlockHashComponentError(DatabaseComponentError):
    """The block-hash component failed."""


class DatabaseComponents(Database):
    """A database assembled from a state part and a block-hash part."""

    def __init__(self, state: StateDatabase, block_hash: BlockHashDatabase):
        self.state = state
        self.block_hash_source = block_hash

    def _from_state(self, method: str, *args: Any) -> Any:
        try:
            return getattr(self.state, method)(*args)
        except DatabaseComponentError:
            raise
        except Exception as exc:
            raise StateComponentError(exc) from exc

    def basic(self, address: B160) -> AccountInfo | None:
        return self._from_state("basic", address)

    def code_by_hash(self, code_hash: B256) -> Bytecode:
        return self._from_state("code_by_hash", code_hash)

    def storage(self, address: B160, index: int) -> int:
        return self._from_state("storage", address, index)

    def block_hash(self, number: int) -> B256:
        try:
            return self.block_hash_source.block_hash(number)
        except DatabaseComponentError:
            raise
        except Exception as exc:
            raise BlockHashComponentError(exc) from exc


class WrapDatabaseRef(Database):
    """Presents a read-only database object as a Database."""

    def __init__(self, inner: Any):
        self.inner = inner

    def basic(self, address: B160) -> AccountInfo | None:
        return self.inner.basic(address)

    def code_by_hash(self, code_hash: B256) -> Bytecode:
        return self.inner.code_by_hash(code_hash)

    def storage(self, address: B160, index: int) -> int:
        return self.inner.storage(address, index)

    def block_hash(self, number: int) -> B256:
        return self.inner.block_hash(number)