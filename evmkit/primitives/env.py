"""Block, transaction and configuration environment, with validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from evmkit.primitives.bits import B160, B256
from evmkit.primitives.constants import MAX_INITCODE_SIZE
from evmkit.primitives.result import (
    InvalidTransaction,
    InvalidTransactionKind,
    PrevrandaoNotSet,
)
from evmkit.primitives.specification import SpecId
from evmkit.primitives.state import Account
from evmkit.primitives.utilities import KECCAK_EMPTY

U64_MAX = (1 << 64) - 1
U256_MAX = (1 << 256) - 1


@dataclass(frozen=True)
class CreateScheme:
    """Contract creation scheme: CREATE when ``salt`` is None, else CREATE2."""

    salt: int | None = None

    @classmethod
    def create2(cls, salt: int) -> CreateScheme:
        """The CREATE2 scheme with the given salt."""
        if not 0 <= salt <= U256_MAX:
            raise ValueError("salt does not fit in 256 bits")
        return cls(salt)

    @property
    def is_create2(self) -> bool:
        return self.salt is not None


@dataclass(frozen=True)
class TransactTo:
    """Destination of a transaction: a call to ``address`` or a create."""

    address: B160 | None = None
    scheme: CreateScheme | None = None

    def __post_init__(self) -> None:
        if (self.address is None) == (self.scheme is None):
            raise ValueError("a transaction goes either to an address or creates a contract")
        if self.address is not None:
            object.__setattr__(self, "address", B160(self.address))

    @classmethod
    def call(cls, address: B160) -> TransactTo:
        """A call to an existing address."""
        return cls(address=address)

    @classmethod
    def create(cls, scheme: CreateScheme | None = None) -> TransactTo:
        """A contract creation, CREATE by default."""
        return cls(scheme=scheme if scheme is not None else CreateScheme())

    def is_create(self) -> bool:
        return self.scheme is not None


class AnalysisKind(Enum):
    """How created bytecode is prepared."""

    RAW = "raw"
    CHECK = "check"
    ANALYSE = "analyse"


@dataclass
class CfgEnv:
    """Chain configuration and switches that relax validation."""

    chain_id: int = 1
    spec_id: SpecId = SpecId.LATEST
    perf_analyse_created_bytecodes: AnalysisKind = AnalysisKind.ANALYSE
    limit_contract_code_size: int | None = None
    disable_coinbase_tip: bool = False
    memory_limit: int = (1 << 32) - 1
    disable_balance_check: bool = False
    disable_block_gas_limit: bool = False
    disable_eip3607: bool = False
    disable_gas_refund: bool = False
    disable_base_fee: bool = False


@dataclass
class BlockEnv:
    """Properties of the block the transaction runs in."""

    number: int = 0
    coinbase: B160 = field(default_factory=B160.zero)
    timestamp: int = 1
    difficulty: int = 0
    prevrandao: B256 | None = field(default_factory=B256.zero)
    basefee: int = 0
    gas_limit: int = U256_MAX


@dataclass
class TxEnv:
    """The transaction being executed."""

    caller: B160 = field(default_factory=B160.zero)
    gas_limit: int = U64_MAX
    gas_price: int = 0
    gas_priority_fee: int | None = None
    transact_to: TransactTo = field(default_factory=lambda: TransactTo.call(B160.zero()))
    value: int = 0
    data: bytes = b""
    chain_id: int | None = None
    nonce: int | None = None
    access_list: list[tuple[B160, list[int]]] = field(default_factory=list)


def _invalid(kind: InvalidTransactionKind, **details: object) -> InvalidTransaction:
    return InvalidTransaction(kind, **details)


@dataclass
class Env:
    """Configuration, block and transaction together."""

    cfg: CfgEnv = field(default_factory=CfgEnv)
    block: BlockEnv = field(default_factory=BlockEnv)
    tx: TxEnv = field(default_factory=TxEnv)

    def effective_gas_price(self) -> int:
        """Gas price actually paid, capped by basefee plus priority fee."""
        if self.tx.gas_priority_fee is None:
            return self.tx.gas_price
        return min(self.tx.gas_price, self.block.basefee + self.tx.gas_priority_fee)

    def validate_block_env(self, spec: SpecId) -> None:
        """Raise PrevrandaoNotSet if ``spec`` needs prevrandao and it is missing."""
        if spec.enabled(SpecId.MERGE) and self.block.prevrandao is None:
            raise PrevrandaoNotSet()

    def validate_tx(self, spec: SpecId) -> None:
        """Check the transaction against the environment under ``spec``."""
        tx = self.tx
        if spec.enabled(SpecId.LONDON):
            if tx.gas_priority_fee is not None and tx.gas_priority_fee > tx.gas_price:
                raise _invalid(InvalidTransactionKind.GAS_MAX_FEE_GREATER_THAN_PRIORITY_FEE)
            if not self.cfg.disable_base_fee and self.effective_gas_price() < self.block.basefee:
                raise _invalid(InvalidTransactionKind.GAS_PRICE_LESS_THAN_BASEFEE)

        if not self.cfg.disable_block_gas_limit and tx.gas_limit > self.block.gas_limit:
            raise _invalid(InvalidTransactionKind.CALLER_GAS_LIMIT_MORE_THAN_BLOCK)

        if spec.enabled(SpecId.SHANGHAI) and tx.transact_to.is_create():
            limit = self.cfg.limit_contract_code_size
            max_initcode_size = MAX_INITCODE_SIZE if limit is None else 2 * limit
            if len(tx.data) > max_initcode_size:
                raise _invalid(InvalidTransactionKind.CREATE_INITCODE_SIZE_LIMIT)

        if tx.chain_id is not None and tx.chain_id != self.cfg.chain_id:
            raise _invalid(InvalidTransactionKind.INVALID_CHAIN_ID)

        if not spec.enabled(SpecId.BERLIN) and tx.access_list:
            raise _invalid(InvalidTransactionKind.ACCESS_LIST_NOT_SUPPORTED)

    def validate_tx_against_state(self, account: Account) -> None:
        """Check the transaction against the sender's account."""
        info = account.info
        if not self.cfg.disable_eip3607 and info.code_hash != KECCAK_EMPTY:
            raise _invalid(InvalidTransactionKind.REJECT_CALLER_WITH_CODE)

        if self.tx.nonce is not None:
            if self.tx.nonce > info.nonce:
                raise _invalid(
                    InvalidTransactionKind.NONCE_TOO_HIGH, tx=self.tx.nonce, state=info.nonce
                )
            if self.tx.nonce < info.nonce:
                raise _invalid(
                    InvalidTransactionKind.NONCE_TOO_LOW, tx=self.tx.nonce, state=info.nonce
                )

        gas_cost = self.tx.gas_limit * self.tx.gas_price
        if gas_cost > U256_MAX or gas_cost + self.tx.value > U256_MAX:
            raise _invalid(InvalidTransactionKind.OVERFLOW_PAYMENT_IN_TRANSACTION)
        balance_check = gas_cost + self.tx.value

        if not self.cfg.disable_balance_check and balance_check > info.balance:
            raise _invalid(
                InvalidTransactionKind.LACK_OF_FUND_FOR_MAX_FEE,
                fee=self.tx.gas_limit,
                balance=info.balance,
            )