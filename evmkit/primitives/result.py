"""Outcomes of transaction execution and the errors that stop it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from evmkit.primitives.bits import B160
from evmkit.primitives.log import Log


class Eval(Enum):
    """Why execution ended successfully."""

    STOP = "Stop"
    RETURN = "Return"
    SELF_DESTRUCT = "SelfDestruct"


class OutOfGasError(Enum):
    """Which kind of gas exhaustion halted execution."""

    BASIC_OUT_OF_GAS = "BasicOutOfGas"
    MEMORY_LIMIT = "MemoryLimit"
    MEMORY = "Memory"
    PRECOMPILE = "Precompile"
    INVALID_OPERAND = "InvalidOperand"


class Halt(Enum):
    """Exceptional halts that consume all gas."""

    OUT_OF_GAS = "OutOfGas"
    OPCODE_NOT_FOUND = "OpcodeNotFound"
    INVALID_FE_OPCODE = "InvalidFEOpcode"
    INVALID_JUMP = "InvalidJump"
    NOT_ACTIVATED = "NotActivated"
    STACK_UNDERFLOW = "StackUnderflow"
    STACK_OVERFLOW = "StackOverflow"
    OUT_OF_OFFSET = "OutOfOffset"
    CREATE_COLLISION = "CreateCollision"
    PRECOMPILE_ERROR = "PrecompileError"
    NONCE_OVERFLOW = "NonceOverflow"
    CREATE_CONTRACT_SIZE_LIMIT = "CreateContractSizeLimit"
    CREATE_CONTRACT_STARTING_WITH_EF = "CreateContractStartingWithEF"
    CREATE_INITCODE_SIZE_LIMIT = "CreateInitcodeSizeLimit"
    OVERFLOW_PAYMENT = "OverflowPayment"
    STATE_CHANGE_DURING_STATIC_CALL = "StateChangeDuringStaticCall"
    CALL_NOT_ALLOWED_INSIDE_STATIC = "CallNotAllowedInsideStatic"
    OUT_OF_FUND = "OutOfFund"
    CALL_TOO_DEEP = "CallTooDeep"


@dataclass(frozen=True)
class CallOutput:
    """Data returned by a call."""

    data: bytes = b""


@dataclass(frozen=True)
class CreateOutput:
    """Data returned by a create, with the new contract's address if any."""

    data: bytes = b""
    address: B160 | None = None


Output = Union[CallOutput, CreateOutput]


class ExecutionResult:
    """Common behaviour of the three execution outcomes."""

    gas_used: int

    def is_success(self) -> bool:
        """Whether execution succeeded (receipt status 1)."""
        return isinstance(self, Success)

    @property
    def output_data(self) -> bytes | None:
        """Returned bytes, or None when execution halted."""
        if isinstance(self, Success):
            return self.output.data
        if isinstance(self, Revert):
            return self.output
        return None


@dataclass(frozen=True)
class Success(ExecutionResult):
    """Execution returned normally."""

    reason: Eval
    gas_used: int
    gas_refunded: int
    logs: list[Log] = field(default_factory=list)
    output: Output = field(default_factory=CallOutput)


@dataclass(frozen=True)
class Revert(ExecutionResult):
    """Execution ended with REVERT, keeping unspent gas."""

    gas_used: int
    output: bytes = b""

    @property
    def logs(self) -> list[Log]:
        return []


@dataclass(frozen=True)
class Halted(ExecutionResult):
    """Execution halted and used all gas; ``out_of_gas`` qualifies OUT_OF_GAS."""

    reason: Halt
    gas_used: int
    out_of_gas: OutOfGasError | None = None

    def __post_init__(self) -> None:
        if (self.reason is Halt.OUT_OF_GAS) != (self.out_of_gas is not None):
            raise ValueError("out_of_gas is given exactly when the reason is OUT_OF_GAS")

    @property
    def logs(self) -> list[Log]:
        return []


@dataclass
class ResultAndState:
    """An execution result together with the accounts it changed."""

    result: ExecutionResult
    state: dict = field(default_factory=dict)


class InvalidTransactionKind(Enum):
    """Reasons a transaction is rejected before execution."""

    GAS_MAX_FEE_GREATER_THAN_PRIORITY_FEE = "GasMaxFeeGreaterThanPriorityFee"
    GAS_PRICE_LESS_THAN_BASEFEE = "GasPriceLessThanBasefee"
    CALLER_GAS_LIMIT_MORE_THAN_BLOCK = "CallerGasLimitMoreThanBlock"
    CALL_GAS_COST_MORE_THAN_GAS_LIMIT = "CallGasCostMoreThanGasLimit"
    REJECT_CALLER_WITH_CODE = "RejectCallerWithCode"
    LACK_OF_FUND_FOR_MAX_FEE = "LackOfFundForMaxFee"
    OVERFLOW_PAYMENT_IN_TRANSACTION = "OverflowPaymentInTransaction"
    NONCE_OVERFLOW_IN_TRANSACTION = "NonceOverflowInTransaction"
    NONCE_TOO_HIGH = "NonceTooHigh"
    NONCE_TOO_LOW = "NonceTooLow"
    CREATE_INITCODE_SIZE_LIMIT = "CreateInitcodeSizeLimit"
    INVALID_CHAIN_ID = "InvalidChainId"
    ACCESS_LIST_NOT_SUPPORTED = "AccessListNotSupported"


class EVMError(Exception):
    """Base of errors that prevent a transaction from executing."""


class InvalidTransaction(EVMError):
    """The transaction failed validation; ``details`` holds variant data."""

    def __init__(self, kind: InvalidTransactionKind, **details: Any):
        self.kind = kind
        self.details = details
        super().__init__(f"Transaction error: {self._describe()}")

    def _describe(self) -> str:
        if not self.details:
            return self.kind.value
        fields = ", ".join(f"{name}: {value}" for name, value in self.details.items())
        return f"{self.kind.value} {{ {fields} }}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidTransaction):
            return NotImplemented
        return self.kind is other.kind and self.details == other.details

    def __hash__(self) -> int:
        return hash((self.kind, tuple(sorted(self.details.items()))))

    def __repr__(self) -> str:
        args = "".join(f", {name}={value!r}" for name, value in self.details.items())
        return f"InvalidTransaction({self.kind.name}{args})"


class PrevrandaoNotSet(EVMError):
    """The block environment lacks prevrandao after the merge."""

    def __init__(self) -> None:
        super().__init__("Prevrandao not set")


class DatabaseError(EVMError):
    """The database failed; the original error is in ``error``."""

    def __init__(self, error: object):
        self.error = error
        super().__init__(f"Database error: {error}")