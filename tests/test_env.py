import pytest

from evmkit.primitives.bits import B160, B256
from evmkit.primitives.constants import MAX_INITCODE_SIZE
from evmkit.primitives.env import (
    AnalysisKind,
    BlockEnv,
    CfgEnv,
    CreateScheme,
    Env,
    TransactTo,
    TxEnv,
)
from evmkit.primitives.result import (
    InvalidTransaction,
    InvalidTransactionKind,
    PrevrandaoNotSet,
)
from evmkit.primitives.specification import SpecId
from evmkit.primitives.state import Account, AccountInfo
from evmkit.primitives.utilities import KECCAK_EMPTY, keccak256

K = InvalidTransactionKind


def _kind(excinfo):
    return excinfo.value.kind


def test_defaults():
    env = Env()
    assert env.cfg.chain_id == 1
    assert env.cfg.spec_id is SpecId.LATEST
    assert env.cfg.perf_analyse_created_bytecodes is AnalysisKind.ANALYSE
    assert env.cfg.memory_limit == 2**32 - 1
    assert env.block.timestamp == 1
    assert env.block.gas_limit == 2**256 - 1
    assert env.block.prevrandao == B256.zero()
    assert env.tx.gas_limit == 2**64 - 1
    assert env.tx.transact_to == TransactTo.call(B160.zero())


def test_transact_to():
    address = B160.from_u64(9)
    assert not TransactTo.call(address).is_create()
    assert TransactTo.call(address).address == address
    assert TransactTo.create().is_create()
    assert not TransactTo.create().scheme.is_create2
    target = TransactTo.create(CreateScheme.create2(7))
    assert target.scheme.salt == 7
    assert target.scheme.is_create2
    with pytest.raises(ValueError):
        TransactTo()


def test_effective_gas_price():
    env = Env(tx=TxEnv(gas_price=20))
    assert env.effective_gas_price() == 20
    env = Env(block=BlockEnv(basefee=10), tx=TxEnv(gas_price=20, gas_priority_fee=50))
    assert env.effective_gas_price() == 20
    env = Env(block=BlockEnv(basefee=0), tx=TxEnv(gas_price=100, gas_priority_fee=7))
    assert env.effective_gas_price() == 7


def test_validate_block_env():
    env = Env(block=BlockEnv(prevrandao=None))
    assert env.validate_block_env(SpecId.LONDON) is None
    with pytest.raises(PrevrandaoNotSet):
        env.validate_block_env(SpecId.MERGE)


def test_priority_fee_above_gas_price():
    env = Env(tx=TxEnv(gas_price=1, gas_priority_fee=2))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx(SpecId.LONDON)
    assert _kind(excinfo) is K.GAS_MAX_FEE_GREATER_THAN_PRIORITY_FEE
    assert env.validate_tx(SpecId.BERLIN) is None


def test_gas_price_below_basefee():
    env = Env(block=BlockEnv(basefee=10), tx=TxEnv(gas_price=5))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx(SpecId.LONDON)
    assert _kind(excinfo) is K.GAS_PRICE_LESS_THAN_BASEFEE
    env.cfg.disable_base_fee = True
    assert env.validate_tx(SpecId.LONDON) is None


def test_gas_limit_above_block():
    env = Env(block=BlockEnv(gas_limit=100), tx=TxEnv(gas_limit=101))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx(SpecId.LATEST)
    assert _kind(excinfo) is K.CALLER_GAS_LIMIT_MORE_THAN_BLOCK
    env.cfg.disable_block_gas_limit = True
    assert env.validate_tx(SpecId.LATEST) is None


def test_initcode_size_limit():
    tx = TxEnv(transact_to=TransactTo.create(), data=bytes(MAX_INITCODE_SIZE + 1))
    env = Env(tx=tx)
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx(SpecId.SHANGHAI)
    assert _kind(excinfo) is K.CREATE_INITCODE_SIZE_LIMIT
    assert env.validate_tx(SpecId.LONDON) is None
    env.tx.data = bytes(MAX_INITCODE_SIZE)
    assert env.validate_tx(SpecId.SHANGHAI) is None


def test_initcode_size_follows_code_size_limit():
    env = Env(
        cfg=CfgEnv(limit_contract_code_size=10),
        tx=TxEnv(transact_to=TransactTo.create(), data=bytes(21)),
    )
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx(SpecId.SHANGHAI)
    assert _kind(excinfo) is K.CREATE_INITCODE_SIZE_LIMIT
    env.tx.data = bytes(20)
    assert env.validate_tx(SpecId.SHANGHAI) is None


def test_calls_ignore_initcode_limit():
    env = Env(tx=TxEnv(data=bytes(MAX_INITCODE_SIZE + 1)))
    assert env.validate_tx(SpecId.SHANGHAI) is None
    assert not env.tx.transact_to.is_create()


def test_chain_id_mismatch():
    env = Env(tx=TxEnv(chain_id=5))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx(SpecId.LATEST)
    assert _kind(excinfo) is K.INVALID_CHAIN_ID
    env.tx.chain_id = env.cfg.chain_id
    assert env.validate_tx(SpecId.LATEST) is None


def test_access_list_before_berlin():
    env = Env(tx=TxEnv(access_list=[(B160.from_u64(1), [1])]))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx(SpecId.ISTANBUL)
    assert _kind(excinfo) is K.ACCESS_LIST_NOT_SUPPORTED
    assert env.validate_tx(SpecId.BERLIN) is None


def _account(balance=0, nonce=0, code_hash=KECCAK_EMPTY):
    return Account(info=AccountInfo(balance=balance, nonce=nonce, code_hash=code_hash))


def test_reject_caller_with_code():
    env = Env(tx=TxEnv(gas_limit=0))
    account = _account(code_hash=keccak256(b"\x60\x00"))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx_against_state(account)
    assert _kind(excinfo) is K.REJECT_CALLER_WITH_CODE
    env.cfg.disable_eip3607 = True
    assert env.validate_tx_against_state(account) is None


def test_nonce_checks():
    env = Env(tx=TxEnv(gas_limit=0, nonce=5))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx_against_state(_account(nonce=3))
    assert excinfo.value == InvalidTransaction(K.NONCE_TOO_HIGH, tx=5, state=3)
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx_against_state(_account(nonce=8))
    assert excinfo.value == InvalidTransaction(K.NONCE_TOO_LOW, tx=5, state=8)
    assert env.validate_tx_against_state(_account(nonce=5)) is None


def test_overflow_payment():
    env = Env(tx=TxEnv(gas_limit=2**64 - 1, gas_price=2**256 - 1))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx_against_state(_account(balance=2**256 - 1))
    assert _kind(excinfo) is K.OVERFLOW_PAYMENT_IN_TRANSACTION
    env = Env(tx=TxEnv(gas_limit=1, gas_price=1, value=2**256 - 1))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx_against_state(_account(balance=2**256 - 1))
    assert _kind(excinfo) is K.OVERFLOW_PAYMENT_IN_TRANSACTION


def test_lack_of_funds():
    env = Env(tx=TxEnv(gas_limit=100, gas_price=2, value=1))
    with pytest.raises(InvalidTransaction) as excinfo:
        env.validate_tx_against_state(_account(balance=200))
    assert excinfo.value == InvalidTransaction(K.LACK_OF_FUND_FOR_MAX_FEE, fee=100, balance=200)
    assert env.validate_tx_against_state(_account(balance=201)) is None
    env.cfg.disable_balance_check = True
    assert env.validate_tx_against_state(_account(balance=0)) is None