# evmkit

Building blocks for an Ethereum Virtual Machine: fixed-size hash types,
hard-fork specifications, account state, bytecode, transaction environment
and validation, execution results, database interfaces, and a set of the
standard precompiled contracts.

## Installation

```
pip install evmkit
```

## Primitives

```python
from evmkit.primitives.bits import B160, B256
from evmkit.primitives.utilities import keccak256, create_address
from evmkit.primitives.specification import SpecId

caller = B160.from_hex("0x" + "11" * 20)
print(create_address(caller, 0).to_hex())
print(keccak256(b"").to_hex())

assert SpecId.from_name("Berlin").enabled(SpecId.ISTANBUL)
```

- `evmkit.primitives.bits`: `B256` and `B160` (immutable `bytes` of 32 and
  20 bytes), `encode_hex`, `decode_hex` and `HexError`.
- `evmkit.primitives.utilities`: `keccak256`, `rlp_encode`,
  `create_address`, `create2_address`, `hex_bytes_encode`,
  `hex_bytes_decode` and `KECCAK_EMPTY`.
- `evmkit.primitives.specification`: `SpecId`, an ordered `IntEnum` of hard
  forks with `try_from_u8`, `from_name` and `enabled`.
- `evmkit.primitives.constants`: stack, code-size and block-hash limits and
  `PRECOMPILE3`.
- `evmkit.primitives.bytecode`: `Bytecode` in `RAW`, `CHECKED` or
  `ANALYSED` state, and `JumpMap`.
- `evmkit.primitives.state`: `Account`, `AccountInfo`, `StorageSlot` and the
  `AccountStatus` flags.
- `evmkit.primitives.env`: `Env`, `CfgEnv`, `BlockEnv`, `TxEnv`,
  `TransactTo` and `CreateScheme`. `Env.validate_block_env` raises
  `PrevrandaoNotSet`; `Env.validate_tx` and `Env.validate_tx_against_state`
  raise `InvalidTransaction`.
- `evmkit.primitives.result`: `Success`, `Revert` and `Halted` results,
  `ResultAndState`, and the `EVMError` exceptions.
- `evmkit.primitives.db`: abstract `Database`, `DatabaseCommit`,
  `StateDatabase` and `BlockHashDatabase`; `DatabaseComponents` joins a state
  part and a block-hash part and wraps their failures in
  `StateComponentError` or `BlockHashComponentError`; `WrapDatabaseRef`
  forwards to any object with the same four methods.

## Precompiles

Each precompile takes the call data and a gas limit and returns a
`PrecompileResult` with `gas_used` and `output`, or raises
`PrecompileError` whose `kind` is a `PrecompileErrorKind` (for instance
`OUT_OF_GAS` when the gas limit is too low).

```python
from evmkit.precompile.registry import Precompiles, u64_to_b160

precompiles = Precompiles.berlin()
sha256 = precompiles.get(u64_to_b160(2))
result = sha256(b"hello", 100_000)
print(result.gas_used, result.output.hex())
```

The registry offers `homestead()`, `byzantium()`, `istanbul()`, `berlin()`
and `latest()`, each a superset of the previous one, and `for_spec()` to
pick one by `PrecompileSpec`. `PrecompileSpec.from_spec_id` maps a `SpecId`
onto these sets.

Available contracts: ecrecover (1), SHA-256 (2), RIPEMD-160 (3),
identity (4), alt_bn128 add (6), mul (7) and pairing (8), and the BLAKE2
compression function F (9). The functions behind them are also importable
from `evmkit.precompile.secp256k1`, `hashing`, `identity`, `bn128` and
`blake2`.

## What it does not do

- There is no interpreter: nothing here executes bytecode or runs a
  transaction. The package supplies the types such an interpreter works with.
- The modular exponentiation precompile (address 5) is not included, so the
  Berlin set holds the same contracts as the Istanbul set.
- No concrete database is provided, in memory or otherwise; only the
  interfaces and the two adapters above.

## Running the tests

```
pip install -e .[test]
pytest
```