"""Interpreter limits and well-known addresses."""

from evmkit.primitives.bits import B160

STACK_LIMIT = 1024
"""Interpreter stack limit."""

CALL_STACK_LIMIT = 1024
"""Call depth limit."""

MAX_CODE_SIZE = 0x6000
"""EIP-170 contract code size limit."""

BLOCK_HASH_HISTORY = 256
"""Number of past block hashes that can be accessed."""

MAX_INITCODE_SIZE = 2 * MAX_CODE_SIZE
"""EIP-3860 initcode size limit."""

PRECOMPILE3 = B160.from_u64(3)
"""Address of the RIPEMD-160 precompile, which is special in a few places."""