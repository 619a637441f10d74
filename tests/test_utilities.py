import pytest

from evmkit.primitives.bits import B160, B256
from evmkit.primitives.utilities import (
    KECCAK_EMPTY,
    create2_address,
    create_address,
    hex_bytes_decode,
    hex_bytes_encode,
    keccak256,
    rlp_encode,
)


def test_keccak_of_empty_matches_constant():
    assert keccak256(b"") == KECCAK_EMPTY


def test_keccak_result_size_and_determinism():
    digest = keccak256(b"abc")
    assert len(digest) == 32
    assert digest == keccak256(bytearray(b"abc"))
    assert digest != keccak256(b"abd")


def test_rlp_single_small_byte_is_itself():
    assert rlp_encode(b"\x7f") == b"\x7f"


def test_rlp_short_string():
    assert rlp_encode(b"dog") == b"\x83dog"


def test_rlp_zero_equals_empty_string():
    assert rlp_encode(0) == rlp_encode(b"")


def test_rlp_integer_matches_bytes():
    assert rlp_encode(0x0400) == rlp_encode(b"\x04\x00")


def test_rlp_long_string_has_two_byte_prefix():
    data = b"a" * 56
    encoded = rlp_encode(data)
    assert encoded[2:] == data
    assert encoded[1] == len(data)


def test_rlp_list_wraps_payload():
    encoded = rlp_encode([b"cat", b"dog"])
    assert encoded[1:] == rlp_encode(b"cat") + rlp_encode(b"dog")
    assert encoded[0] - 0xC0 == len(encoded) - 1


def test_rlp_rejects_negative_and_unknown():
    with pytest.raises(ValueError):
        rlp_encode(-1)
    with pytest.raises(TypeError):
        rlp_encode(1.5)


def test_create_address_known_vector():
    caller = B160.from_hex("0x6ac7ea33f8831ea9dcc53393aaa88b25a785dbf0")
    expected = B160.from_hex("0xcd234a471b72ba2f1ccf0a70fcaba648a5eecd8d")
    assert create_address(caller, 0) == expected


def test_create_address_depends_on_nonce():
    caller = B160.from_u64(1)
    assert create_address(caller, 0) != create_address(caller, 1)


def test_create2_known_vector():
    code_hash = keccak256(b"\x00")
    expected = B160.from_hex("0x4D1A2e2bB4F88F0250f26Ffff098B0b30B26BF38")
    assert create2_address(B160.zero(), code_hash, 0) == expected


def test_create2_depends_on_salt():
    code_hash = B256.zero()
    assert create2_address(B160.zero(), code_hash, 1) != create2_address(
        B160.zero(), code_hash, 2
    )


def test_hex_bytes_round_trip():
    data = bytes(range(16))
    assert hex_bytes_decode(hex_bytes_encode(data)) == data


def test_hex_bytes_decode_without_prefix():
    assert hex_bytes_decode("beef") == hex_bytes_decode("0xbeef")


def test_hex_bytes_decode_invalid():
    with pytest.raises(ValueError):
        hex_bytes_decode("0xabc")
    with pytest.raises(ValueError):
        hex_bytes_decode("zz")