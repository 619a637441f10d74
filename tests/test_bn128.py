import pytest

from evmkit.precompile.bn128 import (
    CURVE_ORDER,
    FIELD_MODULUS,
    add_byzantium,
    add_istanbul,
    mul_byzantium,
    mul_istanbul,
    pair_byzantium,
    pair_istanbul,
    run_add,
    run_mul,
    run_pair,
)
from evmkit.primitives.precompile_types import PrecompileError, PrecompileErrorKind

PAIR_INPUT = bytes.fromhex(
    "1c76476f4def4bb94541d57ebba1193381ffa7aa76ada664dd31c16024c43f59"
    "3034dd2920f673e204fee2811c678745fc819b55d3e9d294e45c9b03a76aef41"
    "209dd15ebff5d46c4bd888e51a93cf99a7329636c63514396b4a452003a35bf7"
    "04bf11ca01483bfa8b34b43561848d28905960114c8ac04049af4b6315a41678"
    "2bb8324af6cfc93537a2ad1a445cfd0ca2a71acd7ac41fadbf933c2a51be344d"
    "120a2a4cf30c1bf9845f20c6fe39e07ea2cce61f0c9bb048165fe5e4de877550"
    "111e129f1cf1097710d41c4ac70fcdfa5ba2023c6ff1cbeac322de49d1b6df7c"
    "2032c61a830e3c17286de9462bf242fca2883585b93870a73853face6a6bf411"
    "198e9393920d483a7260bfb731fb5d25f1aa493335a9e71297e485b7aef312c2"
    "1800deef121f1e76426a00665e5c4479674322d4f75edadd46debd5cd992f6ed"
    "090689d0585ff075ec9e99ad690c3395bc4b313370b38ef355acdadcd122975b"
    "12c85ea5db8c6deb4aab71808dcb408fe3d1e7690c43d37b4ce6cc0166fa7daa"
)

G2_GENERATOR = PAIR_INPUT[256:384]
ONE = (1).to_bytes(32, "big")
ZERO_WORD = bytes(32)


def _g1(x, y):
    return x.to_bytes(32, "big") + y.to_bytes(32, "big")


G1_GENERATOR = _g1(1, 2)
G1_NEG_GENERATOR = _g1(1, FIELD_MODULUS - 2)


def _kind(excinfo):
    return excinfo.value.kind


def test_add_known_vector():
    data = bytes.fromhex(
        "18b18acfb4c2c30276db5411368e7185b311dd124691610c5d3b74034e093dc9"
        "063c909c4720840cb5134cb9f59fa749755796819658d32efc0d288198f37266"
        "07c2b7f58a84bd6145f00c9c2bc0bb1a187f20ff2c92963a88019e7c6a014eed"
        "06614e20c147e940f2d70da3f74c9a17df361706a4485c742bd6788478fa17d7"
    )
    expected = bytes.fromhex(
        "2243525c5efd4b9c3d3c45ac0ca3fe4dd85e830a4ce6b65fa1eeaee202839703"
        "301d1d33be6da8e509df21cc35964723180eed7532537db9ae5e7d48f195c915"
    )
    assert add_byzantium(data, 500) == (500, expected)


def test_add_zero_sum():
    assert add_byzantium(bytes(128), 500) == (500, bytes(64))


def test_add_out_of_gas():
    with pytest.raises(PrecompileError) as excinfo:
        add_byzantium(bytes(128), 499)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_add_no_input():
    assert add_byzantium(b"", 500) == (500, bytes(64))


def test_add_point_not_on_curve():
    with pytest.raises(PrecompileError) as excinfo:
        add_byzantium(b"\x11" * 128, 500)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE


def test_add_coordinate_outside_field():
    data = FIELD_MODULUS.to_bytes(32, "big") + bytes(96)
    with pytest.raises(PrecompileError) as excinfo:
        run_add(data)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_FIELD_POINT_NOT_A_MEMBER


def test_add_point_and_its_negation_is_zero():
    assert run_add(G1_GENERATOR + G1_NEG_GENERATOR) == bytes(64)


def test_add_istanbul_price():
    assert add_istanbul(b"", 150) == (150, bytes(64))
    with pytest.raises(PrecompileError) as excinfo:
        add_istanbul(b"", 149)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_mul_known_vector():
    data = bytes.fromhex(
        "2bd3e6d0f3b142924f5ca7b49ce5b9d54c4703d7ae5648e61d02268b1a0a9fb7"
        "21611ce0a6af85915e2f1d70300909ce2e49dfad4a4619c8390cae66cefdb204"
        "00000000000000000000000000000000000000000000000011138ce750fa15c2"
    )
    expected = bytes.fromhex(
        "070a8d6a982153cae4be29d434e8faef8a47b274a053f5a4ee2a6c9c13c31e5c"
        "031b8ce914eba3a9ffb989f9cdd5b0f01943074bf4f0f315690ec3cec6981afc"
    )
    assert mul_byzantium(data, 40_000) == (40_000, expected)


def test_mul_out_of_gas():
    data = bytes(64) + bytes.fromhex("02" + "00" * 31)
    with pytest.raises(PrecompileError) as excinfo:
        mul_byzantium(data, 39_999)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_mul_zero_point():
    data = bytes(64) + bytes.fromhex("02" + "00" * 31)
    assert mul_byzantium(data, 40_000) == (40_000, bytes(64))


def test_mul_no_input():
    assert mul_byzantium(b"", 40_000) == (40_000, bytes(64))


def test_mul_point_not_on_curve():
    data = b"\x11" * 64 + bytes.fromhex("0f" + "00" * 31)
    with pytest.raises(PrecompileError) as excinfo:
        mul_byzantium(data, 40_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE


def test_mul_by_two_matches_doubling():
    doubled = run_add(G1_GENERATOR + G1_GENERATOR)
    assert run_mul(G1_GENERATOR + (2).to_bytes(32, "big")) == doubled


def test_mul_by_group_order_is_zero():
    assert run_mul(G1_GENERATOR + CURVE_ORDER.to_bytes(32, "big")) == bytes(64)


def test_mul_by_one_is_identity():
    assert run_mul(G1_GENERATOR + ONE) == G1_GENERATOR


def test_mul_istanbul_price():
    assert mul_istanbul(b"", 6_000) == (6_000, bytes(64))
    with pytest.raises(PrecompileError) as excinfo:
        mul_istanbul(b"", 5_999)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_pair_known_vector():
    assert pair_byzantium(PAIR_INPUT, 260_000) == (260_000, ONE)


def test_pair_out_of_gas():
    with pytest.raises(PrecompileError) as excinfo:
        pair_byzantium(PAIR_INPUT, 259_999)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_pair_no_input():
    assert pair_byzantium(b"", 260_000) == (100_000, ONE)


def test_pair_point_not_on_curve():
    with pytest.raises(PrecompileError) as excinfo:
        pair_byzantium(b"\x11" * 192, 260_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE


def test_pair_invalid_length():
    data = b"\x11" * 79
    with pytest.raises(PrecompileError) as excinfo:
        pair_byzantium(data, 260_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_PAIR_LENGTH


def test_pair_field_element_out_of_range():
    data = FIELD_MODULUS.to_bytes(32, "big") + bytes(160)
    with pytest.raises(PrecompileError) as excinfo:
        run_pair(data, 80_000, 100_000, 1_000_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_FIELD_POINT_NOT_A_MEMBER


def test_pair_g2_not_on_curve():
    data = G1_GENERATOR + ONE * 4
    with pytest.raises(PrecompileError) as excinfo:
        run_pair(data, 80_000, 100_000, 1_000_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE


def test_pair_zero_points_give_one():
    assert run_pair(bytes(192), 80_000, 100_000, 180_000) == (180_000, ONE)


def test_pair_single_generator_pair_is_not_one():
    result = run_pair(G1_GENERATOR + G2_GENERATOR, 34_000, 45_000, 79_000)
    assert result == (79_000, ZERO_WORD)


def test_pair_with_negated_point_cancels():
    data = G1_GENERATOR + G2_GENERATOR + G1_NEG_GENERATOR + G2_GENERATOR
    assert pair_istanbul(data, 113_000) == (113_000, ONE)


def test_pair_istanbul_prices():
    assert pair_istanbul(b"", 45_000) == (45_000, ONE)
    with pytest.raises(PrecompileError) as excinfo:
        pair_istanbul(b"", 44_999)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS