"""Precompiles for addition, scalar multiplication and pairing checks on alt_bn128."""

from __future__ import annotations

from evmkit.primitives.precompile_types import (
    PrecompileError,
    PrecompileErrorKind,
    PrecompileResult,
)

FIELD_MODULUS = 21888242871839275222246405745257275088696311157297823662689037894645226208583
CURVE_ORDER = 21888242871839275222246405745257275088548364400416034343698204186575808495617

ADD_INPUT_LEN = 128
MUL_INPUT_LEN = 128
PAIR_ELEMENT_LEN = 192

ISTANBUL_ADD_GAS = 150
BYZANTIUM_ADD_GAS = 500
ISTANBUL_MUL_GAS = 6_000
BYZANTIUM_MUL_GAS = 40_000
ISTANBUL_PAIR_PER_POINT = 34_000
ISTANBUL_PAIR_BASE = 45_000
BYZANTIUM_PAIR_PER_POINT = 80_000
BYZANTIUM_PAIR_BASE = 100_000

_P = FIELD_MODULUS
_ATE_LOOP_COUNT = 29793968203157093288
_FINAL_EXPONENT = (_P**12 - 1) // CURVE_ORDER


class _Fq2:
    """Element a + b*i of the quadratic extension, with i^2 = -1."""

    __slots__ = ("a", "b")

    def __init__(self, a: int, b: int = 0):
        self.a = a % _P
        self.b = b % _P

    def __add__(self, other: _Fq2) -> _Fq2:
        return _Fq2(self.a + other.a, self.b + other.b)

    def __sub__(self, other: _Fq2) -> _Fq2:
        return _Fq2(self.a - other.a, self.b - other.b)

    def __neg__(self) -> _Fq2:
        return _Fq2(-self.a, -self.b)

    def __mul__(self, other: _Fq2 | int) -> _Fq2:
        if isinstance(other, int):
            return _Fq2(self.a * other, self.b * other)
        return _Fq2(
            self.a * other.a - self.b * other.b,
            self.a * other.b + self.b * other.a,
        )

    __rmul__ = __mul__

    def __pow__(self, exponent: int) -> _Fq2:
        result = _Fq2(1)
        base = self
        while exponent:
            if exponent & 1:
                result = result * base
            base = base * base
            exponent >>= 1
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Fq2):
            return NotImplemented
        return self.a == other.a and self.b == other.b

    __hash__ = None

    def is_zero(self) -> bool:
        return self.a == 0 and self.b == 0

    def inverse(self) -> _Fq2:
        norm_inv = pow(self.a * self.a + self.b * self.b, -1, _P)
        return _Fq2(self.a * norm_inv, -self.b * norm_inv)

    def conjugate(self) -> _Fq2:
        return _Fq2(self.a, -self.b)


_XI = _Fq2(9, 1)
_TWIST_B = _Fq2(3) * _XI.inverse()
_FROBENIUS_X = _XI ** ((_P - 1) // 3)
_FROBENIUS_Y = _XI ** ((_P - 1) // 2)

G1Point = tuple  # (x, y) of ints, or None for infinity
G2Point = tuple  # (x, y) of _Fq2, or None for infinity


# --- G1 over the base field -------------------------------------------------


def _g1_on_curve(x: int, y: int) -> bool:
    return (y * y - x * x * x - 3) % _P == 0


def _g1_add(p1, p2):
    if p1 is None:
        return p2
    if p2 is None:
        return p1
    x1, y1 = p1
    x2, y2 = p2
    if x1 == x2:
        if (y1 + y2) % _P == 0:
            return None
        slope = 3 * x1 * x1 * pow(2 * y1, -1, _P) % _P
    else:
        slope = (y2 - y1) * pow(x2 - x1, -1, _P) % _P
    x3 = (slope * slope - x1 - x2) % _P
    y3 = (slope * (x1 - x3) - y1) % _P
    return (x3, y3)


def _g1_mul(point, scalar: int):
    result = None
    for bit in bin(scalar)[2:]:
        result = _g1_add(result, result)
        if bit == "1":
            result = _g1_add(result, point)
    return result


# --- G2 over the quadratic extension (sextic twist) -------------------------


def _g2_on_curve(x: _Fq2, y: _Fq2) -> bool:
    return y * y == x * x * x + _TWIST_B


def _g2_add(p1, p2):
    if p1 is None:
        return p2
    if p2 is None:
        return p1
    x1, y1 = p1
    x2, y2 = p2
    if x1 == x2:
        if (y1 + y2).is_zero():
            return None
        slope = x1 * x1 * 3 * (y1 * 2).inverse()
    else:
        slope = (y2 - y1) * (x2 - x1).inverse()
    x3 = slope * slope - x1 - x2
    y3 = slope * (x1 - x3) - y1
    return (x3, y3)


def _g2_mul(point, scalar: int):
    result = None
    for bit in bin(scalar)[2:]:
        result = _g2_add(result, result)
        if bit == "1":
            result = _g2_add(result, point)
    return result


def _g2_frobenius(point):
    x, y = point
    return (x.conjugate() * _FROBENIUS_X, y.conjugate() * _FROBENIUS_Y)


# --- Degree-12 extension: polynomials in w modulo w^12 - 18 w^6 + 82 -------

_F12_ONE = (1,) + (0,) * 11


def _f12_mul(x: tuple, y: tuple) -> tuple:
    product = [0] * 23
    for i, xi in enumerate(x):
        if xi:
            for j, yj in enumerate(y):
                product[i + j] += xi * yj
    for degree in range(22, 11, -1):
        top = product[degree]
        if top:
            product[degree - 6] += 18 * top
            product[degree - 12] -= 82 * top
    return tuple(value % _P for value in product[:12])


def _f12_pow(base: tuple, exponent: int) -> tuple:
    result = _F12_ONE
    for bit in bin(exponent)[2:]:
        result = _f12_mul(result, result)
        if bit == "1":
            result = _f12_mul(result, base)
    return result


def _f12_sparse(constant: int, terms: list[tuple[int, _Fq2]]) -> tuple:
    """Build ``constant + sum(c * w^k)`` with each c in the quadratic extension."""
    coeffs = [0] * 12
    coeffs[0] = constant
    for power, value in terms:
        # i maps to w^6 - 9
        coeffs[power] += value.a - 9 * value.b
        coeffs[power + 6] += value.b
    return tuple(c % _P for c in coeffs)


def _line(r1, r2, xp: int, yp: int) -> tuple:
    """Line through twisted r1 and r2 evaluated at the G1 point (xp, yp)."""
    x1, y1 = r1
    x2, y2 = r2
    if x1 != x2:
        slope = (y2 - y1) * (x2 - x1).inverse()
    elif y1 == y2:
        slope = x1 * x1 * 3 * (y1 * 2).inverse()
    else:
        return _f12_sparse(xp, [(2, -x1)])
    return _f12_sparse(-yp, [(1, slope * xp), (3, y1 - slope * x1)])


def _miller_loop(q, p) -> tuple:
    xp, yp = p
    r = q
    f = _F12_ONE
    for bit in bin(_ATE_LOOP_COUNT)[3:]:
        f = _f12_mul(_f12_mul(f, f), _line(r, r, xp, yp))
        r = _g2_add(r, r)
        if bit == "1":
            f = _f12_mul(f, _line(r, q, xp, yp))
            r = _g2_add(r, q)
    q1 = _g2_frobenius(q)
    q2x, q2y = _g2_frobenius(q1)
    neg_q2 = (q2x, -q2y)
    f = _f12_mul(f, _line(r, q1, xp, yp))
    r = _g2_add(r, q1)
    return _f12_mul(f, _line(r, neg_q2, xp, yp))


# --- Input decoding ----------------------------------------------------------


def _read_fq(data: bytes, pos: int) -> int:
    value = int.from_bytes(data[pos : pos + 32], "big")
    if value >= _P:
        raise PrecompileError(PrecompileErrorKind.BN128_FIELD_POINT_NOT_A_MEMBER)
    return value


def _make_g1(x: int, y: int):
    if x == 0 and y == 0:
        return None
    if not _g1_on_curve(x, y):
        raise PrecompileError(PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE)
    return (x, y)


def _make_g2(x: _Fq2, y: _Fq2):
    if x.is_zero() and y.is_zero():
        return None
    point = (x, y)
    if not _g2_on_curve(x, y) or _g2_mul(point, CURVE_ORDER) is not None:
        raise PrecompileError(PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE)
    return point


def _read_point(data: bytes, pos: int):
    x = _read_fq(data, pos)
    y = _read_fq(data, pos + 32)
    return _make_g1(x, y)


def _pad(data: bytes, length: int) -> bytes:
    return bytes(data[:length]).ljust(length, b"\x00")


def _encode_g1(point) -> bytes:
    if point is None:
        return bytes(64)
    x, y = point
    return x.to_bytes(32, "big") + y.to_bytes(32, "big")


# --- Operations ----------------------------------------------------------------


def run_add(data: bytes) -> bytes:
    """Sum of two G1 points given as 128 bytes (zero-padded or truncated)."""
    data = _pad(data, ADD_INPUT_LEN)
    p1 = _read_point(data, 0)
    p2 = _read_point(data, 64)
    return _encode_g1(_g1_add(p1, p2))


def run_mul(data: bytes) -> bytes:
    """A G1 point times a 256-bit scalar, input zero-padded to 128 bytes."""
    data = _pad(data, MUL_INPUT_LEN)
    point = _read_point(data, 0)
    scalar = int.from_bytes(data[64:96], "big") % CURVE_ORDER
    return _encode_g1(_g1_mul(point, scalar))


def run_pair(
    data: bytes, pair_per_point_cost: int, pair_base_cost: int, gas_limit: int
) -> PrecompileResult:
    """Check whether the product of pairings of the given (G1, G2) pairs is one."""
    data = bytes(data)
    gas_used = len(data) // PAIR_ELEMENT_LEN * pair_per_point_cost + pair_base_cost
    if gas_used > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    if len(data) % PAIR_ELEMENT_LEN:
        raise PrecompileError(PrecompileErrorKind.BN128_PAIR_LENGTH)

    pairs = []
    for start in range(0, len(data), PAIR_ELEMENT_LEN):
        ax, ay, bay, bax, bby, bbx = (
            _read_fq(data, start + offset) for offset in range(0, PAIR_ELEMENT_LEN, 32)
        )
        a = _make_g1(ax, ay)
        b = _make_g2(_Fq2(bax, bay), _Fq2(bbx, bby))
        pairs.append((a, b))

    product = _F12_ONE
    for a, b in pairs:
        if a is not None and b is not None:
            product = _f12_mul(product, _miller_loop(b, a))
    success = product == _F12_ONE or _f12_pow(product, _FINAL_EXPONENT) == _F12_ONE
    return PrecompileResult(gas_used, int(success).to_bytes(32, "big"))


def _charged(cost: int, gas_limit: int) -> None:
    if cost > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)


def add_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """Point addition at the Istanbul price."""
    _charged(ISTANBUL_ADD_GAS, gas_limit)
    return PrecompileResult(ISTANBUL_ADD_GAS, run_add(data))


def add_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """Point addition at the Byzantium price."""
    _charged(BYZANTIUM_ADD_GAS, gas_limit)
    return PrecompileResult(BYZANTIUM_ADD_GAS, run_add(data))


def mul_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """Scalar multiplication at the Istanbul price."""
    _charged(ISTANBUL_MUL_GAS, gas_limit)
    return PrecompileResult(ISTANBUL_MUL_GAS, run_mul(data))


def mul_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """Scalar multiplication at the Byzantium price."""
    _charged(BYZANTIUM_MUL_GAS, gas_limit)
    return PrecompileResult(BYZANTIUM_MUL_GAS, run_mul(data))


def pair_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """Pairing check at the Istanbul prices."""
    return run_pair(data, ISTANBUL_PAIR_PER_POINT, ISTANBUL_PAIR_BASE, gas_limit)


def pair_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """Pairing check at the Byzantium prices."""
    return run_pair(data, BYZANTIUM_PAIR_PER_POINT, BYZANTIUM_PAIR_BASE, gas_limit)