"""ECRECOVER precompile: signer address from a secp256k1 signature."""

from __future__ import annotations

from evmkit.primitives.bits import B256
from evmkit.primitives.precompile_types import (
    PrecompileError,
    PrecompileErrorKind,
    PrecompileResult,
)
from evmkit.primitives.utilities import keccak256

ECRECOVER_BASE = 3_000

P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8
_B = 7


def _add(p1, p2):
    if p1 is None:
        return p2
    if p2 is None:
        return p1
    x1, y1 = p1
    x2, y2 = p2
    if x1 == x2:
        if (y1 + y2) % P == 0:
            return None
        slope = 3 * x1 * x1 * pow(2 * y1, -1, P) % P
    else:
        slope = (y2 - y1) * pow(x2 - x1, -1, P) % P
    x3 = (slope * slope - x1 - x2) % P
    return (x3, (slope * (x1 - x3) - y1) % P)


def _mul(point, scalar: int):
    result = None
    for bit in bin(scalar)[2:]:
        result = _add(result, result)
        if bit == "1":
            result = _add(result, point)
    return result


def _lift_x(x: int, odd: bool):
    rhs = (pow(x, 3, P) + _B) % P
    y = pow(rhs, (P + 1) // 4, P)
    if y * y % P != rhs:
        raise ValueError("signature r is not the x coordinate of a curve point")
    if (y & 1) != odd:
        y = P - y
    return (x, y)


def ecrecover(sig: bytes, msg: bytes) -> B256:
    """Recover the signer of the 32-byte prehash ``msg`` from a 65-byte ``r||s||recid``.

    Returns the keccak-256 hash of the public key with its first 12 bytes zeroed,
    and raises ValueError if no key can be recovered.
    """
    sig = bytes(sig)
    msg = bytes(msg)
    if len(sig) != 65 or len(msg) != 32:
        raise ValueError("signature must be 65 bytes and message 32 bytes")
    recid = sig[64]
    if recid > 3:
        raise ValueError("recovery id must be between 0 and 3")
    r = int.from_bytes(sig[:32], "big")
    s = int.from_bytes(sig[32:64], "big")
    if not (0 < r < N and 0 < s < N):
        raise ValueError("signature scalars out of range")

    x = r + N if recid & 2 else r
    if x >= P:
        raise ValueError("reduced x coordinate out of range")
    big_r = _lift_x(x, bool(recid & 1))

    z = int.from_bytes(msg, "big") % N
    r_inv = pow(r, -1, N)
    u1 = (-z * r_inv) % N
    u2 = (s * r_inv) % N
    public = _add(_mul((GX, GY), u1), _mul(big_r, u2))
    if public is None:
        raise ValueError("recovered the point at infinity")

    qx, qy = public
    digest = keccak256(qx.to_bytes(32, "big") + qy.to_bytes(32, "big"))
    return B256(bytes(12) + bytes(digest)[12:])


def ec_recover_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """Read hash, v, r, s (zero-padded to 128 bytes) and return the signer address.

    Malformed v or an unrecoverable signature gives empty output, not an error.
    """
    if ECRECOVER_BASE > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    padded = bytes(data[:128]).ljust(128, b"\x00")

    if any(padded[32:63]) or padded[63] not in (27, 28):
        return PrecompileResult(ECRECOVER_BASE, b"")

    msg = padded[:32]
    sig = padded[64:128] + bytes([padded[63] - 27])
    try:
        output = bytes(ecrecover(sig, msg))
    except ValueError:
        output = b""
    return PrecompileResult(ECRECOVER_BASE, output)