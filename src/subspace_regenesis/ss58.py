"""
SS58 address codec.

Layout: prefix (1 or 2 bytes) | 32-byte public key | 2-byte checksum, base58
encoded. The checksum is the first two bytes of blake2b-512 over
b"SS58PRE" + prefix + key.
"""
from __future__ import annotations

import hashlib

import base58

from .project_constants import ACCOUNT_ID_LEN, DEFAULT_SS58_FORMAT

SS58_PREFIX = b"SS58PRE"
CHECKSUM_LEN = 2

# Reserved identifiers that never appear as an address prefix
_RESERVED_FORMATS = (46, 47)

# Largest identifier a two-byte prefix can carry
MAX_SS58_FORMAT = 16383


def _checksum(payload: bytes) -> bytes:
    return hashlib.blake2b(SS58_PREFIX + payload, digest_size=64).digest()[:CHECKSUM_LEN]


def validate_ss58_format(ss58_format: int) -> None:
    if not 0 <= ss58_format <= MAX_SS58_FORMAT or ss58_format in _RESERVED_FORMATS:
        raise ValueError(f"Invalid SS58 format: {ss58_format}")


def _encode_prefix(ss58_format: int) -> bytes:
    validate_ss58_format(ss58_format)
    if ss58_format < 64:
        return bytes([ss58_format])
    first = ((ss58_format & 0b0000_0000_1111_1100) >> 2) | 0b0100_0000
    second = (ss58_format >> 8) | ((ss58_format & 0b0000_0000_0000_0011) << 6)
    return bytes([first, second])


def ss58_decode(address: str) -> tuple[bytes, int]:
    """Returns (account_id, ss58_format). Raises ValueError on any malformed input."""
    try:
        raw = base58.b58decode(address)
    except ValueError as e:
        raise ValueError(f"Not base58: {address!r}") from e

    if not raw:
        raise ValueError("Empty address")

    if raw[0] & 0b1000_0000:
        raise ValueError(f"Invalid address prefix byte {raw[0]}: {address!r}")
    if raw[0] & 0b0100_0000:
        if len(raw) < 2:
            raise ValueError(f"Truncated address: {address!r}")
        prefix_len = 2
        ss58_format = (
            ((raw[0] & 0b0011_1111) << 2) | (raw[1] >> 6) | ((raw[1] & 0b0011_1111) << 8)
        )
    else:
        prefix_len = 1
        ss58_format = raw[0]

    if len(raw) != prefix_len + ACCOUNT_ID_LEN + CHECKSUM_LEN:
        raise ValueError(f"Wrong address length ({len(raw)} bytes): {address!r}")
    if ss58_format in _RESERVED_FORMATS:
        raise ValueError(f"Reserved SS58 format {ss58_format}: {address!r}")

    payload, checksum = raw[:-CHECKSUM_LEN], raw[-CHECKSUM_LEN:]
    if _checksum(payload) != checksum:
        raise ValueError(f"Bad checksum: {address!r}")

    return payload[prefix_len:], ss58_format


def ss58_encode(account_id: bytes, ss58_format: int = DEFAULT_SS58_FORMAT) -> str:
    if len(account_id) != ACCOUNT_ID_LEN:
        raise ValueError(f"Account id must be {ACCOUNT_ID_LEN} bytes, got {len(account_id)}")
    payload = _encode_prefix(ss58_format) + account_id
    return base58.b58encode(payload + _checksum(payload)).decode("ascii")
