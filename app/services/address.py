"""Helpers for validating EVM addresses and 32-byte hex values."""

from __future__ import annotations

import re

from eth_utils import is_checksum_address, to_checksum_address

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
_BYTES32_RE = re.compile(r"^0x[a-fA-F0-9]{64}$")
_HEX_RE = re.compile(r"^(0x)?[a-fA-F0-9]*$")


def is_valid_evm_address(address: str | None) -> bool:
    """Return True for a 20-byte hex address.

    All-lowercase and all-uppercase addresses are accepted as-is; mixed case
    must carry a valid EIP-55 checksum.
    """

    if not address or not _EVM_ADDRESS_RE.fullmatch(address):
        return False
    body = address[2:]
    if body.islower() or body.isupper() or body.isdigit():
        return True
    return is_checksum_address(address)


def has_address_shape(address: str | None) -> bool:
    """True for 0x plus 40 hex digits, regardless of checksum."""
    return bool(address) and bool(_EVM_ADDRESS_RE.fullmatch(address))


def checksum(address: str) -> str:
    return to_checksum_address(address)


def is_bytes32_hex(value: str | None) -> bool:
    return bool(value) and bool(_BYTES32_RE.fullmatch(value))


def is_hex_string(value: str | None, *, require_prefix: bool = False) -> bool:
    if value is None:
        return False
    if require_prefix and not value.startswith("0x"):
        return False
    return bool(_HEX_RE.fullmatch(value))


__all__ = [
    "has_address_shape",
    "is_valid_evm_address",
    "checksum",
    "is_bytes32_hex",
    "is_hex_string",
]
