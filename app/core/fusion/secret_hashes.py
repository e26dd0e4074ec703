"""Secret-hash commitments for cross-chain settlement.

Each commitment is the keccak256 of a fresh 32-byte secret drawn from the
OS CSPRNG. Secrets are discarded here; revealing them belongs to the
settlement layer, never to this service.
"""

from __future__ import annotations

import secrets
from typing import List

from eth_utils import keccak, to_hex

SECRET_SIZE_BYTES = 32


def generate_secret_hash() -> str:
    secret = secrets.token_bytes(SECRET_SIZE_BYTES)
    return to_hex(keccak(secret))


def generate_secret_hashes(count: int) -> List[str]:
    """Return ``count`` independent 0x-prefixed 32-byte hashes."""

    if count < 1:
        raise ValueError("secret hash count must be positive")
    return [generate_secret_hash() for _ in range(count)]


__all__ = ["SECRET_SIZE_BYTES", "generate_secret_hash", "generate_secret_hashes"]
