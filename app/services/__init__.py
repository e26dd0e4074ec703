"""Service layer helpers"""

from .address import checksum, has_address_shape, is_bytes32_hex, is_hex_string, is_valid_evm_address

__all__ = [
    "checksum",
    "has_address_shape",
    "is_bytes32_hex",
    "is_hex_string",
    "is_valid_evm_address",
]
