from app.services.address import (
    checksum,
    has_address_shape,
    is_bytes32_hex,
    is_hex_string,
    is_valid_evm_address,
)

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def test_address_validation_accepts_single_case_and_checksum():
    assert is_valid_evm_address(USDC) is True
    assert is_valid_evm_address(USDC.lower()) is True
    assert is_valid_evm_address("0x" + USDC[2:].upper()) is True


def test_address_validation_rejects_bad_checksum_and_length():
    bad_checksum = USDC[:-1] + "b"
    assert is_valid_evm_address(bad_checksum) is False
    assert is_valid_evm_address(USDC[:-1]) is False
    assert is_valid_evm_address("") is False
    assert is_valid_evm_address(None) is False


def test_address_shape_ignores_checksum():
    assert has_address_shape(USDC[:-1] + "b") is True
    assert has_address_shape(USDC.lower()) is True
    assert has_address_shape(USDC[:-1]) is False
    assert has_address_shape("0x" + "g" * 40) is False
    assert has_address_shape(None) is False


def test_checksum_normalizes_lowercase():
    assert checksum(USDC.lower()) == USDC


def test_bytes32_and_hex_helpers():
    assert is_bytes32_hex("0x" + "ab" * 32)
    assert not is_bytes32_hex("0x" + "ab" * 31)
    assert not is_bytes32_hex("ab" * 32)
    assert is_hex_string("0x")
    assert is_hex_string("deadbeef")
    assert not is_hex_string("deadbeef", require_prefix=True)
    assert not is_hex_string("0xzz")
