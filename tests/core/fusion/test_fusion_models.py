import pytest
from pydantic import ValidationError

from conftest import VERIFYING_CONTRACT, build_payload, order_wire, quote_payload

from app.core.fusion.constants import DEFAULT_SECRETS_COUNT
from app.core.fusion.models import (
    UINT256_MAX,
    CreatedOrder,
    FusionQuote,
    LimitOrder,
    SignedOrder,
    UnsignedOrder,
    parse_uint256,
)


def test_parse_uint256_accepts_decimal_hex_and_int():
    assert parse_uint256("42") == 42
    assert parse_uint256("0x2a") == 42
    assert parse_uint256(42) == 42


@pytest.mark.parametrize("value", [-1, UINT256_MAX + 1, "1.5", True, None])
def test_parse_uint256_rejects_out_of_range_and_garbage(value):
    with pytest.raises(ValueError):
        parse_uint256(value)


def test_limit_order_round_trips_wire_strings():
    order = LimitOrder.model_validate(order_wire())

    assert order.making_amount == 1_000_000
    assert order.to_wire() == order_wire()


def test_limit_order_rejects_bad_addresses():
    with pytest.raises(ValidationError):
        LimitOrder.model_validate(order_wire(maker="0x1234"))


def test_typed_message_uses_checksummed_addresses_and_integers():
    message = LimitOrder.model_validate(order_wire()).to_typed_message()

    assert list(message) == [
        "salt", "maker", "receiver", "makerAsset", "takerAsset", "makingAmount", "takingAmount", "makerTraits",
    ]
    assert message["makerAsset"] == "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
    assert isinstance(message["salt"], int)


def test_unsigned_order_defaults_missing_extension():
    unsigned = UnsignedOrder.model_validate(build_payload(extension=None))

    assert unsigned.extension == "0x"


def test_quote_preset_resolution():
    quote = FusionQuote.from_payload(quote_payload())

    assert quote.resolve_preset() == "medium"
    assert quote.resolve_preset("slow") == "slow"
    assert quote.secrets_count_for("slow") == 2
    assert quote.secrets_count_for("custom") == DEFAULT_SECRETS_COUNT


@pytest.mark.parametrize("entry", [{}, {"secretsCount": 0}, {"secretsCount": "many"}, "fast"])
def test_unusable_secret_counts_fall_back_to_default(entry):
    quote = FusionQuote.from_payload(quote_payload(presets={"fast": entry}))

    assert quote.secrets_count_for("fast") == DEFAULT_SECRETS_COUNT


def test_created_order_response_carries_signing_payload():
    created = CreatedOrder(
        unsigned=UnsignedOrder.model_validate(build_payload()),
        quote_id="quote-123",
        secret_hashes=["0x" + "00" * 32],
        src_chain_id=137,
        preset="fast",
    )

    response = created.to_response()

    assert response["domain"] == {
        "name": "1inch Fusion+",
        "version": "1",
        "chainId": 137,
        "verifyingContract": VERIFYING_CONTRACT,
    }
    assert [field["name"] for field in response["types"]["Order"]][0] == "salt"
    assert response["order"]["salt"] == order_wire()["salt"]
    assert created.typed_data()["primaryType"] == "Order"


def test_signed_order_normalizes_empty_extension():
    signed = SignedOrder(
        order=LimitOrder.model_validate(order_wire()),
        src_chain_id=1,
        signature="0xdead",
        extension="",
        secret_hashes=None,
    )

    assert signed.to_wire()["extension"] == "0x"
    assert signed.to_wire()["secretHashes"] == []
