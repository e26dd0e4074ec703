"""Data model for the Fusion+ order lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...services.address import checksum, is_hex_string, is_valid_evm_address
from .constants import (
    DEFAULT_PRESET,
    DEFAULT_SECRETS_COUNT,
    DOMAIN_NAME,
    DOMAIN_VERSION,
    EIP712_DOMAIN_TYPE,
    EMPTY_EXTENSION,
    ORDER_FIELD_MAP,
    ORDER_TYPE,
)

UINT256_MAX = 2**256 - 1


def parse_uint256(value: Any) -> int:
    """Coerce an int, decimal string or 0x-hex string into a uint256."""

    if isinstance(value, bool):
        raise ValueError("boolean is not a uint256")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            number = int(text, 16)
        elif text.isdigit():
            number = int(text)
        else:
            raise ValueError(f"not an unsigned integer: {value!r}")
    else:
        raise ValueError(f"not an unsigned integer: {value!r}")
    if number < 0 or number > UINT256_MAX:
        raise ValueError("value out of uint256 range")
    return number


def order_types() -> Dict[str, List[Dict[str, str]]]:
    """The fixed type schema advertised to signers."""
    return {"Order": [dict(item) for item in ORDER_TYPE]}


@dataclass(frozen=True)
class SwapIntent:
    """User-supplied swap request, already validated at the boundary."""

    from_chain_id: int
    to_chain_id: int
    src_token: str
    dst_token: str
    amount: str
    wallet_address: str
    receiver: Optional[str] = None
    permit: Optional[str] = None
    is_permit2: bool = False
    preset: Optional[str] = None


@dataclass
class FusionQuote:
    """View over an aggregator quote; the raw payload is kept verbatim."""

    quote_id: Optional[str]
    presets: Dict[str, Any]
    recommended_preset: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "FusionQuote":
        presets = payload.get("presets")
        quote_id = payload.get("quoteId")
        return cls(
            quote_id=str(quote_id) if quote_id else None,
            presets=presets if isinstance(presets, dict) else {},
            recommended_preset=payload.get("recommendedPreset") or None,
            raw=payload,
        )

    @property
    def dst_token_amount(self) -> Optional[str]:
        amount = self.raw.get("dstTokenAmount")
        return str(amount) if amount is not None else None

    def resolve_preset(self, requested: Optional[str] = None) -> str:
        return requested or self.recommended_preset or DEFAULT_PRESET

    def secrets_count_for(self, preset: str) -> int:
        """Secret count for ``preset``; falls back to the default when the table lacks it."""

        entry = self.presets.get(preset)
        if not isinstance(entry, dict):
            return DEFAULT_SECRETS_COUNT
        try:
            count = int(entry.get("secretsCount") or 0)
        except (TypeError, ValueError):
            return DEFAULT_SECRETS_COUNT
        return count if count > 0 else DEFAULT_SECRETS_COUNT


class LimitOrder(BaseModel):
    """The limit-order struct covered by the typed-data signature."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    salt: int
    maker: str
    receiver: str
    maker_asset: str = Field(alias="makerAsset")
    taker_asset: str = Field(alias="takerAsset")
    making_amount: int = Field(alias="makingAmount")
    taking_amount: int = Field(alias="takingAmount")
    maker_traits: int = Field(alias="makerTraits")

    @field_validator("salt", "making_amount", "taking_amount", "maker_traits", mode="before")
    @classmethod
    def _uint256(cls, value: Any) -> int:
        return parse_uint256(value)

    @field_validator("maker", "receiver", "maker_asset", "taker_asset")
    @classmethod
    def _address(cls, value: str) -> str:
        if not is_valid_evm_address(value):
            raise ValueError(f"invalid address: {value}")
        return value

    def to_wire(self) -> Dict[str, str]:
        """Order in aggregator wire form: camelCase keys, decimal-string integers."""
        wire: Dict[str, str] = {}
        for wire_name, attr in ORDER_FIELD_MAP.items():
            value = getattr(self, attr)
            wire[wire_name] = str(value) if isinstance(value, int) else value
        return wire

    def to_typed_message(self) -> Dict[str, Any]:
        """Order as a typed-data message, in schema field order."""
        message: Dict[str, Any] = {}
        for item in ORDER_TYPE:
            value = getattr(self, ORDER_FIELD_MAP[item["name"]])
            message[item["name"]] = checksum(value) if item["type"] == "address" else value
        return message


def _normalize_extension(value: Optional[str]) -> str:
    if not value:
        return EMPTY_EXTENSION
    if not is_hex_string(value, require_prefix=True):
        raise ValueError("extension must be a 0x-prefixed hex string")
    return value


class TypedDataDomain(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = DOMAIN_NAME
    version: str = DOMAIN_VERSION
    chain_id: int = Field(alias="chainId")
    verifying_contract: str = Field(alias="verifyingContract")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_typed_domain(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": checksum(self.verifying_contract),
        }


def build_typed_data(domain: TypedDataDomain, order: LimitOrder) -> Dict[str, Any]:
    """Full EIP-712 payload for ``order`` under ``domain``."""
    return {
        "types": {
            "EIP712Domain": [dict(item) for item in EIP712_DOMAIN_TYPE],
            **order_types(),
        },
        "primaryType": "Order",
        "domain": domain.to_typed_domain(),
        "message": order.to_typed_message(),
    }


class UnsignedOrder(BaseModel):
    """Aggregator-built order awaiting the maker's signature."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order: LimitOrder
    verifying_contract: str = Field(alias="verifyingContract")
    extension: str = EMPTY_EXTENSION

    @field_validator("verifying_contract")
    @classmethod
    def _contract(cls, value: str) -> str:
        if not is_valid_evm_address(value):
            raise ValueError(f"invalid verifying contract: {value}")
        return value

    @field_validator("extension", mode="before")
    @classmethod
    def _extension(cls, value: Optional[str]) -> str:
        return _normalize_extension(value)


@dataclass
class CreatedOrder:
    """Result of the quote → build pipeline, ready for signing."""

    unsigned: UnsignedOrder
    quote_id: str
    secret_hashes: List[str]
    src_chain_id: int
    preset: str = DEFAULT_PRESET
    quote: Optional[FusionQuote] = None

    @property
    def domain(self) -> TypedDataDomain:
        return TypedDataDomain(
            chain_id=self.src_chain_id,
            verifying_contract=self.unsigned.verifying_contract,
        )

    @property
    def secrets_count(self) -> int:
        return len(self.secret_hashes)

    def typed_data(self) -> Dict[str, Any]:
        return build_typed_data(self.domain, self.unsigned.order)

    def to_response(self) -> Dict[str, Any]:
        return {
            "order": self.unsigned.order.to_wire(),
            "verifyingContract": self.unsigned.verifying_contract,
            "extension": self.unsigned.extension,
            "quoteId": self.quote_id,
            "secretHashes": list(self.secret_hashes),
            "srcChainId": self.src_chain_id,
            "preset": self.preset,
            "domain": self.domain.to_dict(),
            "types": order_types(),
        }


@dataclass
class SignedOrder:
    """The unit submitted to the relayer."""

    order: LimitOrder
    src_chain_id: int
    signature: str
    quote_id: str = ""
    extension: str = EMPTY_EXTENSION
    secret_hashes: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.extension = _normalize_extension(self.extension)
        self.secret_hashes = list(self.secret_hashes or [])
        self.quote_id = self.quote_id or ""

    def to_wire(self) -> Dict[str, Any]:
        return {
            "order": self.order.to_wire(),
            "srcChainId": self.src_chain_id,
            "signature": self.signature,
            "extension": self.extension,
            "quoteId": self.quote_id,
            "secretHashes": list(self.secret_hashes),
        }


@dataclass
class SubmittedOrder:
    order_hash: Optional[str]
    signed: SignedOrder
    upstream: Any = None

    def to_response(self) -> Dict[str, Any]:
        return {
            "orderHash": self.order_hash,
            "order": self.signed.order.to_wire(),
            "signature": self.signed.signature,
            "quoteId": self.signed.quote_id,
        }


@dataclass
class TokenPairValidation:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


__all__ = [
    "UINT256_MAX",
    "parse_uint256",
    "order_types",
    "build_typed_data",
    "SwapIntent",
    "FusionQuote",
    "LimitOrder",
    "TypedDataDomain",
    "UnsignedOrder",
    "CreatedOrder",
    "SignedOrder",
    "SubmittedOrder",
    "TokenPairValidation",
]
