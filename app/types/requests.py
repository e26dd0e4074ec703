from typing import List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from ..core.fusion.constants import DEFAULT_PRESET
from ..core.fusion.models import LimitOrder, SignedOrder, SwapIntent
from ..core.fusion.units import MAX_DECIMALS
from ..services.address import has_address_shape, is_bytes32_hex, is_hex_string, is_valid_evm_address

_ADDRESS_MESSAGES = {
    "srcToken": "Invalid source token address",
    "dstToken": "Invalid destination token address",
    "walletAddress": "Wallet address is required",
    "receiver": "Invalid receiver address",
}


def _require_address(value: str, field_name: str) -> str:
    if not is_valid_evm_address(value):
        message = _ADDRESS_MESSAGES.get(field_name, "Invalid address")
        if has_address_shape(value):
            # Well-formed hex whose mixed case fails the checksum.
            message = f"{message}: invalid EIP-55 checksum"
        raise ValueError(message)
    return value


class TokenPairRequest(BaseModel):
    fromChainId: int = Field(..., gt=0, description="Source chain ID")
    toChainId: int = Field(..., gt=0, description="Destination chain ID")
    srcToken: str = Field(..., description="Token sold on the source chain")
    dstToken: str = Field(..., description="Token received on the destination chain")

    @field_validator("srcToken", "dstToken")
    @classmethod
    def _tokens(cls, value: str, info: ValidationInfo) -> str:
        return _require_address(value, info.field_name)


class QuoteRequest(TokenPairRequest):
    amount: str = Field(..., description="Amount in base units (decimal integer string)")
    walletAddress: str = Field(..., description="Maker wallet address")

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: str) -> str:
        if not (value.isascii() and value.isdigit()):
            raise ValueError("Amount must be a base-unit integer string")
        return value

    @field_validator("walletAddress")
    @classmethod
    def _wallet(cls, value: str, info: ValidationInfo) -> str:
        return _require_address(value, info.field_name)

    def to_intent(self) -> SwapIntent:
        return SwapIntent(
            from_chain_id=self.fromChainId,
            to_chain_id=self.toChainId,
            src_token=self.srcToken,
            dst_token=self.dstToken,
            amount=self.amount,
            wallet_address=self.walletAddress,
        )


class CreateOrderRequest(QuoteRequest):
    permit: Optional[str] = Field(default=None, description="Optional permit blob")
    isPermit2: bool = Field(default=False, description="Whether the permit is a Permit2 signature")
    receiver: Optional[str] = Field(default=None, description="Receiver on the destination chain")
    preset: Optional[str] = Field(
        default=None,
        min_length=1,
        description=f"Execution preset (fast/medium/slow); defaults to the quote's recommendation, then {DEFAULT_PRESET}",
    )

    @field_validator("receiver")
    @classmethod
    def _receiver(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None:
            return value
        return _require_address(value, info.field_name)

    @field_validator("permit")
    @classmethod
    def _permit(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_hex_string(value, require_prefix=True):
            raise ValueError("Permit must be a 0x-prefixed hex string")
        return value

    def to_intent(self) -> SwapIntent:
        return SwapIntent(
            from_chain_id=self.fromChainId,
            to_chain_id=self.toChainId,
            src_token=self.srcToken,
            dst_token=self.dstToken,
            amount=self.amount,
            wallet_address=self.walletAddress,
            receiver=self.receiver,
            permit=self.permit,
            is_permit2=self.isPermit2,
            preset=self.preset,
        )


class SubmitOrderRequest(BaseModel):
    order: LimitOrder = Field(..., description="Limit order struct as returned by /api/orders/create")
    srcChainId: int = Field(..., gt=0, description="Source chain ID")
    signature: str = Field(..., min_length=1, description="Maker's typed-data signature")
    extension: Optional[str] = Field(default=None, description="Order extension (defaults to 0x)")
    quoteId: str = Field(..., description="Quote the order was built from")
    secretHashes: List[str] = Field(..., description="Secret hash commitments returned at creation")

    @field_validator("extension")
    @classmethod
    def _extension(cls, value: Optional[str]) -> Optional[str]:
        if value and not is_hex_string(value, require_prefix=True):
            raise ValueError("Extension must be a 0x-prefixed hex string")
        return value

    @field_validator("secretHashes")
    @classmethod
    def _secret_hashes(cls, value: List[str]) -> List[str]:
        for item in value:
            if not is_bytes32_hex(item):
                raise ValueError("Secret hashes must be 0x-prefixed 32-byte hex strings")
        return value

    def to_signed_order(self) -> SignedOrder:
        return SignedOrder(
            order=self.order,
            src_chain_id=self.srcChainId,
            signature=self.signature,
            quote_id=self.quoteId,
            extension=self.extension or "0x",
            secret_hashes=self.secretHashes,
        )


class CancelOrderRequest(BaseModel):
    privateKey: str = Field(..., min_length=1, repr=False, description="Maker private key used to sign the cancellation")


class ToWeiRequest(BaseModel):
    amount: str = Field(..., description="Human-readable decimal amount")
    decimals: int = Field(default=18, ge=0, le=MAX_DECIMALS)


class FromWeiRequest(BaseModel):
    wei: str = Field(..., description="Base-unit integer amount")
    decimals: int = Field(default=18, ge=0, le=MAX_DECIMALS)
