"""FusionOrderManager drives the quote → build → sign → submit order lifecycle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Set

from pydantic import ValidationError

from ...cache import TTLCache
from ...services.address import is_bytes32_hex
from .constants import TOKEN_NOT_SUPPORTED_DESCRIPTION
from .errors import (
    CancellationRejectedError,
    ErrorContext,
    InvalidUpstreamResponseError,
    OrderValidationError,
    PipelineStep,
    QuoteUnavailableError,
    SigningError,
    SubmissionRejectedError,
    TokenNotSupportedError,
    UpstreamError,
)
from .models import (
    CreatedOrder,
    FusionQuote,
    SignedOrder,
    SubmittedOrder,
    SwapIntent,
    TokenPairValidation,
    UnsignedOrder,
)
from .secret_hashes import generate_secret_hashes
from .signing import SigningAdapter

if TYPE_CHECKING:
    from ...providers.oneinch import OneInchFusionProvider


class FusionOrderManager:
    """Stateless orchestration of Fusion+ orders against the 1inch API.

    Nothing is persisted between calls: every ``create_order`` fetches a
    fresh quote and a fresh secret-hash set, so a failed pipeline is retried
    by simply calling it again.
    """

    def __init__(
        self,
        *,
        provider: "OneInchFusionProvider",
        signer: Optional[SigningAdapter] = None,
        token_cache: Optional[TTLCache] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._provider = provider
        self._signer = signer
        self._token_cache = token_cache or TTLCache(default_ttl=0)
        self._logger = logger or logging.getLogger(__name__)

    @property
    def provider(self) -> "OneInchFusionProvider":
        return self._provider

    # ------------------------------------------------------------------
    # Quote
    # ------------------------------------------------------------------

    async def get_quote(self, intent: SwapIntent) -> Dict[str, Any]:
        """Fetch a raw quote, classifying token-support failures."""

        try:
            payload = await self._provider.quote(
                src_chain=intent.from_chain_id,
                dst_chain=intent.to_chain_id,
                src_token=intent.src_token,
                dst_token=intent.dst_token,
                wallet_address=intent.wallet_address,
                amount=intent.amount,
            )
        except UpstreamError as exc:
            if self._is_token_not_supported(exc):
                raise TokenNotSupportedError(
                    f"Token not supported: {intent.src_token} on chain {intent.from_chain_id} "
                    f"or {intent.dst_token} on chain {intent.to_chain_id}. "
                    "Please check if these tokens are supported by 1inch Fusion+ for cross-chain swaps.",
                    src_token=intent.src_token,
                    dst_token=intent.dst_token,
                    context=exc.context,
                ) from exc
            raise QuoteUnavailableError.from_upstream(exc, step=PipelineStep.QUOTE) from exc

        if not isinstance(payload, dict) or not payload:
            raise QuoteUnavailableError(
                "Quote API returned no usable response",
                step=PipelineStep.QUOTE,
                status_code=502,
                context=ErrorContext(payload=payload),
            )
        return payload

    @staticmethod
    def _is_token_not_supported(exc: UpstreamError) -> bool:
        if exc.upstream_status != 400 or not isinstance(exc.payload, dict):
            return False
        description = exc.payload.get("description")
        return isinstance(description, str) and description.strip().lower() == TOKEN_NOT_SUPPORTED_DESCRIPTION

    # ------------------------------------------------------------------
    # Create (quote → secrets → build)
    # ------------------------------------------------------------------

    async def create_order(self, intent: SwapIntent) -> CreatedOrder:
        quote = FusionQuote.from_payload(await self.get_quote(intent))
        if not quote.quote_id:
            raise InvalidUpstreamResponseError(
                "No quoteId received from quote API",
                step=PipelineStep.QUOTE,
                context=ErrorContext(payload=quote.raw),
            )

        preset = quote.resolve_preset(intent.preset)
        secrets_count = quote.secrets_count_for(preset)
        secret_hashes = generate_secret_hashes(secrets_count)
        self._logger.info(
            "Quote %s received; preset=%s secretsCount=%s",
            quote.quote_id,
            preset,
            secrets_count,
        )

        try:
            built = await self._provider.build_order(
                quote_id=quote.quote_id,
                secrets_hash_list=secret_hashes,
                preset=preset,
                permit=intent.permit,
                is_permit2=intent.is_permit2,
                receiver=intent.receiver,
            )
        except UpstreamError as exc:
            raise UpstreamError.from_upstream(exc, step=PipelineStep.BUILD) from exc

        unsigned = self._parse_unsigned(built)
        return CreatedOrder(
            unsigned=unsigned,
            quote_id=quote.quote_id,
            secret_hashes=secret_hashes,
            src_chain_id=intent.from_chain_id,
            preset=preset,
            quote=quote,
        )

    @staticmethod
    def _parse_unsigned(built: Any) -> UnsignedOrder:
        if not isinstance(built, dict):
            raise InvalidUpstreamResponseError(
                "Build API returned no order",
                step=PipelineStep.BUILD,
                context=ErrorContext(payload=built),
            )
        try:
            return UnsignedOrder.model_validate(built)
        except ValidationError as exc:
            raise InvalidUpstreamResponseError(
                "Build API returned a malformed order",
                step=PipelineStep.BUILD,
                context=ErrorContext(payload=built, details={"errors": exc.errors(include_url=False, include_context=False)}),
            ) from exc

    # ------------------------------------------------------------------
    # Sign / submit
    # ------------------------------------------------------------------

    def sign_order(self, created: CreatedOrder, *, private_key: str) -> SignedOrder:
        """Sign a created order locally with the source-chain signer."""

        if self._signer is None:
            raise SigningError("No signing adapter configured", step=PipelineStep.SIGN)
        signature = self._signer.sign_order(created.unsigned.order, created.domain, private_key=private_key)
        return SignedOrder(
            order=created.unsigned.order,
            src_chain_id=created.src_chain_id,
            signature=signature,
            quote_id=created.quote_id,
            extension=created.unsigned.extension,
            secret_hashes=created.secret_hashes,
        )

    async def submit_order(self, signed: SignedOrder) -> SubmittedOrder:
        try:
            result = await self._provider.submit_order(signed.to_wire())
        except UpstreamError as exc:
            raise SubmissionRejectedError.from_upstream(exc, step=PipelineStep.SUBMIT) from exc

        order_hash = result.get("orderHash") if isinstance(result, dict) else None
        if order_hash:
            self._logger.info("Order submitted: %s (quote %s)", order_hash, signed.quote_id)
        else:
            self._logger.warning("Relayer accepted order for quote %s without an orderHash", signed.quote_id)
        return SubmittedOrder(order_hash=order_hash, signed=signed, upstream=result)

    # ------------------------------------------------------------------
    # Tracking / cancellation
    # ------------------------------------------------------------------

    async def get_order_status(self, order_hash: str, chain_id: int) -> Any:
        return await self._provider.get_order_status(chain_id=chain_id, order_hash=order_hash)

    async def cancel_order(self, order_hash: str, chain_id: int, *, private_key: str) -> Any:
        if self._signer is None:
            raise SigningError("No signing adapter configured", step=PipelineStep.CANCEL)
        if not is_bytes32_hex(order_hash):
            raise OrderValidationError(
                "Order hash must be a 0x-prefixed 32-byte hex value",
                errors=[{"field": "orderHash", "message": "Invalid order hash"}],
                step=PipelineStep.CANCEL,
            )

        signature = self._signer.sign_cancellation(order_hash, private_key=private_key, chain_id=chain_id)
        try:
            result = await self._provider.cancel_order(chain_id=chain_id, order_hash=order_hash, signature=signature)
        except UpstreamError as exc:
            raise CancellationRejectedError.from_upstream(exc, step=PipelineStep.CANCEL) from exc
        self._logger.info("Cancellation accepted for %s on chain %s", order_hash, chain_id)
        return result

    async def get_active_orders(self, maker: str, chain_id: int, limit: int = 10, offset: int = 0) -> Any:
        return await self._provider.get_active_orders(chain_id=chain_id, maker=maker, limit=limit, offset=offset)

    async def get_balances(self, chain_id: int, wallet_address: str) -> Any:
        return await self._provider.get_balances(chain_id=chain_id, wallet_address=wallet_address)

    # ------------------------------------------------------------------
    # Token support
    # ------------------------------------------------------------------

    async def get_supported_tokens(self, chain_id: int) -> Any:
        return await self._token_cache.get_or_load(chain_id, lambda: self._provider.get_tokens(chain_id))

    async def is_token_supported(self, chain_id: int, token_address: str) -> bool:
        data = await self.get_supported_tokens(chain_id)
        return token_address.lower() in _token_addresses(data)

    async def validate_token_pair(
        self,
        from_chain_id: int,
        to_chain_id: int,
        src_token: str,
        dst_token: str,
    ) -> TokenPairValidation:
        """Check both tokens against their chains' token lists; never short-circuits."""

        errors = []
        if not await self.is_token_supported(from_chain_id, src_token):
            errors.append(f"Source token {src_token} is not supported on chain {from_chain_id}")
        if not await self.is_token_supported(to_chain_id, dst_token):
            errors.append(f"Destination token {dst_token} is not supported on chain {to_chain_id}")
        return TokenPairValidation(is_valid=not errors, errors=errors)


def _token_addresses(data: Any) -> Set[str]:
    tokens = data.get("tokens") if isinstance(data, dict) else None
    if not isinstance(tokens, dict):
        return set()
    addresses: Set[str] = {str(key).lower() for key in tokens}
    for entry in tokens.values():
        if isinstance(entry, dict) and isinstance(entry.get("address"), str):
            addresses.add(entry["address"].lower())
    return addresses


__all__ = ["FusionOrderManager"]
