"""Async client for the 1inch Fusion+ developer API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..core.fusion.errors import ErrorCategory, ErrorContext, PipelineStep, UpstreamError

logger = logging.getLogger(__name__)

QUOTER_PATH = "/fusion-plus/quoter/v1.1"
RELAYER_V11_PATH = "/fusion-plus/relayer/v1.1"
RELAYER_V10_PATH = "/fusion-plus/relayer/v1.0"
BALANCE_PATH = "/balance/v1.2"
SWAP_PATH = "/swap/v6.0"


class OneInchFusionProvider:
    """
    Thin wrapper around https://api.1inch.dev Fusion+ endpoints.

    Write calls (quote, build, submit, cancel) are attempted exactly once.
    Read calls (status, active orders, balances, token lists) are retried on
    network failures only; HTTP error responses are never retried.
    """

    name = "1inch"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        token_list_timeout_s: Optional[float] = None,
        read_retries: Optional[int] = None,
        retry_backoff_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.oneinch_api_key
        self.base_url = (base_url or settings.oneinch_base_url).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else settings.request_timeout_seconds
        self.token_list_timeout_s = (
            token_list_timeout_s if token_list_timeout_s is not None else settings.token_list_timeout_seconds
        )
        self.read_retries = read_retries if read_retries is not None else settings.read_retry_attempts
        self.retry_backoff_s = retry_backoff_s if retry_backoff_s is not None else settings.read_retry_backoff_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def _request(
        self,
        method: str,
        path: str,
        *,
        step: PipelineStep,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        retries: int = 0,
    ) -> Any:
        url = f"{self.base_url}{path}"
        cleaned_params = {k: v for k, v in (params or {}).items() if v is not None} or None
        attempts = retries + 1

        for attempt in range(1, attempts + 1):
            try:
                async with httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=timeout or self.timeout_s,
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method,
                        path,
                        params=cleaned_params,
                        json=json,
                        headers=self._headers(),
                    )
                    response.raise_for_status()
                    return self._decode(response)
            except httpx.HTTPStatusError as exc:
                payload = self._decode(exc.response)
                logger.warning(
                    "1inch %s error (%s): url=%s params=%s data=%s",
                    step.value,
                    exc.response.status_code,
                    url,
                    cleaned_params,
                    payload,
                )
                raise UpstreamError(
                    f"Request failed with status code {exc.response.status_code}",
                    step=step,
                    status_code=exc.response.status_code,
                    context=ErrorContext(
                        url=str(exc.request.url),
                        params=cleaned_params,
                        upstream_status=exc.response.status_code,
                        upstream_status_text=exc.response.reason_phrase,
                        payload=payload,
                    ),
                ) from exc
            except httpx.RequestError as exc:
                if attempt < attempts:
                    logger.info(
                        "1inch %s network error, retrying (%s/%s): %s",
                        step.value,
                        attempt,
                        retries,
                        exc,
                    )
                    if self.retry_backoff_s:
                        await asyncio.sleep(self.retry_backoff_s * attempt)
                    continue
                logger.error("1inch %s request failed: url=%s error=%s", step.value, url, exc)
                error = UpstreamError(
                    f"1inch API unreachable: {exc}",
                    step=step,
                    context=ErrorContext(url=url, params=cleaned_params),
                )
                error.category = ErrorCategory.NETWORK
                raise error from exc

        raise RuntimeError("unreachable: request loop exhausted without result")

    # ------------------------------------------------------------------
    # Order lifecycle (single attempt)
    # ------------------------------------------------------------------

    async def quote(
        self,
        *,
        src_chain: int,
        dst_chain: int,
        src_token: str,
        dst_token: str,
        wallet_address: str,
        amount: str,
    ) -> Any:
        """Fetch a cross-chain quote for an exact input amount."""

        params = {
            "srcChain": src_chain,
            "dstChain": dst_chain,
            "srcTokenAddress": src_token,
            "dstTokenAddress": dst_token,
            "walletAddress": wallet_address,
            "amount": amount,
            "enableEstimate": "true",
            "fee": "0",
        }
        return await self._request("GET", f"{QUOTER_PATH}/quote/receive", step=PipelineStep.QUOTE, params=params)

    async def build_order(
        self,
        *,
        quote_id: str,
        secrets_hash_list: list[str],
        preset: str,
        permit: Optional[str] = None,
        is_permit2: bool = False,
        receiver: Optional[str] = None,
    ) -> Any:
        """Build the EVM limit order for a previously fetched quote."""

        body: Dict[str, Any] = {
            "secretsHashList": secrets_hash_list,
            "isPermit2": is_permit2,
            "preset": preset,
        }
        if permit is not None:
            body["permit"] = permit
        if receiver is not None:
            body["receiver"] = receiver
        return await self._request(
            "POST",
            f"{QUOTER_PATH}/quote/build/evm",
            step=PipelineStep.BUILD,
            params={"quoteId": quote_id},
            json=body,
        )

    async def submit_order(self, payload: Dict[str, Any]) -> Any:
        return await self._request("POST", f"{RELAYER_V11_PATH}/submit", step=PipelineStep.SUBMIT, json=payload)

    async def cancel_order(self, *, chain_id: int, order_hash: str, signature: str) -> Any:
        return await self._request(
            "POST",
            f"{RELAYER_V10_PATH}/{chain_id}/order/cancel",
            step=PipelineStep.CANCEL,
            json={"orderHash": order_hash, "signature": signature},
        )

    # ------------------------------------------------------------------
    # Reads (retried on network failure)
    # ------------------------------------------------------------------

    async def get_order_status(self, *, chain_id: int, order_hash: str) -> Any:
        return await self._request(
            "GET",
            f"{RELAYER_V11_PATH}/{chain_id}/order/status/{order_hash}",
            step=PipelineStep.STATUS,
            retries=self.read_retries,
        )

    async def get_active_orders(self, *, chain_id: int, maker: str, limit: int = 10, offset: int = 0) -> Any:
        return await self._request(
            "GET",
            f"{RELAYER_V10_PATH}/{chain_id}/order/active",
            step=PipelineStep.ACTIVE_ORDERS,
            params={"maker": maker, "limit": limit, "offset": offset},
            retries=self.read_retries,
        )

    async def get_balances(self, *, chain_id: int, wallet_address: str) -> Any:
        return await self._request(
            "GET",
            f"{BALANCE_PATH}/{chain_id}/balances/{wallet_address}",
            step=PipelineStep.BALANCES,
            retries=self.read_retries,
        )

    async def get_tokens(self, chain_id: int) -> Any:
        return await self._request(
            "GET",
            f"{SWAP_PATH}/{chain_id}/tokens",
            step=PipelineStep.TOKENS,
            timeout=self.token_list_timeout_s,
            retries=self.read_retries,
        )

    async def health_check(self, chain_id: int = 1) -> Dict[str, Any]:
        """Probe connectivity with a token list request."""

        url = f"{self.base_url}{SWAP_PATH}/{chain_id}/tokens"
        try:
            data = await self.get_tokens(chain_id)
        except UpstreamError as exc:
            return {
                "status": "unhealthy",
                "url": url,
                "error": exc.error_body(),
            }
        tokens = data.get("tokens") if isinstance(data, dict) else None
        return {
            "status": "healthy",
            "url": url,
            "tokensCount": len(tokens) if isinstance(tokens, dict) else 0,
        }
