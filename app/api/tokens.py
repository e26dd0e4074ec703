from typing import Any, Dict

from fastapi import APIRouter, Depends, Path

from ..core.fusion.constants import COMMON_TOKENS
from ..core.fusion.orchestrator import FusionOrderManager
from ..types.requests import QuoteRequest, TokenPairRequest
from ..types.responses import ok
from .deps import get_order_manager

router = APIRouter(prefix="/api")


@router.post("/validate-tokens")
async def validate_tokens(
    request: TokenPairRequest,
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    validation = await manager.validate_token_pair(
        request.fromChainId,
        request.toChainId,
        request.srcToken,
        request.dstToken,
    )
    return ok(
        {
            "isValid": validation.is_valid,
            "errors": validation.errors,
            "tokens": {
                "srcToken": {"address": request.srcToken, "chainId": request.fromChainId},
                "dstToken": {"address": request.dstToken, "chainId": request.toChainId},
            },
        }
    )


@router.post("/quote")
async def get_quote(
    request: QuoteRequest,
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    quote = await manager.get_quote(request.to_intent())
    return ok(quote)


@router.get("/tokens/{chainId}")
async def get_tokens(
    chainId: int = Path(..., gt=0, description="Chain ID"),
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    tokens = await manager.get_supported_tokens(chainId)
    return ok(tokens)


@router.get("/balance/{chainId}/{walletAddress}")
async def get_balances(
    chainId: int = Path(..., gt=0, description="Chain ID"),
    walletAddress: str = Path(..., pattern=r"^0x[a-fA-F0-9]{40}$", description="Wallet address"),
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    balances = await manager.get_balances(chainId, walletAddress)
    response = ok(balances)
    response.update({"walletAddress": walletAddress, "chainId": chainId})
    return response


@router.get("/common-tokens")
async def common_tokens() -> Dict[str, Any]:
    return ok(
        {
            "message": "Common token addresses for testing",
            "tokens": COMMON_TOKENS,
            "note": "These are common token addresses. Use /api/tokens/:chainId to get the full list of supported tokens.",
        }
    )
