from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Query

from ..core.fusion.orchestrator import FusionOrderManager
from ..types.requests import CancelOrderRequest, CreateOrderRequest, SubmitOrderRequest
from ..types.responses import ok
from .deps import get_order_manager

router = APIRouter(prefix="/api/orders")


@router.post("/create")
async def create_order(
    request: CreateOrderRequest,
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    created = await manager.create_order(request.to_intent())
    return ok(created.to_response(), message="Order created successfully - ready for signing")


@router.post("/submit")
async def submit_order(
    request: SubmitOrderRequest,
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    submitted = await manager.submit_order(request.to_signed_order())
    return ok(submitted.to_response(), message="Signed order submitted successfully")


@router.get("/active/{maker}/{chainId}")
async def get_active_orders(
    maker: str = Path(..., pattern=r"^0x[a-fA-F0-9]{40}$", description="Maker address"),
    chainId: int = Path(..., gt=0, description="Chain ID"),
    limit: int = Query(10, ge=1, le=500),
    offset: int = Query(0, ge=0),
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    orders = await manager.get_active_orders(maker, chainId, limit=limit, offset=offset)
    return ok(orders)


@router.get("/{orderHash}/{chainId}")
async def get_order_status(
    orderHash: str = Path(..., pattern=r"^(0x)?[0-9a-fA-F]+$", description="Order hash (hex)"),
    chainId: int = Path(..., gt=0, description="Chain ID"),
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    status = await manager.get_order_status(orderHash, chainId)
    return ok(status)


@router.delete("/{orderHash}/{chainId}")
async def cancel_order(
    request: CancelOrderRequest,
    orderHash: str = Path(..., pattern=r"^(0x)?[0-9a-fA-F]+$", description="Order hash (hex)"),
    chainId: int = Path(..., gt=0, description="Chain ID"),
    manager: FusionOrderManager = Depends(get_order_manager),
) -> Dict[str, Any]:
    result = await manager.cancel_order(orderHash, chainId, private_key=request.privateKey)
    return ok(result, message="Order cancelled successfully")
