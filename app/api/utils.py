from typing import Any, Dict

from fastapi import APIRouter

from ..core.fusion.errors import OrderValidationError
from ..core.fusion.units import from_base_units, to_base_units
from ..types.requests import FromWeiRequest, ToWeiRequest
from ..types.responses import ok

router = APIRouter(prefix="/api/utils")


@router.post("/to-wei")
async def to_wei(request: ToWeiRequest) -> Dict[str, Any]:
    try:
        wei = to_base_units(request.amount, request.decimals)
    except ValueError as exc:
        raise OrderValidationError(str(exc), errors=[{"field": "amount", "message": str(exc)}]) from exc
    return ok({"amount": request.amount, "decimals": request.decimals, "wei": str(wei)})


@router.post("/from-wei")
async def from_wei(request: FromWeiRequest) -> Dict[str, Any]:
    try:
        amount = from_base_units(request.wei, request.decimals)
    except ValueError as exc:
        raise OrderValidationError(str(exc), errors=[{"field": "wei", "message": str(exc)}]) from exc
    return ok({"wei": request.wei, "decimals": request.decimals, "amount": amount})
