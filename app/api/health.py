from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import settings
from ..core.fusion.orchestrator import FusionOrderManager
from ..types.responses import fail, ok
from .deps import get_order_manager

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Liveness plus configuration presence"""

    return ok(
        {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": {
                "hasApiKey": settings.has_api_key,
                "environment": settings.environment,
            },
        }
    )


@router.get("/api/test-connection")
async def test_connection(manager: FusionOrderManager = Depends(get_order_manager)):
    """Verify the 1inch API is reachable with the configured key"""

    status = await manager.provider.health_check()
    if status["status"] != "healthy":
        return JSONResponse(
            status_code=500,
            content=fail("1inch API connection test failed", error=status.get("error")),
        )
    return ok(
        {"status": 200, "tokensCount": status["tokensCount"], "url": status["url"]},
        message="1inch API connection successful",
    )
