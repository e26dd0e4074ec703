"""FastAPI dependencies shared by the /api routers."""

from fastapi import Request

from ..config import ConfigurationError
from ..core.fusion.orchestrator import FusionOrderManager


def get_order_manager(request: Request) -> FusionOrderManager:
    manager = getattr(request.app.state, "order_manager", None)
    if manager is None:
        raise ConfigurationError("Order manager is not initialised; the application lifespan has not run")
    return manager
