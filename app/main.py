import logging
import traceback
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import health, orders, tokens, utils
from .cache import TTLCache
from .config import settings
from .core.fusion.errors import FusionError
from .core.fusion.orchestrator import FusionOrderManager
from .core.fusion.signing import ChainResourceCache, SigningAdapter
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .providers.oneinch import OneInchFusionProvider
from .types.responses import fail

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    settings.require_api_key()

    chain_cache = ChainResourceCache(settings.rpc_urls)
    app.state.chain_cache = chain_cache
    app.state.order_manager = FusionOrderManager(
        provider=OneInchFusionProvider(),
        signer=SigningAdapter(chain_cache),
        token_cache=TTLCache(default_ttl=settings.token_list_cache_ttl_seconds),
    )
    logger.info("Fusion+ relay started (environment=%s)", settings.environment)
    try:
        yield
    finally:
        chain_cache.clear()
        logger.info("Fusion+ relay stopped")


# Create FastAPI app
app = FastAPI(
    title="Fusion+ Relay API",
    description="Relay between wallets and the 1inch Fusion+ cross-chain swap API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    # Inputs are not echoed back; cancellation bodies carry private keys.
    errors = []
    for error in exc.errors():
        loc = tuple(error.get("loc") or ("body",))
        field = ".".join(str(part) for part in loc[1:]) or str(loc[0])
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": field, "location": str(loc[0]), "message": message})
    return errors


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=fail("Validation errors", errors=_field_errors(exc)))


@app.exception_handler(FusionError)
async def handle_fusion_error(request: Request, exc: FusionError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "%s %s failed at step=%s: %s",
        request.method,
        request.url.path,
        exc.step.value if exc.step else None,
        exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_envelope(include_trace=not settings.is_production),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content: Dict[str, Any] = fail(str(exc) or "Internal server error")
    if not settings.is_production:
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=content)


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(tokens.router, tags=["Tokens"])
app.include_router(orders.router, tags=["Orders"])
app.include_router(utils.router, tags=["Utils"])


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Fusion+ Relay API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
        "api": "/api",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        log_level=settings.log_level.lower()
    )
