import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_order_manager
from app.cache import TTLCache
from app.core.fusion.orchestrator import FusionOrderManager
from app.core.fusion.signing import ChainResourceCache, SigningAdapter
from app.main import app
from app.providers.oneinch import OneInchFusionProvider

API_BASE = "https://api.1inch.test"

# Well-known throwaway key; never funded.
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

USDC_ETH = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
USDC_POLYGON = "0x2791bca1f2de4661ed88a30c99a7a9449aa84174"
WALLET = "0x1111111111111111111111111111111111111111"
VERIFYING_CONTRACT = "0x111111125421ca6dc452d289314280a0f8842a65"

QUOTE_PATH = "/fusion-plus/quoter/v1.1/quote/receive"
BUILD_PATH = "/fusion-plus/quoter/v1.1/quote/build/evm"
SUBMIT_PATH = "/fusion-plus/relayer/v1.1/submit"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeFusionApi:
    """Route table standing in for the 1inch API behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=body)

        self.routes[(method, path)] = respond

    def on_call(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": f"unmocked {request.method} {request.url.path}"})
        return route(request)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)

    def provider(self, **kwargs: Any) -> OneInchFusionProvider:
        options = {
            "api_key": "test-key",
            "base_url": API_BASE,
            "read_retries": 2,
            "retry_backoff_s": 0,
        }
        options.update(kwargs)
        return OneInchFusionProvider(transport=httpx.MockTransport(self.handle), **options)

    def manager(self, *, cache_ttl: float = 300, signer: Optional[SigningAdapter] = None) -> FusionOrderManager:
        return FusionOrderManager(
            provider=self.provider(),
            signer=signer or make_signer(),
            token_cache=TTLCache(default_ttl=cache_ttl),
        )


def make_signer() -> SigningAdapter:
    cache = ChainResourceCache(
        {1: "http://rpc.invalid/1", 137: "http://rpc.invalid/137"},
        provider_factory=lambda url: object(),
    )
    return SigningAdapter(cache)


def order_wire(**overrides: str) -> Dict[str, str]:
    order = {
        "salt": "9445680530040881547766744232958233146473413282425451357896736347236581437440",
        "maker": WALLET,
        "receiver": "0x0000000000000000000000000000000000000000",
        "makerAsset": USDC_ETH,
        "takerAsset": USDC_POLYGON,
        "makingAmount": "1000000",
        "takingAmount": "998000",
        "makerTraits": "62419173104490761595518734106643312524177918888344010093236686688879363751936",
    }
    order.update(overrides)
    return order


def quote_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "quoteId": "quote-123",
        "srcTokenAmount": "1000000",
        "dstTokenAmount": "998000",
        "recommendedPreset": "medium",
        "presets": {
            "fast": {"secretsCount": 1, "auctionDuration": 180},
            "medium": {"secretsCount": 3, "auctionDuration": 360},
            "slow": {"secretsCount": 2, "auctionDuration": 600},
        },
    }
    payload.update(overrides)
    return payload


def build_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "order": order_wire(),
        "verifyingContract": VERIFYING_CONTRACT,
        "extension": "0x",
    }
    payload.update(overrides)
    return payload


def tokens_payload(*addresses: str) -> Dict[str, Any]:
    return {"tokens": {address: {"address": address, "symbol": "TKN", "decimals": 6} for address in addresses}}


@pytest.fixture
def fusion_api() -> FakeFusionApi:
    api = FakeFusionApi()
    api.on("GET", QUOTE_PATH, body=quote_payload())
    api.on("POST", BUILD_PATH, body=build_payload())
    return api


@pytest.fixture
def api_client(fusion_api):
    """TestClient wired to a manager over the fake API; the lifespan is not run."""
    manager = fusion_api.manager()
    app.dependency_overrides[get_order_manager] = lambda: manager
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()
