import httpx
import pytest

from conftest import BUILD_PATH, FakeFusionApi, tokens_payload

from app.core.fusion.errors import ErrorCategory, PipelineStep, UpstreamError

TOKENS_PATH = "/swap/v6.0/1/tokens"


@pytest.mark.asyncio
async def test_build_body_omits_unset_optionals():
    api = FakeFusionApi()
    api.on("POST", BUILD_PATH, body={"ok": True})

    await api.provider().build_order(quote_id="q-1", secrets_hash_list=["0x" + "00" * 32], preset="fast")

    body = api.body(api.requests[0])
    assert body == {"secretsHashList": ["0x" + "00" * 32], "isPermit2": False, "preset": "fast"}


@pytest.mark.asyncio
async def test_build_body_forwards_permit_and_receiver():
    api = FakeFusionApi()
    api.on("POST", BUILD_PATH, body={"ok": True})
    receiver = "0x2222222222222222222222222222222222222222"

    await api.provider().build_order(
        quote_id="q-1",
        secrets_hash_list=[],
        preset="slow",
        permit="0xabcd",
        is_permit2=True,
        receiver=receiver,
    )

    body = api.body(api.requests[0])
    assert body["permit"] == "0xabcd"
    assert body["isPermit2"] is True
    assert body["receiver"] == receiver


@pytest.mark.asyncio
async def test_non_json_error_body_is_kept_as_text():
    api = FakeFusionApi()
    api.on_call("GET", TOKENS_PATH, lambda request: httpx.Response(503, text="upstream overloaded"))

    with pytest.raises(UpstreamError) as exc_info:
        await api.provider(read_retries=0).get_tokens(1)

    error = exc_info.value
    assert error.status_code == 503
    assert error.payload == "upstream overloaded"
    assert error.error_body()["statusText"] == "Service Unavailable"
    assert error.step == PipelineStep.TOKENS


@pytest.mark.asyncio
async def test_network_failure_after_retries_is_classified():
    api = FakeFusionApi()

    def unreachable(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    api.on_call("GET", TOKENS_PATH, unreachable)

    with pytest.raises(UpstreamError) as exc_info:
        await api.provider(read_retries=1).get_tokens(1)

    assert exc_info.value.category == ErrorCategory.NETWORK
    assert exc_info.value.upstream_status is None
    assert len(api.requests) == 2


@pytest.mark.asyncio
async def test_health_check_reports_token_count():
    api = FakeFusionApi()
    api.on("GET", TOKENS_PATH, body=tokens_payload("0x" + "1" * 40, "0x" + "2" * 40))

    status = await api.provider().health_check()

    assert status["status"] == "healthy"
    assert status["tokensCount"] == 2
    assert status["url"].endswith(TOKENS_PATH)


@pytest.mark.asyncio
async def test_health_check_reports_upstream_error():
    api = FakeFusionApi()
    api.on("GET", TOKENS_PATH, status=401, body={"message": "Unauthorized"})

    status = await api.provider().health_check()

    assert status["status"] == "unhealthy"
    assert status["error"]["status"] == 401
    assert status["error"]["data"] == {"message": "Unauthorized"}
