"""
HTTP tests for the /api/orders routes.
"""

from conftest import (
    SUBMIT_PATH,
    TEST_PRIVATE_KEY,
    USDC_ETH,
    USDC_POLYGON,
    WALLET,
    order_wire,
)

ORDER_HASH = "0x" + "cd" * 32


def create_body(**overrides):
    body = {
        "fromChainId": 1,
        "toChainId": 137,
        "srcToken": USDC_ETH,
        "dstToken": USDC_POLYGON,
        "amount": "1000000",
        "walletAddress": WALLET,
    }
    body.update(overrides)
    return body


def submit_body(**overrides):
    body = {
        "order": order_wire(),
        "srcChainId": 1,
        "signature": "0x1234",
        "extension": "0x",
        "quoteId": "quote-123",
        "secretHashes": ["0x" + "00" * 32],
    }
    body.update(overrides)
    return body


def test_create_order_returns_signing_payload(api_client):
    resp = api_client.post("/api/orders/create", json=create_body())

    assert resp.status_code == 200, resp.json()
    payload = resp.json()
    assert payload["success"] is True
    assert payload["message"] == "Order created successfully - ready for signing"
    data = payload["data"]
    assert data["quoteId"] == "quote-123"
    assert data["preset"] == "medium"
    assert len(data["secretHashes"]) == 3
    assert data["domain"]["name"] == "1inch Fusion+"
    assert data["domain"]["chainId"] == 1
    assert data["order"]["makingAmount"] == "1000000"
    assert data["types"]["Order"][0] == {"name": "salt", "type": "uint256"}


def test_create_order_with_preset(api_client):
    resp = api_client.post("/api/orders/create", json=create_body(preset="slow"))

    assert resp.status_code == 200
    assert len(resp.json()["data"]["secretHashes"]) == 2


def test_create_order_validation_errors_are_listed(api_client, fusion_api):
    resp = api_client.post("/api/orders/create", json=create_body(srcToken="0x123", amount="1.5"))

    assert resp.status_code == 400
    payload = resp.json()
    assert payload["success"] is False
    assert payload["message"] == "Validation errors"
    fields = {error["field"]: error["message"] for error in payload["errors"]}
    assert fields["srcToken"] == "Invalid source token address"
    assert "amount" in fields
    assert fusion_api.requests == []


def test_bad_checksum_address_is_reported_as_checksum_error(api_client, fusion_api):
    # Mixed case with the leading "A" lowered breaks the EIP-55 checksum.
    bad_checksum = "0xa0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
    resp = api_client.post("/api/orders/create", json=create_body(srcToken=bad_checksum))

    assert resp.status_code == 400
    fields = {error["field"]: error["message"] for error in resp.json()["errors"]}
    assert fields["srcToken"] == "Invalid source token address: invalid EIP-55 checksum"
    assert fusion_api.requests == []


def test_create_order_missing_fields(api_client):
    resp = api_client.post("/api/orders/create", json={"fromChainId": 1})

    assert resp.status_code == 400
    fields = {error["field"] for error in resp.json()["errors"]}
    assert {"toChainId", "srcToken", "dstToken", "amount", "walletAddress"} <= fields


def test_submit_forwards_signed_order(api_client, fusion_api):
    fusion_api.on("POST", SUBMIT_PATH, body={"orderHash": ORDER_HASH})

    resp = api_client.post("/api/orders/submit", json=submit_body())

    assert resp.status_code == 200, resp.json()
    data = resp.json()["data"]
    assert data["orderHash"] == ORDER_HASH
    assert data["quoteId"] == "quote-123"
    assert data["signature"] == "0x1234"

    forwarded = fusion_api.body(fusion_api.calls("POST", SUBMIT_PATH)[0])
    assert forwarded["order"] == order_wire()
    assert forwarded["srcChainId"] == 1


def test_submit_rejection_surfaces_upstream_response(api_client, fusion_api):
    upstream = {"statusCode": 400, "description": "Invalid signature"}
    fusion_api.on("POST", SUBMIT_PATH, status=400, body=upstream)

    resp = api_client.post("/api/orders/submit", json=submit_body(signature="0xnotasignature"))

    assert resp.status_code == 400
    payload = resp.json()
    assert payload["success"] is False
    assert payload["message"] == "Order submission rejected"
    assert payload["error"]["status"] == 400
    assert payload["error"]["data"] == upstream
    assert payload["error"]["step"] == "submit"


def test_submit_rejects_malformed_secret_hashes(api_client, fusion_api):
    resp = api_client.post("/api/orders/submit", json=submit_body(secretHashes=["0x12"]))

    assert resp.status_code == 400
    assert fusion_api.requests == []


def test_order_status_passthrough(api_client, fusion_api):
    fusion_api.on(
        "GET",
        f"/fusion-plus/relayer/v1.1/1/order/status/{ORDER_HASH}",
        body={"orderHash": ORDER_HASH, "status": "executed", "fills": []},
    )

    resp = api_client.get(f"/api/orders/{ORDER_HASH}/1")

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "executed"


def test_order_status_not_found_is_mirrored(api_client, fusion_api):
    fusion_api.on(
        "GET",
        f"/fusion-plus/relayer/v1.1/1/order/status/{ORDER_HASH}",
        status=404,
        body={"message": "Order not found"},
    )

    resp = api_client.get(f"/api/orders/{ORDER_HASH}/1")

    assert resp.status_code == 404
    error = resp.json()["error"]
    assert error["status"] == 404
    assert error["data"] == {"message": "Order not found"}
    assert error["url"].endswith(f"/order/status/{ORDER_HASH}")


def test_active_orders_query_params(api_client, fusion_api):
    fusion_api.on("GET", "/fusion-plus/relayer/v1.0/1/order/active", body={"items": [{"orderHash": ORDER_HASH}]})

    resp = api_client.get(f"/api/orders/active/{WALLET}/1", params={"limit": 5, "offset": 10})

    assert resp.status_code == 200
    assert resp.json()["data"]["items"][0]["orderHash"] == ORDER_HASH
    params = fusion_api.requests[0].url.params
    assert params["limit"] == "5"
    assert params["offset"] == "10"


def test_active_orders_rejects_bad_limit(api_client):
    resp = api_client.get(f"/api/orders/active/{WALLET}/1", params={"limit": 0})

    assert resp.status_code == 400


def test_cancel_order_signs_and_forwards(api_client, fusion_api):
    fusion_api.on("POST", "/fusion-plus/relayer/v1.0/1/order/cancel", body={"status": "cancelled"})

    resp = api_client.request("DELETE", f"/api/orders/{ORDER_HASH}/1", json={"privateKey": TEST_PRIVATE_KEY})

    assert resp.status_code == 200, resp.json()
    assert resp.json()["message"] == "Order cancelled successfully"
    forwarded = fusion_api.body(fusion_api.requests[0])
    assert forwarded["orderHash"] == ORDER_HASH
    assert forwarded["signature"].startswith("0x")
    assert TEST_PRIVATE_KEY[2:] not in resp.text


def test_cancel_order_requires_private_key(api_client, fusion_api):
    resp = api_client.request("DELETE", f"/api/orders/{ORDER_HASH}/1", json={})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "privateKey"
    assert fusion_api.requests == []


def test_cancel_with_invalid_key_does_not_echo_it(api_client, fusion_api):
    resp = api_client.request("DELETE", f"/api/orders/{ORDER_HASH}/1", json={"privateKey": "not-a-real-key"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Signing failed"
    assert "not-a-real-key" not in resp.text
    assert fusion_api.requests == []
