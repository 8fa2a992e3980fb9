"""ApiClient request shapes and error mapping, against httpx.MockTransport."""

import json

import httpx
import pytest

from orderdesk.api import ApiClient, ApiError
from orderdesk.models import Feedback, OrderStatus


@pytest.mark.asyncio
class TestApiClient:
    async def test_get_menu_parses_items(self, api, backend):
        items = await api.get_menu()

        assert [item.name for item in items] == ["Classic Burger", "Tomato Soup", "Lemonade"]
        assert "authorization" not in backend.requests[0].headers

    async def test_place_order_sends_bearer_token_and_body(self, api, backend):
        backend.on("POST", "/orders", status=201, json={"success": True, "orderId": "o9"})
        api.token = "tok-abc"
        draft = {"items": [], "totalAmount": 0}

        body = await api.place_order(draft)

        request = backend.calls("POST", "/orders")[0]
        assert request.headers["authorization"] == "Bearer tok-abc"
        assert json.loads(request.content) == draft
        assert body == {"success": True, "orderId": "o9"}

    async def test_error_status_raises_with_server_message(self, api, backend):
        backend.on("POST", "/orders", status=400, json={"message": "Item 'Soup' is unavailable"})

        with pytest.raises(ApiError) as excinfo:
            await api.place_order({"items": []})

        assert excinfo.value.status_code == 400
        assert excinfo.value.message == "Item 'Soup' is unavailable"
        assert excinfo.value.payload == {"message": "Item 'Soup' is unavailable"}

    async def test_error_without_body_uses_reason_phrase(self, api, backend):
        backend.on("GET", "/orders/my-orders", status=500)

        with pytest.raises(ApiError) as excinfo:
            await api.list_my_orders()

        assert excinfo.value.status_code == 500
        assert excinfo.value.message == "Internal Server Error"

    async def test_transport_error_has_no_status(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = ApiClient(base_url="http://test", transport=httpx.MockTransport(refuse))

        with pytest.raises(ApiError) as excinfo:
            await client.get_menu()

        assert excinfo.value.status_code is None
        assert "Cannot reach server" in excinfo.value.message

    async def test_login_returns_token_and_user(self, api, backend):
        backend.on(
            "POST",
            "/auth/login",
            json={"token": "t1", "user": {"_id": "u1", "name": "Ada", "email": "ada@example.com", "role": "customer"}},
        )

        token, user = await api.login("ada@example.com", "secret1")

        assert token == "t1"
        assert user.name == "Ada"
        assert json.loads(backend.calls("POST", "/auth/login")[0].content) == {
            "email": "ada@example.com",
            "password": "secret1",
        }

    async def test_malformed_auth_response_raises(self, api, backend):
        backend.on("POST", "/auth/register", json={"user": {}})

        with pytest.raises(ApiError, match="Malformed"):
            await api.register("Ada", "ada@example.com", "secret1", "customer")

    async def test_submit_feedback_payload(self, api, backend):
        backend.on("POST", "/feedback", status=201, json={"success": True})
        api.token = "tok"

        await api.submit_feedback(Feedback(order_id="o1", rating=4, comment="Tasty"))

        sent = json.loads(backend.calls("POST", "/feedback")[0].content)
        assert sent == {"orderId": "o1", "rating": 4, "comment": "Tasty"}

    async def test_update_order_status(self, api, backend):
        backend.on("PATCH", "/orders/o1/status", json={"_id": "o1", "status": "ready", "items": [], "totalAmount": 3})
        api.token = "tok"

        order = await api.update_order_status("o1", OrderStatus.READY)

        assert json.loads(backend.calls("PATCH", "/orders/o1/status")[0].content) == {"status": "ready"}
        assert order.status is OrderStatus.READY

    async def test_base_url_path_prefix_is_kept(self):
        seen = []

        def record(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json=[])

        client = ApiClient(base_url="http://test/api/", transport=httpx.MockTransport(record))

        await client.list_kitchen_orders()

        assert seen == ["/api/orders/chef"]

    async def test_get_order_parses_populated_lines(self, api, backend):
        backend.on(
            "GET",
            "/orders/o5",
            json={
                "_id": "o5",
                "status": "ready",
                "totalAmount": 9.5,
                "items": [{"menuItem": {"_id": "m1", "name": "Classic Burger"}, "quantity": 1, "price": 9.5}],
            },
        )
        api.token = "tok"

        order = await api.get_order("o5")

        assert order.order_id == "o5"
        assert order.status is OrderStatus.READY
        assert order.items[0].name == "Classic Burger"
