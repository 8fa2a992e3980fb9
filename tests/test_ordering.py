"""Order submission: local guards, success path and status-coded failures."""

import json

import httpx
import pytest

from orderdesk.api import ApiClient
from orderdesk.cart import Cart
from orderdesk.ordering import SubmitOutcome, submit_order, unavailable_item_name
from orderdesk.persistence import load_session


@pytest.fixture
def cart(burger, soup) -> Cart:
    cart = Cart()
    cart.add(burger)
    cart.customize_and_add(soup, ["Cream"], "extra hot")
    return cart


def test_unavailable_item_name_extraction():
    assert unavailable_item_name("Item 'Tomato Soup' is unavailable") == "Tomato Soup"
    assert unavailable_item_name("Some items are unavailable") is None


@pytest.mark.asyncio
class TestLocalGuards:
    async def test_empty_cart_never_issues_a_request(self, signed_in_auth, api, backend):
        result = await submit_order(Cart(), signed_in_auth, api)

        assert result.outcome is SubmitOutcome.EMPTY_CART
        assert result.message == "Your cart is empty"
        assert backend.requests == []

    async def test_guest_is_sent_to_login_without_a_request(self, auth, api, backend, cart):
        result = await submit_order(cart, auth, api)

        assert result.outcome is SubmitOutcome.LOGIN_REQUIRED
        assert backend.requests == []
        assert len(cart) == 2


@pytest.mark.asyncio
class TestPlacement:
    async def test_success_clears_cart_and_returns_order_id(self, signed_in_auth, api, backend, cart):
        backend.on("POST", "/orders", status=201, json={"success": True, "orderId": "o42"})

        result = await submit_order(cart, signed_in_auth, api)

        assert result.ok
        assert result.order_id == "o42"
        assert cart.is_empty
        request = backend.calls("POST", "/orders")[0]
        assert request.headers["authorization"] == "Bearer tok-123"
        body = json.loads(request.content)
        assert body["totalAmount"] == pytest.approx(13.75)
        assert body["items"][1]["removedIngredients"] == ["Cream"]
        assert body["items"][1]["specialRequest"] == "extra hot"

    async def test_unsuccessful_body_keeps_cart(self, signed_in_auth, api, backend, cart):
        backend.on("POST", "/orders", json={"success": False, "message": "Kitchen closed"})

        result = await submit_order(cart, signed_in_auth, api)

        assert result.outcome is SubmitOutcome.FAILED
        assert result.message == "Kitchen closed"
        assert len(cart) == 2


@pytest.mark.asyncio
class TestFailureClassification:
    async def test_unavailable_item(self, signed_in_auth, api, backend, cart):
        backend.on("POST", "/orders", status=400, json={"message": "Item 'Tomato Soup' is unavailable"})

        result = await submit_order(cart, signed_in_auth, api)

        assert result.outcome is SubmitOutcome.ITEM_UNAVAILABLE
        assert result.unavailable_item == "Tomato Soup"
        assert len(cart) == 2
        cart.remove_by_name(result.unavailable_item)
        assert [line.item.name for line in cart] == ["Classic Burger"]

    async def test_other_validation_error(self, signed_in_auth, api, backend, cart):
        backend.on("POST", "/orders", status=400, json={"message": "Quantity too large"})

        result = await submit_order(cart, signed_in_auth, api)

        assert result.outcome is SubmitOutcome.INVALID
        assert result.message == "Quantity too large"

    async def test_validation_error_without_body(self, signed_in_auth, api, backend, cart):
        backend.on("POST", "/orders", status=400)

        result = await submit_order(cart, signed_in_auth, api)

        assert result.outcome is SubmitOutcome.INVALID
        assert result.message == "Invalid order data"

    async def test_401_clears_stored_token(self, signed_in_auth, api, backend, cart, session_db):
        backend.on("POST", "/orders", status=401, json={"message": "jwt expired"})

        result = await submit_order(cart, signed_in_auth, api)

        assert result.outcome is SubmitOutcome.SESSION_EXPIRED
        assert result.message == "Session expired. Please login again"
        assert not signed_in_auth.is_authenticated
        assert api.token is None
        assert load_session(session_db) is None

    async def test_404_refetches_menu(self, signed_in_auth, api, backend, cart):
        backend.on("POST", "/orders", status=404, json={"message": "Menu item not found"})

        result = await submit_order(cart, signed_in_auth, api)

        assert result.outcome is SubmitOutcome.MENU_STALE
        assert [item.item_id for item in result.menu] == ["m1", "m2", "m3"]
        assert len(backend.calls("GET", "/menu")) == 1
        assert len(backend.calls("POST", "/orders")) == 1

    async def test_404_with_failed_refetch(self, signed_in_auth, api, backend, cart):
        backend.on("POST", "/orders", status=404, json={"message": "Menu item not found"})
        backend.on("GET", "/menu", status=503, json={"message": "down"})

        result = await submit_order(cart, signed_in_auth, api)

        assert result.outcome is SubmitOutcome.MENU_STALE
        assert result.menu is None

    async def test_server_error_is_not_retried(self, signed_in_auth, api, backend, cart):
        backend.on("POST", "/orders", status=500, json={"message": "Database unavailable"})

        result = await submit_order(cart, signed_in_auth, api)

        # 500 is not a validation error even though the text mentions "unavailable".
        assert result.outcome is SubmitOutcome.FAILED
        assert result.message == "Database unavailable"
        assert len(backend.calls("POST", "/orders")) == 1
        assert len(cart) == 2

    async def test_network_failure(self, signed_in_auth, session_db, cart):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        api = ApiClient(base_url="http://test", transport=httpx.MockTransport(refuse))
        signed_in_auth.api = api
        api.token = signed_in_auth.token

        result = await submit_order(cart, signed_in_auth, api)

        assert result.outcome is SubmitOutcome.FAILED
        assert "Cannot reach server" in result.message
