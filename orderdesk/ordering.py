"""Order submission and classification of its failures."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from orderdesk.api import ApiClient, ApiError
from orderdesk.auth import AuthSession
from orderdesk.cart import Cart
from orderdesk.models import MenuItem

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to place order"


class SubmitOutcome(str, Enum):
    PLACED = "placed"
    LOGIN_REQUIRED = "login_required"
    EMPTY_CART = "empty_cart"
    ITEM_UNAVAILABLE = "item_unavailable"
    INVALID = "invalid"
    SESSION_EXPIRED = "session_expired"
    MENU_STALE = "menu_stale"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmitResult:
    """What happened to a submit attempt and what the UI should show."""

    outcome: SubmitOutcome
    message: str
    order_id: str | None = None
    unavailable_item: str | None = None
    menu: list[MenuItem] | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is SubmitOutcome.PLACED


def unavailable_item_name(message: str) -> str | None:
    """Extract the quoted item name from messages like "Item 'Soup' is unavailable"."""
    parts = message.split("'")
    if len(parts) < 3 or not parts[1]:
        return None
    return parts[1]


async def submit_order(cart: Cart, auth: AuthSession, api: ApiClient) -> SubmitResult:
    """Place the cart as one order. Local checks run before any request is made."""
    if not auth.is_authenticated:
        return SubmitResult(SubmitOutcome.LOGIN_REQUIRED, "Please login to place an order")
    if cart.is_empty:
        return SubmitResult(SubmitOutcome.EMPTY_CART, "Your cart is empty")

    draft = cart.to_order_payload()
    logger.info("submit_order lines=%d total=%.2f", len(cart), draft["totalAmount"])
    try:
        body = await api.place_order(draft)
    except ApiError as exc:
        return await _classify_failure(exc, auth, api)

    if body.get("success"):
        order_id = str(body.get("orderId") or "")
        cart.clear()
        logger.info("submit_order_placed order_id=%s", order_id)
        return SubmitResult(SubmitOutcome.PLACED, "Order placed successfully!", order_id=order_id)

    message = body.get("message") or DEFAULT_FAILURE_MESSAGE
    logger.warning("submit_order_rejected message=%r", message)
    return SubmitResult(SubmitOutcome.FAILED, message)


async def _classify_failure(exc: ApiError, auth: AuthSession, api: ApiClient) -> SubmitResult:
    logger.warning("submit_order_failed status=%s message=%r", exc.status_code, exc.message)
    server_message = exc.message if exc.payload else ""

    if exc.status_code == 400:
        if "unavailable" in exc.message:
            return SubmitResult(
                SubmitOutcome.ITEM_UNAVAILABLE,
                exc.message,
                unavailable_item=unavailable_item_name(exc.message),
            )
        return SubmitResult(SubmitOutcome.INVALID, server_message or "Invalid order data")

    if exc.status_code == 401:
        auth.expire()
        return SubmitResult(SubmitOutcome.SESSION_EXPIRED, "Session expired. Please login again")

    if exc.status_code == 404:
        try:
            menu = await api.get_menu()
        except ApiError as refetch_exc:
            logger.warning("menu_refetch_failed error=%r", refetch_exc)
            menu = None
        return SubmitResult(SubmitOutcome.MENU_STALE, "Menu item not found - please refresh the menu", menu=menu)

    return SubmitResult(SubmitOutcome.FAILED, exc.message or DEFAULT_FAILURE_MESSAGE)
