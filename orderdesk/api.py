"""Async HTTP client for the restaurant ordering API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from orderdesk.config import API_BASE_URL, API_TIMEOUT_SECONDS
from orderdesk.models import Feedback, MenuItem, Order, OrderStatus, User

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call. `status_code` is None when no response was received."""

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class ApiClient:
    """One request per call; no retries, no caching."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        timeout: float = API_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token: str | None = None
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, *, json: Any = None, auth: bool = False) -> Any:
        headers: dict[str, str] = {}
        if auth:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.debug("api_request method=%s path=%s", method, path)
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.RequestError as exc:
            logger.warning("api_unreachable method=%s path=%s error=%r", method, path, exc)
            raise ApiError(f"Cannot reach server: {exc}") from exc

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = None

        if response.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            logger.info("api_error method=%s path=%s status=%d message=%r", method, path, response.status_code, message)
            raise ApiError(message or response.reason_phrase or "Request failed", response.status_code, data)
        return data

    async def get_menu(self) -> list[MenuItem]:
        data = await self._request("GET", "/menu")
        return [MenuItem.from_api(entry) for entry in data or []]

    async def place_order(self, draft: dict[str, Any]) -> dict[str, Any]:
        """Submit an order draft; returns the raw `{success, orderId, message}` body."""
        data = await self._request("POST", "/orders", json=draft, auth=True)
        return data if isinstance(data, dict) else {}

    async def list_my_orders(self) -> list[Order]:
        data = await self._request("GET", "/orders/my-orders", auth=True)
        return [Order.from_api(entry) for entry in data or []]

    async def get_order(self, order_id: str) -> Order:
        data = await self._request("GET", f"/orders/{order_id}", auth=True)
        return Order.from_api(data or {})

    async def submit_feedback(self, feedback: Feedback) -> None:
        await self._request("POST", "/feedback", json=feedback.to_payload(), auth=True)

    async def login(self, email: str, password: str) -> tuple[str, User]:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        return _token_and_user(data)

    async def register(self, name: str, email: str, password: str, role: str) -> tuple[str, User]:
        body = {"name": name, "email": email, "password": password, "role": role}
        data = await self._request("POST", "/auth/register", json=body)
        return _token_and_user(data)

    async def list_kitchen_orders(self) -> list[Order]:
        data = await self._request("GET", "/orders/chef", auth=True)
        return [Order.from_api(entry) for entry in data or []]

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        data = await self._request("PATCH", f"/orders/{order_id}/status", json={"status": status.value}, auth=True)
        return Order.from_api(data or {})


def _token_and_user(data: Any) -> tuple[str, User]:
    if not isinstance(data, dict) or not data.get("token"):
        raise ApiError("Malformed authentication response", payload=data)
    user_data = data.get("user") or {}
    return str(data["token"]), User.from_api(user_data)
