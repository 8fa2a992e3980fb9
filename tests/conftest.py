"""Shared fixtures: an in-process fake of the ordering API and a temporary session store."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from orderdesk.api import ApiClient
from orderdesk.auth import AuthSession
from orderdesk.models import MenuItem, User
from orderdesk.persistence import bootstrap_schema, save_session

MENU_JSON: list[dict[str, Any]] = [
    {
        "_id": "m1",
        "name": "Classic Burger",
        "description": "Beef patty with house sauce",
        "price": 9.5,
        "category": "mains",
        "ingredients": ["Beef", "Lettuce", "Onion", "Pickles"],
        "image": "https://img.example/burger.png",
    },
    {
        "_id": "m2",
        "name": "Tomato Soup",
        "description": "Slow cooked",
        "price": 4.25,
        "category": "starters",
        "ingredients": ["Tomato", "Cream"],
    },
    {
        "_id": "m3",
        "name": "Lemonade",
        "price": 3.0,
        "category": "drinks",
    },
]

CUSTOMER_JSON = {"_id": "u1", "name": "Ada", "email": "ada@example.com", "role": "customer"}
CHEF_JSON = {"_id": "u2", "name": "Remy", "email": "remy@example.com", "role": "chef"}


class FakeBackend:
    """Routes requests by (method, path) to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, json: Any = None) -> None:
        self.routes[(method, path)] = (status, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})
        status, body = self.routes[key]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture
def backend() -> FakeBackend:
    fake = FakeBackend()
    fake.on("GET", "/menu", json=MENU_JSON)
    return fake


@pytest.fixture
def api(backend: FakeBackend) -> ApiClient:
    return ApiClient(base_url="http://test", transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def session_db(tmp_path) -> str:
    path = str(tmp_path / "session.db")
    bootstrap_schema(path)
    return path


@pytest.fixture
def auth(api: ApiClient, session_db: str) -> AuthSession:
    return AuthSession(api, db_path=session_db)


@pytest.fixture
def signed_in_auth(auth: AuthSession, session_db: str) -> AuthSession:
    save_session("tok-123", User.from_api(CUSTOMER_JSON), session_db)
    auth.restore()
    return auth


@pytest.fixture
def menu_items() -> list[MenuItem]:
    return [MenuItem.from_api(entry) for entry in MENU_JSON]


@pytest.fixture
def burger(menu_items: list[MenuItem]) -> MenuItem:
    return menu_items[0]


@pytest.fixture
def soup(menu_items: list[MenuItem]) -> MenuItem:
    return menu_items[1]
