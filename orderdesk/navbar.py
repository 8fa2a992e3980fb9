"""Navigation bar showing the routes available to the current session."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from orderdesk.auth import AuthSession

ROUTE_KEYS: list[tuple[str, str, str]] = [
    ("home", "F1", "Home"),
    ("menu", "F2", "Menu"),
    ("orders", "F3", "My Orders"),
    ("chef", "F4", "Kitchen"),
    ("login", "F5", "Login"),
    ("register", "F6", "Register"),
]


def visible_routes(auth: AuthSession) -> list[str]:
    """Routes to advertise: guests see login/register, chefs also see the kitchen."""
    if not auth.is_authenticated:
        return ["home", "menu", "login", "register"]
    routes = ["home", "menu", "orders"]
    if auth.is_chef:
        routes.append("chef")
    return routes


def render_nav(auth: AuthSession, current: str) -> Text:
    text = Text()
    shown = visible_routes(auth)
    for route, key, label in ROUTE_KEYS:
        if route not in shown:
            continue
        style = "bold reverse" if route == current else ""
        text.append(f" {key} ", style="bold #ffffff on #3c8c4a")
        text.append(f" {label} ", style=style)
        text.append(" ")

    if auth.user is not None:
        text.append(" │ ", style="dim")
        text.append(auth.user.name or auth.user.email, style="bold")
        text.append(f" ({auth.user.role})", style="dim")
        text.append("  Ctrl+L logout", style="dim")
    return text


class NavBar(Static):
    """One-line route bar; call `refresh_nav` after the session changes."""

    DEFAULT_CSS = """
    NavBar {
        height: 1;
        background: $panel;
    }
    """

    def __init__(self, current: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.current = current

    def on_mount(self) -> None:
        self.refresh_nav()

    def refresh_nav(self) -> None:
        self.update(render_nav(self.app.auth, self.current))
