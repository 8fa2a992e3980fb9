"""Main Textual app class."""

from __future__ import annotations

import logging
from typing import Any, Callable

from textual.app import App
from textual.screen import ModalScreen, Screen

from orderdesk.api import ApiClient
from orderdesk.auth import AuthSession
from orderdesk.auth_screens import LoginScreen, RegisterScreen
from orderdesk.cart import Cart
from orderdesk.chef_dashboard_screen import ChefDashboardScreen
from orderdesk.feedback_screen import FeedbackScreen
from orderdesk.home_screen import HomeScreen
from orderdesk.menu_screen import MenuScreen
from orderdesk.order_history_screen import OrderHistoryScreen
from orderdesk.persistence import bootstrap_schema
from orderdesk.printer import check_printer_dependencies

logger = logging.getLogger(__name__)

ROUTES: dict[str, Callable[..., Screen]] = {
    "home": HomeScreen,
    "menu": MenuScreen,
    "orders": OrderHistoryScreen,
    "feedback": FeedbackScreen,
    "chef": ChefDashboardScreen,
    "login": LoginScreen,
    "register": RegisterScreen,
}

LOGIN_REQUIRED_ROUTES = {"orders", "feedback", "chef"}


class OrderDeskApp(App):
    """A Textual client for browsing the menu, ordering and running the kitchen."""

    TITLE = "OrderDesk"
    SUB_TITLE = "Menu / Orders / Kitchen"

    BINDINGS = [
        ("f1", "navigate('home')", "Home"),
        ("f2", "navigate('menu')", "Menu"),
        ("f3", "navigate('orders')", "Orders"),
        ("f4", "navigate('chef')", "Kitchen"),
        ("f5", "navigate('login')", "Login"),
        ("f6", "navigate('register')", "Register"),
        ("ctrl+l", "logout", "Logout"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, api: ApiClient | None = None, session_db_path: str | None = None) -> None:
        super().__init__()
        self.api = api or ApiClient()
        self.session_db_path = session_db_path
        self.auth = AuthSession(self.api, db_path=session_db_path)
        self.cart = Cart()
        self.printer_status = ""
        self.current_route = "home"

    def on_mount(self) -> None:
        bootstrap_schema(self.session_db_path)
        self.auth.restore()
        _, self.printer_status = check_printer_dependencies()
        logger.info("app_mounted printer_status=%r authenticated=%s", self.printer_status, self.auth.is_authenticated)
        self.push_screen(HomeScreen())

    async def on_unmount(self) -> None:
        await self.api.aclose()

    def action_navigate(self, route: str) -> None:
        self.navigate(route)

    def navigate(self, route: str, **kwargs: Any) -> None:
        """Switch the visible screen, applying login and role guards."""
        if isinstance(self.screen, ModalScreen):
            return
        if route in LOGIN_REQUIRED_ROUTES and not self.auth.is_authenticated:
            self.notify("Please login first", severity="warning")
            route, kwargs = "login", {}
        elif route == "chef" and not self.auth.is_chef:
            self.notify("Access denied: chefs only", severity="error")
            route, kwargs = "menu", {}
        elif route == "feedback" and "order" not in kwargs:
            route = "orders"

        logger.info("navigate route=%s", route)
        self.current_route = route
        self.switch_screen(ROUTES[route](**kwargs))

    def action_logout(self) -> None:
        if not self.auth.is_authenticated:
            return
        self.auth.logout()
        self.notify("Logged out")
        self.navigate("home")
