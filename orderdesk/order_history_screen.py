"""Order history screen for the signed-in customer."""

from __future__ import annotations

import logging

from textual import work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from orderdesk.api import ApiError
from orderdesk.models import Order
from orderdesk.navbar import NavBar
from orderdesk.rendering import format_order_summary, render_window

logger = logging.getLogger(__name__)


def newest_first(orders: list[Order]) -> list[Order]:
    # ISO timestamps sort lexicographically; orders without one keep API order at the end.
    dated = sorted((o for o in orders if o.created_at), key=lambda o: o.created_at, reverse=True)
    return dated + [o for o in orders if not o.created_at]


class OrderHistoryScreen(Screen):
    """List past orders; the selected one is expanded to show its items."""

    CSS = """
    #orders-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #orders-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(0)

    BINDINGS = [
        ("j", "move(1)", "Next"),
        ("k", "move(-1)", "Previous"),
        ("down", "move(1)", "Next"),
        ("up", "move(-1)", "Previous"),
        ("f", "feedback", "Leave feedback"),
        ("r", "reload", "Refresh"),
    ]

    def __init__(self, focus_order_id: str | None = None) -> None:
        super().__init__()
        self.focus_order_id = focus_order_id
        self.orders: list[Order] = []
        self.is_loading = True

    def compose(self) -> ComposeResult:
        yield Header()
        yield NavBar("orders", id="navbar")
        with Vertical(id="orders-pane"):
            yield Static("My Orders", classes="pane-title")
            yield Static("Loading orders...", id="orders-list")
        yield Footer()

    def on_mount(self) -> None:
        self.load_orders()

    @work(exclusive=True, group="orders")
    async def load_orders(self) -> None:
        self.is_loading = True
        try:
            orders = await self.app.api.list_my_orders()
        except ApiError as exc:
            logger.warning("orders_load_failed error=%r", exc)
            if exc.status_code == 401:
                self.app.auth.expire()
                self.app.notify("Session expired. Please login again", severity="error")
                self.app.navigate("login")
                return
            self.app.notify("Failed to load your orders", severity="error")
            orders = []
        self.set_orders(orders)

    def set_orders(self, orders: list[Order]) -> None:
        self.orders = newest_first(orders)
        self.is_loading = False
        self.selected_index = 0
        if self.focus_order_id:
            for idx, order in enumerate(self.orders):
                if order.order_id == self.focus_order_id:
                    self.selected_index = idx
                    break
        self._refresh_orders()

    def selected_order(self) -> Order | None:
        if not (0 <= self.selected_index < len(self.orders)):
            return None
        return self.orders[self.selected_index]

    def action_move(self, delta: int) -> None:
        if not self.orders:
            return
        self.selected_index = (self.selected_index + delta) % len(self.orders)
        self._refresh_orders()

    def action_feedback(self) -> None:
        order = self.selected_order()
        if order is None:
            return
        if order.has_feedback:
            self.app.notify("Feedback already submitted for this order", severity="warning")
            return
        self.app.navigate("feedback", order=order)

    def action_reload(self) -> None:
        selected = self.selected_order()
        if selected is not None:
            self.focus_order_id = selected.order_id
        self._refresh_orders()
        self.load_orders()

    def _refresh_orders(self) -> None:
        try:
            orders_widget = self.query_one("#orders-list", Static)
        except NoMatches:
            return
        if self.is_loading and not self.orders:
            orders_widget.update("Loading orders...")
            return
        if not self.orders:
            orders_widget.update("You have not placed any orders yet")
            return

        rows = [
            format_order_summary(order, show_lines=(idx == self.selected_index))
            for idx, order in enumerate(self.orders)
        ]
        height = orders_widget.size.height
        visible_rows = max(1, height // 2) if height > 0 else 8
        orders_widget.update(render_window(rows, self.selected_index, visible_rows))
