"""Kitchen dashboard: incoming orders, status updates and ticket printing."""

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
from orderdesk.models import Order, OrderStatus
from orderdesk.navbar import NavBar
from orderdesk.printer import PrinterError, print_ticket
from orderdesk.rendering import format_order_summary, render_window

logger = logging.getLogger(__name__)

_STATUS_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.PREPARING: 1,
    OrderStatus.READY: 2,
    OrderStatus.COMPLETED: 3,
    OrderStatus.CANCELLED: 4,
}


def kitchen_queue(orders: list[Order]) -> list[Order]:
    """Active orders first (pending, preparing, ready), oldest first within a status."""
    return sorted(orders, key=lambda o: (_STATUS_RANK[o.status], o.created_at))


class ChefDashboardScreen(Screen):
    """Chef-only view of the kitchen queue."""

    CSS = """
    #kitchen-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #kitchen-status {
        height: 1;
        margin-bottom: 1;
        color: $text-muted;
    }

    #kitchen-list {
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
        ("s", "advance_status", "Advance status"),
        ("p", "print_ticket", "Print ticket"),
        ("r", "reload", "Refresh"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.orders: list[Order] = []
        self.is_loading = True
        self.busy = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield NavBar("chef", id="navbar")
        with Vertical(id="kitchen-pane"):
            yield Static("Kitchen Orders", classes="pane-title")
            yield Static(id="kitchen-status")
            yield Static("Loading orders...", id="kitchen-list")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#kitchen-status", Static).update(self.app.printer_status)
        self.load_orders()

    @work(exclusive=True, group="kitchen")
    async def load_orders(self) -> None:
        self.is_loading = True
        try:
            orders = await self.app.api.list_kitchen_orders()
        except ApiError as exc:
            logger.warning("kitchen_load_failed error=%r", exc)
            if self._handle_auth_failure(exc):
                return
            self.app.notify("Failed to load kitchen orders", severity="error")
            orders = []
        self.orders = kitchen_queue(orders)
        self.is_loading = False
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

    def action_reload(self) -> None:
        self.load_orders()

    def action_advance_status(self) -> None:
        order = self.selected_order()
        if order is None or self.busy:
            return
        next_status = order.status.next()
        if next_status is None:
            self.app.notify(f"Order is already {order.status.value}", severity="warning")
            return
        self.busy = True
        self.update_status(order, next_status)

    @work(exclusive=True, group="kitchen-status")
    async def update_status(self, order: Order, status: OrderStatus) -> None:
        try:
            updated = await self.app.api.update_order_status(order.order_id, status)
        except ApiError as exc:
            logger.warning("status_update_failed order_id=%s error=%r", order.order_id, exc)
            if not self._handle_auth_failure(exc):
                self.app.notify(exc.message or "Failed to update order", severity="error")
            return
        finally:
            self.busy = False

        # Some servers answer with an empty body; keep what we know locally then.
        if not updated.order_id:
            updated = Order(
                order_id=order.order_id,
                items=order.items,
                total_amount=order.total_amount,
                status=status,
                created_at=order.created_at,
                customer_name=order.customer_name,
                has_feedback=order.has_feedback,
            )
        self.orders = [updated if o.order_id == order.order_id else o for o in self.orders]
        logger.info("status_updated order_id=%s status=%s", order.order_id, updated.status.value)
        self.app.notify(f"Order marked {updated.status.value}")
        self._refresh_orders()

    def action_print_ticket(self) -> None:
        order = self.selected_order()
        if order is None:
            return
        try:
            print_ticket(order)
        except PrinterError as exc:
            logger.warning("ticket_print_failed order_id=%s error=%r", order.order_id, exc)
            self.app.notify(str(exc), severity="error")
            return
        self.app.notify("Ticket printed")

    def _handle_auth_failure(self, exc: ApiError) -> bool:
        if exc.status_code == 401:
            self.app.auth.expire()
            self.app.notify("Session expired. Please login again", severity="error")
            self.app.navigate("login")
            return True
        if exc.status_code == 403:
            self.app.notify("Access denied: chefs only", severity="error")
            self.app.navigate("menu")
            return True
        return False

    def _refresh_orders(self) -> None:
        try:
            orders_widget = self.query_one("#kitchen-list", Static)
        except NoMatches:
            return
        if self.is_loading and not self.orders:
            orders_widget.update("Loading orders...")
            return
        if not self.orders:
            orders_widget.update("No orders in the kitchen queue")
            return
        if self.selected_index >= len(self.orders):
            self.selected_index = len(self.orders) - 1

        rows = [format_order_summary(order, show_lines=True) for order in self.orders]
        height = orders_widget.size.height
        visible_rows = max(1, height // 3) if height > 0 else 6
        orders_widget.update(render_window(rows, self.selected_index, visible_rows))
