"""Menu browsing and cart screen."""

from __future__ import annotations

import logging

from rich.text import Text
from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from orderdesk.api import ApiError
from orderdesk.catalog import ALL_CATEGORIES, category_tabs, filter_by_category, search
from orderdesk.config import UNAVAILABLE_TOAST_SECONDS
from orderdesk.customize_modal import CustomizeModal
from orderdesk.models import CartLine, Customization, MenuItem
from orderdesk.navbar import NavBar
from orderdesk.ordering import SubmitOutcome, SubmitResult, submit_order
from orderdesk.rendering import (
    format_cart_line,
    format_category_tabs,
    format_menu_item,
    format_price,
    render_window,
)

logger = logging.getLogger(__name__)


class MenuScreen(Screen):
    """Browse the menu by category, build the cart and place the order."""

    CSS = """
    #main-layout {
        height: 1fr;
    }

    #menu-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #cart-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #menu-pane.active, #cart-pane.active {
        border: heavy $accent;
    }

    #category-bar {
        height: auto;
        margin-bottom: 1;
    }

    #search-bar {
        height: 1;
        margin-bottom: 1;
    }

    #menu-list, #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-total {
        text-style: bold;
        margin-top: 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    pane = reactive("menu")
    selected_index = reactive(0)
    cart_index = reactive(None)

    BINDINGS = [
        ("j", "move(1)", "Next"),
        ("k", "move(-1)", "Previous"),
        ("down", "move(1)", "Next"),
        ("up", "move(-1)", "Previous"),
        ("right_square_bracket", "cycle_category(1)", "Next category"),
        ("left_square_bracket", "cycle_category(-1)", "Previous category"),
        ("slash", "start_search", "Search"),
        ("a", "add_selected", "Add"),
        ("c", "customize_selected", "Customize"),
        ("tab", "switch_pane", "Menu/Cart"),
        ("plus", "change_quantity(1)", "Qty +"),
        ("minus", "change_quantity(-1)", "Qty -"),
        ("d", "remove_selected", "Remove"),
        Binding("ctrl+s", "place_order", "Place order", priority=True),
        ("ctrl+r", "prune_unavailable", "Remove unavailable"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.menu_items: list[MenuItem] = []
        self.category = ALL_CATEGORIES
        self.search_query = ""
        self.is_loading = True
        self.placing_order = False
        self.pending_unavailable: str | None = None

    @property
    def cart(self):
        return self.app.cart

    def compose(self) -> ComposeResult:
        yield Header()
        yield NavBar("menu", id="navbar")
        with Horizontal(id="main-layout"):
            with Vertical(id="menu-pane", classes="active"):
                yield Static("Our Menu", classes="pane-title")
                yield Static(id="category-bar")
                yield Static(id="search-bar")
                yield Static("Loading menu...", id="menu-list")
            with Vertical(id="cart-pane"):
                yield Static("Your Order", classes="pane-title")
                yield Static(id="cart-list")
                yield Static(id="cart-total")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_all()
        self.load_menu()

    @work(exclusive=True, group="menu")
    async def load_menu(self) -> None:
        try:
            items = await self.app.api.get_menu()
        except ApiError as exc:
            logger.warning("menu_load_failed error=%r", exc)
            self.app.notify("Failed to load menu items", severity="error")
            self.is_loading = False
            self._refresh_menu()
            return
        self.set_menu(items)

    def set_menu(self, items: list[MenuItem]) -> None:
        self.menu_items = list(items)
        self.is_loading = False
        if self.category not in category_tabs(self.menu_items):
            self.category = ALL_CATEGORIES
        self.selected_index = 0
        logger.info("menu_loaded items=%d", len(self.menu_items))
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if self.input_state != "active":
            return

        if event.key == "escape":
            self.input_state = "normal"
            self.search_query = ""
            self.selected_index = 0
            self._refresh_menu()
            event.stop()
            return

        if event.key == "enter":
            self.input_state = "normal"
            self._refresh_menu()
            event.stop()
            return

        if event.key == "backspace":
            self.search_query = self.search_query[:-1]
            self.selected_index = 0
            self._refresh_menu()
            event.stop()
            return

        if event.is_printable and event.character:
            self.search_query += event.character
            self.selected_index = 0
            self._refresh_menu()
            event.stop()

    def visible_items(self) -> list[MenuItem]:
        return search(filter_by_category(self.menu_items, self.category), self.search_query)

    def selected_item(self) -> MenuItem | None:
        items = self.visible_items()
        if not (0 <= self.selected_index < len(items)):
            return None
        return items[self.selected_index]

    def selected_line(self) -> CartLine | None:
        lines = self.cart.lines
        if self.cart_index is None or not (0 <= self.cart_index < len(lines)):
            return None
        return lines[self.cart_index]

    def action_move(self, delta: int) -> None:
        if self.pane == "cart":
            total = len(self.cart)
            if not total:
                return
            if self.cart_index is None:
                self.cart_index = 0 if delta > 0 else total - 1
            else:
                self.cart_index = (self.cart_index + delta) % total
            self._refresh_cart()
            return

        items = self.visible_items()
        if not items:
            return
        self.selected_index = (self.selected_index + delta) % len(items)
        self._refresh_menu()

    def action_cycle_category(self, delta: int) -> None:
        tabs = category_tabs(self.menu_items)
        idx = tabs.index(self.category) if self.category in tabs else 0
        self.category = tabs[(idx + delta) % len(tabs)]
        self.selected_index = 0
        self._refresh_menu()

    def action_start_search(self) -> None:
        self.input_state = "active"
        self.pane = "menu"
        self._refresh_all()

    def action_switch_pane(self) -> None:
        self.pane = "cart" if self.pane == "menu" else "menu"
        if self.pane == "cart" and self.cart_index is None and len(self.cart):
            self.cart_index = 0
        self._refresh_all()

    def action_add_selected(self) -> None:
        if self.pane != "menu":
            return
        item = self.selected_item()
        if item is None:
            return
        if not item.available:
            self.app.notify(f"{item.name} is currently unavailable", severity="warning")
            return
        self.cart.add(item)
        self.app.notify(f"Added {item.name} to cart")
        self._refresh_cart()

    def action_customize_selected(self) -> None:
        if self.pane != "menu":
            return
        item = self.selected_item()
        if item is None:
            return
        if not item.available:
            self.app.notify(f"{item.name} is currently unavailable", severity="warning")
            return

        def on_customized(customization: Customization | None) -> None:
            if customization is None:
                return
            self.cart.customize_and_add(item, customization.removed_ingredients, customization.special_request)
            self.app.notify(f"Added customized {item.name} to cart")
            self._refresh_cart()

        self.app.push_screen(CustomizeModal(item), on_customized)

    def action_change_quantity(self, delta: int) -> None:
        line = self.selected_line() if self.pane == "cart" else None
        if line is None:
            return
        self.cart.update_quantity(line.item_id, line.quantity + delta)
        self._refresh_cart()

    def action_remove_selected(self) -> None:
        line = self.selected_line() if self.pane == "cart" else None
        if line is None:
            return
        self.cart.remove(line.item_id)
        if not len(self.cart):
            self.cart_index = None
        else:
            self.cart_index = min(self.cart_index or 0, len(self.cart) - 1)
        self._refresh_cart()

    def action_prune_unavailable(self) -> None:
        if self.pending_unavailable is None:
            return
        removed = self.cart.remove_by_name(self.pending_unavailable)
        self.app.notify(f"Removed {removed} unavailable item(s) from cart")
        self.pending_unavailable = None
        self.cart_index = None
        self._refresh_cart()

    def action_place_order(self) -> None:
        if self.placing_order:
            return
        self.placing_order = True
        self._refresh_cart()
        self.submit()

    @work(exclusive=True, group="order")
    async def submit(self) -> None:
        try:
            result = await submit_order(self.cart, self.app.auth, self.app.api)
        finally:
            self.placing_order = False
        self._handle_submit_result(result)

    def _handle_submit_result(self, result: SubmitResult) -> None:
        outcome = result.outcome
        if outcome is SubmitOutcome.PLACED:
            self.app.notify(result.message)
            self.app.navigate("orders", focus_order_id=result.order_id)
            return

        if outcome in (SubmitOutcome.LOGIN_REQUIRED, SubmitOutcome.SESSION_EXPIRED):
            self.app.notify(result.message, severity="error")
            self.app.navigate("login")
            return

        if outcome is SubmitOutcome.ITEM_UNAVAILABLE:
            self.pending_unavailable = result.unavailable_item
            hint = "\nPress Ctrl+R to remove unavailable items" if result.unavailable_item else ""
            self.app.notify(f"{result.message}{hint}", severity="error", timeout=UNAVAILABLE_TOAST_SECONDS)
        elif outcome is SubmitOutcome.MENU_STALE:
            self.app.notify(result.message, severity="warning")
            if result.menu is not None:
                self.set_menu(result.menu)
        else:
            self.app.notify(result.message, severity="error")
        self._refresh_cart()

    def _refresh_all(self) -> None:
        self._refresh_menu()
        self._refresh_cart()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height // 2)

    def _refresh_menu(self) -> None:
        try:
            menu_pane = self.query_one("#menu-pane")
            category_bar = self.query_one("#category-bar", Static)
            search_bar = self.query_one("#search-bar", Static)
            menu_widget = self.query_one("#menu-list", Static)
        except NoMatches:
            return
        menu_pane.set_class(self.pane == "menu", "active")

        category_bar.update(format_category_tabs(category_tabs(self.menu_items), self.category))
        if self.input_state == "active":
            search_bar.update(f"Search: {self.search_query}|")
        elif self.search_query:
            search_bar.update(f"Search: {self.search_query}  (/ edit, Esc clear)")
        else:
            search_bar.update(Text("/ search  [ ] category  A add  C customize", style="dim"))

        if self.is_loading:
            menu_widget.update("Loading menu...")
            return

        items = self.visible_items()
        if not items:
            menu_widget.update("No items match" if self.menu_items else "Menu is empty")
            return
        if self.selected_index >= len(items):
            self.selected_index = 0

        rows = [format_menu_item(item, detailed=(idx == self.selected_index)) for idx, item in enumerate(items)]
        menu_widget.update(render_window(rows, self.selected_index, self._visible_rows(menu_widget)))

    def _refresh_cart(self) -> None:
        try:
            cart_pane = self.query_one("#cart-pane")
            cart_widget = self.query_one("#cart-list", Static)
            total_widget = self.query_one("#cart-total", Static)
        except NoMatches:
            return
        cart_pane.set_class(self.pane == "cart", "active")

        lines = self.cart.lines
        if not lines:
            self.cart_index = None
            cart_widget.update("Your cart is empty")
            total_widget.update(f"Total: {format_price(0)}")
            return

        if self.cart_index is not None and self.cart_index >= len(lines):
            self.cart_index = len(lines) - 1

        selected = self.cart_index if self.pane == "cart" else None
        rows = [format_cart_line(line) for line in lines]
        cart_widget.update(render_window(rows, selected, self._visible_rows(cart_widget)))

        status = "Placing order..." if self.placing_order else "Ctrl+S place order"
        total_widget.update(f"Total: {format_price(self.cart.total())}   {status}")
