"""Text rendering helpers and kitchen ticket layout."""

import pytest
from rich.text import Text

from orderdesk import printer
from orderdesk.chef_dashboard_screen import kitchen_queue
from orderdesk.feedback_screen import parse_rating
from orderdesk.models import CartLine, Order, OrderLine, OrderStatus
from orderdesk.order_history_screen import newest_first
from orderdesk.printer import PrinterError, print_ticket, resolve_printer_font_path, ticket_lines
from orderdesk.rendering import (
    badge_style,
    format_cart_line,
    format_menu_item,
    format_price,
    render_window,
    short_order_id,
    window_bounds,
)


def _order(order_id="64f0c0ffee1234abcd", status=OrderStatus.PENDING, created_at="", **kwargs) -> Order:
    items = kwargs.pop(
        "items",
        (
            OrderLine(name="Classic Burger", quantity=2, price=9.5, removed_ingredients=("Onion",)),
            OrderLine(name="Tomato Soup", quantity=1, price=4.25, special_request="extra hot"),
        ),
    )
    return Order(order_id=order_id, items=items, total_amount=23.25, status=status, created_at=created_at, **kwargs)


class TestRendering:
    def test_format_price(self):
        assert format_price(0) == "$0.00"
        assert format_price(9.5) == "$9.50"

    def test_badge_style_is_stable(self):
        assert badge_style("mains") == badge_style("mains")

    def test_menu_item_details_only_when_selected(self, burger):
        assert "Ingredients" not in format_menu_item(burger).plain
        detailed = format_menu_item(burger, detailed=True).plain
        assert "Beef patty with house sauce" in detailed
        assert "Ingredients: Beef, Lettuce, Onion, Pickles" in detailed

    def test_cart_line_shows_subtotal_and_customization(self, burger):
        line = CartLine(item=burger, quantity=3, removed_ingredients=["Onion"], special_request="medium")

        plain = format_cart_line(line).plain

        assert "3 x Classic Burger" in plain
        assert "$28.50" in plain
        assert "Removed: Onion" in plain
        assert "Note: medium" in plain

    def test_short_order_id(self):
        assert short_order_id("64f0c0ffee1234abcd") == "34abcd"
        assert short_order_id("o1") == "o1"

    def test_window_bounds_keeps_selection_centered(self):
        assert window_bounds(0, 5, None) == (0, 0)
        assert window_bounds(3, 5, 2) == (0, 3)
        assert window_bounds(20, 5, 10) == (8, 13)
        assert window_bounds(20, 5, 19) == (15, 20)

    def test_render_window_marks_selection_and_clipping(self):
        rows = [Text(f"row {i}") for i in range(10)]

        plain = render_window(rows, 5, 3).plain

        assert plain.startswith("⋮")
        assert "➤ row 5" in plain
        assert plain.endswith("⋮")


class TestOrderingOfLists:
    def test_newest_first_puts_undated_last(self):
        orders = [_order("a", created_at="2026-01-01"), _order("b"), _order("c", created_at="2026-03-01")]

        assert [o.order_id for o in newest_first(orders)] == ["c", "a", "b"]

    def test_kitchen_queue_orders_by_status_then_age(self):
        orders = [
            _order("done", OrderStatus.COMPLETED, "2026-01-01"),
            _order("new-late", OrderStatus.PENDING, "2026-01-03"),
            _order("cooking", OrderStatus.PREPARING, "2026-01-01"),
            _order("new-early", OrderStatus.PENDING, "2026-01-02"),
        ]

        assert [o.order_id for o in kitchen_queue(orders)] == ["new-early", "new-late", "cooking", "done"]


class TestParseRating:
    @pytest.mark.parametrize("value,expected", [("1", 1), (" 5 ", 5)])
    def test_valid(self, value, expected):
        assert parse_rating(value) == expected

    @pytest.mark.parametrize(
        "value,message",
        [("", "required"), ("x", "whole number"), ("0", "between 1 and 5"), ("6", "between 1 and 5")],
    )
    def test_invalid(self, value, message):
        with pytest.raises(ValueError, match=message):
            parse_rating(value)


class TestKitchenTicket:
    def test_ticket_lines(self):
        order = _order(customer_name="Ada")

        assert ticket_lines(order) == [
            "#34abcd Ada",
            "2x Classic Burger",
            "    x onion",
            "1x Tomato Soup",
            "    * extra hot",
        ]

    def test_font_override_from_environment(self, tmp_path, monkeypatch):
        font = tmp_path / "ticket.ttf"
        font.write_bytes(b"")
        monkeypatch.setenv("ORDERDESK_PRINTER_FONT_PATH", str(font))

        assert resolve_printer_font_path() == str(font)

    def test_missing_fonts_raise_printer_error(self, monkeypatch):
        monkeypatch.delenv("ORDERDESK_PRINTER_FONT_PATH", raising=False)
        monkeypatch.setattr(printer, "PRINTER_FONT_PATH", "/nonexistent/font.ttf")
        monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())

        with pytest.raises(PrinterError, match="No usable printer font"):
            resolve_printer_font_path()

    def test_empty_order_is_not_printed(self):
        with pytest.raises(PrinterError, match="no items"):
            print_ticket(_order(items=()))
