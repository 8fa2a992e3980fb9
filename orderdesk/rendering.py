"""Rich text rendering helpers shared by the screens."""

from __future__ import annotations

from zlib import crc32

from rich.text import Text

from orderdesk.models import CartLine, MenuItem, Order, OrderStatus

_CATEGORY_STYLES = (
    "bold #0b1f0f on #5fbf72",
    "bold #ffffff on #b23a48",
    "bold #ffffff on #2f6db5",
    "bold #1f1300 on #e0a030",
    "bold #ffffff on #7a4fb5",
)

_STATUS_STYLES: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "bold #1f1300 on #e0a030",
    OrderStatus.PREPARING: "bold #ffffff on #2f6db5",
    OrderStatus.READY: "bold #0b1f0f on #5fbf72",
    OrderStatus.COMPLETED: "bold #ffffff on #555555",
    OrderStatus.CANCELLED: "bold #ffffff on #b23a48",
}


def format_price(amount: float) -> str:
    return f"${amount:.2f}"


def badge_style(category: str) -> str:
    """Return a stable badge style for a category name."""
    return _CATEGORY_STYLES[crc32(category.encode("utf-8")) % len(_CATEGORY_STYLES)]


def format_category_tabs(tabs: list[str], selected: str) -> Text:
    text = Text()
    for idx, tab in enumerate(tabs):
        if idx > 0:
            text.append(" ")
        label = f" {tab.title()} "
        if tab == selected:
            text.append(label, style="bold #ffffff on #3c8c4a")
        else:
            text.append(label, style="dim")
    return text


def format_menu_item(item: MenuItem, *, detailed: bool = False) -> Text:
    """Render a menu row: category badge, name and price, plus details when selected."""
    text = Text()
    text.append(f" {item.category[:1].upper() or '?'} ", style=badge_style(item.category))
    text.append(f" {item.name}", style="bold" if item.available else "dim strike")
    text.append(f"  {format_price(item.price)}")
    if not detailed:
        return text
    if item.description:
        text.append(f"\n      {item.description}", style="italic")
    if item.ingredients:
        text.append(f"\n      Ingredients: {', '.join(item.ingredients)}", style="dim")
    return text


def format_customization(removed: list[str] | tuple[str, ...], special_request: str) -> Text:
    text = Text()
    if removed:
        text.append(f"Removed: {', '.join(removed)}", style="dim")
    if special_request:
        if removed:
            text.append("\n      ")
        text.append(f"Note: {special_request}", style="dim italic")
    return text


def format_cart_line(line: CartLine) -> Text:
    text = Text()
    text.append(f"{line.quantity} x {line.item.name}")
    text.append(f"  {format_price(line.subtotal)}", style="bold")
    details = format_customization(line.removed_ingredients, line.special_request)
    if details.plain:
        text.append("\n      ")
        text.append_text(details)
    return text


def format_status(status: OrderStatus) -> Text:
    return Text(f" {status.value.upper()} ", style=_STATUS_STYLES[status])


def short_order_id(order_id: str) -> str:
    return order_id[-6:] if len(order_id) > 6 else order_id


def format_order_summary(order: Order, *, show_lines: bool = False) -> Text:
    """Render an order header line and, optionally, its items."""
    text = Text()
    text.append(f"#{short_order_id(order.order_id)} ")
    text.append_text(format_status(order.status))
    text.append(f"  {format_price(order.total_amount)}", style="bold")
    if order.customer_name:
        text.append(f"  {order.customer_name}")
    if order.created_at:
        text.append(f"  {order.created_at[:16].replace('T', ' ')}", style="dim")
    if order.has_feedback:
        text.append("  ★", style="#e0a030")
    if not show_lines:
        return text
    for line in order.items:
        text.append(f"\n      {line.quantity} x {line.name}")
        details = format_customization(line.removed_ingredients, line.special_request)
        if details.plain:
            text.append("\n        ")
            text.append_text(details)
    return text


def window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    """Slice of a list to show so the selected row stays near the middle."""
    if total <= 0:
        return (0, 0)

    rows = max(1, rows)
    if total <= rows:
        return (0, total)

    if selected is None:
        start = 0
    else:
        half = rows // 2
        start = selected - half
        start = max(0, start)
        start = min(start, total - rows)

    return (start, start + rows)


def render_window(rows: list[Text], selected: int | None, visible_rows: int) -> Text:
    """Join rows with a pointer on the selected one and ellipses for clipped ends."""
    start, end = window_bounds(len(rows), visible_rows, selected)

    lines = Text()
    if start > 0:
        lines.append("⋮\n", style="dim")

    for idx in range(start, end):
        if idx > start:
            lines.append("\n")
        pointer = "➤ " if idx == selected else "  "
        lines.append(pointer)
        lines.append_text(rows[idx])

    if end < len(rows):
        lines.append("\n⋮", style="dim")
    return lines
