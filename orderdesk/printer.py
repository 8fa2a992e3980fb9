"""Kitchen ticket printing on an ESC/POS USB thermal printer."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from orderdesk.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from orderdesk.models import Order
from orderdesk.rendering import short_order_id

logger = logging.getLogger(__name__)

# Extra vertical headroom for lines to avoid descender clipping on thermal output.
_LINE_EXTRA_PX = 16
_TAIL_SPACER_PX = 60
_FONT_OVERRIDE_ENV = "ORDERDESK_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


class PrinterError(RuntimeError):
    """The ticket could not be printed."""


def ticket_lines(order: Order) -> list[str]:
    """Text lines of a kitchen ticket, top to bottom."""
    header = f"#{short_order_id(order.order_id)}"
    if order.customer_name:
        header = f"{header} {order.customer_name}"
    lines = [header]
    for item in order.items:
        lines.append(f"{item.quantity}x {item.name}")
        lines.extend(f"    x {ingredient.lower()}" for ingredient in item.removed_ingredients)
        if item.special_request:
            lines.append(f"    * {item.special_request}")
    return lines


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. ORDERDESK_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise PrinterError(
        f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable and a font is available."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer unavailable: {exc}")
    return (True, "Printer ready")


def _render_line(text: str, font: object) -> object:
    from PIL import Image, ImageDraw

    canvas_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)

    bbox = draw.textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]

    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), text, font=font, fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def print_ticket(order: Order) -> None:
    """Print one kitchen ticket for `order` and cut the paper."""
    if not order.items:
        raise PrinterError("Order has no items to print")

    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise PrinterError(f"Printer dependencies unavailable: {exc}") from exc

    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    try:
        printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
        for line in ticket_lines(order):
            printer.image(_render_line(line, font))
        printer.image(_render_spacer(_TAIL_SPACER_PX))
        printer.cut()
    except Exception as exc:
        raise PrinterError(f"Printing failed: {exc}") from exc
    logger.info("ticket_printed order_id=%s lines=%d", order.order_id, len(order.items))
