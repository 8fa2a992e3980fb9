"""In-memory cart of menu items awaiting submission."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from orderdesk.models import CartLine, MenuItem

logger = logging.getLogger(__name__)


class Cart:
    """Ordered cart lines keyed by menu item identity."""

    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self._lines)

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def line_for(self, item_id: str) -> CartLine | None:
        for line in self._lines:
            if line.item_id == item_id:
                return line
        return None

    def add(self, item: MenuItem) -> CartLine:
        """Add one plain unit of an item, merging into an existing line."""
        existing = self.line_for(item.item_id)
        if existing is not None:
            existing.quantity += 1
            logger.debug("cart_add item=%s quantity=%d", item.item_id, existing.quantity)
            return existing

        line = CartLine(item=item)
        self._lines.append(line)
        logger.debug("cart_add item=%s quantity=1", item.item_id)
        return line

    def customize_and_add(
        self,
        item: MenuItem,
        removed_ingredients: Iterable[str] = (),
        special_request: str = "",
    ) -> CartLine:
        """Insert or replace the line for `item` with a customized single unit."""
        removed = list(dict.fromkeys(removed_ingredients))
        unknown = [name for name in removed if name not in item.ingredients]
        if unknown:
            raise ValueError(f"{item.name} has no ingredient(s): {', '.join(unknown)}")

        line = CartLine(
            item=item,
            quantity=1,
            removed_ingredients=removed,
            special_request=special_request.strip(),
        )
        for idx, existing in enumerate(self._lines):
            if existing.item_id == item.item_id:
                self._lines[idx] = line
                break
        else:
            self._lines.append(line)

        logger.debug("cart_customize item=%s removed=%r request=%r", item.item_id, removed, line.special_request)
        return line

    def update_quantity(self, item_id: str, new_quantity: int) -> None:
        if new_quantity < 1:
            return
        line = self.line_for(item_id)
        if line is not None:
            line.quantity = new_quantity

    def remove(self, item_id: str) -> None:
        self._lines = [line for line in self._lines if line.item_id != item_id]

    def remove_by_name(self, name: str) -> int:
        """Drop every line whose item is called `name`; return how many were removed."""
        kept = [line for line in self._lines if line.item.name != name]
        removed = len(self._lines) - len(kept)
        self._lines = kept
        return removed

    def clear(self) -> None:
        self._lines.clear()

    def total(self) -> float:
        return sum((line.subtotal for line in self._lines), 0.0)

    def to_order_payload(self) -> dict[str, Any]:
        """Project the cart into the body of a place-order request."""
        return {
            "items": [line.to_payload() for line in self._lines],
            "totalAmount": self.total(),
        }
