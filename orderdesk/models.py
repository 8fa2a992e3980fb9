"""Domain models for orderdesk."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _entity_id(data: dict[str, Any]) -> str:
    # The API exposes document ids as `_id`; some endpoints return plain `id`.
    return str(data.get("_id") or data.get("id") or "")


@dataclass(frozen=True)
class MenuItem:
    """A catalog entry available for ordering."""

    item_id: str
    name: str
    price: float
    category: str
    description: str = ""
    ingredients: tuple[str, ...] = ()
    image: str | None = None
    available: bool = True

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> MenuItem:
        return cls(
            item_id=_entity_id(data),
            name=str(data.get("name", "")),
            price=float(data.get("price") or 0),
            category=str(data.get("category") or "uncategorized"),
            description=str(data.get("description") or ""),
            ingredients=tuple(str(i) for i in data.get("ingredients") or []),
            image=data.get("image") or None,
            available=bool(data.get("isAvailable", data.get("available", True))),
        )


@dataclass(frozen=True)
class Customization:
    """Removed ingredients and free-text instructions for one cart line."""

    removed_ingredients: tuple[str, ...] = ()
    special_request: str = ""


@dataclass
class CartLine:
    """One menu item in the cart with its quantity and customization."""

    item: MenuItem
    quantity: int = 1
    removed_ingredients: list[str] = field(default_factory=list)
    special_request: str = ""

    @property
    def item_id(self) -> str:
        return self.item.item_id

    @property
    def subtotal(self) -> float:
        return self.item.price * self.quantity

    def to_payload(self) -> dict[str, Any]:
        return {
            "menuItem": self.item.item_id,
            "quantity": self.quantity,
            "price": self.item.price,
            "removedIngredients": list(self.removed_ingredients),
            "specialRequest": self.special_request,
        }


class OrderStatus(str, Enum):
    """Kitchen lifecycle of a placed order."""

    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str | None) -> OrderStatus:
        try:
            return cls((value or "pending").lower())
        except ValueError:
            return cls.PENDING

    def next(self) -> OrderStatus | None:
        """Return the status a chef moves the order to, or None when terminal."""
        flow = [OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.COMPLETED]
        if self not in flow or self is OrderStatus.COMPLETED:
            return None
        return flow[flow.index(self) + 1]


@dataclass(frozen=True)
class OrderLine:
    """A line of an order as reported back by the API."""

    name: str
    quantity: int
    price: float
    removed_ingredients: tuple[str, ...] = ()
    special_request: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> OrderLine:
        menu_item = data.get("menuItem")
        # Populated orders embed the menu item; unpopulated ones only carry its id.
        if isinstance(menu_item, dict):
            name = str(menu_item.get("name", ""))
        else:
            name = str(data.get("name") or menu_item or "")
        return cls(
            name=name,
            quantity=int(data.get("quantity") or 1),
            price=float(data.get("price") or 0),
            removed_ingredients=tuple(data.get("removedIngredients") or []),
            special_request=str(data.get("specialRequest") or ""),
        )


@dataclass(frozen=True)
class Order:
    """A placed order, as listed in order history and on the chef dashboard."""

    order_id: str
    items: tuple[OrderLine, ...]
    total_amount: float
    status: OrderStatus = OrderStatus.PENDING
    created_at: str = ""
    customer_name: str | None = None
    has_feedback: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Order:
        user = data.get("user")
        customer_name = user.get("name") if isinstance(user, dict) else data.get("customerName")
        return cls(
            order_id=_entity_id(data),
            items=tuple(OrderLine.from_api(line) for line in data.get("items") or []),
            total_amount=float(data.get("totalAmount") or 0),
            status=OrderStatus.parse(data.get("status")),
            created_at=str(data.get("createdAt") or ""),
            customer_name=customer_name,
            has_feedback=bool(data.get("hasFeedback") or data.get("feedback")),
        )


@dataclass(frozen=True)
class User:
    """The signed-in account."""

    user_id: str
    name: str
    email: str
    role: str = "customer"

    @property
    def is_chef(self) -> bool:
        return self.role == "chef"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> User:
        return cls(
            user_id=_entity_id(data),
            name=str(data.get("name", "")),
            email=str(data.get("email", "")),
            role=str(data.get("role") or "customer"),
        )


@dataclass(frozen=True)
class Feedback:
    """Customer feedback for one order."""

    order_id: str
    rating: int
    comment: str = ""

    def to_payload(self) -> dict[str, Any]:
        return {"orderId": self.order_id, "rating": self.rating, "comment": self.comment}


@dataclass
class RegistrationForm:
    """Fields collected by the register screen."""

    name: str
    email: str
    password: str
    confirm_password: str
    role: str = "customer"
