"""Menu browsing helpers: categories, filtering and search."""

from __future__ import annotations

from orderdesk.models import MenuItem

ALL_CATEGORIES = "all"


def categories(items: list[MenuItem]) -> list[str]:
    """Unique categories in the order they first appear."""
    return list(dict.fromkeys(item.category for item in items))


def filter_by_category(items: list[MenuItem], category: str) -> list[MenuItem]:
    if category == ALL_CATEGORIES:
        return list(items)
    return [item for item in items if item.category == category]


def search(items: list[MenuItem], query: str) -> list[MenuItem]:
    """Case-insensitive match on name, description or any ingredient."""
    q = query.strip().lower()
    if not q:
        return list(items)
    return [
        item
        for item in items
        if q in item.name.lower()
        or q in item.description.lower()
        or any(q in ingredient.lower() for ingredient in item.ingredients)
    ]


def category_tabs(items: list[MenuItem]) -> list[str]:
    """Category bar entries, starting with the catch-all tab."""
    return [ALL_CATEGORIES, *categories(items)]
