"""Entry point for the OrderDesk Textual app."""

from __future__ import annotations

from orderdesk.config import setup_logging
from orderdesk.orderdesk_app import OrderDeskApp


def main() -> None:
    """Run the Textual application."""
    setup_logging()
    OrderDeskApp().run()


if __name__ == "__main__":
    main()
