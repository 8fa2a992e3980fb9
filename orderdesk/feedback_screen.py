"""Feedback form for one order."""

from __future__ import annotations

import logging

from textual import work
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Static

from orderdesk.api import ApiError
from orderdesk.models import Feedback, Order
from orderdesk.navbar import NavBar
from orderdesk.rendering import format_order_summary

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
COMMENT_MAX_LENGTH = 500


def parse_rating(value: str) -> int:
    """Validate the rating field; raises ValueError with a user-facing message."""
    raw = value.strip()
    if not raw:
        raise ValueError("Rating is required.")
    if not raw.isdigit():
        raise ValueError("Rating must be a whole number.")
    parsed = int(raw)
    if not (MIN_RATING <= parsed <= MAX_RATING):
        raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")
    return parsed


class FeedbackScreen(Screen):
    """Rate an order and leave an optional comment."""

    CSS = """
    FeedbackScreen {
        align: center middle;
    }

    #feedback-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #feedback-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #feedback-order {
        margin-bottom: 1;
    }

    #feedback-error {
        color: #ffb3b3;
        margin: 1 0;
    }
    """

    BINDINGS = [("escape", "back", "Back to orders")]

    def __init__(self, order: Order) -> None:
        super().__init__()
        self.order = order
        self.submitting = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield NavBar("orders", id="navbar")
        with Container(id="feedback-dialog"):
            yield Static("Leave Feedback", id="feedback-title")
            yield Static(format_order_summary(self.order, show_lines=True), id="feedback-order")
            yield Input(placeholder=f"Rating ({MIN_RATING}-{MAX_RATING})", max_length=1, id="rating")
            yield Input(placeholder="Comments (optional)", max_length=COMMENT_MAX_LENGTH, id="comment")
            yield Static(id="feedback-error")
            yield Button("Submit Feedback", variant="success", id="submit")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#rating", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "rating":
            self.query_one("#comment", Input).focus()
            return
        self._confirm()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "submit":
            self._confirm()

    def action_back(self) -> None:
        self.app.navigate("orders", focus_order_id=self.order.order_id)

    def _confirm(self) -> None:
        if self.submitting:
            return
        error_widget = self.query_one("#feedback-error", Static)
        try:
            rating = parse_rating(self.query_one("#rating", Input).value)
        except ValueError as exc:
            error_widget.update(str(exc))
            return
        error_widget.update("")
        comment = self.query_one("#comment", Input).value.strip()
        self.submitting = True
        self.send(Feedback(order_id=self.order.order_id, rating=rating, comment=comment))

    @work(exclusive=True, group="feedback")
    async def send(self, feedback: Feedback) -> None:
        try:
            await self.app.api.submit_feedback(feedback)
        except ApiError as exc:
            self.submitting = False
            logger.warning("feedback_failed order_id=%s error=%r", feedback.order_id, exc)
            if exc.status_code == 401:
                self.app.auth.expire()
                self.app.notify("Session expired. Please login again", severity="error")
                self.app.navigate("login")
                return
            self.app.notify(exc.message or "Failed to submit feedback", severity="error")
            return
        logger.info("feedback_sent order_id=%s rating=%d", feedback.order_id, feedback.rating)
        self.app.notify("Thank you for your feedback!")
        self.app.navigate("orders", focus_order_id=feedback.order_id)
