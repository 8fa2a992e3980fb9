"""Customize modal screen: remove ingredients and add a special request."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from orderdesk.models import Customization, MenuItem
from orderdesk.rendering import format_price

SPECIAL_REQUEST_MAX_LENGTH = 200


class CustomizeModal(ModalScreen[Customization | None]):
    """Centered modal that dismisses with a Customization, or None on cancel."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("q", "cancel", "Cancel"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "toggle_current", "Toggle"),
        ("a", "confirm", "Add to cart"),
    ]

    CSS = """
    CustomizeModal {
        align: center middle;
        background: $background 60%;
    }

    #customize-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #customize-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #customize-body {
        margin-bottom: 1;
        color: white;
    }

    #customize-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)
    _INGREDIENT_KIND = "ingredient"
    _REQUEST_KIND = "request"

    def __init__(self, item: MenuItem) -> None:
        super().__init__()
        self.item = item
        self.removed_ingredients: list[str] = []
        self.special_request = ""
        self.typing_request = False
        self.request_input_value = ""

    def compose(self) -> ComposeResult:
        with Container(id="customize-dialog"):
            yield Static(f"Customize {self.item.name}", id="customize-title")
            yield Static(id="customize-body")
            yield Static(id="customize-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if not self.typing_request:
            return

        if event.key == "escape":
            self.typing_request = False
            self.request_input_value = ""
            self._refresh_content()
            event.stop()
            return

        if event.key == "enter":
            self._confirm_request()
            event.stop()
            return

        if event.key == "backspace":
            if self.request_input_value:
                self.request_input_value = self.request_input_value[:-1]
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if len(self.request_input_value) < SPECIAL_REQUEST_MAX_LENGTH:
                self.request_input_value += event.character
            self._refresh_content()
            event.stop()
            return

        # Ignore all non-text keys while typing.
        event.stop()

    def action_cancel(self) -> None:
        if self.typing_request:
            self.typing_request = False
            self.request_input_value = ""
            self._refresh_content()
            return
        self.dismiss(None)

    def action_confirm(self) -> None:
        if self.typing_request:
            return
        removed = tuple(name for name in self.item.ingredients if name in self.removed_ingredients)
        self.dismiss(Customization(removed_ingredients=removed, special_request=self.special_request))

    def action_move_cursor(self, delta: int) -> None:
        if self.typing_request:
            return
        rows = self._rows()
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        row_kind, row_value = self._rows()[self.cursor_index]

        if row_kind == self._REQUEST_KIND:
            self.typing_request = True
            self.request_input_value = self.special_request
            self._refresh_content()
            return

        if row_value in self.removed_ingredients:
            self.removed_ingredients.remove(row_value)
        else:
            self.removed_ingredients.append(row_value)
        self._refresh_content()

    def _rows(self) -> list[tuple[str, str]]:
        rows: list[tuple[str, str]] = [(self._INGREDIENT_KIND, name) for name in self.item.ingredients]
        rows.append((self._REQUEST_KIND, "Special instructions"))
        return rows

    def _confirm_request(self) -> None:
        self.special_request = self.request_input_value.strip()
        self.typing_request = False
        self.request_input_value = ""
        self._refresh_content()

    def _refresh_content(self) -> None:
        body = self.query_one("#customize-body", Static)
        help_text = self.query_one("#customize-help", Static)

        content = Text(style="white")
        content.append(f"{self.item.name}  {format_price(self.item.price)}", style="bold")
        rows = self._rows()
        if self.cursor_index >= len(rows):
            self.cursor_index = max(0, len(rows) - 1)

        content.append("\n\n")
        if self.item.ingredients:
            content.append("Ingredients (unchecked = removed)\n", style="#dddddd")
        for idx, (row_kind, row_value) in enumerate(rows):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            if row_kind == self._INGREDIENT_KIND:
                kept = row_value not in self.removed_ingredients
                checked = "[x]" if kept else "[ ]"
                content.append(f"{pointer}{checked} {row_value}", style="white" if kept else "dim strike")
            elif self.typing_request and idx == self.cursor_index:
                content.append(f"{pointer}Special instructions: {self.request_input_value}|", style="bold white")
            else:
                shown = self.special_request or "E.g. No salt, extra sauce..."
                style = "bold white" if self.special_request else "dim"
                content.append(f"{pointer}Special instructions: ", style="white")
                content.append(shown, style=style)

        if self.typing_request:
            help_text.update("Type text, Enter confirm, Esc cancel typing")
        else:
            help_text.update("J/K/↑/↓ move, Enter toggle/edit, A add to cart, Esc/q cancel")
        body.update(content)
