"""Landing screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from orderdesk.navbar import NavBar


class HomeScreen(Screen):
    CSS = """
    HomeScreen {
        align: center middle;
    }

    #home-dialog {
        width: 64;
        height: auto;
        border: round $primary;
        padding: 1 2;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header()
        yield NavBar("home", id="navbar")
        with Container(id="home-dialog"):
            yield Static(id="home-body")
        yield Footer()

    def on_mount(self) -> None:
        auth = self.app.auth
        text = Text()
        text.append("Welcome to OrderDesk\n\n", style="bold")
        if auth.user is not None:
            text.append(f"Signed in as {auth.user.name or auth.user.email}.\n")
        text.append("F2 browse the menu and build your order.\n")
        if auth.is_authenticated:
            text.append("F3 see your orders and leave feedback.\n")
            if auth.is_chef:
                text.append("F4 open the kitchen dashboard.\n")
        else:
            text.append("F5 login or F6 register to place orders.\n")
        text.append("\nCtrl+Q quit", style="dim")
        self.query_one("#home-body", Static).update(text)
