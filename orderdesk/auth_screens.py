"""Login and register screens."""

from __future__ import annotations

from textual import work
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Select, Static

from orderdesk.config import MIN_PASSWORD_LENGTH
from orderdesk.models import RegistrationForm
from orderdesk.navbar import NavBar

_FORM_CSS = """
    #form-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #form-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #form-error {
        color: #ffb3b3;
        margin: 1 0;
    }

    #form-help {
        color: #dddddd;
        margin-top: 1;
    }

    Input, Select {
        margin-bottom: 1;
    }
"""


class LoginScreen(Screen):
    """Email and password sign-in."""

    CSS = "LoginScreen { align: center middle; }" + _FORM_CSS

    def __init__(self) -> None:
        super().__init__()
        self.is_loading = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield NavBar("login", id="navbar")
        with Container(id="form-dialog"):
            yield Static("Login", id="form-title")
            yield Input(placeholder="Email", id="email")
            yield Input(placeholder="Password", password=True, id="password")
            yield Static(id="form-error")
            yield Button("Login", variant="success", id="submit")
            yield Static("Don't have an account? Press F6 to register.", id="form-help")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#email", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "email":
            self.query_one("#password", Input).focus()
            return
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "submit":
            self._submit()

    def _submit(self) -> None:
        if self.is_loading:
            return
        self.is_loading = True
        self.query_one("#submit", Button).label = "Logging in..."
        self.submit_login(self.query_one("#email", Input).value, self.query_one("#password", Input).value)

    @work(exclusive=True, group="auth")
    async def submit_login(self, email: str, password: str) -> None:
        result = await self.app.auth.login(email, password)
        self.is_loading = False
        if not result.success:
            self.query_one("#submit", Button).label = "Login"
            self.query_one("#form-error", Static).update(result.message)
            self.app.notify(result.message, severity="error")
            return
        self.app.notify(result.message)
        self.app.navigate("chef" if self.app.auth.is_chef else "menu")


class RegisterScreen(Screen):
    """Create a customer or chef account."""

    CSS = "RegisterScreen { align: center middle; }" + _FORM_CSS

    def __init__(self) -> None:
        super().__init__()
        self.is_loading = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield NavBar("register", id="navbar")
        with Container(id="form-dialog"):
            yield Static("Create an Account", id="form-title")
            yield Input(placeholder="Full Name", id="name")
            yield Input(placeholder="Email", id="email")
            yield Input(placeholder=f"Password (min {MIN_PASSWORD_LENGTH} characters)", password=True, id="password")
            yield Input(placeholder="Confirm Password", password=True, id="confirm-password")
            yield Select(
                [("Customer", "customer"), ("Chef", "chef")],
                value="customer",
                allow_blank=False,
                id="role",
            )
            yield Static(id="form-error")
            yield Button("Sign Up", variant="success", id="submit")
            yield Static("Already have an account? Press F5 to login.", id="form-help")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#name", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "submit":
            self._submit()

    def collect_form(self) -> RegistrationForm:
        return RegistrationForm(
            name=self.query_one("#name", Input).value,
            email=self.query_one("#email", Input).value,
            password=self.query_one("#password", Input).value,
            confirm_password=self.query_one("#confirm-password", Input).value,
            role=str(self.query_one("#role", Select).value),
        )

    def _submit(self) -> None:
        if self.is_loading:
            return
        self.is_loading = True
        self.query_one("#submit", Button).label = "Creating Account..."
        self.submit_registration(self.collect_form())

    @work(exclusive=True, group="auth")
    async def submit_registration(self, form: RegistrationForm) -> None:
        result = await self.app.auth.register(form)
        self.is_loading = False
        if not result.success:
            self.query_one("#submit", Button).label = "Sign Up"
            self.query_one("#form-error", Static).update(result.message)
            self.app.notify(result.message, severity="error")
            return
        self.app.notify(result.message)
        self.app.navigate("menu")
