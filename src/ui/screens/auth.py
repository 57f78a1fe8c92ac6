# src/ui/screens/auth.py

"""Vendor and admin sign-in / registration."""

import logging

from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Input, Label, Static

from src.config.settings import Settings
from src.models.session import SessionState, User
from src.storage.backend import AuthError
from src.ui.screens.base import MarketScreen

logger = logging.getLogger("vendor_market.ui")


class AuthScreen(MarketScreen):
    """Email/password sign-in and sign-up for vendors."""

    heading = "Vendor Access"
    subtitle = "Sign in or register to manage your products"

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Vertical(
                Static(self.heading, id="auth_title"),
                Static(self.subtitle),
                Label("Email"),
                Input(placeholder="you@example.com", id="email_input"),
                Label("Password"),
                Input(password=True, id="password_input"),
                Horizontal(
                    Button("Sign In", variant="primary", id="sign_in_btn"),
                    Button("Register", id="sign_up_btn"),
                    Button("Back to Home", id="home_btn"),
                    id="auth_buttons",
                ),
                id="auth_form",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.session_changed(self.market.session.state)

    def session_changed(self, state: SessionState) -> None:
        """Already signed in: go where this account belongs."""
        if not state.loading and state.user is not None:
            self.market.call_later(
                self.market.navigate, self.landing_route(state.user)
            )

    def landing_route(self, user: User) -> str:
        return Settings.DASHBOARD_ROUTE

    def credentials(self) -> tuple[str, str] | None:
        email = self.query_one("#email_input", Input).value.strip()
        password = self.query_one("#password_input", Input).value
        if not email or not password:
            self.notify("Email and password are required", severity="warning")
            return None
        return email, password

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "sign_in_btn":
            await self.sign_in()
        elif event.button.id == "sign_up_btn":
            await self.sign_up()
        elif event.button.id == "home_btn":
            self.market.navigate(Settings.HOME_ROUTE)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "password_input":
            await self.sign_in()

    def _set_busy(self, busy: bool) -> None:
        for button_id in ("#sign_in_btn", "#sign_up_btn"):
            self.query_one(button_id, Button).disabled = busy

    async def sign_in(self) -> None:
        """Sign in with the entered credentials."""
        creds = self.credentials()
        if creds is None:
            return
        self._set_busy(True)
        try:
            await self.market.session.sign_in(*creds)
        except AuthError as exc:
            if self.live:
                self.notify(str(exc), title="Sign in failed", severity="error")
                self._set_busy(False)
            return
        # Navigation happens through session_changed

    async def sign_up(self) -> None:
        """Register a new account with the entered credentials."""
        creds = self.credentials()
        if creds is None:
            return
        self._set_busy(True)
        try:
            user = await self.market.session.sign_up(*creds)
        except AuthError as exc:
            if self.live:
                self.notify(str(exc), title="Registration failed", severity="error")
                self._set_busy(False)
            return
        if user is None and self.live:
            self.notify("Account created! Check your email for verification.")
            self._set_busy(False)


class AdminAuthScreen(AuthScreen):
    """Sign-in for administrators; non-admins land on their dashboard."""

    heading = "Admin Access"
    subtitle = "Enter your admin credentials to access the admin panel"

    def landing_route(self, user: User) -> str:
        if user.can(Settings.ADMIN_CAPABILITY):
            return Settings.ADMIN_ROUTE
        self.notify(
            "This account has no admin access", severity="warning"
        )
        return Settings.DASHBOARD_ROUTE
