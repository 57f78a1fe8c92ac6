# src/ui/screens/storefront.py

"""Public storefront: every vendor's products, newest first."""

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Button, DataTable, Footer, Header, Static

from src.config.settings import Settings
from src.models.product import Product
from src.models.session import SessionState
from src.ui.formatting import format_discount, format_price
from src.ui.screens.listing import ListingScreen

logger = logging.getLogger("vendor_market.ui")


class StorefrontScreen(ListingScreen):
    """Browse all listed products."""

    BINDINGS = [
        Binding("b", "buy", "Buy"),
        Binding("r", "refresh", "Refresh"),
        Binding("l", "account", "Login / Dashboard"),
        Binding("a", "admin", "Admin"),
    ]

    COLUMNS = ("Name", "Category", "Price", "Discount", "Brand", "Photos")
    EMPTY_MESSAGE = (
        "No products available yet. Check back later or "
        "register as a vendor to add products."
    )

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Horizontal(
                Static(f"🛍 {Settings.MARKETPLACE_NAME}", id="title"),
                Button("Login / Register", variant="primary", id="account_btn"),
                Button("Admin", id="admin_btn"),
                id="top_bar",
            ),
            Static("Browse all available products from our vendors"),
            Static("", id="status"),
            DataTable(id="products_table", zebra_stripes=True, cursor_type="row"),
            Horizontal(
                Button("Buy Now", variant="success", id="buy_btn"),
                id="action_bar",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.session_changed(self.market.session.state)

    def render_row(self, product: Product) -> tuple[str, ...]:
        return (
            product.name[:60],
            product.category or "",
            format_price(product.mrp),
            format_discount(product.discount),
            product.manufactured_by or "",
            str(len(product.photos)),
        )

    def session_changed(self, state: SessionState) -> None:
        button = self.query_one("#account_btn", Button)
        button.label = "Dashboard" if state.user else "Login / Register"

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "buy_btn":
            self.action_buy()
        elif event.button.id == "account_btn":
            self.action_account()
        elif event.button.id == "admin_btn":
            self.action_admin()

    def action_buy(self) -> None:
        """Demo checkout: confirm the order with a notification only."""
        product = self.selected_product()
        if product is None:
            return
        logger.info("Demo order placed for %s", product.id)
        self.notify(
            f"You've ordered {product.name}! "
            "This is a demo - no actual purchase was made."
        )

    def action_refresh(self) -> None:
        self.refresh_products()

    def action_account(self) -> None:
        if self.market.session.user:
            self.market.navigate(Settings.DASHBOARD_ROUTE)
        else:
            self.market.navigate(Settings.LOGIN_ROUTE)

    def action_admin(self) -> None:
        self.market.navigate(Settings.ADMIN_LOGIN_ROUTE)
