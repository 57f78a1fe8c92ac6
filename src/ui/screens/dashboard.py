# src/ui/screens/dashboard.py

"""Vendor dashboard: the signed-in vendor's own products."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Button, DataTable, Footer, Header, Static

from src.config.settings import Settings
from src.models.product import Product
from src.storage.backend import AuthError
from src.ui.formatting import format_date, format_discount, format_price, or_na
from src.ui.screens.listing import ListingScreen


class DashboardScreen(ListingScreen):
    """List, add, edit and delete the vendor's products."""

    BINDINGS = [
        Binding("n", "add", "Add Product"),
        Binding("e", "edit", "Edit"),
        Binding("d", "delete", "Delete"),
        Binding("r", "refresh", "Refresh"),
    ]

    COLUMNS = ("Name", "Category", "SKU", "Price", "Discount", "Expiry")
    EMPTY_MESSAGE = "No products found. Press 'n' to add your first product."

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Horizontal(
                Static("Product Dashboard", id="title"),
                Button("Home", id="home_btn"),
                Button("Sign Out", id="sign_out_btn"),
                Button("Add Product", variant="primary", id="add_btn"),
                id="top_bar",
            ),
            Static("", id="status"),
            DataTable(id="products_table", zebra_stripes=True, cursor_type="row"),
            Horizontal(
                Button("Edit", id="edit_btn"),
                Button("Delete", variant="error", id="delete_btn"),
                id="action_bar",
            ),
            id="main_container",
        )
        yield Footer()

    def owner_id(self) -> str | None:
        user = self.market.session.user
        return user.id if user else None

    def render_row(self, product: Product) -> tuple[str, ...]:
        return (
            product.name[:60],
            or_na(product.category),
            or_na(product.sku),
            format_price(product.mrp),
            format_discount(product.discount),
            format_date(product.expiry),
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "add_btn":
            self.action_add()
        elif button_id == "edit_btn":
            self.action_edit()
        elif button_id == "delete_btn":
            self.action_delete()
        elif button_id == "home_btn":
            self.market.navigate(Settings.HOME_ROUTE)
        elif button_id == "sign_out_btn":
            await self.sign_out()

    def action_add(self) -> None:
        self.market.navigate("/products/new")

    def action_edit(self) -> None:
        product = self.selected_product()
        if product is not None:
            self.market.navigate(f"/products/edit/{product.id}")

    def action_delete(self) -> None:
        self.confirm_delete()

    def action_refresh(self) -> None:
        self.refresh_products()

    async def sign_out(self) -> None:
        try:
            await self.market.session.sign_out()
        except AuthError as exc:
            self.notify(str(exc), title="Sign out failed", severity="error")
