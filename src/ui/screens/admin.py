# src/ui/screens/admin.py

"""Admin panel: search, inspect and remove any vendor's products."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Button, DataTable, Footer, Header, Input, Static

from src.config.settings import Settings
from src.filters.product_search import ProductSearch
from src.models.product import Product
from src.storage.backend import AuthError
from src.ui.formatting import format_date, format_price, or_na
from src.ui.screens.common import ProductDetailScreen
from src.ui.screens.listing import ListingScreen


class AdminScreen(ListingScreen):
    """Product management across all vendors."""

    BINDINGS = [
        Binding("v", "view", "View"),
        Binding("d", "delete", "Delete"),
        Binding("r", "refresh", "Refresh"),
    ]

    COLUMNS = ("Name", "Category", "Price", "Vendor", "Created", "Photos")
    EMPTY_MESSAGE = "No products match your search"

    def __init__(self) -> None:
        super().__init__()
        self.search_term = ""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Horizontal(
                Static(f"{Settings.MARKETPLACE_NAME} - Admin", id="title"),
                Button("Back to Home", id="home_btn"),
                Button("Sign Out", id="sign_out_btn"),
                id="top_bar",
            ),
            Input(placeholder="Search products...", id="search_input"),
            Static("", id="status"),
            DataTable(id="products_table", zebra_stripes=True, cursor_type="row"),
            Horizontal(
                Button("View", id="view_btn"),
                Button("Delete", variant="error", id="delete_btn"),
                id="action_bar",
            ),
            id="main_container",
        )
        yield Footer()

    def visible_products(self) -> list[Product]:
        return ProductSearch.filter(self.products, self.search_term)

    def render_row(self, product: Product) -> tuple[str, ...]:
        return (
            product.name[:60],
            or_na(product.category),
            format_price(product.mrp),
            or_na(product.user_id),
            format_date(product.created_at),
            str(len(product.photos)),
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search_input":
            self.search_term = event.value
            if not self.fetching:
                self.populate_table()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "view_btn":
            self.action_view()
        elif button_id == "delete_btn":
            self.action_delete()
        elif button_id == "home_btn":
            self.market.navigate(Settings.HOME_ROUTE)
        elif button_id == "sign_out_btn":
            await self.sign_out()

    def action_view(self) -> None:
        product = self.selected_product()
        if product is not None:
            self.app.push_screen(ProductDetailScreen(product))

    def action_delete(self) -> None:
        self.confirm_delete()

    def action_refresh(self) -> None:
        self.refresh_products()

    async def sign_out(self) -> None:
        try:
            await self.market.session.sign_out()
        except AuthError as exc:
            self.notify(str(exc), title="Sign out failed", severity="error")
