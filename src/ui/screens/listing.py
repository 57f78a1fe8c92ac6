# src/ui/screens/listing.py

"""Shared behaviour of the product listing screens."""

import logging
from typing import cast

from textual.widgets import DataTable, Static

from src.models.product import Product
from src.services.catalog import remove_product
from src.storage.backend import BackendError
from src.ui.screens.base import MarketScreen
from src.ui.screens.common import ConfirmScreen

logger = logging.getLogger("vendor_market.ui")


class ListingScreen(MarketScreen):
    """Loads the catalog into a ``#products_table`` DataTable.

    Subclasses set ``COLUMNS`` and implement :meth:`render_row`; they
    may narrow the fetch with :meth:`owner_id` and the display with
    :meth:`visible_products`.
    """

    COLUMNS: tuple[str, ...] = ()
    EMPTY_MESSAGE = "No products found"

    def __init__(self) -> None:
        super().__init__()
        self.products: list[Product] = []
        self.fetching = False
        self.status_message = ""

    # ── Hooks ────────────────────────────────────────────

    def owner_id(self) -> str | None:
        return None

    def visible_products(self) -> list[Product]:
        return self.products

    def render_row(self, product: Product) -> tuple[str, ...]:
        raise NotImplementedError

    # ── Loading ──────────────────────────────────────────

    def on_mount(self) -> None:
        self.table.add_columns(*self.COLUMNS)
        self.refresh_products()

    @property
    def table(self) -> DataTable[str]:
        return cast(DataTable[str], self.query_one("#products_table", DataTable))

    def refresh_products(self) -> None:
        self.run_worker(self.load_products(), exclusive=True, group="load")

    async def load_products(self) -> None:
        """Fetch the catalog and redraw; errors leave an empty table."""
        self.fetching = True
        self.query_one("#status", Static).update("Loading products...")
        try:
            products = await self.market.catalog.fetch_catalog(self.owner_id())
        except BackendError as exc:
            logger.error("Catalog load failed: %s", exc)
            products = []
            if self.live:
                self.notify(
                    str(exc) or "Error fetching products", severity="error"
                )
        if not self.live:
            logger.debug("%s closed before products arrived", type(self).__name__)
            return
        self.fetching = False
        self.products = products
        self.populate_table()

    def populate_table(self) -> None:
        """Redraw the table from :meth:`visible_products`."""
        table = self.table
        table.clear()
        visible = self.visible_products()
        for product in visible:
            table.add_row(*self.render_row(product), key=product.id)
        self.status_message = (
            f"{len(visible)} products" if visible else self.EMPTY_MESSAGE
        )
        self.query_one("#status", Static).update(self.status_message)

    def selected_product(self) -> Product | None:
        visible = self.visible_products()
        row = self.table.cursor_row
        if 0 <= row < len(visible):
            return visible[row]
        self.notify("Select a product first", severity="warning")
        return None

    # ── Deletion ─────────────────────────────────────────

    def confirm_delete(self) -> None:
        """Ask for confirmation, then delete the selected product."""
        product = self.selected_product()
        if product is None or product.id is None:
            return
        product_id = product.id

        def _on_answer(confirmed: bool | None) -> None:
            if confirmed:
                self.run_worker(self.delete_product(product_id))

        self.app.push_screen(
            ConfirmScreen(f"Are you sure you want to delete {product.name}?"),
            _on_answer,
        )

    async def delete_product(self, product_id: str) -> bool:
        """Delete on the backend, then drop the row locally.

        Returns True on success; the list is untouched on failure.
        """
        try:
            await self.market.catalog.delete_product(product_id)
        except BackendError as exc:
            if self.live:
                self.notify(
                    str(exc) or "Error deleting product", severity="error"
                )
            return False
        if not self.live:
            return True
        self.products = remove_product(self.products, product_id)
        self.populate_table()
        self.notify("Product deleted successfully")
        return True
