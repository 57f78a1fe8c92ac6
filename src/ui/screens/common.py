# src/ui/screens/common.py

"""Placeholder and modal screens used across routes."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, LoadingIndicator, Static

from src.models.product import Product
from src.ui.formatting import format_date, format_discount, format_price, or_na


class LoadingScreen(Screen[None]):
    """Neutral placeholder shown while the session is resolving."""

    def compose(self) -> ComposeResult:
        yield LoadingIndicator(id="session_loader")


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog; dismisses with the answer."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(self.question, id="confirm_question"),
            Horizontal(
                Button("Cancel", id="confirm_no"),
                Button("Delete", variant="error", id="confirm_yes"),
                classes="dialog_buttons",
            ),
            id="confirm_dialog",
            classes="dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm_yes")

    def action_cancel(self) -> None:
        self.dismiss(False)


class ProductDetailScreen(ModalScreen[None]):
    """Read-only view of every field of a product, with its photos."""

    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, product: Product) -> None:
        super().__init__()
        self.product = product

    def compose(self) -> ComposeResult:
        p = self.product
        lines = [
            f"[b]{p.name}[/b]",
            "",
            f"Description: {p.description or 'No description'}",
            f"Category: {or_na(p.category)}",
            f"SKU: {or_na(p.sku)}",
            f"Price: {format_price(p.mrp)}",
            f"Discount: {format_discount(p.discount) or 'N/A'}",
            f"Expiry: {format_date(p.expiry)}",
            f"Manufactured by: {or_na(p.manufactured_by)}",
            f"Quantity/Size: {or_na(p.quantity)}",
            f"Return policy: {or_na(p.return_policy)}",
            f"Vendor: {or_na(p.user_id)}",
            f"Created: {format_date(p.created_at)}",
            "",
            f"Photos ({len(p.photos)}):",
        ]
        lines.extend(f"  {photo.photo_url}" for photo in p.photos)
        yield Vertical(
            VerticalScroll(Static("\n".join(lines), id="detail_body")),
            Button("Close", variant="primary", id="detail_close"),
            id="detail_dialog",
            classes="dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)
