# src/ui/screens/product_form.py

"""Add / edit product screen."""

import logging
from pathlib import Path
from typing import cast

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, VerticalScroll
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    LoadingIndicator,
    Static,
    TextArea,
)

from src.config.settings import Settings
from src.filters.product_validator import FORM_FIELDS, FormError
from src.services.product_form import ProductForm
from src.storage.backend import BackendError
from src.ui.screens.base import MarketScreen

logger = logging.getLogger("vendor_market.ui")


class ProductFormScreen(MarketScreen):
    """Create a product, or edit one when a product id is routed in."""

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, product_id: str | None = None) -> None:
        super().__init__()
        self.form = ProductForm(self.market.backend, product_id)
        self.submitting = False

    def compose(self) -> ComposeResult:
        mode = "Edit" if self.form.is_edit else "Add"
        fields: list[Label | Input | TextArea] = []
        for name, label, multiline in FORM_FIELDS:
            fields.append(Label(label))
            if multiline:
                fields.append(TextArea(id=f"field_{name}"))
            else:
                fields.append(Input(id=f"field_{name}"))

        yield Header()
        yield Container(
            Horizontal(
                Static(f"{mode} Product", id="title"),
                Button("Back", id="cancel_btn"),
                id="top_bar",
            ),
            LoadingIndicator(id="loader"),
            VerticalScroll(
                *fields,
                Label("Product Photos"),
                DataTable(id="photos_table", cursor_type="row"),
                Horizontal(
                    Input(placeholder="Path to an image file", id="photo_path"),
                    Button("Add Photo", id="add_photo_btn"),
                    Button("Remove Photo", id="remove_photo_btn"),
                    id="photo_bar",
                ),
                id="form_body",
            ),
            Horizontal(
                Button(f"{'Update' if self.form.is_edit else 'Save'} Product",
                       variant="primary", id="save_btn"),
                id="action_bar",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.photos_table.add_columns("#", "Photo", "Status")
        loader = self.query_one("#loader", LoadingIndicator)
        if self.form.is_edit:
            self.query_one("#form_body").display = False
            self.run_worker(self.load_product(), exclusive=True)
        else:
            loader.display = False

    def on_unmount(self) -> None:
        released = self.form.discard()
        if released:
            logger.debug("Released %d photo previews", released)

    @property
    def photos_table(self) -> DataTable[str]:
        return cast(DataTable[str], self.query_one("#photos_table", DataTable))

    # ── Loading ──────────────────────────────────────────

    async def load_product(self) -> None:
        """Load the edited product; on failure go back to the dashboard."""
        try:
            await self.form.load()
        except BackendError as exc:
            if self.live:
                self.notify(
                    str(exc) or "Error fetching product", severity="error"
                )
                self.market.navigate(Settings.DASHBOARD_ROUTE)
            return
        if not self.live:
            return
        self.fill_fields()
        self.populate_photos()
        self.query_one("#loader", LoadingIndicator).display = False
        self.query_one("#form_body").display = True

    def fill_fields(self) -> None:
        for name, _, multiline in FORM_FIELDS:
            value = self.form.values.get(name, "")
            if multiline:
                self.query_one(f"#field_{name}", TextArea).text = value
            else:
                self.query_one(f"#field_{name}", Input).value = value

    def collect_values(self) -> None:
        for name, _, multiline in FORM_FIELDS:
            if multiline:
                value = self.query_one(f"#field_{name}", TextArea).text
            else:
                value = self.query_one(f"#field_{name}", Input).value
            self.form.values[name] = value

    def populate_photos(self) -> None:
        table = self.photos_table
        table.clear()
        for index, entry in enumerate(self.form.photos, 1):
            table.add_row(
                str(index),
                entry.photo_url,
                "new" if entry.is_new else "stored",
            )

    # ── Photos ───────────────────────────────────────────

    def add_photo(self) -> None:
        path_input = self.query_one("#photo_path", Input)
        raw = path_input.value.strip()
        if not raw:
            self.notify("Enter the path of an image", severity="warning")
            return
        try:
            self.form.add_photo(Path(raw).expanduser())
        except FormError as exc:
            self.notify(str(exc), severity="error")
            return
        path_input.value = ""
        self.populate_photos()

    def remove_photo(self) -> None:
        row = self.photos_table.cursor_row
        if not 0 <= row < len(self.form.photos):
            self.notify("Select a photo first", severity="warning")
            return
        self.form.remove_photo(row)
        self.populate_photos()

    # ── Submission ───────────────────────────────────────

    def _set_submitting(self, submitting: bool) -> None:
        self.submitting = submitting
        button = self.query_one("#save_btn", Button)
        button.disabled = submitting
        verb = "Update" if self.form.is_edit else "Save"
        if submitting:
            button.label = "Updating..." if self.form.is_edit else "Saving..."
        else:
            button.label = f"{verb} Product"

    async def submit(self) -> bool:
        """Validate and save; the form stays filled in on failure."""
        if self.submitting:
            return False
        user = self.market.session.user
        if user is None:
            self.notify(
                "You must be logged in to perform this action",
                severity="error",
            )
            return False

        self.collect_values()
        was_edit = self.form.is_edit
        self._set_submitting(True)
        try:
            await self.form.submit(user)
        except FormError as exc:
            if self.live:
                self.notify(str(exc), severity="warning")
                self._set_submitting(False)
            return False
        except BackendError as exc:
            action = "updating" if was_edit else "creating"
            if self.live:
                self.notify(
                    str(exc) or f"Error {action} product", severity="error"
                )
                self.populate_photos()
                self._set_submitting(False)
            return False

        if not self.live:
            logger.info(
                "Product %s saved after the form was closed",
                self.form.product_id,
            )
            return True
        self.notify(
            f"Product {'updated' if was_edit else 'created'} successfully!"
        )
        self.market.navigate(Settings.DASHBOARD_ROUTE)
        return True

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "save_btn":
            await self.submit()
        elif button_id == "cancel_btn":
            self.action_cancel()
        elif button_id == "add_photo_btn":
            self.add_photo()
        elif button_id == "remove_photo_btn":
            self.remove_photo()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "photo_path":
            self.add_photo()

    async def action_save(self) -> None:
        await self.submit()

    def action_cancel(self) -> None:
        self.market.navigate(Settings.DASHBOARD_ROUTE)
