# src/services/product_form.py

"""Create/edit workflow for a product and its photo set."""

import asyncio
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from src.filters.product_validator import (
    FORM_FIELDS,
    FormError,
    ProductValidator,
)
from src.models.session import User
from src.storage.backend import BackendError, MarketplaceBackend
from src.storage.preview_store import PhotoPreview, PreviewStore

logger = logging.getLogger("vendor_market.form")


@dataclass
class PhotoEntry:
    """A photo shown in the form: stored (has an id) or newly picked."""

    photo_url: str
    id: str | None = None
    source: Path | None = None
    preview: PhotoPreview | None = None

    @property
    def is_new(self) -> bool:
        return self.id is None


class ProductForm:
    """State and submission logic behind the product form screen.

    Edit mode is selected by passing a ``product_id``. Field values are
    kept as the text the vendor typed; parsing happens on submit.
    """

    def __init__(
        self,
        backend: MarketplaceBackend,
        product_id: str | None = None,
        previews: PreviewStore | None = None,
    ) -> None:
        self.backend = backend
        self.product_id = product_id
        self.previews = previews or PreviewStore()
        self.values: dict[str, str] = {name: "" for name, _, _ in FORM_FIELDS}
        self.photos: list[PhotoEntry] = []
        self._stored_photo_ids: set[str] = set()

    @property
    def is_edit(self) -> bool:
        return self.product_id is not None

    async def load(self) -> None:
        """Load the product being edited and its stored photos.

        Raises:
            BackendError: when the product or its photos cannot be read.
        """
        if self.product_id is None:
            return
        product = await asyncio.to_thread(
            self.backend.get_product, self.product_id
        )
        photos = await asyncio.to_thread(
            self.backend.list_photos, self.product_id
        )
        self.values = ProductValidator.to_form_values(product)
        self.photos = [
            PhotoEntry(photo_url=p.photo_url, id=p.id) for p in photos
        ]
        self._stored_photo_ids = {p.id for p in photos}
        logger.info(
            "Loaded product %s with %d photos",
            self.product_id,
            len(photos),
        )

    def add_photo(self, path: Path) -> PhotoEntry:
        """Attach a local image file, previewed until it is uploaded.

        Raises:
            FormError: when *path* is missing or not an image.
        """
        content_type = mimetypes.guess_type(path.name)[0] or ""
        if not content_type.startswith("image/"):
            raise FormError(f"File {path.name} is not an image")
        if not path.is_file():
            raise FormError(f"File {path} does not exist")

        preview = self.previews.create(path)
        entry = PhotoEntry(
            photo_url=str(preview.path), source=path, preview=preview
        )
        self.photos.append(entry)
        return entry

    def remove_photo(self, index: int) -> PhotoEntry:
        """Drop a photo from the form, releasing its preview.

        Stored photos are only deleted on the backend at submit time.
        """
        entry = self.photos.pop(index)
        if entry.preview is not None:
            self.previews.release(entry.preview)
            entry.preview = None
        return entry

    def discard(self) -> int:
        """Release every outstanding preview (form closed or cancelled)."""
        return self.previews.release_all()

    async def submit(self, user: User) -> str:
        """Save the product, upload new photos, delete removed ones.

        Returns the product id.

        Raises:
            FormError: when the name is blank (nothing is written).
            BackendError: on the first failing request; later steps are
                skipped.
        """
        product = ProductValidator.build_product(self.values, user.id)
        record = product.to_record()

        if self.product_id is None:
            self.product_id = await asyncio.to_thread(
                self.backend.insert_product, record
            )
        else:
            await asyncio.to_thread(
                self.backend.update_product, self.product_id, record
            )
        product_id = self.product_id

        # Known gap: nothing below is rolled back. If an upload fails the
        # product row and any photos stored before it stay in place.
        for entry in [e for e in self.photos if e.is_new]:
            try:
                await self._store_photo(product_id, entry)
            except BackendError:
                logger.warning(
                    "Product %s saved but photo %s failed; "
                    "earlier writes were kept",
                    product_id,
                    entry.source,
                )
                raise

        current_ids = {e.id for e in self.photos if e.id is not None}
        removed = self._stored_photo_ids - current_ids
        if removed:
            await asyncio.to_thread(
                self.backend.delete_photos, sorted(removed)
            )
            self._stored_photo_ids -= removed

        logger.info(
            "Product %s saved (%d photos, %d removed)",
            product_id,
            len(self.photos),
            len(removed),
        )
        return product_id

    async def _store_photo(self, product_id: str, entry: PhotoEntry) -> None:
        if entry.source is None:
            raise FormError("New photo has no source file")
        url = await asyncio.to_thread(
            self.backend.upload_photo, product_id, entry.source
        )
        photo = await asyncio.to_thread(
            self.backend.insert_photo, product_id, url
        )
        entry.id = photo.id
        entry.photo_url = photo.photo_url
        self._stored_photo_ids.add(photo.id)
        if entry.preview is not None:
            self.previews.release(entry.preview)
            entry.preview = None
