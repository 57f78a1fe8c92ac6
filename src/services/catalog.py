# src/services/catalog.py

"""Product listings: fetch products and photos, join them by key."""

import asyncio
import logging
from collections import defaultdict
from dataclasses import replace

from src.models.product import Product, ProductPhoto
from src.storage.backend import MarketplaceBackend

logger = logging.getLogger("vendor_market.catalog")


def join_photos(
    products: list[Product], photos: list[ProductPhoto],
) -> list[Product]:
    """Attach each photo to the product whose id matches its ``product_id``.

    Products keep their order and always get a list (empty when nothing
    matches). Photos without a parent, or whose parent was not fetched,
    are dropped.
    """
    by_product: defaultdict[str, list[ProductPhoto]] = defaultdict(list)
    for photo in photos:
        if photo.product_id:
            by_product[photo.product_id].append(photo)

    return [
        replace(product, photos=list(by_product.get(product.id or "", [])))
        for product in products
    ]


def remove_product(products: list[Product], product_id: str) -> list[Product]:
    """Return *products* without *product_id*, others in original order."""
    return [p for p in products if p.id != product_id]


class CatalogService:
    """Listing operations shared by the storefront, dashboard and admin."""

    def __init__(self, backend: MarketplaceBackend) -> None:
        self.backend = backend

    async def fetch_catalog(self, owner_id: str | None = None) -> list[Product]:
        """Fetch products (newest first), then photos, then join them.

        Raises:
            BackendError: when either fetch fails.
        """
        products = await asyncio.to_thread(
            self.backend.list_products, owner_id
        )
        photos = await asyncio.to_thread(self.backend.list_photos)
        joined = join_photos(products, photos)
        logger.info(
            "Catalog loaded: %d products, %d photos (owner=%s)",
            len(joined),
            len(photos),
            owner_id,
        )
        return joined

    async def delete_product(self, product_id: str) -> None:
        """Delete a product on the backend.

        Raises:
            BackendError: when the delete is rejected.
        """
        await asyncio.to_thread(self.backend.delete_product, product_id)
