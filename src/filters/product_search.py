# src/filters/product_search.py

"""Client-side product search for the admin panel."""

import logging

from src.models.product import Product

logger = logging.getLogger("vendor_market.filters")


class ProductSearch:
    """Filter already-fetched products by a free-text query."""

    @staticmethod
    def matches(product: Product, query: str) -> bool:
        """True when name, category or description contains *query*."""
        needle = query.lower()
        haystacks = (
            product.name,
            product.category or "",
            product.description or "",
        )
        return any(needle in text.lower() for text in haystacks)

    @staticmethod
    def filter(products: list[Product], query: str) -> list[Product]:
        """Return the products matching *query*, in their original order.

        The empty query matches every product.
        """
        if not query:
            return list(products)

        kept = [p for p in products if ProductSearch.matches(p, query)]
        logger.debug(
            "Search '%s' kept %d of %d products",
            query,
            len(kept),
            len(products),
        )
        return kept
