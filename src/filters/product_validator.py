# src/filters/product_validator.py

"""Product form validation: turn entered text into a writable record."""

import logging
import math
from datetime import date
from typing import Any

from src.models.product import Product

logger = logging.getLogger("vendor_market.filters")

# Form inputs in display order: (field name, label, multi-line)
FORM_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("name", "Product Name *", False),
    ("category", "Category", False),
    ("sku", "SKU", False),
    ("manufactured_by", "Manufactured By", False),
    ("mrp", "MRP (₹)", False),
    ("discount", "Discount (₹)", False),
    ("expiry", "Expiry Date (YYYY-MM-DD)", False),
    ("quantity", "Quantity/Size", False),
    ("description", "Product Description", True),
    ("return_policy", "Return Policy", True),
)

NUMERIC_FIELDS: frozenset[str] = frozenset({"mrp", "discount"})


class FormError(ValueError):
    """The product form cannot be submitted as entered."""


class ProductValidator:
    """Parse and validate product form text."""

    @staticmethod
    def parse_amount(text: str) -> float | None:
        """Parse a money amount; empty or invalid input is absent.

        Negative, NaN and infinite values count as invalid.
        """
        cleaned = text.strip()
        if not cleaned:
            return None
        try:
            value = float(cleaned)
        except ValueError:
            logger.debug("Discarded non-numeric amount %r", text)
            return None
        if not math.isfinite(value) or value < 0:
            logger.debug("Discarded out-of-range amount %r", text)
            return None
        return value

    @staticmethod
    def parse_date(text: str) -> str | None:
        """Return an ISO ``YYYY-MM-DD`` date or ``None``."""
        cleaned = text.strip()
        if not cleaned:
            return None
        try:
            return date.fromisoformat(cleaned).isoformat()
        except ValueError:
            logger.debug("Discarded invalid date %r", text)
            return None

    @staticmethod
    def build_product(values: dict[str, str], user_id: str) -> Product:
        """Validate form *values* into a :class:`Product` owned by *user_id*.

        Raises:
            FormError: when the product name is blank.
        """
        name = values.get("name", "").strip()
        if not name:
            raise FormError("Product name is required")

        def text(field: str) -> str | None:
            return values.get(field, "").strip() or None

        return Product(
            name=name,
            description=text("description"),
            category=text("category"),
            sku=text("sku"),
            mrp=ProductValidator.parse_amount(values.get("mrp", "")),
            discount=ProductValidator.parse_amount(
                values.get("discount", "")
            ),
            expiry=ProductValidator.parse_date(values.get("expiry", "")),
            manufactured_by=text("manufactured_by"),
            quantity=text("quantity"),
            return_policy=text("return_policy"),
            user_id=user_id,
        )

    @staticmethod
    def to_form_values(product: Product) -> dict[str, str]:
        """Render a stored product back into editable form text."""

        def show(value: Any) -> str:
            return "" if value is None else str(value)

        return {
            "name": product.name,
            "description": show(product.description),
            "category": show(product.category),
            "sku": show(product.sku),
            "mrp": show(product.mrp),
            "discount": show(product.discount),
            "expiry": product.expiry.split("T")[0] if product.expiry else "",
            "manufactured_by": show(product.manufactured_by),
            "quantity": show(product.quantity),
            "return_policy": show(product.return_policy),
        }
