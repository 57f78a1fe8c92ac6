# src/models/product.py

"""Product and product photo records as stored by the backend."""

from dataclasses import dataclass, field
from typing import Any

# Business columns a vendor may write; identity and timestamps are server-side
WRITABLE_FIELDS: tuple[str, ...] = (
    "name",
    "description",
    "category",
    "sku",
    "mrp",
    "discount",
    "expiry",
    "manufactured_by",
    "quantity",
    "return_policy",
    "user_id",
)


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


@dataclass
class ProductPhoto:
    """An image reference attached to exactly one product."""

    id: str
    product_id: str | None
    photo_url: str

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ProductPhoto":
        """Build a photo from a ``product_photos`` row."""
        product_id = record.get("product_id")
        return cls(
            id=str(record["id"]),
            product_id=str(product_id) if product_id is not None else None,
            photo_url=record.get("photo_url") or "",
        )


@dataclass
class Product:
    """A sellable item listed by a vendor."""

    name: str
    id: str | None = None
    description: str | None = None
    category: str | None = None
    sku: str | None = None
    mrp: float | None = None
    discount: float | None = None
    expiry: str | None = None
    manufactured_by: str | None = None
    quantity: str | None = None
    return_policy: str | None = None
    user_id: str | None = None
    created_at: str | None = None
    photos: list[ProductPhoto] = field(
        default_factory=lambda: list[ProductPhoto]()
    )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Product":
        """Build a product from a ``products`` row (photos start empty)."""
        return cls(
            id=str(record["id"]) if record.get("id") is not None else None,
            name=record.get("name") or "",
            description=record.get("description"),
            category=record.get("category"),
            sku=record.get("sku"),
            mrp=_optional_float(record.get("mrp")),
            discount=_optional_float(record.get("discount")),
            expiry=record.get("expiry"),
            manufactured_by=record.get("manufactured_by"),
            quantity=record.get("quantity"),
            return_policy=record.get("return_policy"),
            user_id=record.get("user_id"),
            created_at=record.get("created_at"),
        )

    def to_record(self) -> dict[str, Any]:
        """Return the writable columns for an insert or update."""
        return {name: getattr(self, name) for name in WRITABLE_FIELDS}
