# src/storage/backend.py

"""Gateway to the managed backend: product tables, photo bucket, auth.

Every call is a blocking request through the ``supabase`` client; async
callers dispatch them with ``asyncio.to_thread``. SDK exceptions are
re-raised as :class:`BackendError` (or :class:`AuthError`) carrying the
service's own message so screens can show it verbatim.
"""

import logging
import mimetypes
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from supabase import Client, create_client

from src.config.settings import Settings
from src.models.product import Product, ProductPhoto
from src.models.session import User

logger = logging.getLogger("vendor_market.backend")


class BackendError(Exception):
    """A data or storage request was rejected or could not be sent."""


class AuthError(BackendError):
    """The auth service rejected a sign-in, sign-up or sign-out."""


class ConfigError(Exception):
    """Backend credentials are missing from the environment."""


@contextmanager
def _translate_errors(
    action: str, error_cls: type[BackendError] = BackendError,
) -> Iterator[None]:
    """Re-raise any SDK failure inside the block as *error_cls*."""
    try:
        yield
    except BackendError:
        raise
    except Exception as exc:
        message = (
            getattr(exc, "message", None)
            or str(exc)
            or exc.__class__.__name__
        )
        logger.error("%s failed: %s", action, message, exc_info=True)
        raise error_cls(message) from exc


def build_photo_path(product_id: str, filename: str) -> str:
    """Return ``{product_id}/{random}.{ext}`` for a new upload."""
    ext = Path(filename).suffix.lstrip(".").lower() or "jpg"
    stem = uuid.uuid4().hex[: Settings.RANDOM_NAME_LENGTH]
    return f"{product_id}/{stem}.{ext}"


class MarketplaceBackend:
    """Thin request/response wrapper around a ``supabase.Client``."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.products_table = Settings.PRODUCTS_TABLE
        self.photos_table = Settings.PHOTOS_TABLE
        self.bucket = Settings.PHOTO_BUCKET

    @classmethod
    def from_settings(cls) -> "MarketplaceBackend":
        """Create a backend from ``SUPABASE_URL`` / ``SUPABASE_KEY``."""
        if not Settings.SUPABASE_URL or not Settings.SUPABASE_KEY:
            raise ConfigError(
                "SUPABASE_URL and SUPABASE_KEY must be set "
                "(environment or .env file)"
            )
        client = create_client(Settings.SUPABASE_URL, Settings.SUPABASE_KEY)
        logger.debug("Backend client created for %s", Settings.SUPABASE_URL)
        return cls(client)

    # ── Products ─────────────────────────────────────────

    def list_products(self, owner_id: str | None = None) -> list[Product]:
        """Fetch products, newest first, optionally for one owner."""
        with _translate_errors("List products"):
            query = self.client.table(self.products_table).select("*")
            if owner_id is not None:
                query = query.eq("user_id", owner_id)
            response = query.order("created_at", desc=True).execute()
        rows: list[dict[str, Any]] = response.data or []
        logger.debug("Fetched %d products (owner=%s)", len(rows), owner_id)
        return [Product.from_record(row) for row in rows]

    def get_product(self, product_id: str) -> Product:
        """Fetch a single product by id."""
        with _translate_errors(f"Fetch product {product_id}"):
            response = (
                self.client.table(self.products_table)
                .select("*")
                .eq("id", product_id)
                .single()
                .execute()
            )
        if not response.data:
            raise BackendError(f"Product {product_id} not found")
        return Product.from_record(response.data)

    def insert_product(self, record: dict[str, Any]) -> str:
        """Insert a product row and return its new id."""
        with _translate_errors("Create product"):
            response = (
                self.client.table(self.products_table)
                .insert(record)
                .execute()
            )
        rows: list[dict[str, Any]] = response.data or []
        if not rows:
            raise BackendError("Product was not created")
        product_id = str(rows[0]["id"])
        logger.info("Created product %s (%s)", product_id, record.get("name"))
        return product_id

    def update_product(self, product_id: str, record: dict[str, Any]) -> None:
        """Overwrite the writable columns of an existing product."""
        with _translate_errors(f"Update product {product_id}"):
            (
                self.client.table(self.products_table)
                .update(record)
                .eq("id", product_id)
                .execute()
            )
        logger.info("Updated product %s", product_id)

    def delete_product(self, product_id: str) -> None:
        """Delete a product; photo rows cascade on the server."""
        with _translate_errors(f"Delete product {product_id}"):
            (
                self.client.table(self.products_table)
                .delete()
                .eq("id", product_id)
                .execute()
            )
        logger.info("Deleted product %s", product_id)

    # ── Photos ───────────────────────────────────────────

    def list_photos(self, product_id: str | None = None) -> list[ProductPhoto]:
        """Fetch photo rows, all of them or those of one product."""
        with _translate_errors("List photos"):
            query = self.client.table(self.photos_table).select("*")
            if product_id is not None:
                query = query.eq("product_id", product_id)
            response = query.execute()
        rows: list[dict[str, Any]] = response.data or []
        return [ProductPhoto.from_record(row) for row in rows]

    def upload_photo(self, product_id: str, file_path: Path) -> str:
        """Upload a local image under the product's prefix.

        Returns the public URL of the stored object.
        """
        storage_path = build_photo_path(product_id, file_path.name)
        content_type = (
            mimetypes.guess_type(file_path.name)[0]
            or "application/octet-stream"
        )
        with _translate_errors(f"Upload {file_path.name}"):
            data = file_path.read_bytes()
            bucket = self.client.storage.from_(self.bucket)
            bucket.upload(
                storage_path, data, {"content-type": content_type}
            )
            public_url: str = bucket.get_public_url(storage_path)
        logger.info(
            "Uploaded %s to %s/%s", file_path.name, self.bucket, storage_path
        )
        return public_url

    def insert_photo(self, product_id: str, photo_url: str) -> ProductPhoto:
        """Record an uploaded photo against its product."""
        with _translate_errors("Save photo"):
            response = (
                self.client.table(self.photos_table)
                .insert({"product_id": product_id, "photo_url": photo_url})
                .execute()
            )
        rows: list[dict[str, Any]] = response.data or []
        if not rows:
            raise BackendError("Photo was not recorded")
        return ProductPhoto.from_record(rows[0])

    def delete_photos(self, photo_ids: list[str]) -> None:
        """Delete photo rows by id."""
        if not photo_ids:
            return
        with _translate_errors("Delete photos"):
            (
                self.client.table(self.photos_table)
                .delete()
                .in_("id", photo_ids)
                .execute()
            )
        logger.info("Deleted %d photo records", len(photo_ids))

    # ── Auth ─────────────────────────────────────────────

    def current_user(self) -> User | None:
        """Return the user of the persisted session, if any."""
        with _translate_errors("Resolve session", AuthError):
            session = self.client.auth.get_session()
        if session is None or session.user is None:
            return None
        return User.from_auth_user(session.user)

    def sign_in(self, email: str, password: str) -> User:
        """Sign in with email and password."""
        with _translate_errors("Sign in", AuthError):
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        if response.user is None:
            raise AuthError("Invalid login credentials")
        return User.from_auth_user(response.user)

    def sign_up(self, email: str, password: str) -> User | None:
        """Register a new account.

        Returns ``None`` when the service requires email confirmation
        before issuing a session.
        """
        with _translate_errors("Sign up", AuthError):
            response = self.client.auth.sign_up(
                {"email": email, "password": password}
            )
        if response.session is None or response.user is None:
            return None
        return User.from_auth_user(response.user)

    def sign_out(self) -> None:
        """End the current session."""
        with _translate_errors("Sign out", AuthError):
            self.client.auth.sign_out()

    def on_auth_change(
        self, callback: Callable[[User | None], None],
    ) -> Callable[[], None]:
        """Forward auth events to *callback*; returns an unsubscribe."""

        def _handler(event: str, session: Any) -> None:
            auth_user = getattr(session, "user", None)
            logger.debug("Auth event %s", event)
            callback(
                User.from_auth_user(auth_user) if auth_user else None
            )

        subscription = self.client.auth.on_auth_state_change(_handler)
        unsubscribe: Callable[[], None] = subscription.unsubscribe
        return unsubscribe
