# tests/fake_backend.py

"""In-memory stand-in for MarketplaceBackend used across the test suite."""

import itertools
import threading
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from src.models.product import Product, ProductPhoto
from src.models.session import User
from src.storage.backend import AuthError, BackendError

_EPOCH = datetime(2026, 1, 1)


class FakeBackend:
    """Same surface as MarketplaceBackend, backed by dicts.

    Set ``fail[<method name>]`` to an exception to make that call raise,
    and add file names to ``fail_uploads`` to reject specific uploads.
    :meth:`hold` blocks a method until the returned event is set.
    """

    def __init__(self) -> None:
        self.products: dict[str, dict[str, Any]] = {}
        self.photos: dict[str, dict[str, Any]] = {}
        self.uploads: list[str] = []
        self.accounts: dict[str, tuple[str, User]] = {}
        self.session_user: User | None = None
        self.auto_confirm = True
        self.fail: dict[str, Exception] = {}
        self.fail_uploads: set[str] = set()
        self.calls: list[str] = []
        self.gates: dict[str, threading.Event] = {}
        self.listeners: list[Callable[[User | None], None]] = []
        self._ids = itertools.count(1)
        self._ticks = itertools.count(1)

    # ── Seeding helpers ──────────────────────────────────

    def add_product(self, name: str, **fields: Any) -> str:
        product_id = f"p{next(self._ids)}"
        created = _EPOCH + timedelta(seconds=next(self._ticks))
        self.products[product_id] = {
            "id": product_id,
            "name": name,
            "created_at": created.isoformat(),
            **fields,
        }
        return product_id

    def add_photo(self, product_id: str | None, url: str) -> str:
        photo_id = f"ph{next(self._ids)}"
        self.photos[photo_id] = {
            "id": photo_id,
            "product_id": product_id,
            "photo_url": url,
        }
        return photo_id

    def register(
        self, email: str, password: str, *capabilities: str,
    ) -> User:
        user = User(
            id=f"u{next(self._ids)}",
            email=email,
            capabilities=frozenset({"vendor", *capabilities}),
        )
        self.accounts[email] = (password, user)
        return user

    def emit(self, user: User | None) -> None:
        """Simulate an auth event from the service."""
        for listener in list(self.listeners):
            listener(user)

    def photos_of(self, product_id: str) -> list[dict[str, Any]]:
        return [
            p for p in self.photos.values() if p["product_id"] == product_id
        ]

    def hold(self, method: str) -> threading.Event:
        """Make *method* wait (on its worker thread) until released."""
        gate = threading.Event()
        self.gates[method] = gate
        return gate

    def _check(self, method: str) -> None:
        self.calls.append(method)
        gate = self.gates.get(method)
        if gate is not None:
            gate.wait(timeout=5)
        if method in self.fail:
            raise self.fail[method]

    # ── Products ─────────────────────────────────────────

    def list_products(self, owner_id: str | None = None) -> list[Product]:
        self._check("list_products")
        rows = [
            r for r in self.products.values()
            if owner_id is None or r.get("user_id") == owner_id
        ]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return [Product.from_record(r) for r in rows]

    def get_product(self, product_id: str) -> Product:
        self._check("get_product")
        if product_id not in self.products:
            raise BackendError(f"Product {product_id} not found")
        return Product.from_record(self.products[product_id])

    def insert_product(self, record: dict[str, Any]) -> str:
        self._check("insert_product")
        return self.add_product(**record)

    def update_product(self, product_id: str, record: dict[str, Any]) -> None:
        self._check("update_product")
        self.products[product_id].update(record)

    def delete_product(self, product_id: str) -> None:
        self._check("delete_product")
        self.products.pop(product_id, None)
        for photo_id in [p["id"] for p in self.photos_of(product_id)]:
            del self.photos[photo_id]

    # ── Photos ───────────────────────────────────────────

    def list_photos(self, product_id: str | None = None) -> list[ProductPhoto]:
        self._check("list_photos")
        rows = [
            r for r in self.photos.values()
            if product_id is None or r["product_id"] == product_id
        ]
        return [ProductPhoto.from_record(r) for r in rows]

    def upload_photo(self, product_id: str, file_path: Path) -> str:
        self._check("upload_photo")
        if file_path.name in self.fail_uploads:
            raise BackendError(f"Upload of {file_path.name} rejected")
        self.uploads.append(f"{product_id}/{file_path.name}")
        return f"https://cdn.test/{product_id}/{file_path.name}"

    def insert_photo(self, product_id: str, photo_url: str) -> ProductPhoto:
        self._check("insert_photo")
        photo_id = self.add_photo(product_id, photo_url)
        return ProductPhoto.from_record(self.photos[photo_id])

    def delete_photos(self, photo_ids: list[str]) -> None:
        self._check("delete_photos")
        for photo_id in photo_ids:
            self.photos.pop(photo_id, None)

    # ── Auth ─────────────────────────────────────────────

    def current_user(self) -> User | None:
        self._check("current_user")
        return self.session_user

    def sign_in(self, email: str, password: str) -> User:
        self._check("sign_in")
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthError("Invalid login credentials")
        self.session_user = account[1]
        return account[1]

    def sign_up(self, email: str, password: str) -> User | None:
        self._check("sign_up")
        if email in self.accounts:
            raise AuthError("User already registered")
        user = self.register(email, password)
        if not self.auto_confirm:
            return None
        self.session_user = user
        return user

    def sign_out(self) -> None:
        self._check("sign_out")
        self.session_user = None

    def on_auth_change(
        self, callback: Callable[[User | None], None],
    ) -> Callable[[], None]:
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)
