# tests/test_app.py

"""Routing and screen tests for the TUI using Textual's Pilot."""

import asyncio
import unittest
from collections.abc import Coroutine
from typing import Any, cast
from unittest.mock import MagicMock

from textual.pilot import Pilot
from textual.widgets import DataTable, Input

from src.storage.backend import BackendError
from src.ui.app import MarketplaceApp
from src.ui.router import Router
from src.ui.screens.admin import AdminScreen
from src.ui.screens.auth import AdminAuthScreen, AuthScreen
from src.ui.screens.dashboard import DashboardScreen
from src.ui.screens.listing import ListingScreen
from src.ui.screens.product_form import ProductFormScreen
from src.ui.screens.storefront import StorefrontScreen
from tests.fake_backend import FakeBackend


async def settle(pilot: Pilot[None]) -> None:
    """Let navigation, session events and catalog workers finish."""
    for _ in range(3):
        await pilot.pause()
        await pilot.app.workers.wait_for_complete()
    await pilot.pause()


def table_of(app: MarketplaceApp) -> DataTable[str]:
    return cast(DataTable[str], app.screen.query_one("#products_table", DataTable))


def status_of(app: MarketplaceApp) -> str:
    return cast(ListingScreen, app.screen).status_message


def notified(app: MarketplaceApp) -> list[str]:
    mock = cast(MagicMock, app.notify)
    return [str(call.args[0]) for call in mock.call_args_list]


class MarketplaceAppTestCase(unittest.IsolatedAsyncioTestCase):
    """Shared backend seeding for the app tests."""

    def setUp(self) -> None:
        self.backend = FakeBackend()
        self.vendor = self.backend.register("vendor@shop.test", "secret1")
        self.other = self.backend.register("other@shop.test", "secret2")
        self.admin = self.backend.register(
            "boss@shop.test", "secret3", "admin"
        )
        self.chair = self.backend.add_product(
            "Chair", mrp=1200.0, discount=100.0, category="Furniture",
            user_id=self.other.id,
        )
        self.lamp = self.backend.add_product(
            "Lamp", mrp=499.0, category="Lighting", user_id=self.vendor.id,
        )
        self.backend.add_photo(self.lamp, "https://cdn.test/lamp.jpg")

    def make_app(self, route: str = "/") -> MarketplaceApp:
        app = MarketplaceApp(self.backend, initial_route=route)  # type: ignore[arg-type]
        app.notify = MagicMock()  # type: ignore[method-assign]
        return app


class TestStorefront(MarketplaceAppTestCase):
    """The public listing."""

    async def test_lists_all_products_newest_first(self) -> None:
        """Every vendor's products appear, newest first."""
        app = self.make_app()
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertIsInstance(app.screen, StorefrontScreen)
            table = table_of(app)
            self.assertEqual(table.row_count, 2)
            self.assertEqual(table.get_row_at(0)[0], "Lamp")
            self.assertEqual(status_of(app), "2 products")

    async def test_price_and_discount_formatting(self) -> None:
        """Prices have two decimals; no discount shows nothing."""
        app = self.make_app()
        async with app.run_test() as pilot:
            await settle(pilot)
            table = table_of(app)
            lamp = table.get_row(self.lamp)
            self.assertEqual(lamp[2], "₹499.00")
            self.assertEqual(lamp[3], "")
            self.assertEqual(lamp[5], "1")
            chair = table.get_row(self.chair)
            self.assertEqual(chair[3], "₹100.00")

    async def test_empty_catalog_message(self) -> None:
        """No products shows the empty-state message."""
        self.backend.products.clear()
        app = self.make_app()
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertEqual(table_of(app).row_count, 0)
            self.assertIn("No products available yet", status_of(app))

    async def test_fetch_failure_notifies(self) -> None:
        """A failed fetch leaves an empty list and shows the error."""
        self.backend.fail["list_products"] = BackendError("offline")
        app = self.make_app()
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertEqual(table_of(app).row_count, 0)
            self.assertIn("offline", notified(app))

    async def test_buy_is_demo_only(self) -> None:
        """Buying only shows a confirmation message."""
        app = self.make_app()
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = cast(StorefrontScreen, app.screen)
            screen.action_buy()
            self.assertIn(
                "You've ordered Lamp! This is a demo - no actual purchase "
                "was made.",
                notified(app),
            )
            self.assertEqual(len(self.backend.products), 2)

    async def test_unknown_route_goes_home(self) -> None:
        """An unknown path shows an error and the storefront."""
        app = self.make_app("/nowhere")
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertIsInstance(app.screen, StorefrontScreen)
            self.assertIn("Page not found: /nowhere", notified(app))

    async def test_missing_home_route_stays_put(self) -> None:
        """Without a home route an unknown path only shows the error."""
        app = self.make_app()
        async with app.run_test() as pilot:
            await settle(pilot)
            app.router = Router([])
            app.navigate("/nowhere")
            await settle(pilot)
            self.assertIsInstance(app.screen, StorefrontScreen)
            self.assertIn("Page not found: /nowhere", notified(app))


class TestGuardedRoutes(MarketplaceAppTestCase):
    """Route guard behaviour inside the app."""

    async def test_anonymous_dashboard_redirects_to_login(self) -> None:
        """Without a session the dashboard redirects to /auth."""
        app = self.make_app("/dashboard")
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertIsInstance(app.screen, AuthScreen)
            assert app.active_route is not None
            self.assertEqual(app.active_route.path, "/auth")
            self.assertNotIn("list_products", self.backend.calls)

    async def test_dashboard_shows_own_products(self) -> None:
        """A vendor only sees their own listings."""
        self.backend.session_user = self.vendor
        app = self.make_app("/dashboard")
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertIsInstance(app.screen, DashboardScreen)
            table = table_of(app)
            self.assertEqual(table.row_count, 1)
            self.assertEqual(table.get_row(self.lamp)[3], "₹499.00")

    async def test_sign_in_lands_on_dashboard(self) -> None:
        """Signing in from the login screen opens the dashboard."""
        app = self.make_app("/auth")
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = cast(AuthScreen, app.screen)
            screen.query_one("#email_input", Input).value = "vendor@shop.test"
            screen.query_one("#password_input", Input).value = "secret1"
            await screen.sign_in()
            await settle(pilot)
            self.assertIsInstance(app.screen, DashboardScreen)

    async def test_wrong_password_stays_on_login(self) -> None:
        """Rejected credentials show the service's message."""
        app = self.make_app("/auth")
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = cast(AuthScreen, app.screen)
            screen.query_one("#email_input", Input).value = "vendor@shop.test"
            screen.query_one("#password_input", Input).value = "nope"
            await screen.sign_in()
            await settle(pilot)
            self.assertIsInstance(app.screen, AuthScreen)
            self.assertIn("Invalid login credentials", notified(app))

    async def test_sign_out_redirects_to_login(self) -> None:
        """Signing out of a protected screen returns to /auth."""
        self.backend.session_user = self.vendor
        app = self.make_app("/dashboard")
        async with app.run_test() as pilot:
            await settle(pilot)
            await cast(DashboardScreen, app.screen).sign_out()
            await settle(pilot)
            self.assertIsInstance(app.screen, AuthScreen)

    async def test_admin_forbidden_for_vendor(self) -> None:
        """A signed-in vendor cannot open the admin panel."""
        self.backend.session_user = self.vendor
        app = self.make_app("/admin")
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertIsInstance(app.screen, StorefrontScreen)
            self.assertIn("You don't have access to this page", notified(app))

    async def test_admin_login_routes_by_capability(self) -> None:
        """Admin sign-in opens the panel for admins only."""
        app = self.make_app("/admin/auth")
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = cast(AdminAuthScreen, app.screen)
            screen.query_one("#email_input", Input).value = "boss@shop.test"
            screen.query_one("#password_input", Input).value = "secret3"
            await screen.sign_in()
            await settle(pilot)
            self.assertIsInstance(app.screen, AdminScreen)


class TestAdminPanel(MarketplaceAppTestCase):
    """Search and delete across all vendors."""

    def setUp(self) -> None:
        super().setUp()
        self.backend.session_user = self.admin

    async def _search(
        self, app: MarketplaceApp, pilot: Pilot[None], text: str,
    ) -> None:
        app.screen.query_one("#search_input", Input).value = text
        await settle(pilot)

    async def test_search_filters_rows(self) -> None:
        """Typing narrows the table; clearing restores it."""
        app = self.make_app("/admin")
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertIsInstance(app.screen, AdminScreen)
            self.assertEqual(table_of(app).row_count, 2)

            await self._search(app, pilot, "FURN")
            self.assertEqual(table_of(app).row_count, 1)
            self.assertEqual(table_of(app).get_row_at(0)[0], "Chair")

            await self._search(app, pilot, "sofa")
            self.assertEqual(table_of(app).row_count, 0)
            self.assertEqual(status_of(app), "No products match your search")

            await self._search(app, pilot, "")
            self.assertEqual(table_of(app).row_count, 2)

    async def test_delete_removes_row(self) -> None:
        """A confirmed delete removes the product everywhere."""
        app = self.make_app("/admin")
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = cast(AdminScreen, app.screen)
            self.assertTrue(await screen.delete_product(self.chair))
            await pilot.pause()
            self.assertNotIn(self.chair, self.backend.products)
            self.assertEqual(table_of(app).row_count, 1)
            self.assertIn("Product deleted successfully", notified(app))

    async def test_failed_delete_keeps_row(self) -> None:
        """A rejected delete leaves the list as it was."""
        self.backend.fail["delete_product"] = BackendError("not allowed")
        app = self.make_app("/admin")
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = cast(AdminScreen, app.screen)
            self.assertFalse(await screen.delete_product(self.chair))
            await pilot.pause()
            self.assertEqual(table_of(app).row_count, 2)
            self.assertIn("not allowed", notified(app))


class TestProductForm(MarketplaceAppTestCase):
    """Creating and editing products through the form screen."""

    def setUp(self) -> None:
        super().setUp()
        self.backend.session_user = self.vendor

    async def test_edit_route_loads_fields(self) -> None:
        """The edit route fills the form from the stored product."""
        app = self.make_app(f"/products/edit/{self.lamp}")
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = app.screen
            self.assertIsInstance(screen, ProductFormScreen)
            self.assertEqual(
                screen.query_one("#field_name", Input).value, "Lamp"
            )
            self.assertEqual(
                screen.query_one("#field_mrp", Input).value, "499.0"
            )
            photos = screen.query_one("#photos_table", DataTable)
            self.assertEqual(photos.row_count, 1)

    async def test_edit_missing_product_returns_to_dashboard(self) -> None:
        """A failed load goes back to the dashboard."""
        app = self.make_app("/products/edit/missing")
        async with app.run_test() as pilot:
            await settle(pilot)
            self.assertIsInstance(app.screen, DashboardScreen)

    async def test_blank_name_is_rejected(self) -> None:
        """Saving without a name warns and writes nothing."""
        app = self.make_app("/products/new")
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = cast(ProductFormScreen, app.screen)
            self.assertFalse(await screen.submit())
            self.assertIn("Product name is required", notified(app))
            self.assertNotIn("insert_product", self.backend.calls)


class TestLateResponses(MarketplaceAppTestCase):
    """Replies that arrive after the user has navigated elsewhere."""

    async def _leave_during(
        self,
        pilot: Pilot[None],
        method: str,
        call: Coroutine[Any, Any, Any],
        route: str,
    ) -> Any:
        """Run *call* with *method* held, go to *route*, then release."""
        gate = self.backend.hold(method)
        self.addCleanup(gate.set)
        task = asyncio.ensure_future(call)
        await pilot.pause()
        cast(MarketplaceApp, pilot.app).navigate(route)
        await settle(pilot)
        gate.set()
        result = await asyncio.wait_for(task, timeout=5)
        await settle(pilot)
        return result

    async def test_catalog_after_leaving_is_dropped(self) -> None:
        """A storefront fetch finishing on the login screen changes nothing."""
        app = self.make_app()
        async with app.run_test() as pilot:
            await settle(pilot)
            storefront = cast(StorefrontScreen, app.screen)
            self.backend.add_product("Desk", user_id=self.vendor.id)
            await self._leave_during(
                pilot, "list_products", storefront.load_products(), "/auth"
            )
            self.assertIsInstance(app.screen, AuthScreen)
            self.assertFalse(storefront.live)
            self.assertEqual(len(storefront.products), 2)

    async def test_catalog_error_after_leaving_is_silent(self) -> None:
        """A failed fetch for a closed screen is not reported."""
        app = self.make_app()
        async with app.run_test() as pilot:
            await settle(pilot)
            storefront = cast(StorefrontScreen, app.screen)
            self.backend.fail["list_products"] = BackendError("offline")
            await self._leave_during(
                pilot, "list_products", storefront.load_products(), "/auth"
            )
            self.assertIsInstance(app.screen, AuthScreen)
            self.assertNotIn("offline", notified(app))

    async def test_delete_after_leaving_keeps_new_screen(self) -> None:
        """The delete still happens but the storefront is left alone."""
        self.backend.session_user = self.admin
        app = self.make_app("/admin")
        async with app.run_test() as pilot:
            await settle(pilot)
            admin = cast(AdminScreen, app.screen)
            deleted = await self._leave_during(
                pilot, "delete_product", admin.delete_product(self.chair), "/"
            )
            self.assertTrue(deleted)
            self.assertNotIn(self.chair, self.backend.products)
            self.assertIsInstance(app.screen, StorefrontScreen)
            self.assertEqual(len(admin.products), 2)
            self.assertNotIn("Product deleted successfully", notified(app))

    async def test_delete_error_after_leaving_is_silent(self) -> None:
        self.backend.session_user = self.admin
        self.backend.fail["delete_product"] = BackendError("not allowed")
        app = self.make_app("/admin")
        async with app.run_test() as pilot:
            await settle(pilot)
            admin = cast(AdminScreen, app.screen)
            deleted = await self._leave_during(
                pilot, "delete_product", admin.delete_product(self.chair), "/"
            )
            self.assertFalse(deleted)
            self.assertIsInstance(app.screen, StorefrontScreen)
            self.assertNotIn("not allowed", notified(app))

    async def test_product_load_after_leaving_is_dropped(self) -> None:
        """An edit form closed mid-load does not touch its widgets."""
        self.backend.session_user = self.vendor
        app = self.make_app(f"/products/edit/{self.lamp}")
        async with app.run_test() as pilot:
            await settle(pilot)
            form = cast(ProductFormScreen, app.screen)
            await self._leave_during(
                pilot, "get_product", form.load_product(), "/"
            )
            self.assertIsInstance(app.screen, StorefrontScreen)
            self.assertFalse(form.live)

    async def test_product_load_error_after_leaving_stays_put(self) -> None:
        """A failed load of a closed form does not open the dashboard."""
        self.backend.session_user = self.vendor
        app = self.make_app(f"/products/edit/{self.lamp}")
        async with app.run_test() as pilot:
            await settle(pilot)
            form = cast(ProductFormScreen, app.screen)
            self.backend.fail["get_product"] = BackendError("gone")
            await self._leave_during(
                pilot, "get_product", form.load_product(), "/"
            )
            self.assertIsInstance(app.screen, StorefrontScreen)
            self.assertNotIn("gone", notified(app))

    async def test_submit_after_leaving_does_not_navigate(self) -> None:
        """A save finishing after the form closed keeps the user where they are."""
        self.backend.session_user = self.vendor
        app = self.make_app("/products/new")
        async with app.run_test() as pilot:
            await settle(pilot)
            form = cast(ProductFormScreen, app.screen)
            form.query_one("#field_name", Input).value = "Desk"
            saved = await self._leave_during(
                pilot, "insert_product", form.submit(), "/"
            )
            self.assertTrue(saved)
            names = [r["name"] for r in self.backend.products.values()]
            self.assertIn("Desk", names)
            self.assertIsInstance(app.screen, StorefrontScreen)
            self.assertNotIn("Product created successfully!", notified(app))


class TestLampEndToEnd(MarketplaceAppTestCase):
    """A vendor lists a lamp; shoppers and admins can find it."""

    async def test_create_then_browse_and_search(self) -> None:
        """Create 'Lamp' at 499, see it listed and searchable."""
        self.backend.products.clear()
        self.backend.photos.clear()
        self.backend.session_user = self.admin

        app = self.make_app("/products/new")
        async with app.run_test() as pilot:
            await settle(pilot)
            screen = cast(ProductFormScreen, app.screen)
            screen.query_one("#field_name", Input).value = "Lamp"
            screen.query_one("#field_mrp", Input).value = "499"
            self.assertTrue(await screen.submit())
            await settle(pilot)
            self.assertIsInstance(app.screen, DashboardScreen)
            self.assertIn("Product created successfully!", notified(app))

            app.navigate("/")
            await settle(pilot)
            storefront = table_of(app)
            self.assertEqual(storefront.get_row_at(0)[0], "Lamp")
            self.assertEqual(storefront.get_row_at(0)[2], "₹499.00")
            self.assertEqual(storefront.get_row_at(0)[3], "")

            app.navigate("/admin")
            await settle(pilot)
            search = app.screen.query_one("#search_input", Input)
            search.value = "lam"
            await settle(pilot)
            self.assertEqual(table_of(app).row_count, 1)
            self.assertEqual(table_of(app).get_row_at(0)[0], "Lamp")

            search.value = "chair"
            await settle(pilot)
            self.assertEqual(table_of(app).row_count, 0)


if __name__ == "__main__":
    unittest.main()
