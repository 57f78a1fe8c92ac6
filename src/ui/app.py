# src/ui/app.py

"""Terminal UI for the vendor marketplace."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from textual.app import App
from textual.binding import Binding
from textual.screen import Screen

from src.config.settings import Settings
from src.models.session import SessionState
from src.services.catalog import CatalogService
from src.services.route_guard import GuardDecision, RouteGuard
from src.services.session_provider import SessionProvider
from src.storage.backend import MarketplaceBackend
from src.ui.router import Route, Router
from src.ui.screens.admin import AdminScreen
from src.ui.screens.auth import AdminAuthScreen, AuthScreen
from src.ui.screens.base import MarketScreen
from src.ui.screens.common import LoadingScreen
from src.ui.screens.dashboard import DashboardScreen
from src.ui.screens.product_form import ProductFormScreen
from src.ui.screens.storefront import StorefrontScreen

logger = logging.getLogger("vendor_market.ui")

ROUTES: list[Route] = [
    Route("/", lambda params: StorefrontScreen()),
    Route("/auth", lambda params: AuthScreen()),
    Route("/admin/auth", lambda params: AdminAuthScreen()),
    Route("/dashboard", lambda params: DashboardScreen(), guarded=True),
    Route("/products/new", lambda params: ProductFormScreen(), guarded=True),
    Route(
        "/products/edit/:id",
        lambda params: ProductFormScreen(params["id"]),
        guarded=True,
    ),
    Route(
        "/admin",
        lambda params: AdminScreen(),
        guarded=True,
        capability=Settings.ADMIN_CAPABILITY,
    ),
]


@dataclass
class ActiveRoute:
    """The route currently navigated to, and whether it is on screen."""

    path: str
    route: Route
    params: dict[str, str]
    guard: RouteGuard | None
    rendered: bool = False


class MarketplaceApp(App[None]):
    """Terminal UI for the vendor marketplace."""

    CSS_PATH = "styles.css"
    TITLE = Settings.MARKETPLACE_NAME

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+h", "home", "Home"),
    ]

    def __init__(
        self,
        backend: MarketplaceBackend,
        initial_route: str = Settings.HOME_ROUTE,
    ) -> None:
        super().__init__()
        self.backend = backend
        self.session = SessionProvider(backend)
        self.catalog = CatalogService(backend)
        self.router = Router(ROUTES)
        self.initial_route = initial_route
        self.active_route: ActiveRoute | None = None
        self._unsubscribe_session: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        """Show the first route, then resolve the session."""
        self._unsubscribe_session = self.session.subscribe(
            self._on_session_change
        )
        self.navigate(self.initial_route)
        await self.session.start()

    def on_unmount(self) -> None:
        if self._unsubscribe_session is not None:
            self._unsubscribe_session()
            self._unsubscribe_session = None
        self.session.stop()

    # ── Navigation ───────────────────────────────────────

    def navigate(self, path: str) -> None:
        """Go to *path*, running the route guard for protected routes."""
        match = self.router.resolve(path)
        if match is None:
            logger.warning("No route for %s", path)
            self.notify(f"Page not found: {path}", severity="error")
            path = Settings.HOME_ROUTE
            match = self.router.resolve(path)
            if match is None:
                return
        route, params = match
        guard = (
            RouteGuard(Settings.LOGIN_ROUTE, route.capability)
            if route.guarded
            else None
        )
        logger.debug("Navigating to %s", path)
        self.active_route = ActiveRoute(path, route, params, guard)
        self._apply_active_route()

    def _apply_active_route(self) -> None:
        active = self.active_route
        if active is None:
            return
        decision = (
            active.guard.evaluate(self.session.state)
            if active.guard is not None
            else GuardDecision.RENDER
        )

        if decision is GuardDecision.WAIT:
            if not isinstance(self.screen, LoadingScreen):
                active.rendered = False
                self._show(LoadingScreen())
        elif decision is GuardDecision.REDIRECT:
            if active.guard is not None:
                self.navigate(active.guard.login_route)
        elif decision is GuardDecision.FORBIDDEN:
            self.notify(
                "You don't have access to this page", severity="error"
            )
            self.navigate(Settings.HOME_ROUTE)
        elif not active.rendered:
            active.rendered = True
            self._show(active.route.factory(active.params))

    def _show(self, screen: Screen[None]) -> None:
        # The default screen stays at the bottom; routed screens swap on top
        if len(self.screen_stack) > 1:
            self.switch_screen(screen)
        else:
            self.push_screen(screen)

    def _on_session_change(self, state: SessionState) -> None:
        logger.debug(
            "Session changed (loading=%s, user=%s)",
            state.loading,
            state.user.email if state.user else None,
        )
        shown = self.screen
        self._apply_active_route()
        if (
            shown is self.screen
            and isinstance(shown, MarketScreen)
            and shown.mounted
        ):
            shown.session_changed(state)

    def action_home(self) -> None:
        self.navigate(Settings.HOME_ROUTE)
