# src/ui/screens/base.py

"""Common base for routed screens."""

from typing import TYPE_CHECKING, cast

from textual.screen import Screen

from src.models.session import SessionState

if TYPE_CHECKING:
    from src.ui.app import MarketplaceApp


class MarketScreen(Screen[None]):
    """A routed screen with access to the app's services.

    ``mounted`` turns True once the widgets exist; ``live`` turns False
    once the screen is unmounted, so responses arriving after navigation
    can be dropped.
    """

    def __init__(self) -> None:
        super().__init__()
        self.mounted = False
        self.live = True

    @property
    def market(self) -> "MarketplaceApp":
        return cast("MarketplaceApp", self.app)

    def on_mount(self) -> None:
        self.mounted = True

    def on_unmount(self) -> None:
        self.live = False

    def session_changed(self, state: SessionState) -> None:
        """Hook called after every session change while shown."""
