# src/services/session_provider.py

"""Process-wide owner of the authenticated session."""

import asyncio
import logging
from collections.abc import Callable

from src.models.session import SessionState, User
from src.storage.backend import AuthError, MarketplaceBackend

logger = logging.getLogger("vendor_market.session")

SessionListener = Callable[[SessionState], None]


class SessionProvider:
    """Holds the current user and loading flag for the app lifetime.

    Only this class writes the session state. ``start()`` resolves the
    persisted session and subscribes to the auth service; ``stop()``
    unsubscribes. Listeners are called on the event loop after every
    change.
    """

    def __init__(self, backend: MarketplaceBackend) -> None:
        self.backend = backend
        self._state = SessionState()
        self._listeners: list[SessionListener] = []
        self._unsubscribe_backend: Callable[[], None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user(self) -> User | None:
        return self._state.user

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def start(self) -> None:
        """Subscribe to auth events and resolve the initial session."""
        if self._unsubscribe_backend is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._unsubscribe_backend = self.backend.on_auth_change(
            self._on_backend_change
        )
        try:
            user = await asyncio.to_thread(self.backend.current_user)
        except AuthError:
            logger.warning(
                "Could not restore the previous session", exc_info=True
            )
            user = None
        self._set_state(SessionState(user=user, loading=False))
        logger.info(
            "Session resolved: %s", user.email if user else "anonymous"
        )

    def stop(self) -> None:
        """Unsubscribe from the auth service."""
        if self._unsubscribe_backend is not None:
            self._unsubscribe_backend()
            self._unsubscribe_backend = None
            logger.debug("Session provider stopped")

    async def sign_in(self, email: str, password: str) -> User:
        """Sign in; raises :class:`AuthError` and leaves state untouched."""
        user = await asyncio.to_thread(self.backend.sign_in, email, password)
        self._set_state(SessionState(user=user, loading=False))
        logger.info("Signed in as %s", user.email)
        return user

    async def sign_up(self, email: str, password: str) -> User | None:
        """Register; the session only changes if the service issues one."""
        user = await asyncio.to_thread(self.backend.sign_up, email, password)
        if user is not None:
            self._set_state(SessionState(user=user, loading=False))
        logger.info(
            "Registered %s (%s)",
            email,
            "signed in" if user else "awaiting confirmation",
        )
        return user

    async def sign_out(self) -> None:
        """Sign out; raises :class:`AuthError` on failure."""
        await asyncio.to_thread(self.backend.sign_out)
        self._set_state(SessionState(user=None, loading=False))
        logger.info("Signed out")

    # ── Internals ────────────────────────────────────────

    def _on_backend_change(self, user: User | None) -> None:
        """Auth callback; may run on an SDK worker thread."""
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._apply_backend_user, user)

    def _apply_backend_user(self, user: User | None) -> None:
        self._set_state(
            SessionState(user=user, loading=self._state.loading)
        )

    def _set_state(self, state: SessionState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)
