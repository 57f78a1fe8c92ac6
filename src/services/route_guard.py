# src/services/route_guard.py

"""Authentication gate consulted before rendering a protected screen."""

import logging
from enum import Enum, auto

from src.models.session import SessionState

logger = logging.getLogger("vendor_market.guard")


class GuardDecision(Enum):
    """What the router should do with a guarded route right now."""

    WAIT = auto()       # show the placeholder, build nothing
    REDIRECT = auto()   # send the visitor to the login route
    FORBIDDEN = auto()  # signed in, but missing the capability
    RENDER = auto()     # build and show the screen


class RouteGuard:
    """Decides whether a protected route may render.

    One guard is created per navigation. It is re-evaluated on every
    session change; the redirect to the login route is issued only once
    until a user shows up again.
    """

    def __init__(
        self,
        login_route: str,
        required_capability: str | None = None,
    ) -> None:
        self.login_route = login_route
        self.required_capability = required_capability
        self._redirected = False

    @property
    def redirected(self) -> bool:
        return self._redirected

    def evaluate(self, state: SessionState) -> GuardDecision:
        """Return the decision for the current session *state*."""
        if state.loading:
            return GuardDecision.WAIT

        if state.user is None:
            if self._redirected:
                return GuardDecision.WAIT
            self._redirected = True
            logger.info("No session, redirecting to %s", self.login_route)
            return GuardDecision.REDIRECT

        self._redirected = False
        if (
            self.required_capability is not None
            and not state.user.can(self.required_capability)
        ):
            logger.warning(
                "User %s lacks capability '%s'",
                state.user.email,
                self.required_capability,
            )
            return GuardDecision.FORBIDDEN

        return GuardDecision.RENDER
