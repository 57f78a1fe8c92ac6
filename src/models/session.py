# src/models/session.py

"""Authenticated identity and session resolution state."""

from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings


@dataclass(frozen=True)
class User:
    """The signed-in account as issued by the auth service."""

    id: str
    email: str
    capabilities: frozenset[str] = field(default_factory=frozenset)

    def can(self, capability: str) -> bool:
        """Return True when the session carries *capability*."""
        return capability in self.capabilities

    @classmethod
    def from_auth_user(cls, auth_user: Any) -> "User":
        """Build a user from the SDK's user object.

        Capabilities are read from ``app_metadata`` (``role`` and/or
        ``roles``), which only the service role can write. Every
        signed-in account is a vendor.
        """
        metadata: dict[str, Any] = (
            getattr(auth_user, "app_metadata", None) or {}
        )
        capabilities = {Settings.VENDOR_CAPABILITY}
        role = metadata.get("role")
        if isinstance(role, str) and role:
            capabilities.add(role)
        roles = metadata.get("roles") or []
        if isinstance(roles, list):
            capabilities.update(str(r) for r in roles)
        return cls(
            id=str(auth_user.id),
            email=getattr(auth_user, "email", None) or "",
            capabilities=frozenset(capabilities),
        )


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the session: who is signed in, and whether we know yet."""

    user: User | None = None
    loading: bool = True
