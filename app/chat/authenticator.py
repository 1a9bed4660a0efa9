"""
Session authenticator for real-time connections.

Turns the user attached to a WebSocket scope (by AuthMiddlewareStack from the
session cookie, or by JWTAuthMiddleware from an access token) into a
SessionIdentity, or raises Unauthenticated.

Related files:
    - middleware.py: Populates scope["user"] from a JWT
    - consumers.py: Calls SessionAuthenticator.resolve() before accept()
"""

from __future__ import annotations

from dataclasses import dataclass

from core.exceptions import PermissionDeniedError


class Unauthenticated(PermissionDeniedError):
    """The connection request carries no valid identity."""

    default_error_code = "UNAUTHENTICATED"


@dataclass(frozen=True)
class SessionIdentity:
    """Identity bound to a channel for its whole lifetime."""

    user_id: int
    username: str
    display_name: str
    is_staff: bool = False


class SessionAuthenticator:
    """Resolve the identity of an inbound connection."""

    @staticmethod
    def resolve(scope) -> SessionIdentity:
        """
        Resolve ``scope["user"]`` to a SessionIdentity.

        Raises:
            Unauthenticated: Missing, anonymous or inactive user
        """
        user = scope.get("user")
        if user is None or not user.is_authenticated:
            raise Unauthenticated("Authentication required")
        if not user.is_active:
            raise Unauthenticated("Account is inactive")

        return SessionIdentity(
            user_id=user.pk,
            username=user.username,
            display_name=user.display_name or user.username,
            is_staff=user.is_staff,
        )
