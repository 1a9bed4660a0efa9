"""
Constants and configuration for the real-time delivery pipeline.

This module centralizes:
- Wire event names exchanged over the WebSocket
- Send-time error reasons reported to the sender
- WebSocket close codes

Import example:
    from chat.constants import DELIVERY_CONFIG, DeliveryError
"""

from typing import Final


# =============================================================================
# Wire Protocol
# =============================================================================


class EVENTS:
    """Event names carried in the ``type`` field of each frame."""

    # Client -> server
    SEND_MESSAGE: Final[str] = "send-message"

    # Server -> client
    MESSAGE_DELIVERED: Final[str] = "message-delivered"
    SEND_ERROR: Final[str] = "send-error"
    ERROR: Final[str] = "error"


class DeliveryError:
    """
    Machine-usable reasons for a rejected send attempt.

    The values are sent verbatim as the ``error`` of a ``send-error`` frame.
    """

    USER_NOT_FOUND: Final[str] = "UserNotFound"
    NOT_FRIENDS: Final[str] = "NotFriends"
    STORAGE_FAILURE: Final[str] = "StorageFailure"


# =============================================================================
# Connection Configuration
# =============================================================================


class DELIVERY_CONFIG:
    """Configuration for real-time connections."""

    # Close code used when the handshake carries no valid identity
    CLOSE_CODE_UNAUTHENTICATED: Final[int] = 4001

    # Channel layer message types dispatched to MessengerConsumer handlers
    LAYER_EVENT_DELIVERED: Final[str] = "message.delivered"
    LAYER_EVENT_SEND_ERROR: Final[str] = "send.error"

    # Subprotocol marker for passing a JWT: Sec-WebSocket-Protocol: jwt, <token>
    JWT_SUBPROTOCOL: Final[str] = "jwt"
