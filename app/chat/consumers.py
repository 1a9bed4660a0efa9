"""
WebSocket consumer for the messenger.

Consumers:
    MessengerConsumer: One instance per connected device

Authentication:
    The handshake must carry an identity, either the Django session cookie
    (AuthMiddlewareStack) or a JWT (JWTAuthMiddleware, ?token= or the
    ``jwt, <token>`` subprotocol). Without one the handshake is closed with
    code 4001 before accept(): nothing is registered and no frame is sent.

Message Types (from client):
    - send-message: {"type": "send-message", "to": "bob", "text": "hi"}
      An optional "as": "<username>" sends on behalf of another user and is
      only honoured for staff accounts.

Message Types (to client):
    - message-delivered: {"type": "message-delivered", "message": {...}}
    - send-error: {"type": "send-error", "error": "NotFriends"}
    - error: Binary or malformed frame, unknown type or refused act-as
"""

from __future__ import annotations

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from authentication.services import IdentityService

from chat.authenticator import SessionAuthenticator, SessionIdentity, Unauthenticated
from chat.constants import DELIVERY_CONFIG, EVENTS
from chat.delivery import ActAs, delivery_pipeline
from chat.presence import presence_registry

logger = logging.getLogger(__name__)


class MessengerConsumer(AsyncJsonWebsocketConsumer):
    """
    Real-time endpoint binding one channel to one authenticated user.

    Attributes:
        identity: SessionIdentity bound at connect (None until accepted)
    """

    pipeline = delivery_pipeline
    registry = presence_registry

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.identity: SessionIdentity | None = None

    async def connect(self):
        try:
            identity = SessionAuthenticator.resolve(self.scope)
        except Unauthenticated as e:
            logger.warning(f"Rejected WebSocket connection: {e.message}")
            await self.close(code=DELIVERY_CONFIG.CLOSE_CODE_UNAUTHENTICATED)
            return

        self.identity = identity
        self.registry.register(identity.username, self.channel_name)

        subprotocols = self.scope.get("subprotocols") or []
        if DELIVERY_CONFIG.JWT_SUBPROTOCOL in subprotocols:
            await self.accept(subprotocol=DELIVERY_CONFIG.JWT_SUBPROTOCOL)
        else:
            await self.accept()
        logger.info(f"User {identity.username} connected on {self.channel_name}")

    async def disconnect(self, close_code):
        if self._release():
            logger.info(
                f"User {self.identity.username} disconnected from {self.channel_name} "
                f"(code {close_code})"
            )

    def _release(self) -> bool:
        """Remove this channel from presence; True if it was registered."""
        if self.identity is None:
            return False
        return self.registry.unregister(self.channel_name) is not None

    async def websocket_receive(self, message):
        # A handler crash ends the consumer without disconnect()
        try:
            await super().websocket_receive(message)
        except Exception:
            if self._release():
                logger.exception(
                    f"Consumer for {self.identity.username} on {self.channel_name} failed"
                )
            raise

    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        if text_data is None:
            await self._reply_error("Expected a text frame")
            return
        await super().receive(text_data=text_data, bytes_data=bytes_data, **kwargs)

    @classmethod
    async def decode_json(cls, text_data):
        # Unparseable frames reach receive_json as None and get an error frame
        try:
            return await super().decode_json(text_data)
        except json.JSONDecodeError:
            return None

    async def receive_json(self, content, **kwargs):
        if self.identity is None:
            return

        if not isinstance(content, dict):
            await self._reply_error("Expected a JSON object")
            return

        message_type = content.get("type")
        if message_type == EVENTS.SEND_MESSAGE:
            await self._handle_send(content)
        else:
            await self._reply_error(f"Unknown message type: {message_type}")

    async def _handle_send(self, content: dict):
        to = content.get("to")
        text = content.get("text")
        if to is not None and not isinstance(to, str):
            to = str(to)
        if text is not None and not isinstance(text, str):
            text = str(text)

        act_as = None
        subject = content.get("as")
        if subject:
            act_as = await self._authorize_act_as(str(subject))
            if act_as is None:
                await self._reply_error("Not allowed to send as another user")
                return

        await self.pipeline.send(
            sender_username=self.identity.username,
            origin_channel=self.channel_name,
            to=to,
            text=text,
            act_as=act_as,
        )

    @database_sync_to_async
    def _authorize_act_as(self, subject: str) -> ActAs | None:
        """Build an ActAs when the connected user is (still) staff and the subject exists."""
        actor = IdentityService.find_by_id(self.identity.user_id)
        if actor is None or not actor.is_active or not actor.is_staff:
            logger.warning(
                f"User {self.identity.username} requested act-as {subject!r} without privilege"
            )
            return None
        if IdentityService.find_by_username(subject) is None:
            return None
        return ActAs(actor=actor.username, subject=subject)

    async def _reply_error(self, message: str):
        await self.send_json({"type": EVENTS.ERROR, "message": message})

    # -------------------------------------------------------------------------
    # Channel layer handlers
    # -------------------------------------------------------------------------

    async def message_delivered(self, event):
        """Handle message.delivered: push the persisted message."""
        await self.send_json(
            {"type": EVENTS.MESSAGE_DELIVERED, "message": event["message"]}
        )

    async def send_error(self, event):
        """Handle send.error: report a rejected send to its originating channel."""
        await self.send_json({"type": EVENTS.SEND_ERROR, "error": event["error"]})
