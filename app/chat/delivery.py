"""
Delivery pipeline.

Takes one send intent from a connected channel through

    Received -> Validated -> Persisted -> Delivered
    Received -> Rejected

exactly once, with no retry. The sender is always the identity bound to the
originating channel (or, for an ActAs send, the subject the boundary already
authorised); nothing in the client payload can change it.

Related files:
    - services.py: FriendshipGate and MessageStore (synchronous, database)
    - presence.py: Live channels per username
    - consumers.py: Builds the intent and any ActAs, then calls send()

Fan-out:
    The persisted message is pushed over the channel layer to every live
    channel of the recipient (possibly none) and then to the originating
    channel as the acknowledgement. Errors go to the originating channel only.

Ordering:
    Persistence is serialized per sender within this process, so one sender's
    messages are stored in the order their intents were processed.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from channels.db import database_sync_to_async
from channels.exceptions import ChannelFull
from channels.layers import get_channel_layer
from django.db import models

from authentication.services import IdentityService
from core.services import ServiceResult

from chat.constants import DELIVERY_CONFIG, DeliveryError
from chat.presence import presence_registry
from chat.services import FriendshipGate, MessageStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from chat.presence import PresenceRegistry

logger = logging.getLogger(__name__)


class DeliveryState(models.TextChoices):
    RECEIVED = "received", "Received"
    VALIDATED = "validated", "Validated"
    PERSISTED = "persisted", "Persisted"
    DELIVERED = "delivered", "Delivered"
    REJECTED = "rejected", "Rejected"


@dataclass(frozen=True)
class ActAs:
    """
    Explicit capability to send on behalf of another user.

    Only the consumer creates one, after checking that ``actor`` is staff
    and ``subject`` exists.
    """

    actor: str
    subject: str


@dataclass
class DeliveryOutcome:
    """
    Result of one send attempt.

    Attributes:
        states: Every state the attempt passed through, in order
        message: Wire form of the persisted message (Delivered only)
        error: Wire reason (Rejected only)
        pushed_to: Recipient channels the message was pushed to
    """

    states: list[str] = field(default_factory=lambda: [DeliveryState.RECEIVED])
    message: dict | None = None
    error: str | None = None
    pushed_to: list[str] = field(default_factory=list)

    @property
    def state(self) -> str:
        return self.states[-1]

    @property
    def delivered(self) -> bool:
        return self.state == DeliveryState.DELIVERED

    def advance(self, state: str) -> None:
        self.states.append(state)

    def reject(self, error: str) -> None:
        self.error = error
        self.states.append(DeliveryState.REJECTED)


class DeliveryPipeline:
    """
    Validate, persist and fan out a send intent.

    Args:
        registry: Presence registry used for fan-out (process-wide by default)
        channel_layer: Channels layer used for pushes (default layer by default)
    """

    def __init__(
        self,
        registry: PresenceRegistry | None = None,
        channel_layer=None,
    ):
        self.registry = registry if registry is not None else presence_registry
        self.channel_layer = channel_layer
        self._locks: dict[str, list] = {}

    def _layer(self):
        if self.channel_layer is None:
            self.channel_layer = get_channel_layer()
        return self.channel_layer

    @asynccontextmanager
    async def _serialized(self, sender_username: str) -> AsyncIterator[None]:
        # [lock, users]; dropped when the last user for this sender leaves
        entry = self._locks.get(sender_username)
        if entry is None:
            entry = self._locks[sender_username] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[sender_username]

    @staticmethod
    @database_sync_to_async
    def _validate(sender_username: str, recipient_username: str | None) -> ServiceResult:
        return FriendshipGate.check(sender_username, recipient_username)

    @staticmethod
    @database_sync_to_async
    def _persist(sender_username: str, recipient, text) -> ServiceResult[dict]:
        sender = IdentityService.find_by_username(sender_username)
        if sender is None:
            return ServiceResult.failure(
                "not found", error_code=DeliveryError.USER_NOT_FOUND
            )
        result = MessageStore.append(sender, recipient, text)
        if not result.success:
            return result
        return ServiceResult.success(result.data.to_wire())

    async def send(
        self,
        sender_username: str,
        origin_channel: str | None,
        to: str | None,
        text: str | None,
        act_as: ActAs | None = None,
    ) -> DeliveryOutcome:
        """
        Process one send intent.

        Args:
            sender_username: Identity bound to the originating channel
            origin_channel: Channel that submitted the intent (receives the
                ack or the error); None skips both
            to: Recipient username as supplied by the client
            text: Payload, stored as given
            act_as: Send as act_as.subject instead of the bound identity

        Returns:
            DeliveryOutcome in state Delivered or Rejected
        """
        outcome = DeliveryOutcome()

        if act_as is not None:
            logger.info(
                f"Act-as send: {act_as.actor} sending as {act_as.subject} to {to!r}"
            )
            sender_username = act_as.subject

        async with self._serialized(sender_username):
            checked = await self._validate(sender_username, to)
            if checked.success:
                outcome.advance(DeliveryState.VALIDATED)
                stored = await self._persist(sender_username, checked.data, text)
            else:
                stored = checked

        if not stored.success:
            outcome.reject(stored.error_code)
            logger.warning(
                f"Send rejected: {sender_username} -> {to!r} ({outcome.error})"
            )
            if origin_channel:
                await self._push(
                    origin_channel,
                    {"error": outcome.error},
                    event_type=DELIVERY_CONFIG.LAYER_EVENT_SEND_ERROR,
                )
            return outcome

        outcome.advance(DeliveryState.PERSISTED)
        outcome.message = stored.data

        for channel_name in sorted(self.registry.channels_for(stored.data["to"])):
            if channel_name == origin_channel:
                continue
            if await self._deliver(channel_name, stored.data):
                outcome.pushed_to.append(channel_name)

        # The originating channel may already be gone; the push is then a no-op
        if origin_channel:
            await self._deliver(origin_channel, stored.data)

        outcome.advance(DeliveryState.DELIVERED)
        logger.info(
            f"Delivered message {stored.data['id']} {sender_username} -> "
            f"{stored.data['to']} to {len(outcome.pushed_to)} channel(s)"
        )
        return outcome

    async def _deliver(self, channel_name: str, message: dict) -> bool:
        return await self._push(
            channel_name,
            {"message": message},
            event_type=DELIVERY_CONFIG.LAYER_EVENT_DELIVERED,
        )

    async def _push(self, channel_name: str, payload: dict, event_type: str) -> bool:
        """Send one layer event; False when the channel is full and it was dropped."""
        try:
            await self._layer().send(channel_name, {"type": event_type, **payload})
        except ChannelFull:
            logger.warning(f"Channel {channel_name} is full, dropped {event_type}")
            return False
        return True


delivery_pipeline = DeliveryPipeline()
