"""
Chat models.

Models:
    Message: One persisted direct message between two users

Design Decisions:
    - Messages are append-only: the core creates them and never updates
      or deletes them (user deletion cascades as identity-store housekeeping)
    - The public id is a UUID assigned at persistence time; the integer
      primary key is kept as the insertion sequence for tie-breaking
    - A conversation is not stored: it is the unordered pair of users, and
      its history is every message between them ordered by
      (sent_at, insertion order)
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import BaseModel

if TYPE_CHECKING:
    from authentication.models import User

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class MessageQuerySet(models.QuerySet):
    """QuerySet helpers for conversation history."""

    def between(self, user_a: User, user_b: User) -> MessageQuerySet:
        """Messages exchanged between two users, in either direction."""
        return self.filter(
            Q(sender=user_a, recipient=user_b) | Q(sender=user_b, recipient=user_a)
        )

    def in_timeline_order(self) -> MessageQuerySet:
        return self.order_by("sent_at", "id")


class Message(BaseModel):
    """
    A persisted message from one user to another.

    Fields:
        uuid: Opaque public identifier (wire ``id``)
        sender: Author, taken from the sending channel's bound identity
        recipient: Addressee
        text: Opaque payload, stored as given (empty when missing)
        sent_at: Persistence timestamp, non-decreasing in insertion order

    Wire form (see to_wire):
        {"id", "from", "to", "text", "timestamp"}
    """

    uuid = models.UUIDField(
        default=uuid.uuid4,
        unique=True,
        editable=False,
        help_text="Public message identifier",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text="User who sent the message",
    )

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
        help_text="User the message is addressed to",
    )

    text = models.TextField(
        blank=True,
        default="",
        help_text="Message payload, not interpreted",
    )

    sent_at = models.DateTimeField(
        db_index=True,
        help_text="Persistence timestamp used for conversation ordering",
    )

    objects = MessageQuerySet.as_manager()

    class Meta:
        db_table = "chat_message"
        ordering = ["sent_at", "id"]
        indexes = [
            models.Index(
                fields=["sender", "recipient", "sent_at"],
                name="chat_msg_pair_sent_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Message({self.uuid}) {self.sender_id}->{self.recipient_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Persisted messages are immutable")
        super().save(*args, **kwargs)

    @property
    def timestamp(self) -> int:
        """Persistence time as integer epoch milliseconds."""
        return (self.sent_at - EPOCH) // timedelta(milliseconds=1)

    def to_wire(self) -> dict:
        """
        Build the wire representation.

        Requires sender and recipient to be loaded (select_related or the
        instances used at creation).
        """
        return {
            "id": str(self.uuid),
            "from": self.sender.username,
            "to": self.recipient.username,
            "text": self.text,
            "timestamp": self.timestamp,
        }
