"""
Chat service layer.

This module provides the synchronous building blocks of the delivery
pipeline, plus conversation history for the REST surface.

Services:
    FriendshipGate: Decide, from live state, whether a sender may reach a recipient
    MessageStore: Atomically append messages
    ConversationService: Ordered history between two users

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure() whose error_code is
      the wire reason (see chat.constants.DeliveryError)
    - Nothing here is cached; every call reads the database

Usage:
    from chat.services import FriendshipGate, MessageStore

    result = FriendshipGate.check("alice", "bob")
    if result.success:
        stored = MessageStore.append(sender, result.data, "hi")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import DatabaseError
from django.utils import timezone

from authentication.models import User
from authentication.services import IdentityService
from core.services import BaseService, ServiceResult

from chat.constants import DeliveryError
from chat.models import Message

if TYPE_CHECKING:
    from datetime import datetime


class FriendshipGate(BaseService):
    """
    Mutual-friendship check performed at send time.

    Methods:
        check: Resolve the recipient and verify both friendship directions
        can_deliver: Boolean form of check()
    """

    @staticmethod
    def _holds(holder: User, friend: User) -> bool:
        return User.friends.through.objects.filter(
            from_user_id=holder.pk, to_user_id=friend.pk
        ).exists()

    @classmethod
    def check(cls, sender_username: str, recipient_username: str) -> ServiceResult[User]:
        """
        Verify that sender and recipient are friends in both directions.

        Both friend sets are re-read on every call so that a friendship
        added or revoked after the connection was opened takes effect on
        the next send.

        Returns:
            ServiceResult with the recipient User

        Error codes:
            UserNotFound: Sender or recipient does not exist
            NotFriends: At least one direction of the friendship is missing
        """
        recipient = IdentityService.find_by_username(recipient_username)
        sender = IdentityService.find_by_username(sender_username)
        if recipient is None or sender is None:
            return ServiceResult.failure(
                "not found", error_code=DeliveryError.USER_NOT_FOUND
            )

        forward = cls._holds(sender, recipient)
        backward = cls._holds(recipient, sender)
        if forward and backward:
            return ServiceResult.success(recipient)

        if forward != backward:
            holder, other = (sender, recipient) if forward else (recipient, sender)
            cls.get_logger().warning(
                f"Asymmetric friendship: {holder.username} lists {other.username} "
                f"but not the reverse"
            )
        return ServiceResult.failure("not friends", error_code=DeliveryError.NOT_FRIENDS)

    @classmethod
    def can_deliver(cls, sender_username: str, recipient_username: str) -> bool:
        return cls.check(sender_username, recipient_username).success


class MessageStore(BaseService):
    """
    Append-only message persistence.

    Methods:
        append: Persist one message with a fresh id and timestamp
    """

    @staticmethod
    def _next_timestamp() -> datetime:
        # sent_at never decreases in insertion order, even if the clock steps back
        now = timezone.now()
        latest = (
            Message.objects.order_by("-sent_at", "-id")
            .values_list("sent_at", flat=True)
            .first()
        )
        if latest is not None and latest > now:
            return latest
        return now

    @classmethod
    def append(cls, sender: User, recipient: User, text: str | None) -> ServiceResult[Message]:
        """
        Persist a message.

        The insert runs in its own transaction: on failure no row remains.
        Failures are not retried.

        Args:
            sender: Verified sender
            recipient: Resolved recipient
            text: Payload; None is stored as an empty string

        Error codes:
            StorageFailure: The database rejected the write
        """
        try:
            with cls.atomic():
                message = Message.objects.create(
                    sender=sender,
                    recipient=recipient,
                    text=text if text is not None else "",
                    sent_at=cls._next_timestamp(),
                )
        except DatabaseError:
            cls.get_logger().exception(
                f"Failed to persist message {sender.username} -> {recipient.username}"
            )
            return ServiceResult.failure(
                "storage failure", error_code=DeliveryError.STORAGE_FAILURE
            )

        cls.get_logger().debug(
            f"Stored message {message.uuid} {sender.username} -> {recipient.username}"
        )
        return ServiceResult.success(message)


class ConversationService(BaseService):
    """
    Conversation history.

    A conversation is the unordered pair of users; it exists implicitly
    once either side has sent a message.
    """

    @classmethod
    def history(cls, user: User, peer_username: str) -> ServiceResult[list[Message]]:
        """
        All messages between ``user`` and ``peer_username``.

        Ordered by timestamp, ties broken by insertion order. Reading
        history does not require a current friendship.

        Error codes:
            USER_NOT_FOUND: Peer does not exist
        """
        peer = IdentityService.find_by_username(peer_username)
        if peer is None:
            return ServiceResult.failure("not found", error_code="USER_NOT_FOUND")

        messages = list(
            Message.objects.between(user, peer)
            .select_related("sender", "recipient")
            .in_timeline_order()
        )
        return ServiceResult.success(messages)
