"""
Tests for the chat service layer.

Covers:
- FriendshipGate: live mutual-friendship checks
- MessageStore: atomic append and timestamp ordering
- ConversationService: ordered history between two users
"""

import logging
from datetime import timedelta

from django.db import DatabaseError
from django.utils import timezone

from authentication.services import IdentityService
from authentication.tests.factories import befriend
from chat.constants import DeliveryError
from chat.models import Message
from chat.services import ConversationService, FriendshipGate, MessageStore
from chat.tests.factories import MessageFactory


# =============================================================================
# FriendshipGate
# =============================================================================


class TestFriendshipGate:
    def test_mutual_friends_can_deliver(self, friends):
        result = FriendshipGate.check("alice", "bob")

        assert result.success
        assert result.data.username == "bob"
        assert FriendshipGate.can_deliver("bob", "alice") is True

    def test_strangers_cannot_deliver(self, alice, carol):
        result = FriendshipGate.check("alice", "carol")

        assert result.error_code == DeliveryError.NOT_FRIENDS
        assert FriendshipGate.can_deliver("alice", "carol") is False

    def test_either_missing_direction_blocks_both_ways(self, alice, bob, caplog):
        alice.friends.add(bob)

        with caplog.at_level(logging.WARNING):
            assert FriendshipGate.can_deliver("alice", "bob") is False
            assert FriendshipGate.can_deliver("bob", "alice") is False

        assert "Asymmetric friendship: alice lists bob" in caplog.text

    def test_unknown_recipient(self, alice):
        result = FriendshipGate.check("alice", "ghost")

        assert result.error_code == DeliveryError.USER_NOT_FOUND

    def test_unknown_sender(self, bob):
        assert FriendshipGate.check("ghost", "bob").error_code == DeliveryError.USER_NOT_FOUND

    def test_reads_current_state_on_every_call(self, friends):
        alice, _ = friends
        assert FriendshipGate.can_deliver("alice", "bob") is True

        IdentityService.remove_bidirectional(alice, "bob")
        assert FriendshipGate.can_deliver("alice", "bob") is False

        IdentityService.add_bidirectional(alice, "bob")
        assert FriendshipGate.can_deliver("alice", "bob") is True

    def test_usernames_are_case_sensitive(self, friends):
        assert FriendshipGate.check("alice", "Bob").error_code == DeliveryError.USER_NOT_FOUND


# =============================================================================
# MessageStore
# =============================================================================


class TestMessageStore:
    def test_append_persists_full_record(self, alice, bob):
        result = MessageStore.append(alice, bob, "hello")

        assert result.success
        stored = Message.objects.get(uuid=result.data.uuid)
        assert stored.sender == alice
        assert stored.recipient == bob
        assert stored.text == "hello"
        assert stored.sent_at is not None

    def test_missing_text_is_stored_as_empty(self, alice, bob):
        result = MessageStore.append(alice, bob, None)

        assert result.data.text == ""

    def test_each_append_gets_a_fresh_id(self, alice, bob):
        first = MessageStore.append(alice, bob, "same").data
        second = MessageStore.append(alice, bob, "same").data

        assert first.uuid != second.uuid

    def test_timestamp_never_goes_backwards(self, alice, bob):
        future = timezone.now() + timedelta(minutes=5)
        MessageFactory(sender=bob, recipient=alice, sent_at=future)

        result = MessageStore.append(alice, bob, "after")

        assert result.data.sent_at == future
        history = list(Message.objects.between(alice, bob).in_timeline_order())
        assert history[-1].text == "after"

    def test_storage_failure_leaves_no_row(self, alice, bob, mocker):
        mocker.patch.object(
            Message.objects, "create", side_effect=DatabaseError("disk full")
        )

        result = MessageStore.append(alice, bob, "lost")

        assert not result.success
        assert result.error_code == DeliveryError.STORAGE_FAILURE
        mocker.stopall()
        assert Message.objects.count() == 0


# =============================================================================
# ConversationService
# =============================================================================


class TestConversationHistory:
    def test_history_is_ordered_and_includes_both_directions(self, friends, carol):
        alice, bob = friends
        base = timezone.now()
        MessageFactory(sender=bob, recipient=alice, text="2", sent_at=base + timedelta(seconds=2))
        MessageFactory(sender=alice, recipient=bob, text="1", sent_at=base + timedelta(seconds=1))
        MessageFactory(sender=alice, recipient=carol, text="elsewhere")

        result = ConversationService.history(alice, "bob")

        assert [m.text for m in result.data] == ["1", "2"]

    def test_history_survives_unfriending(self, friends):
        alice, bob = friends
        MessageStore.append(alice, bob, "kept")

        IdentityService.remove_bidirectional(alice, "bob")

        assert [m.text for m in ConversationService.history(alice, "bob").data] == ["kept"]

    def test_history_with_unknown_peer(self, alice):
        result = ConversationService.history(alice, "ghost")

        assert result.error_code == "USER_NOT_FOUND"

    def test_history_without_messages_is_empty(self, alice, carol):
        befriend(alice, carol)

        assert ConversationService.history(alice, "carol").data == []
