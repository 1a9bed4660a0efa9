"""
Tests for the conversation history endpoint.

GET /api/v1/chat/conversation/{peer}/
"""

from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory, befriend
from chat.tests.factories import MessageFactory


def conversation_url(peer):
    return reverse("chat:conversation", kwargs={"peer": peer})


@pytest.mark.django_db
class TestConversationView:
    def test_history_in_both_directions_oldest_first(self, friends, carol, client_for):
        alice, bob = friends
        now = timezone.now()
        second = MessageFactory(sender=bob, recipient=alice, text="hey", sent_at=now)
        first = MessageFactory(
            sender=alice, recipient=bob, text="hi", sent_at=now - timedelta(seconds=5)
        )
        MessageFactory(sender=alice, recipient=carol, text="not in this conversation")

        response = client_for(alice).get(conversation_url("bob"))

        assert response.status_code == status.HTTP_200_OK
        messages = response.data["messages"]
        assert [m["id"] for m in messages] == [str(first.uuid), str(second.uuid)]
        assert messages[0] == first.to_wire()

    def test_same_history_from_either_side(self, friends, client_for):
        alice, bob = friends
        MessageFactory(sender=alice, recipient=bob)
        MessageFactory(sender=bob, recipient=alice)

        from_alice = client_for(alice).get(conversation_url("bob")).data
        from_bob = client_for(bob).get(conversation_url("alice")).data

        assert from_alice == from_bob

    def test_history_survives_unfriending(self, friends, client_for):
        alice, bob = friends
        MessageFactory(sender=alice, recipient=bob, text="before")
        alice.friends.remove(bob)
        bob.friends.remove(alice)

        response = client_for(alice).get(conversation_url("bob"))

        assert [m["text"] for m in response.data["messages"]] == ["before"]

    def test_empty_conversation(self, alice, carol, client_for):
        response = client_for(alice).get(conversation_url("carol"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"messages": []}

    def test_unknown_peer_is_404(self, alice, client_for):
        response = client_for(alice).get(conversation_url("ghost"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "USER_NOT_FOUND"

    def test_requires_authentication(self, bob):
        response = APIClient().get(conversation_url("bob"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize("username", ["a%41b", "team/ops", "name with space"])
    def test_peer_username_is_used_verbatim(self, alice, client_for, username):
        peer = UserFactory(username=username)
        befriend(alice, peer)
        message = MessageFactory(sender=peer, recipient=alice, text="hello")

        response = client_for(alice).get(conversation_url(username))

        assert response.status_code == status.HTTP_200_OK
        assert [m["id"] for m in response.data["messages"]] == [str(message.uuid)]
        assert response.data["messages"][0]["from"] == username

    def test_percent_encoded_peer_is_decoded_once(self, alice, client_for):
        UserFactory(username="aAb")
        peer = UserFactory(username="a%41b")
        MessageFactory(sender=alice, recipient=peer, text="to the percent user")

        response = client_for(alice).get("/api/v1/chat/conversation/a%2541b/")

        assert response.status_code == status.HTTP_200_OK
        assert [m["to"] for m in response.data["messages"]] == ["a%41b"]
