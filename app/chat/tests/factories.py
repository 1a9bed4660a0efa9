"""
Factory Boy factories for chat models.

Usage:
    from chat.tests.factories import MessageFactory

    message = MessageFactory(sender=alice, recipient=bob, text="hi")
"""

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from chat.models import Message


class MessageFactory(factory.django.DjangoModelFactory):
    """Factory for persisted messages."""

    class Meta:
        model = Message

    sender = factory.SubFactory(UserFactory)
    recipient = factory.SubFactory(UserFactory)
    text = factory.Sequence(lambda n: f"message {n}")
    sent_at = factory.LazyFunction(timezone.now)
