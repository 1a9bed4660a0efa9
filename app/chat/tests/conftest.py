"""
Test configuration and fixtures for chat tests.

This module provides:
- Users in the usual friendship shapes (mutual, one-sided, strangers)
- JWT tokens and WebSocket communicators for the messenger endpoint
- A fresh presence registry and in-memory channel layer per test

Usage:
    @pytest.mark.asyncio
    @pytest.mark.django_db(transaction=True)
    async def test_example(alice, bob, connect):
        communicator = await connect(alice)
"""

import pytest
from channels.layers import InMemoryChannelLayer
from channels.testing import WebsocketCommunicator
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from authentication.tests.factories import UserFactory, befriend
from chat.delivery import DeliveryPipeline
from chat.presence import PresenceRegistry, presence_registry

WS_PATH = "/ws/messenger/"
ORIGIN_HEADERS = [(b"origin", b"http://testserver")]


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    return UserFactory(username="alice")


@pytest.fixture
def bob(db):
    return UserFactory(username="bob")


@pytest.fixture
def carol(db):
    """A user with no friendships."""
    return UserFactory(username="carol")


@pytest.fixture
def staff_user(db):
    return UserFactory(username="moderator", is_staff=True)


@pytest.fixture
def friends(alice, bob):
    """alice and bob, friends in both directions."""
    befriend(alice, bob)
    return alice, bob


# =============================================================================
# Presence and Delivery Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_presence():
    """The process-wide registry starts and ends every test empty."""
    presence_registry.clear()
    yield presence_registry
    presence_registry.clear()


@pytest.fixture
def registry():
    return PresenceRegistry()


@pytest.fixture
def channel_layer():
    return InMemoryChannelLayer()


@pytest.fixture
def pipeline(registry, channel_layer):
    return DeliveryPipeline(registry=registry, channel_layer=channel_layer)


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def client_for():
    """Build an API client authenticated with a JWT for the given user."""

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def connect():
    """
    Open an authenticated WebSocket to the messenger endpoint.

    Returns an async factory. Tests disconnect the communicators they open.
    """
    from config.asgi import application

    async def _connect(user, **kwargs):
        token = str(AccessToken.for_user(user))
        communicator = WebsocketCommunicator(
            application, f"{WS_PATH}?token={token}", headers=ORIGIN_HEADERS, **kwargs
        )
        connected, _ = await communicator.connect()
        assert connected
        return communicator

    return _connect
