"""Tests for JWTAuthMiddleware."""

import pytest
from channels.db import database_sync_to_async
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.tokens import AccessToken

from chat.middleware import JWTAuthMiddleware

pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]


class ScopeRecorder:
    """Inner ASGI app that keeps the scope it was called with."""

    def __init__(self):
        self.scope = None

    async def __call__(self, scope, receive, send):
        self.scope = scope


async def run_middleware(scope):
    inner = ScopeRecorder()
    await JWTAuthMiddleware(inner)(scope, None, None)
    return inner.scope


def websocket_scope(query_string=b"", subprotocols=None, **extra):
    return {
        "type": "websocket",
        "path": "/ws/messenger/",
        "query_string": query_string,
        "subprotocols": subprotocols or [],
        **extra,
    }


class TestJWTAuthMiddleware:
    async def test_token_in_query_string(self, alice):
        token = str(AccessToken.for_user(alice))

        scope = await run_middleware(websocket_scope(f"token={token}".encode()))

        assert scope["user"].pk == alice.pk

    async def test_token_in_subprotocol(self, alice):
        token = str(AccessToken.for_user(alice))

        scope = await run_middleware(websocket_scope(subprotocols=["jwt", token]))

        assert scope["user"].pk == alice.pk

    async def test_query_string_wins_over_subprotocol(self, alice, bob):
        query = f"token={AccessToken.for_user(alice)}".encode()
        subprotocols = ["jwt", str(AccessToken.for_user(bob))]

        scope = await run_middleware(websocket_scope(query, subprotocols))

        assert scope["user"].pk == alice.pk

    async def test_invalid_token_yields_anonymous_user(self, alice):
        scope = await run_middleware(
            websocket_scope(b"token=garbage", user=alice)
        )

        assert isinstance(scope["user"], AnonymousUser)

    async def test_token_for_deleted_user_yields_anonymous_user(self, alice):
        token = str(AccessToken.for_user(alice))
        await database_sync_to_async(alice.delete)()

        scope = await run_middleware(websocket_scope(f"token={token}".encode()))

        assert isinstance(scope["user"], AnonymousUser)

    async def test_inactive_user_yields_anonymous_user(self, alice):
        token = str(AccessToken.for_user(alice))
        alice.is_active = False
        await database_sync_to_async(alice.save)()

        scope = await run_middleware(websocket_scope(f"token={token}".encode()))

        assert isinstance(scope["user"], AnonymousUser)

    async def test_without_token_session_user_is_kept(self, alice):
        scope = await run_middleware(websocket_scope(user=alice))

        assert scope["user"] is alice

    async def test_other_subprotocols_are_ignored(self, alice):
        scope = await run_middleware(
            websocket_scope(subprotocols=["chat.v1", "extra"], user=alice)
        )

        assert scope["user"] is alice
