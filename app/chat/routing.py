"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/messenger/ - The single real-time endpoint; one connection per device

Authentication:
    Session cookie, or a JWT access token as ?token=<jwt_access_token> or
    via the ``jwt, <token>`` subprotocol (see chat.middleware).
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/messenger/", consumers.MessengerConsumer.as_asgi()),
]
