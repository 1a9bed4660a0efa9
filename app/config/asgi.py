"""
ASGI config for the messenger.

Exposes the ASGI callable as a module-level variable named ``application``:
- HTTP requests go to Django (REST surface, admin, health check)
- WebSocket connections go to Django Channels (ws/messenger/)

https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# Initialize Django before importing anything that touches models
django_asgi_app = get_asgi_application()

from channels.auth import AuthMiddlewareStack  # noqa: E402
from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402

from chat.middleware import JWTAuthMiddleware  # noqa: E402
from chat.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        # WebSocket connections are routed through:
        # 1. AllowedHostsOriginValidator - origin must match ALLOWED_HOSTS
        # 2. AuthMiddlewareStack - user from the Django session cookie
        # 3. JWTAuthMiddleware - user from ?token= or the jwt subprotocol, if given
        # 4. URLRouter - MessengerConsumer
        "websocket": AllowedHostsOriginValidator(
            AuthMiddlewareStack(JWTAuthMiddleware(URLRouter(websocket_urlpatterns)))
        ),
    }
)
