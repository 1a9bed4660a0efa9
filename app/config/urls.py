"""
URL configuration for the messenger.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin (users, friendships, messages)
    /health/                       - Health check endpoint (load balancers, Docker)
    /schema/                       - OpenAPI schema
    /api/v1/auth/                  - Accounts
        register/                  - Create account, start session
        login/                     - Log in, start session
        logout/                    - End session
        me/                        - Current identity
    /api/v1/users/search/          - User search (?q=)
    /api/v1/friends/               - Friend list
        add/                       - Befriend (both directions)
        remove/                    - Unfriend (both directions)
    /api/v1/chat/                  - Chat endpoints
        conversation/{peer}/       - Message history with a peer

WebSocket routes live in chat/routing.py.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Accounts, search and friendships
    path("", include("authentication.urls")),
    # Chat history
    path("chat/", include("chat.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Minimessenger Admin"
admin.site.site_title = "Minimessenger"
admin.site.index_title = "Users, friendships and messages"
