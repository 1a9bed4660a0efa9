"""
URL configuration for chat API.

URL Structure:
    /conversation/{peer}/   GET

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import path

from chat.views import ConversationView

app_name = "chat"

urlpatterns = [
    path(
        "conversation/<path:peer>/",
        ConversationView.as_view(),
        name="conversation",
    ),
]
