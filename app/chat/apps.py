"""
Chat application configuration.

This app provides the messaging core:
- Message store (append-only, per-pair history)
- Presence registry of live WebSocket channels
- Friendship-gated real-time delivery
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
