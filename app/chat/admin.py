"""
Django admin configuration for chat models.

Messages are append-only, so the admin can inspect and delete them but
never add or edit one.
"""

from django.contrib import admin

from chat.models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "uuid",
        "sender",
        "recipient",
        "text_preview",
        "sent_at",
    ]
    list_filter = ["sent_at"]
    search_fields = ["text", "sender__username", "recipient__username", "uuid"]
    readonly_fields = ["uuid", "sender", "recipient", "text", "sent_at", "created_at"]
    list_select_related = ["sender", "recipient"]
    ordering = ["-sent_at", "-id"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    @admin.display(description="Text")
    def text_preview(self, obj: Message) -> str:
        """Return truncated text for list display."""
        max_length = 50
        if len(obj.text) > max_length:
            return obj.text[:max_length] + "..."
        return obj.text
