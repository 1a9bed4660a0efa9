"""
Django admin configuration for the identity store.

The admin site is the administration surface for editing and deleting
users and their friend lists. Privileged actions stay here; nothing in the
chat delivery path checks roles.

Related files:
    - models.py: User model
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin configuration for the username-keyed User model."""

    list_display = (
        "username",
        "display_name",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = (
        "is_active",
        "is_staff",
        "is_superuser",
        "date_joined",
    )
    search_fields = ("username", "display_name")
    ordering = ("username",)
    filter_horizontal = ("friends", "groups", "user_permissions")

    fieldsets = (
        (None, {"fields": ("username", "display_name", "password")}),
        ("Friends", {"fields": ("friends",)}),
        (
            "Status",
            {"fields": ("is_active", "is_staff", "is_superuser")},
        ),
        (
            "Permissions",
            {"fields": ("groups", "user_permissions")},
        ),
        (
            "Important dates",
            {"fields": ("date_joined", "last_login")},
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "display_name", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")
