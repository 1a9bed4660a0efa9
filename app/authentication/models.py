"""
Authentication models.

This module defines the identity store for the messenger:
- User: Custom user model keyed by a case-sensitive username, carrying a
  display name and a directed friend list.

Related files:
    - managers.py: Custom user manager for username-based creation
    - services.py: IdentityService (registration, lookup, friendship mutation)

Friendship Storage:
    Each row of the ``friends`` relation is ONE direction (holder -> friend).
    A friendship is complete only when both rows exist. IdentityService
    writes both directions inside a single transaction; rows imported from
    legacy data or written by hand may still be one-sided, which is what
    IdentityService.find_asymmetric_friendships() detects.
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using username as the primary identifier.

    Fields:
        username: Unique, case-sensitive identity key used in all wire messages
        display_name: Human-readable name (defaults to username)
        friends: Usernames this user holds as friends (one direction per row)
        is_active: Whether the account may log in
        is_staff: Administrator role (admin site and act-as sends)
        date_joined: When the account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(username="alice", password="secret")
        admin = User.objects.create_superuser(username="root", password="secret")
    """

    username = models.CharField(
        max_length=150,
        unique=True,
        help_text="Unique, case-sensitive username",
    )

    display_name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Name shown to other users (defaults to username)",
    )

    friends = models.ManyToManyField(
        "self",
        symmetrical=False,
        blank=True,
        related_name="friend_of",
        help_text="Users this user holds as friends (one direction per row)",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site and send on behalf of others.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["username"]

    def __str__(self):
        """Return the username as string representation."""
        return self.username

    def save(self, *args, **kwargs):
        if not self.display_name:
            self.display_name = self.username
        super().save(*args, **kwargs)

    def get_full_name(self):
        return self.display_name or self.username

    def get_short_name(self):
        return self.username

    def friend_usernames(self) -> set[str]:
        """Return the usernames this user currently holds as friends."""
        return set(self.friends.values_list("username", flat=True))
