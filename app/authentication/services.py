"""
Identity services.

This module provides IdentityService, the identity store contract the chat
core consumes: user lookup by id and username, registration and credential
checks for the REST surface, and bilateral friendship mutation.

Related files:
    - models.py: User with the directed ``friends`` relation
    - tasks.py: Periodic friendship symmetry audit
    - management/commands/repair_friendships.py: Manual repair

Friendship Symmetry:
    add_bidirectional() and remove_bidirectional() write both directions
    inside one transaction, so a failure between the two writes rolls both
    back. One-sided rows can still arrive through legacy imports or direct
    database edits; find_asymmetric_friendships() reports them and
    repair_asymmetric_friendships() completes them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib.auth import authenticate
from django.db.models import Exists, OuterRef, Q

from core.services import BaseService, ServiceResult

from authentication.models import User

if TYPE_CHECKING:
    from collections.abc import Iterable


SEARCH_MAX_RESULTS = 50


class IdentityService(BaseService):
    """
    Identity store operations.

    Methods:
        register: Create a new account
        check_credentials: Verify username/password
        find_by_username: Lookup by username (None if absent)
        find_by_id: Lookup by primary key (None if absent)
        search: Substring search over username and display name
        add_bidirectional: Make two users friends in both directions
        remove_bidirectional: Remove a friendship in both directions
        friend_usernames: Sorted usernames a user holds as friends
        find_asymmetric_friendships: Detect one-sided friendship rows
        repair_asymmetric_friendships: Add the missing direction for each
    """

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    @classmethod
    def register(
        cls,
        username: str,
        password: str,
        display_name: str = "",
    ) -> ServiceResult[User]:
        """
        Register a new user.

        Error codes:
            USERNAME_REQUIRED: Empty username
            PASSWORD_REQUIRED: Empty password
            USER_EXISTS: Username already taken
        """
        if not username:
            return ServiceResult.failure(
                "username/password required", error_code="USERNAME_REQUIRED"
            )
        if not password:
            return ServiceResult.failure(
                "username/password required", error_code="PASSWORD_REQUIRED"
            )
        if User.objects.filter(username=username).exists():
            return ServiceResult.failure("user exists", error_code="USER_EXISTS")

        with cls.atomic():
            user = User.objects.create_user(
                username=username,
                password=password,
                display_name=display_name or username,
            )

        cls.get_logger().info(f"Registered user {user.username}")
        return ServiceResult.success(user)

    @classmethod
    def check_credentials(cls, username: str, password: str, request=None) -> ServiceResult[User]:
        """
        Verify a username/password pair.

        Error codes:
            INVALID_CREDENTIALS: Unknown user, wrong password or inactive account
        """
        user = authenticate(request, username=username, password=password)
        if user is None:
            cls.get_logger().info(f"Failed login for username {username!r}")
            return ServiceResult.failure("invalid", error_code="INVALID_CREDENTIALS")
        return ServiceResult.success(user)

    @staticmethod
    def find_by_username(username: str | None) -> User | None:
        if not username:
            return None
        return User.objects.filter(username=username).first()

    @staticmethod
    def find_by_id(user_id) -> User | None:
        if user_id is None:
            return None
        return User.objects.filter(pk=user_id).first()

    @staticmethod
    def search(query: str) -> list[User]:
        """
        Find users whose username or display name contains ``query``.

        Matching is case-insensitive; an empty query matches everyone.
        """
        queryset = User.objects.filter(is_active=True)
        if query:
            queryset = queryset.filter(
                Q(username__icontains=query) | Q(display_name__icontains=query)
            )
        return list(queryset.order_by("username")[:SEARCH_MAX_RESULTS])

    # -------------------------------------------------------------------------
    # Friendship
    # -------------------------------------------------------------------------

    @staticmethod
    def friend_usernames(user: User) -> list[str]:
        return sorted(user.friend_usernames())

    @classmethod
    def add_bidirectional(cls, user: User, friend_username: str) -> ServiceResult[list[str]]:
        """
        Make ``user`` and ``friend_username`` friends in both directions.

        Both rows are written in one transaction. Calling it for an existing
        friendship is a no-op that still succeeds.

        Returns:
            ServiceResult with the caller's sorted friend usernames

        Error codes:
            USER_NOT_FOUND: friend_username does not exist
            SELF_FRIENDSHIP: A user cannot befriend themselves
        """
        friend = cls.find_by_username(friend_username)
        if friend is None:
            return ServiceResult.failure("not found", error_code="USER_NOT_FOUND")
        if friend.pk == user.pk:
            return ServiceResult.failure(
                "cannot add yourself as a friend", error_code="SELF_FRIENDSHIP"
            )

        with cls.atomic():
            user.friends.add(friend)
            friend.friends.add(user)

        cls.get_logger().info(f"Friendship added: {user.username} <-> {friend.username}")
        return ServiceResult.success(cls.friend_usernames(user))

    @classmethod
    def remove_bidirectional(cls, user: User, friend_username: str) -> ServiceResult[list[str]]:
        """
        Remove the friendship between ``user`` and ``friend_username``.

        Message history between the pair is left untouched.

        Error codes:
            USER_NOT_FOUND: friend_username does not exist
        """
        friend = cls.find_by_username(friend_username)
        if friend is None:
            return ServiceResult.failure("not found", error_code="USER_NOT_FOUND")

        with cls.atomic():
            user.friends.remove(friend)
            friend.friends.remove(user)

        cls.get_logger().info(f"Friendship removed: {user.username} <-> {friend.username}")
        return ServiceResult.success(cls.friend_usernames(user))

    @staticmethod
    def _one_sided_rows():
        through = User.friends.through
        reverse = through.objects.filter(
            from_user_id=OuterRef("to_user_id"),
            to_user_id=OuterRef("from_user_id"),
        )
        return through.objects.annotate(has_reverse=Exists(reverse)).filter(
            has_reverse=False
        )

    @classmethod
    def find_asymmetric_friendships(cls) -> list[tuple[str, str]]:
        """
        Return ``(holder, friend)`` username pairs held in one direction only.

        ``holder`` lists ``friend`` but ``friend`` does not list ``holder``.
        """
        return list(
            cls._one_sided_rows()
            .order_by("from_user__username", "to_user__username")
            .values_list("from_user__username", "to_user__username")
        )

    @classmethod
    def repair_asymmetric_friendships(cls) -> int:
        """
        Add the missing reverse direction for every one-sided friendship.

        Returns:
            Number of rows added
        """
        through = User.friends.through
        missing: Iterable[tuple[int, int]] = list(
            cls._one_sided_rows().values_list("from_user_id", "to_user_id")
        )
        rows = [
            through(from_user_id=friend_id, to_user_id=holder_id)
            for holder_id, friend_id in missing
        ]
        if rows:
            with cls.atomic():
                through.objects.bulk_create(rows, ignore_conflicts=True)
            cls.get_logger().warning(f"Repaired {len(rows)} one-sided friendships")
        return len(rows)
