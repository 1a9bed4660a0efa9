"""
Tests for UserManager.

The UserManager provides:
- create_user(): Regular users, password optional (legacy imports)
- create_superuser(): Admin users with elevated privileges

Related files:
    - managers.py: Implementation under test
"""

import pytest

from authentication.models import User


class TestUserManagerCreateUser:
    """Tests for UserManager.create_user() method."""

    def test_creates_user_with_username_and_password(self, db):
        """
        Given a username and password
        When create_user is called
        Then a user is created that can authenticate with the password
        """
        user = User.objects.create_user(username="carol", password="SecurePass123!")

        assert user.pk is not None
        assert user.username == "carol"
        assert user.check_password("SecurePass123!") is True

    def test_display_name_defaults_to_username(self, db):
        user = User.objects.create_user(username="dave", password="x")

        assert user.display_name == "dave"

    def test_explicit_display_name_is_kept(self, db):
        user = User.objects.create_user(
            username="erin", password="x", display_name="Erin E."
        )

        assert user.display_name == "Erin E."

    def test_username_case_is_preserved(self, db):
        user = User.objects.create_user(username="MixedCase", password="x")

        assert user.username == "MixedCase"

    @pytest.mark.parametrize("username", ["", None])
    def test_raises_valueerror_when_username_missing(self, db, username):
        with pytest.raises(ValueError, match="Username"):
            User.objects.create_user(username=username, password="x")

    def test_user_without_password_has_unusable_password(self, db):
        user = User.objects.create_user(username="nopass")

        assert user.has_usable_password() is False

    def test_sets_default_flags_for_regular_user(self, db):
        user = User.objects.create_user(username="plain", password="x")

        assert user.is_active is True
        assert user.is_staff is False
        assert user.is_superuser is False


class TestUserManagerCreateSuperuser:
    """Tests for UserManager.create_superuser() method."""

    def test_creates_superuser_with_correct_flags(self, db):
        admin = User.objects.create_superuser(username="root", password="x")

        assert admin.is_staff is True
        assert admin.is_superuser is True
        assert admin.is_active is True

    def test_raises_valueerror_when_is_staff_is_false(self, db):
        with pytest.raises(ValueError, match="is_staff=True"):
            User.objects.create_superuser(username="root", password="x", is_staff=False)

    def test_raises_valueerror_when_is_superuser_is_false(self, db):
        with pytest.raises(ValueError, match="is_superuser=True"):
            User.objects.create_superuser(
                username="root", password="x", is_superuser=False
            )

    def test_get_by_natural_key_is_case_sensitive(self, db):
        User.objects.create_user(username="Alice", password="x")

        assert User.objects.get_by_natural_key("Alice").username == "Alice"
        with pytest.raises(User.DoesNotExist):
            User.objects.get_by_natural_key("alice")
