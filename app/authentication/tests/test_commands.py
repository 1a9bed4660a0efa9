"""
Tests for the repair_friendships management command.
"""

from io import StringIO

from django.core.management import call_command

from authentication.tests.factories import befriend


def run(*args) -> str:
    out = StringIO()
    call_command("repair_friendships", *args, stdout=out)
    return out.getvalue()


class TestRepairFriendshipsCommand:
    def test_reports_symmetric_state(self, user, other_user):
        befriend(user, other_user)

        assert "All friendships are symmetric." in run()

    def test_lists_findings_without_fixing(self, user, other_user):
        user.friends.add(other_user)

        output = run()

        assert "alice -> bob (missing bob -> alice)" in output
        assert "1 one-sided friendships found." in output
        assert other_user.friend_usernames() == set()

    def test_fix_repairs(self, user, other_user):
        user.friends.add(other_user)

        output = run("--fix")

        assert "Repaired 1 friendships." in output
        assert other_user.friend_usernames() == {"alice"}
