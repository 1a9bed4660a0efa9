"""
One-shot import of the legacy JSON data file.

The file holds ``{"users": [...], "messages": [...]}``:

    user:    {"id", "username", "password" (bcrypt), "display", "friends": [usernames]}
    message: {"id", "from", "to", "text", "ts" (epoch ms)}

Existing rows are never overwritten: users are matched by username and
messages by id, and only missing ones are inserted. Friend lists are
imported per direction exactly as stored, so one-sided entries stay
one-sided (see repair_friendships).

Usage:
    django-admin import_legacy_data data.json
"""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from chat.models import Message

User = get_user_model()


def _message_uuid(legacy_id) -> uuid.UUID:
    if not legacy_id:
        return uuid.uuid4()
    try:
        return uuid.UUID(str(legacy_id))
    except ValueError:
        return uuid.uuid5(uuid.NAMESPACE_URL, f"legacy-message:{legacy_id}")


def _timestamp(ts) -> datetime:
    if not ts:
        return datetime.now(tz=timezone.utc)
    return datetime.fromtimestamp(int(ts) / 1000, tz=timezone.utc)


class Command(BaseCommand):
    help = "Import users, friendships and messages from a legacy JSON data file."

    def add_arguments(self, parser):
        parser.add_argument("path", type=Path, help="Path to the legacy data.json")

    def handle(self, *args, **options):
        path: Path = options["path"]
        if not path.exists():
            raise CommandError(f"No data file found at {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CommandError(f"Invalid JSON in {path}: {e}") from e

        users = data.get("users") if isinstance(data.get("users"), list) else []
        messages = data.get("messages") if isinstance(data.get("messages"), list) else []
        self.stdout.write(f"Found {len(users)} users and {len(messages)} messages in {path}")

        with transaction.atomic():
            created_users = self._import_users(users)
            friend_rows = self._import_friends(users, created_users)
            created_messages, skipped = self._import_messages(messages)

        self.stdout.write(
            self.style.SUCCESS(
                f"Imported users: {len(created_users)}, friendships: {friend_rows}, "
                f"messages: {created_messages} (skipped {skipped})"
            )
        )
        self.stdout.write(
            f"Total users in DB: {User.objects.count()}, "
            f"messages in DB: {Message.objects.count()}"
        )

    def _import_users(self, users) -> set[str]:
        created = set()
        for entry in users:
            username = entry.get("username")
            if not username or User.objects.filter(username=username).exists():
                continue

            user = User(
                username=username,
                display_name=entry.get("display") or username,
            )
            password = entry.get("password")
            if password:
                user.password = f"bcrypt${password}"
            else:
                user.set_unusable_password()
            user.save()
            created.add(username)
        return created

    def _import_friends(self, users, created_users: set[str]) -> int:
        ids = dict(User.objects.values_list("username", "id"))
        through = User.friends.through
        rows = []
        for entry in users:
            holder = entry.get("username")
            if holder not in created_users:
                continue
            for friend in entry.get("friends") or []:
                if friend in ids and friend != holder:
                    rows.append(through(from_user_id=ids[holder], to_user_id=ids[friend]))
        through.objects.bulk_create(rows, ignore_conflicts=True)
        return len(rows)

    def _import_messages(self, messages) -> tuple[int, int]:
        users = {user.username: user for user in User.objects.all()}
        created = skipped = 0
        for entry in messages:
            sender = users.get(entry.get("from"))
            recipient = users.get(entry.get("to"))
            if sender is None or recipient is None:
                skipped += 1
                continue

            message_uuid = _message_uuid(entry.get("id"))
            if Message.objects.filter(uuid=message_uuid).exists():
                continue

            Message.objects.create(
                uuid=message_uuid,
                sender=sender,
                recipient=recipient,
                text=entry.get("text") or "",
                sent_at=_timestamp(entry.get("ts")),
            )
            created += 1
        return created, skipped
