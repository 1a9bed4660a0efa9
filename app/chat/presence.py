"""
Presence registry.

Maps each username to the set of channel-layer channel names currently
connected for that user. One user may hold any number of live channels
(one per device or tab).

Related files:
    - consumers.py: The only writer (register on connect, unregister on disconnect)
    - delivery.py: Reads channels_for() to fan out delivered messages

Scope:
    The registry is process-wide and in memory. It answers "where do I push
    this message" and nothing else; it never decides who may talk to whom.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """
    Keyed registry of live channels.

    Methods:
        register: Bind a channel to a username
        unregister: Drop a channel, wherever it is bound (idempotent)
        channels_for: Snapshot of a user's live channels
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._channels: dict[str, set[str]] = {}
        self._owners: dict[str, str] = {}

    def register(self, username: str, channel_name: str) -> None:
        with self._lock:
            previous = self._owners.get(channel_name)
            if previous is not None and previous != username:
                self._discard(previous, channel_name)
            self._owners[channel_name] = username
            self._channels.setdefault(username, set()).add(channel_name)
        logger.debug(f"Registered channel {channel_name} for {username}")

    def unregister(self, channel_name: str) -> str | None:
        """
        Remove a channel from the registry.

        Returns:
            The username the channel was bound to, or None if it was
            not registered (already removed or never added)
        """
        with self._lock:
            username = self._owners.pop(channel_name, None)
            if username is not None:
                self._discard(username, channel_name)
        if username is not None:
            logger.debug(f"Unregistered channel {channel_name} for {username}")
        return username

    def channels_for(self, username: str) -> frozenset[str]:
        """Current live channels for ``username``; empty when offline."""
        with self._lock:
            return frozenset(self._channels.get(username, ()))

    def usernames(self) -> list[str]:
        with self._lock:
            return sorted(self._channels)

    def clear(self) -> None:
        with self._lock:
            self._channels.clear()
            self._owners.clear()

    def _discard(self, username: str, channel_name: str) -> None:
        channels = self._channels.get(username)
        if channels is None:
            return
        channels.discard(channel_name)
        if not channels:
            del self._channels[username]


presence_registry = PresenceRegistry()
