"""In-memory membership of the party room.

Every mutation here is synchronous so that concurrent Socket.IO handlers,
which only interleave at ``await`` points, never observe a half-applied
join or leave.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from aosha.config import settings
from aosha.models.identity import Identity

logger = logging.getLogger(__name__)


@dataclass
class Room:
    """A named broadcast group and its members keyed by socket ID."""

    name: str
    members: Dict[str, Identity] = field(default_factory=dict)


class RoomRegistry:
    """Tracks which authenticated connections are present in which room.

    A connection belongs to at most one room. Rooms are created once when
    the registry is built and live for the whole process.
    """

    def __init__(self, room_names: Iterable[str] = (settings.party_room_name,)):
        self._rooms: Dict[str, Room] = {name: Room(name) for name in room_names}

    def _room(self, room: str) -> Room:
        try:
            return self._rooms[room]
        except KeyError:
            raise KeyError(f"Unknown room: {room}") from None

    def join(self, room: str, sid: str, identity: Identity) -> None:
        """Bind ``sid`` to ``identity`` in ``room``, replacing any previous binding."""
        target = self._room(room)
        for other in self._rooms.values():
            if other is not target:
                other.members.pop(sid, None)
        target.members[sid] = identity
        logger.debug("[Rooms] %s joined %s as %s", sid, room, identity.username)

    def leave(self, room: str, sid: str) -> bool:
        """Remove ``sid`` from ``room``.

        Returns:
            True if the connection was a member and has been removed
        """
        removed = self._room(room).members.pop(sid, None) is not None
        if removed:
            logger.debug("[Rooms] %s left %s", sid, room)
        return removed

    def roster(self, room: str) -> List[Dict[str, object]]:
        return [identity.to_roster_entry() for identity in self._room(room).members.values()]

    def identity_of(self, sid: str) -> Optional[Identity]:
        for room in self._rooms.values():
            identity = room.members.get(sid)
            if identity is not None:
                return identity
        return None

    def find_connection(self, room: str, username: str) -> Optional[str]:
        """Return the first socket ID in ``room`` authenticated as ``username``."""
        for sid, identity in self._room(room).members.items():
            if identity.username == username:
                return sid
        return None

    def member_count(self, room: str) -> int:
        return len(self._room(room).members)


# Global instance
room_registry = RoomRegistry()
