"""Shared fixtures: a throwaway SQLite database and a recording Socket.IO stand-in."""

from collections import defaultdict
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest
import pytest_asyncio

from aosha.auth.models import UserRole
from aosha.auth.tokens import create_access_token
from aosha.connection import map_events, socketio_server
from aosha.connection.room_registry import RoomRegistry
from aosha.db.connection import DatabaseManager
from aosha.infra.storage.asset_repository import AssetRepository
from aosha.infra.storage.map_repository import MapRepository
from aosha.infra.storage.user_repository import UserRepository
from aosha.models.asset_db import AssetVisibility
from aosha.services.map_snapshot_service import MapSnapshotService


# =============================================================================
# Database
# =============================================================================

@pytest_asyncio.fixture
async def db(tmp_path):
    """A fresh SQLite database file per test."""
    manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'aosha-test.sqlite'}", echo=False)
    await manager.create_tables()
    yield manager
    await manager.dispose()


@pytest.fixture
def map_repo(db):
    return MapRepository(db)


@pytest.fixture
def user_repo(db):
    return UserRepository(db)


@pytest.fixture
def asset_repo(db):
    return AssetRepository(db)


@pytest_asyncio.fixture
async def dm_user(user_repo):
    return await user_repo.create_user("dungeonmaster", "dm@aosha.test", "dm-password", UserRole.DM.value)


@pytest_asyncio.fixture
async def other_dm_user(user_repo):
    return await user_repo.create_user("rivaldm", "rival@aosha.test", "rival-password", UserRole.DM.value)


@pytest_asyncio.fixture
async def player_user(user_repo):
    return await user_repo.create_user("elara", "elara@aosha.test", "player-password", UserRole.PLAYER.value)


@pytest_asyncio.fixture
async def map_asset(asset_repo, dm_user):
    return await asset_repo.create_asset(
        filename_original="keep.png",
        filepath="assets/keep.png",
        mimetype="image/png",
        filesize=2048,
        uploader_user_id=dm_user.id,
        visibility_scope=AssetVisibility.PARTY_WIDE,
    )


@pytest_asyncio.fixture
async def game_map(map_repo, dm_user, map_asset):
    return await map_repo.create_map(
        dm_id=dm_user.id,
        name="Ruined Keep",
        map_asset_id=map_asset.id,
        grid_enabled=True,
        grid_size_pixels=64,
    )


def _element_fields(element_type: str = "pin", visible: bool = True, **overrides) -> Dict[str, Any]:
    fields = {
        "element_type": element_type,
        "x_coord_percent": 0.25,
        "y_coord_percent": 0.75,
        "label": f"{element_type} label",
        "description": "",
        "is_visible_to_players": visible,
        "element_data": {"icon": "skull"} if element_type == "pin" else {},
    }
    fields.update(overrides)
    return fields


# =============================================================================
# Tokens
# =============================================================================

def _make_token(user_id: int, username: str, role: UserRole) -> str:
    return create_access_token(user_id, username, role.value)


@pytest.fixture
def dm_token(dm_user):
    return _make_token(dm_user.id, dm_user.username, UserRole.DM)


@pytest.fixture
def player_token(player_user):
    return _make_token(player_user.id, player_user.username, UserRole.PLAYER)


# =============================================================================
# Socket.IO
# =============================================================================

class RecordingSocketServer:
    """Stands in for the AsyncServer methods the handlers call.

    Rooms and deliveries are tracked in memory so tests can assert on what
    each socket would have received.
    """

    def __init__(self):
        self.rooms: Dict[str, Set[str]] = defaultdict(set)
        self.inbox: Dict[str, List[Tuple[str, Any]]] = defaultdict(list)
        self.disconnected: List[str] = []

    async def emit(
        self,
        event: str,
        data: Any = None,
        to: Optional[str] = None,
        room: Optional[str] = None,
        skip_sid: Optional[str] = None,
        namespace: Optional[str] = None,
        **kwargs,
    ) -> None:
        target = to or room
        recipients = set(self.rooms[target]) if target in self.rooms else {target}
        for sid in sorted(recipients):
            if sid != skip_sid and sid not in self.disconnected:
                self.inbox[sid].append((event, data))

    async def enter_room(self, sid: str, room: str, namespace: Optional[str] = None) -> None:
        self.rooms[room].add(sid)

    async def leave_room(self, sid: str, room: str, namespace: Optional[str] = None) -> None:
        self.rooms[room].discard(sid)

    async def disconnect(self, sid: str, namespace: Optional[str] = None, **kwargs) -> None:
        self.disconnected.append(sid)
        for members in self.rooms.values():
            members.discard(sid)
        await socketio_server.disconnect(sid, "server disconnect")

    def events(self, sid: str, name: Optional[str] = None) -> List[Any]:
        """Payloads received by ``sid``, optionally only for one event name."""
        return [data for event, data in self.inbox[sid] if name is None or event == name]

    def event_names(self, sid: str) -> List[str]:
        return [event for event, _ in self.inbox[sid]]

    def clear(self) -> None:
        self.inbox.clear()


@pytest.fixture
def fake_sio(monkeypatch):
    """Recording server plus an empty party room registry."""
    fake = RecordingSocketServer()
    for name in ("emit", "enter_room", "leave_room", "disconnect"):
        monkeypatch.setattr(socketio_server.sio, name, getattr(fake, name))
    monkeypatch.setattr(socketio_server, "room_registry", RoomRegistry((socketio_server.PARTY_ROOM,)))
    return fake


@pytest.fixture
def snapshot_service(monkeypatch, map_repo):
    """Point the live map handlers at the test database."""
    service = MapSnapshotService(gateway=map_repo, uploads_url_prefix="/uploads")
    monkeypatch.setattr(map_events, "map_snapshot_service", service)
    return service


async def _authenticate(sid: str, token: Any) -> None:
    await socketio_server.connect(sid, {})
    await socketio_server.authenticate(sid, token)


@pytest.fixture
def element_fields():
    """Builder for element creation fields."""
    return _element_fields


@pytest.fixture
def token_for():
    """Builder for signed tokens: ``token_for(user_id, username, role)``."""
    return _make_token


@pytest.fixture
def login_socket(fake_sio):
    """Connect and authenticate a socket: ``await login_socket(sid, token)``."""
    return _authenticate
