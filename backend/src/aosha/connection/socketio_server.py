"""Socket.IO server for the party channel.

Handles the authentication handshake, room presence, chat, public and
secret dice rolls and DM whispers. Map events live in
``aosha.connection.map_events`` and register on the same server.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import socketio
from pydantic import ValidationError

from aosha.auth.tokens import InvalidTokenError, verify_access_token
from aosha.config import settings
from aosha.connection.payloads import ChatMessagePayload, DiceRollPayload, WhisperPayload
from aosha.connection.room_registry import room_registry
from aosha.models.identity import Identity

logger = logging.getLogger(__name__)

NAMESPACE = settings.socketio_namespace
PARTY_ROOM = settings.party_room_name


# =============================================================================
# Socket.IO Server Configuration
# =============================================================================

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.cors_allowed_origins,
    ping_timeout=30,
    ping_interval=25,
    logger=False,  # socket.io internal logging is too verbose
    engineio_logger=False,
)


# =============================================================================
# Identity Helpers
# =============================================================================

def get_identity(sid: str) -> Optional[Identity]:
    """Return the identity bound to a socket, or None before authentication."""
    return room_registry.identity_of(sid)


def _extract_token(data: Any) -> Optional[str]:
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        token = data.get("token")
        return token if isinstance(token, str) else None
    return None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Connection Handlers
# =============================================================================

@sio.event(namespace=NAMESPACE)
async def connect(sid: str, environ: Dict, auth: Optional[Dict] = None):
    """Accept the transport; identity is established by ``authenticate``."""
    logger.info("[SocketIO] Connected | sid=%s", sid)


@sio.event(namespace=NAMESPACE)
async def authenticate(sid: str, data: Any = None):
    """Bind an identity to the socket and join the party room."""
    try:
        identity = verify_access_token(_extract_token(data))
    except InvalidTokenError as e:
        logger.warning("[SocketIO] Authentication failed | sid=%s reason=%s", sid, e)
        if room_registry.leave(PARTY_ROOM, sid):
            await sio.leave_room(sid, PARTY_ROOM, namespace=NAMESPACE)
            await broadcast_roster()
        await send_to_socket(sid, "unauthorized", {"error": "Authentication failed. Invalid token."})
        await sio.disconnect(sid, namespace=NAMESPACE)
        return

    room_registry.join(PARTY_ROOM, sid, identity)
    await sio.enter_room(sid, PARTY_ROOM, namespace=NAMESPACE)
    logger.info(
        "[SocketIO] Authenticated | sid=%s user=%s role=%s",
        sid, identity.username, identity.role.value,
    )

    await send_to_socket(
        sid,
        "authenticated",
        {
            "message": "Socket connection authenticated successfully.",
            "user": identity.to_roster_entry(),
        },
    )
    await broadcast_roster()


@sio.event(namespace=NAMESPACE)
async def disconnect(sid: str, reason: Optional[str] = None):
    """Drop the socket from the party room and refresh everyone's roster."""
    identity = get_identity(sid)
    logger.info(
        "[SocketIO] Disconnected | sid=%s user=%s reason=%s",
        sid, identity.username if identity else None, reason,
    )
    if room_registry.leave(PARTY_ROOM, sid):
        await broadcast_roster()


# =============================================================================
# Chat & Dice Handlers
# =============================================================================

@sio.event(namespace=NAMESPACE)
async def chat_message(sid: str, data: Any = None):
    identity = get_identity(sid)
    if identity is None:
        await send_to_socket(sid, "unauthorized", {"error": "Please authenticate first."})
        return

    try:
        payload = ChatMessagePayload.model_validate(data)
    except ValidationError as e:
        logger.warning("[SocketIO] Invalid chat_message | sid=%s errors=%s", sid, e.errors())
        await send_to_socket(sid, "message_rejected", {"error": "Invalid chat message."})
        return

    await broadcast_to_party(
        "chat_message_new",
        {
            "sender": identity.username,
            "role": identity.role.value,
            "text": payload.text,
            "timestamp": _now_iso(),
        },
    )


@sio.event(namespace=NAMESPACE)
async def dice_roll_public(sid: str, data: Any = None):
    identity = get_identity(sid)
    if identity is None:
        await send_to_socket(sid, "unauthorized", {"error": "Please authenticate first."})
        return

    try:
        roll = DiceRollPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("[SocketIO] Invalid dice_roll_public | sid=%s errors=%s", sid, e.errors())
        await send_to_socket(sid, "message_rejected", {"error": "Invalid dice roll."})
        return

    await broadcast_to_party(
        "dice_roll_public_new",
        {
            "roller": identity.username,
            "role": identity.role.value,
            "rollString": roll.roll_string,
            "result": roll.result,
            "details": roll.details,
            "timestamp": _now_iso(),
        },
    )


@sio.event(namespace=NAMESPACE)
async def dm_whisper(sid: str, data: Any = None):
    """Deliver a private message from the DM to one connected user."""
    identity = get_identity(sid)
    if identity is None or not identity.is_dm:
        await send_to_socket(sid, "unauthorized", {"error": "Only DMs can send whispers."})
        return

    try:
        whisper = WhisperPayload.model_validate(data)
    except ValidationError:
        await send_to_socket(sid, "dm_whisper_failed", {"error": "Whisper requires toUsername and text."})
        return

    target_sid = room_registry.find_connection(PARTY_ROOM, whisper.to_username)
    if target_sid is None:
        await send_to_socket(
            sid,
            "dm_whisper_failed",
            {"error": f"User {whisper.to_username} not found or not connected in this room."},
        )
        return

    await send_to_socket(
        target_sid,
        "dm_whisper_new",
        {
            "from": identity.username,
            "text": whisper.text,
            "isWhisper": True,
            "timestamp": _now_iso(),
        },
    )
    await send_to_socket(sid, "dm_whisper_sent_confirmation", {"to": whisper.to_username, "text": whisper.text})


@sio.event(namespace=NAMESPACE)
async def dice_roll_secret(sid: str, data: Any = None):
    """DM-private roll, echoed back to the sender only."""
    identity = get_identity(sid)
    if identity is None or not identity.is_dm:
        await send_to_socket(sid, "unauthorized", {"error": "DM only."})
        return

    try:
        roll = DiceRollPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("[SocketIO] Invalid dice_roll_secret | sid=%s errors=%s", sid, e.errors())
        await send_to_socket(sid, "message_rejected", {"error": "Invalid dice roll."})
        return

    await send_to_socket(
        sid,
        "dice_roll_secret_new",
        {
            "roller": identity.username,
            "rollString": roll.roll_string,
            "result": roll.result,
            "details": roll.details,
            "isSecret": True,
            "timestamp": _now_iso(),
        },
    )


# =============================================================================
# Broadcast Helpers (for use by other modules)
# =============================================================================

async def broadcast_roster() -> None:
    """Send the current party roster to every member."""
    await broadcast_to_party("room_users_update", room_registry.roster(PARTY_ROOM))


async def broadcast_to_party(
    event: str,
    data: Any,
    skip_sid: Optional[str] = None,
) -> None:
    """Broadcast an event to all clients in the party room.

    Args:
        event: Event name
        data: Event data
        skip_sid: Optional socket ID to exclude
    """
    await sio.emit(
        event,
        data,
        room=PARTY_ROOM,
        skip_sid=skip_sid,
        namespace=NAMESPACE,
    )


async def send_to_socket(sid: str, event: str, data: Any) -> None:
    """Send an event to a specific socket.

    Args:
        sid: Socket ID
        event: Event name
        data: Event data
    """
    await sio.emit(event, data, to=sid, namespace=NAMESPACE)


# =============================================================================
# ASGI App
# =============================================================================

def create_socketio_app(other_app):
    """Create Socket.IO ASGI app wrapping another ASGI app.

    Args:
        other_app: The main ASGI app (e.g., FastAPI)

    Returns:
        Combined ASGI app with Socket.IO
    """
    return socketio.ASGIApp(sio, other_asgi_app=other_app)
