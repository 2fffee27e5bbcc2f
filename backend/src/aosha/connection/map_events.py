"""Socket.IO handlers for live map editing.

Fog and element changes are relayed to the party as deltas without being
written to storage; the DM client persists them through the REST API.
Activating a map sends the full player-filtered snapshot to everyone.

Every action is checked in the same order: authentication, DM role,
payload shape. A rejection goes to the sender only as ``map_error``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError

from aosha.connection.payloads import (
    ElementDeleteRequest,
    ElementUpsertRequest,
    FogUpdateRequest,
    MapPayload,
    SetActiveMapRequest,
)
from aosha.connection.socketio_server import (
    NAMESPACE,
    broadcast_to_party,
    get_identity,
    send_to_socket,
    sio,
)
from aosha.infra.storage.errors import MapNotFoundError
from aosha.models.identity import Identity
from aosha.services.map_snapshot_service import (
    MapAssetMissingError,
    MapSnapshotService,
    SnapshotUnavailableError,
)

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=MapPayload)


class RejectionCode:
    """Codes carried by ``map_error``."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    INVALID_PAYLOAD = "invalid_payload"
    NOT_FOUND = "not_found"
    ASSET_MISSING = "asset_missing"
    UNAVAILABLE = "unavailable"


# Global instance
map_snapshot_service = MapSnapshotService()


async def reject(sid: str, error: str, code: str) -> None:
    await send_to_socket(sid, "map_error", {"error": error, "code": code})


async def _admit(
    sid: str,
    data: Any,
    model: Type[PayloadT],
    action: str,
    invalid_message: str,
) -> Optional[Tuple[Identity, PayloadT]]:
    """Run the auth, role and validation gates for one map action.

    Returns:
        (identity, payload) if the action may proceed, otherwise None after
        the sender has been told why
    """
    identity = get_identity(sid)
    if identity is None:
        await reject(sid, "Please authenticate first.", RejectionCode.UNAUTHENTICATED)
        return None
    if not identity.is_dm:
        logger.warning("[Maps] Non-DM %s attempted %s", identity.username, action)
        await reject(sid, f"Only DMs can {action}.", RejectionCode.FORBIDDEN)
        return None

    try:
        payload = model.model_validate(data if data is not None else {})
    except ValidationError as e:
        logger.warning("[Maps] Invalid payload for %s | sid=%s errors=%s", action, sid, e.errors())
        await reject(sid, invalid_message, RejectionCode.INVALID_PAYLOAD)
        return None

    return identity, payload


@sio.event(namespace=NAMESPACE)
async def dm_update_map_fog(sid: str, data: Any = None):
    admitted = await _admit(sid, data, FogUpdateRequest, "update map fog", "Invalid data for fog update.")
    if admitted is None:
        return
    identity, request = admitted

    logger.info("[Maps] DM %s updating fog for map %s", identity.username, request.map_id)
    await broadcast_to_party(
        "map_fog_updated",
        {"mapId": request.map_id, "fogDataJson": request.fog_document()},
        skip_sid=sid,
    )


@sio.event(namespace=NAMESPACE)
async def dm_update_map_element(sid: str, data: Any = None):
    admitted = await _admit(
        sid, data, ElementUpsertRequest, "update map elements", "Invalid data for element update."
    )
    if admitted is None:
        return
    identity, request = admitted

    logger.info(
        "[Maps] DM %s adding/updating element %s (type: %s) for map %s",
        identity.username,
        request.element_data["id"],
        request.element_data["element_type"],
        request.map_id,
    )
    await broadcast_to_party(
        "map_element_added_or_updated",
        {"mapId": request.map_id, "elementData": request.element_data},
        skip_sid=sid,
    )


@sio.event(namespace=NAMESPACE)
async def dm_delete_map_element(sid: str, data: Any = None):
    admitted = await _admit(
        sid, data, ElementDeleteRequest, "delete map elements", "Invalid data for element deletion."
    )
    if admitted is None:
        return
    identity, request = admitted

    logger.info(
        "[Maps] DM %s deleting element %s from map %s",
        identity.username, request.element_id, request.map_id,
    )
    await broadcast_to_party(
        "map_element_deleted",
        {"mapId": request.map_id, "elementId": request.element_id},
        skip_sid=sid,
    )


@sio.event(namespace=NAMESPACE)
async def dm_set_active_map_for_party(sid: str, data: Any = None):
    """Send the snapshot of a DM-owned map to the whole party, sender included."""
    admitted = await _admit(
        sid,
        data,
        SetActiveMapRequest,
        "set the active party map",
        "Map ID is required to set active party map.",
    )
    if admitted is None:
        return
    identity, request = admitted

    logger.info("[Maps] DM %s setting active map for party to %s", identity.username, request.map_id)
    try:
        snapshot = await map_snapshot_service.build_snapshot(request.map_id, identity.id)
    except MapNotFoundError as e:
        logger.warning("[Maps] %s", e)
        await reject(sid, str(e), RejectionCode.NOT_FOUND)
        return
    except MapAssetMissingError as e:
        logger.error("[Maps] %s", e)
        await reject(sid, str(e), RejectionCode.ASSET_MISSING)
        return
    except SnapshotUnavailableError as e:
        await reject(sid, str(e), RejectionCode.UNAVAILABLE)
        return

    logger.info("[Maps] Broadcasting party_active_map_changed | url=%s", snapshot.map_asset_url)
    await broadcast_to_party("party_active_map_changed", snapshot.to_payload())
