"""Map snapshot service for the "set active map" broadcast.

Builds the point-in-time view sent to the party when the DM activates a map:

- Map metadata, read first and scoped to the owning DM
- Fog document and player-visible elements, read concurrently
- An existence re-check, since the map may be deleted while the reads run

The reads use independent sessions; no transaction spans them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from aosha.config import settings
from aosha.infra.storage.errors import MapNotFoundError
from aosha.infra.storage.map_repository import MapRepository
from aosha.models.map_db import EMPTY_FOG_DOCUMENT
from aosha.models.map_snapshot import MapSnapshot

logger = logging.getLogger(__name__)


class MapAssetMissingError(LookupError):
    """The map exists but its base image cannot be resolved."""

    def __init__(self, map_id):
        self.map_id = map_id
        super().__init__(f"Map {map_id} asset information is missing.")


class SnapshotUnavailableError(RuntimeError):
    """Storage failed while assembling a snapshot."""


class MapSnapshotService:
    """Assembles player-filtered map snapshots."""

    def __init__(self, gateway: Optional[MapRepository] = None, uploads_url_prefix: Optional[str] = None):
        self.gateway = gateway or MapRepository()
        prefix = settings.uploads_url_prefix if uploads_url_prefix is None else uploads_url_prefix
        self.uploads_url_prefix = prefix.rstrip("/")

    def asset_url(self, filepath: str) -> str:
        return f"{self.uploads_url_prefix}/{filepath.lstrip('/')}"

    async def build_snapshot(self, map_id: int, dm_id: int) -> MapSnapshot:
        """Build the snapshot for ``map_id`` on behalf of DM ``dm_id``.

        Raises:
            MapNotFoundError: map missing, not owned by the DM, or deleted mid-way
            MapAssetMissingError: base image reference cannot be resolved
            SnapshotUnavailableError: a storage read failed
        """
        try:
            game_map = await self.gateway.get_map_owned_by(map_id, dm_id)
            if game_map is None:
                raise MapNotFoundError(map_id)
            if not game_map.asset_filepath:
                raise MapAssetMissingError(map_id)

            fog_document, elements = await asyncio.gather(
                self.gateway.get_fog_document(map_id),
                self.gateway.get_player_visible_elements(map_id),
            )

            if not await self.gateway.map_exists(map_id):
                raise MapNotFoundError(map_id)

        except SQLAlchemyError as e:
            logger.error(f"Error assembling snapshot for map {map_id}: {e}", exc_info=True)
            raise SnapshotUnavailableError("Failed to fetch map details for party.") from e

        # Never trust the query alone for the player filter
        visible = [element.to_player_dict() for element in elements if element.is_visible_to_players]

        logger.debug(
            f"Snapshot for map {map_id}: {len(visible)} visible elements, "
            f"fog={'stored' if fog_document is not None else 'default'}"
        )
        return MapSnapshot(
            map_id=game_map.id,
            map_name=game_map.name,
            map_asset_url=self.asset_url(game_map.asset_filepath),
            grid_enabled=bool(game_map.grid_enabled),
            grid_size_pixels=game_map.grid_size_pixels,
            fog_data_json=fog_document if fog_document is not None else EMPTY_FOG_DOCUMENT,
            elements=visible,
        )
