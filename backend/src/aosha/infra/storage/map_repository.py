"""Repository layer for interactive map persistence.

Provides the read accessors the live map channel consumes (map metadata for
an owning DM, fog document, player-visible elements) plus the owner-scoped
write path used by the REST API. Every method opens its own session, so
separate reads are independent and never share a transaction.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from aosha.db.connection import DatabaseManager, db_manager
from aosha.infra.storage.errors import (
    AssetNotFoundError,
    ElementNotFoundError,
    MapNotFoundError,
)
from aosha.models.asset_db import Asset
from aosha.models.map_db import EMPTY_FOG_DOCUMENT, GameMap, MapElement, MapFogData

logger = logging.getLogger(__name__)

MAP_UPDATABLE_FIELDS = ("name", "map_asset_id", "grid_enabled", "grid_size_pixels")
ELEMENT_UPDATABLE_FIELDS = (
    "x_coord_percent",
    "y_coord_percent",
    "width_percent",
    "height_percent",
    "label",
    "description",
    "is_visible_to_players",
    "element_data",
)


class MapRepository:
    """Repository for game maps, their fog document and their elements."""

    def __init__(self, manager: Optional[DatabaseManager] = None):
        """Initialize repository with database manager."""
        self.db_manager = manager or db_manager

    # =========================================================================
    # Live-channel reads
    # =========================================================================

    async def get_map_owned_by(self, map_id: int, dm_id: int) -> Optional[GameMap]:
        """Get a map if it exists and belongs to the DM.

        Returns:
            GameMap with its asset loaded, or None
        """
        try:
            async with self.db_manager.get_async_session() as session:
                stmt = select(GameMap).where(GameMap.id == map_id, GameMap.dm_id == dm_id)
                result = await session.execute(stmt)
                return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error getting map {map_id} for DM {dm_id}: {e}")
            raise

    async def get_fog_document(self, map_id: int) -> Optional[str]:
        """Get the stored fog JSON text, or None if no fog row exists."""
        try:
            async with self.db_manager.get_async_session() as session:
                stmt = select(MapFogData.fog_data_json).where(MapFogData.map_id == map_id)
                result = await session.execute(stmt)
                row = result.first()
                return row[0] if row else None

        except SQLAlchemyError as e:
            logger.error(f"Error getting fog for map {map_id}: {e}")
            raise

    async def get_player_visible_elements(self, map_id: int) -> List[MapElement]:
        """Get elements flagged visible to players, oldest first."""
        try:
            async with self.db_manager.get_async_session() as session:
                stmt = (
                    select(MapElement)
                    .where(
                        MapElement.map_id == map_id,
                        MapElement.is_visible_to_players.is_(True),
                    )
                    .order_by(MapElement.created_at.asc(), MapElement.id.asc())
                )
                result = await session.execute(stmt)
                return list(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error getting visible elements for map {map_id}: {e}")
            raise

    async def map_exists(self, map_id: int) -> bool:
        try:
            async with self.db_manager.get_async_session() as session:
                result = await session.execute(select(GameMap.id).where(GameMap.id == map_id))
                return result.first() is not None

        except SQLAlchemyError as e:
            logger.error(f"Error checking map {map_id}: {e}")
            raise

    # =========================================================================
    # Map CRUD
    # =========================================================================

    async def create_map(
        self,
        dm_id: int,
        name: str,
        map_asset_id: int,
        grid_enabled: bool = False,
        grid_size_pixels: Optional[int] = 50,
    ) -> GameMap:
        """Create a map together with its empty fog document.

        Raises:
            AssetNotFoundError: if the base-image asset does not exist
        """
        try:
            async with self.db_manager.get_async_session() as session:
                asset = await session.get(Asset, map_asset_id)
                if asset is None:
                    raise AssetNotFoundError(map_asset_id)

                game_map = GameMap(
                    name=name.strip(),
                    map_asset_id=map_asset_id,
                    grid_enabled=grid_enabled,
                    grid_size_pixels=grid_size_pixels,
                    dm_id=dm_id,
                )
                session.add(game_map)
                await session.flush()

                session.add(MapFogData(map_id=game_map.id, fog_data_json=EMPTY_FOG_DOCUMENT))
                await session.commit()
                game_map = await self._reload_map(session, game_map.id)

                logger.info(f"Created map {game_map.id} '{game_map.name}' for DM {dm_id}")
                return game_map

        except SQLAlchemyError as e:
            logger.error(f"Error creating map '{name}' for DM {dm_id}: {e}")
            raise

    async def list_maps_for_dm(self, dm_id: int) -> List[GameMap]:
        try:
            async with self.db_manager.get_async_session() as session:
                stmt = select(GameMap).where(GameMap.dm_id == dm_id).order_by(GameMap.name.asc())
                result = await session.execute(stmt)
                return list(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error listing maps for DM {dm_id}: {e}")
            raise

    async def update_map(self, map_id: int, dm_id: int, changes: Dict[str, Any]) -> GameMap:
        """Apply a partial update to an owned map.

        Raises:
            MapNotFoundError: map missing or owned by someone else
            AssetNotFoundError: new base-image asset does not exist
        """
        values = {k: v for k, v in changes.items() if k in MAP_UPDATABLE_FIELDS}
        try:
            async with self.db_manager.get_async_session() as session:
                stmt = select(GameMap).where(GameMap.id == map_id, GameMap.dm_id == dm_id)
                game_map = (await session.execute(stmt)).scalar_one_or_none()
                if game_map is None:
                    raise MapNotFoundError(map_id)

                if "map_asset_id" in values and await session.get(Asset, values["map_asset_id"]) is None:
                    raise AssetNotFoundError(values["map_asset_id"])

                if "name" in values and isinstance(values["name"], str):
                    values["name"] = values["name"].strip()

                for key, value in values.items():
                    setattr(game_map, key, value)

                await session.commit()
                game_map = await self._reload_map(session, game_map.id)
                logger.debug(f"Updated map {map_id}: {sorted(values)}")
                return game_map

        except SQLAlchemyError as e:
            logger.error(f"Error updating map {map_id}: {e}")
            raise

    async def delete_map(self, map_id: int, dm_id: int) -> bool:
        """Delete an owned map; fog and elements go with it.

        Returns:
            True if a map was deleted, False if not found / not owned
        """
        try:
            async with self.db_manager.get_async_session() as session:
                stmt = delete(GameMap).where(GameMap.id == map_id, GameMap.dm_id == dm_id)
                result = await session.execute(stmt)
                await session.commit()
                deleted = result.rowcount > 0
                if deleted:
                    logger.info(f"Deleted map {map_id} (DM {dm_id})")
                return deleted

        except SQLAlchemyError as e:
            logger.error(f"Error deleting map {map_id}: {e}")
            raise

    # =========================================================================
    # Fog
    # =========================================================================

    async def save_fog_document(self, map_id: int, dm_id: int, fog_data_json: str) -> None:
        """Replace the map's fog document (insert if missing).

        Raises:
            MapNotFoundError: map missing or owned by someone else
        """
        try:
            async with self.db_manager.get_async_session() as session:
                owned = await session.execute(
                    select(GameMap.id).where(GameMap.id == map_id, GameMap.dm_id == dm_id)
                )
                if owned.first() is None:
                    raise MapNotFoundError(map_id)

                fog = await session.get(MapFogData, map_id)
                if fog is None:
                    session.add(MapFogData(map_id=map_id, fog_data_json=fog_data_json))
                else:
                    fog.fog_data_json = fog_data_json

                await session.commit()
                logger.debug(f"Saved fog for map {map_id} ({len(fog_data_json)} bytes)")

        except SQLAlchemyError as e:
            logger.error(f"Error saving fog for map {map_id}: {e}")
            raise

    # =========================================================================
    # Elements
    # =========================================================================

    async def list_elements(
        self,
        map_id: int,
        dm_id: int,
        element_type: Optional[str] = None,
    ) -> List[MapElement]:
        """List all elements of an owned map (the DM view, hidden ones included).

        Raises:
            MapNotFoundError: map missing or owned by someone else
        """
        try:
            async with self.db_manager.get_async_session() as session:
                await self._require_owned(session, map_id, dm_id)

                stmt = select(MapElement).where(MapElement.map_id == map_id)
                if element_type:
                    stmt = stmt.where(MapElement.element_type == element_type)
                stmt = stmt.order_by(MapElement.created_at.asc(), MapElement.id.asc())
                result = await session.execute(stmt)
                return list(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error listing elements for map {map_id}: {e}")
            raise

    async def create_element(self, map_id: int, dm_id: int, fields: Dict[str, Any]) -> MapElement:
        """Place a new element on an owned map.

        Raises:
            MapNotFoundError: map missing or owned by someone else
        """
        try:
            async with self.db_manager.get_async_session() as session:
                await self._require_owned(session, map_id, dm_id)

                element = MapElement(
                    map_id=map_id,
                    dm_id=dm_id,
                    element_type=fields["element_type"],
                    x_coord_percent=fields["x_coord_percent"],
                    y_coord_percent=fields["y_coord_percent"],
                    width_percent=fields.get("width_percent"),
                    height_percent=fields.get("height_percent"),
                    label=fields.get("label", ""),
                    description=fields.get("description", ""),
                    is_visible_to_players=bool(fields.get("is_visible_to_players", False)),
                    element_data=fields.get("element_data") or {},
                )
                session.add(element)
                await session.commit()
                await session.refresh(element)

                logger.debug(f"Created {element.element_type} element {element.id} on map {map_id}")
                return element

        except SQLAlchemyError as e:
            logger.error(f"Error creating element on map {map_id}: {e}")
            raise

    async def update_element(
        self,
        map_id: int,
        element_id: int,
        dm_id: int,
        changes: Dict[str, Any],
    ) -> MapElement:
        """Apply a partial update to an element of an owned map.

        Raises:
            MapNotFoundError: map missing or owned by someone else
            ElementNotFoundError: element is not on this map
        """
        values = {k: v for k, v in changes.items() if k in ELEMENT_UPDATABLE_FIELDS}
        try:
            async with self.db_manager.get_async_session() as session:
                await self._require_owned(session, map_id, dm_id)
                element = await self._require_element(session, map_id, element_id)

                for key, value in values.items():
                    if key == "is_visible_to_players":
                        value = bool(value)
                    setattr(element, key, value)

                await session.commit()
                await session.refresh(element)
                return element

        except SQLAlchemyError as e:
            logger.error(f"Error updating element {element_id} on map {map_id}: {e}")
            raise

    async def delete_element(self, map_id: int, element_id: int, dm_id: int) -> None:
        """Delete one element. Fog is untouched.

        Raises:
            MapNotFoundError: map missing or owned by someone else
            ElementNotFoundError: element is not on this map
        """
        try:
            async with self.db_manager.get_async_session() as session:
                await self._require_owned(session, map_id, dm_id)
                element = await self._require_element(session, map_id, element_id)
                await session.delete(element)
                await session.commit()
                logger.debug(f"Deleted element {element_id} from map {map_id}")

        except SQLAlchemyError as e:
            logger.error(f"Error deleting element {element_id} on map {map_id}: {e}")
            raise

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    async def _reload_map(session, map_id: int) -> GameMap:
        # Picks up server-side timestamps and a changed asset after commit
        stmt = (
            select(GameMap)
            .where(GameMap.id == map_id)
            .options(selectinload(GameMap.asset))
            .execution_options(populate_existing=True)
        )
        return (await session.execute(stmt)).scalar_one()

    @staticmethod
    async def _require_owned(session, map_id: int, dm_id: int) -> None:
        result = await session.execute(
            select(GameMap.id).where(GameMap.id == map_id, GameMap.dm_id == dm_id)
        )
        if result.first() is None:
            raise MapNotFoundError(map_id)

    @staticmethod
    async def _require_element(session, map_id: int, element_id: int) -> MapElement:
        result = await session.execute(
            select(MapElement).where(MapElement.id == element_id, MapElement.map_id == map_id)
        )
        element = result.scalar_one_or_none()
        if element is None:
            raise ElementNotFoundError(map_id, element_id)
        return element
