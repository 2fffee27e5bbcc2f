"""Repository for asset metadata."""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from aosha.db.connection import DatabaseManager, db_manager
from aosha.models.asset_db import Asset, AssetVisibility

logger = logging.getLogger(__name__)


class AssetRepository:
    """Registers and lists metadata for files held in external storage."""

    def __init__(self, manager: Optional[DatabaseManager] = None):
        self.db_manager = manager or db_manager

    async def create_asset(
        self,
        filename_original: str,
        filepath: str,
        mimetype: str,
        filesize: int,
        uploader_user_id: Optional[int] = None,
        description: Optional[str] = None,
        visibility_scope: str = AssetVisibility.DM_ONLY,
        filename_stored: Optional[str] = None,
    ) -> Asset:
        try:
            async with self.db_manager.get_async_session() as session:
                asset = Asset(
                    filename_original=filename_original,
                    filename_stored=filename_stored or f"{uuid.uuid4().hex}-{filename_original}",
                    filepath=filepath,
                    mimetype=mimetype,
                    filesize=filesize,
                    description=description,
                    uploader_user_id=uploader_user_id,
                    visibility_scope=visibility_scope,
                )
                session.add(asset)
                await session.commit()
                await session.refresh(asset)
                logger.info(f"Registered asset {asset.id} at {asset.filepath}")
                return asset

        except SQLAlchemyError as e:
            logger.error(f"Error registering asset {filename_original}: {e}")
            raise

    async def get_asset(self, asset_id: int) -> Optional[Asset]:
        try:
            async with self.db_manager.get_async_session() as session:
                return await session.get(Asset, asset_id)

        except SQLAlchemyError as e:
            logger.error(f"Error getting asset {asset_id}: {e}")
            raise

    async def list_assets(self, party_visible_only: bool = False) -> List[Asset]:
        """List assets newest first; players only get party-wide ones."""
        try:
            async with self.db_manager.get_async_session() as session:
                stmt = select(Asset)
                if party_visible_only:
                    stmt = stmt.where(Asset.visibility_scope == AssetVisibility.PARTY_WIDE)
                stmt = stmt.order_by(Asset.created_at.desc(), Asset.id.desc())
                result = await session.execute(stmt)
                return list(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error listing assets: {e}")
            raise
