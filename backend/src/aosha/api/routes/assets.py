"""Asset metadata endpoints.

Files themselves live in upload storage; only their metadata is kept here.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from aosha.api.schemas.assets import AssetResponse, CreateAssetRequest
from aosha.auth.dependencies import get_current_identity, require_dm
from aosha.config import settings
from aosha.infra.storage.asset_repository import AssetRepository
from aosha.models.identity import Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assets", tags=["assets"])


def get_asset_repository() -> AssetRepository:
    return AssetRepository()


@router.post("", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def register_asset(
    req: CreateAssetRequest,
    identity: Identity = Depends(require_dm),
    assets: AssetRepository = Depends(get_asset_repository),
) -> AssetResponse:
    asset = await assets.create_asset(
        filename_original=req.filename_original,
        filepath=req.filepath,
        mimetype=req.mimetype,
        filesize=req.filesize,
        uploader_user_id=identity.id,
        description=req.description,
        visibility_scope=req.visibility_scope,
    )
    return AssetResponse.from_model(asset, settings.uploads_url_prefix)


@router.get("", response_model=List[AssetResponse])
async def list_assets(
    identity: Identity = Depends(get_current_identity),
    assets: AssetRepository = Depends(get_asset_repository),
) -> List[AssetResponse]:
    rows = await assets.list_assets(party_visible_only=not identity.is_dm)
    return [AssetResponse.from_model(a, settings.uploads_url_prefix) for a in rows]
