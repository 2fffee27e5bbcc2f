"""Map, fog and element endpoints for the owning DM.

This is the only write path for map state. Live socket deltas are relayed
to the party but never stored, so the DM client saves through here.
"""

import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from aosha.api.schemas.maps import (
    CreateElementRequest,
    CreateMapRequest,
    MapDetailResponse,
    MapElementResponse,
    MapResponse,
    UpdateElementRequest,
    UpdateFogRequest,
    UpdateMapRequest,
)
from aosha.auth.dependencies import require_dm
from aosha.config import settings
from aosha.infra.storage.errors import (
    AssetNotFoundError,
    ElementNotFoundError,
    MapNotFoundError,
)
from aosha.infra.storage.map_repository import MapRepository
from aosha.models.identity import Identity
from aosha.models.map_db import EMPTY_FOG_DOCUMENT, ElementType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/maps", tags=["maps"])


def get_map_repository() -> MapRepository:
    return MapRepository()


def _not_found(e: LookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _storage_failure(action: str, e: SQLAlchemyError) -> HTTPException:
    logger.error("[maps] Failed to %s: %s", action, e, exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}.",
    )


# =============================================================================
# Maps
# =============================================================================

@router.post("", response_model=MapResponse, status_code=status.HTTP_201_CREATED)
async def create_map(
    req: CreateMapRequest,
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
) -> MapResponse:
    logger.info("[maps] DM %s creating map '%s' (asset %s)", identity.id, req.name, req.map_asset_id)
    try:
        game_map = await maps.create_map(
            dm_id=identity.id,
            name=req.name,
            map_asset_id=req.map_asset_id,
            grid_enabled=req.grid_enabled,
            grid_size_pixels=req.grid_size_pixels,
        )
    except AssetNotFoundError as e:
        raise _not_found(e)
    except SQLAlchemyError as e:
        raise _storage_failure("create map", e)
    return MapResponse.from_model(game_map, settings.uploads_url_prefix)


@router.get("", response_model=List[MapResponse])
async def list_maps(
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
) -> List[MapResponse]:
    try:
        rows = await maps.list_maps_for_dm(identity.id)
    except SQLAlchemyError as e:
        raise _storage_failure("retrieve maps", e)
    return [MapResponse.from_model(m, settings.uploads_url_prefix) for m in rows]


@router.get("/{map_id}", response_model=MapDetailResponse)
async def get_map(
    map_id: int,
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
) -> MapDetailResponse:
    """Full DM view: metadata, stored fog and every element, hidden ones included."""
    try:
        game_map = await maps.get_map_owned_by(map_id, identity.id)
        if game_map is None:
            raise MapNotFoundError(map_id)
        fog_document = await maps.get_fog_document(map_id)
        elements = await maps.list_elements(map_id, identity.id)
    except MapNotFoundError as e:
        raise _not_found(e)
    except SQLAlchemyError as e:
        raise _storage_failure("retrieve map details", e)

    summary = MapResponse.from_model(game_map, settings.uploads_url_prefix)
    return MapDetailResponse(
        **summary.model_dump(),
        fog_data_json=fog_document if fog_document is not None else EMPTY_FOG_DOCUMENT,
        elements=[MapElementResponse.from_model(el) for el in elements],
    )


@router.put("/{map_id}", response_model=MapResponse)
async def update_map(
    map_id: int,
    req: UpdateMapRequest,
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
) -> MapResponse:
    changes = req.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No update data provided.")

    try:
        game_map = await maps.update_map(map_id, identity.id, changes)
    except (MapNotFoundError, AssetNotFoundError) as e:
        raise _not_found(e)
    except SQLAlchemyError as e:
        raise _storage_failure("update map", e)
    return MapResponse.from_model(game_map, settings.uploads_url_prefix)


@router.delete("/{map_id}")
async def delete_map(
    map_id: int,
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
):
    try:
        deleted = await maps.delete_map(map_id, identity.id)
    except SQLAlchemyError as e:
        raise _storage_failure("delete map", e)
    if not deleted:
        raise _not_found(MapNotFoundError(map_id))
    return {"message": "Map deleted successfully."}


# =============================================================================
# Fog
# =============================================================================

@router.put("/{map_id}/fog")
async def update_fog(
    map_id: int,
    req: UpdateFogRequest,
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
):
    try:
        parsed = json.loads(req.fog_data_json)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON format for fog_data_json.",
        )
    if not isinstance(parsed, list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="fog_data_json must represent a valid JSON array.",
        )

    try:
        await maps.save_fog_document(map_id, identity.id, req.fog_data_json)
    except MapNotFoundError as e:
        raise _not_found(e)
    except SQLAlchemyError as e:
        raise _storage_failure("update map fog data", e)
    return {"message": "Map fog data updated successfully."}


# =============================================================================
# Elements
# =============================================================================

@router.post(
    "/{map_id}/elements",
    response_model=MapElementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_element(
    map_id: int,
    req: CreateElementRequest,
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
) -> MapElementResponse:
    try:
        element = await maps.create_element(map_id, identity.id, req.model_dump())
    except MapNotFoundError as e:
        raise _not_found(e)
    except SQLAlchemyError as e:
        raise _storage_failure("create element", e)
    return MapElementResponse.from_model(element)


@router.get("/{map_id}/elements", response_model=List[MapElementResponse])
async def list_elements(
    map_id: int,
    type: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
) -> List[MapElementResponse]:
    if type is not None and type not in ElementType.ALL:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown element type.")
    try:
        elements = await maps.list_elements(map_id, identity.id, element_type=type)
    except MapNotFoundError as e:
        raise _not_found(e)
    except SQLAlchemyError as e:
        raise _storage_failure("retrieve elements", e)
    return [MapElementResponse.from_model(el) for el in elements]


@router.put("/{map_id}/elements/{element_id}", response_model=MapElementResponse)
async def update_element(
    map_id: int,
    element_id: int,
    req: UpdateElementRequest,
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
) -> MapElementResponse:
    changes = req.changes()
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No update data provided.")

    try:
        element = await maps.update_element(map_id, element_id, identity.id, changes)
    except (MapNotFoundError, ElementNotFoundError) as e:
        raise _not_found(e)
    except SQLAlchemyError as e:
        raise _storage_failure("update element", e)
    return MapElementResponse.from_model(element)


@router.delete("/{map_id}/elements/{element_id}")
async def delete_element(
    map_id: int,
    element_id: int,
    identity: Identity = Depends(require_dm),
    maps: MapRepository = Depends(get_map_repository),
):
    try:
        await maps.delete_element(map_id, element_id, identity.id)
    except (MapNotFoundError, ElementNotFoundError) as e:
        raise _not_found(e)
    except SQLAlchemyError as e:
        raise _storage_failure("delete element", e)
    return {"message": "Element deleted successfully."}
