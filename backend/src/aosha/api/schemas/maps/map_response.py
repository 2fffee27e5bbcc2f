"""Schema for map response."""

from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from aosha.models.map_db import GameMap


class MapResponse(BaseModel):
    id: int
    name: str
    map_asset_id: int
    grid_enabled: bool
    grid_size_pixels: Optional[int]
    dm_id: int
    mapAssetUrl: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]

    @staticmethod
    def from_model(game_map: "GameMap", uploads_url_prefix: str) -> "MapResponse":
        filepath = game_map.asset_filepath
        return MapResponse(
            id=game_map.id,
            name=game_map.name,
            map_asset_id=game_map.map_asset_id,
            grid_enabled=bool(game_map.grid_enabled),
            grid_size_pixels=game_map.grid_size_pixels,
            dm_id=game_map.dm_id,
            mapAssetUrl=f"{uploads_url_prefix}/{filepath}" if filepath else None,
            created_at=game_map.created_at.isoformat() if game_map.created_at else None,
            updated_at=game_map.updated_at.isoformat() if game_map.updated_at else None,
        )
