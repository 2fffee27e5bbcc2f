"""Schema for map element response."""

from typing import Any, Dict, Optional, TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from aosha.models.map_db import MapElement


class MapElementResponse(BaseModel):
    id: int
    map_id: int
    element_type: str
    x_coord_percent: float
    y_coord_percent: float
    width_percent: Optional[float]
    height_percent: Optional[float]
    label: Optional[str]
    description: Optional[str]
    element_data: Dict[str, Any]
    is_visible_to_players: bool
    dm_id: Optional[int]
    created_at: Optional[str]
    updated_at: Optional[str]

    @staticmethod
    def from_model(element: "MapElement") -> "MapElementResponse":
        return MapElementResponse(**element.to_dict())
