"""Map schema exports."""

from aosha.api.schemas.maps.create_map_request import CreateMapRequest
from aosha.api.schemas.maps.update_map_request import UpdateMapRequest
from aosha.api.schemas.maps.map_response import MapResponse
from aosha.api.schemas.maps.map_detail_response import MapDetailResponse
from aosha.api.schemas.maps.update_fog_request import UpdateFogRequest
from aosha.api.schemas.maps.create_element_request import CreateElementRequest
from aosha.api.schemas.maps.update_element_request import UpdateElementRequest
from aosha.api.schemas.maps.map_element_response import MapElementResponse

__all__ = [
    "CreateMapRequest",
    "UpdateMapRequest",
    "MapResponse",
    "MapDetailResponse",
    "UpdateFogRequest",
    "CreateElementRequest",
    "UpdateElementRequest",
    "MapElementResponse",
]
