"""Schema for the DM's full view of one map."""

from typing import List

from aosha.api.schemas.maps.map_element_response import MapElementResponse
from aosha.api.schemas.maps.map_response import MapResponse


class MapDetailResponse(MapResponse):
    fog_data_json: str
    elements: List[MapElementResponse]
