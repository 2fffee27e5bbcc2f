"""MapSnapshot data model - the payload sent when a DM activates a map."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class MapSnapshot:
    """Point-in-time, player-filtered view of one map."""
    map_id: int
    map_name: str
    map_asset_url: str
    grid_enabled: bool
    grid_size_pixels: Optional[int]
    fog_data_json: str
    elements: List[Dict[str, Any]] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Wire form of ``party_active_map_changed``."""
        return {
            "mapId": self.map_id,
            "mapName": self.map_name,
            "mapAssetUrl": self.map_asset_url,
            "gridEnabled": self.grid_enabled,
            "gridSizePixels": self.grid_size_pixels,
            "initialFogDataJson": self.fog_data_json,
            "initialElements": list(self.elements),
        }
