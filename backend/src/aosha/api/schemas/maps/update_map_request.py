"""Schema for partial map update request."""

from typing import Optional

from pydantic import BaseModel, Field


class UpdateMapRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    map_asset_id: Optional[int] = Field(default=None, gt=0)
    grid_enabled: Optional[bool] = None
    grid_size_pixels: Optional[int] = Field(default=None, gt=0)
