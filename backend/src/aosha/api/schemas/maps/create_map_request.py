"""Schema for map creation request."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CreateMapRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    map_asset_id: int = Field(..., gt=0)
    grid_enabled: bool = False
    grid_size_pixels: Optional[int] = Field(default=50, gt=0)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Map name is required and must be a non-empty string.")
        return value.strip()
