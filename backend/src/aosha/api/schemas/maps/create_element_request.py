"""Schema for map element creation request."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class CreateElementRequest(BaseModel):
    element_type: Literal["pin", "text", "area"]
    x_coord_percent: float = Field(..., ge=0.0, le=1.0)
    y_coord_percent: float = Field(..., ge=0.0, le=1.0)
    width_percent: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    height_percent: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    label: str = ""
    description: str = ""
    is_visible_to_players: bool = False
    element_data: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _pin_needs_icon(self) -> "CreateElementRequest":
        if self.element_type == "pin" and not isinstance(self.element_data.get("icon"), str):
            raise ValueError('Pin element_data requires an "icon" string.')
        return self
