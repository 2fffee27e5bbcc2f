"""Schema for partial map element update request."""

from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, Field


class UpdateElementRequest(BaseModel):
    """Only fields present in the body are applied; explicit nulls clear
    ``width_percent`` / ``height_percent``."""

    x_coord_percent: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    y_coord_percent: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    width_percent: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    height_percent: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    label: Optional[str] = None
    description: Optional[str] = None
    is_visible_to_players: Optional[bool] = None
    element_data: Optional[Dict[str, Any]] = None

    NULLABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("width_percent", "height_percent")

    def changes(self) -> Dict[str, Any]:
        sent = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in sent.items()
            if value is not None or key in self.NULLABLE_FIELDS
        }
