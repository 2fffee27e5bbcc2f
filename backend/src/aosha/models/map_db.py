"""SQLAlchemy models for interactive maps: map metadata, fog and elements."""

from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from aosha.db.base import BaseModel

if TYPE_CHECKING:
    from aosha.models.asset_db import Asset


EMPTY_FOG_DOCUMENT = "[]"


class ElementType:
    """Constants for map element kinds."""

    PIN = "pin"
    TEXT = "text"
    AREA = "area"

    ALL = (PIN, TEXT, AREA)


class GameMap(BaseModel):
    """A battle or world map owned by one DM.

    Deleting a map cascades (at the database level) to its fog row and its
    elements.
    """

    __tablename__ = "game_maps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    map_asset_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("assets.id", ondelete="RESTRICT"),
        nullable=False,
    )
    grid_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    grid_size_pixels: Mapped[Optional[int]] = mapped_column(Integer)
    dm_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    asset: Mapped[Optional["Asset"]] = relationship("Asset", lazy="selectin")

    @property
    def asset_filepath(self) -> Optional[str]:
        return self.asset.filepath if self.asset is not None else None

    def __repr__(self) -> str:
        return f"<GameMap(id={self.id}, name='{self.name}', dm_id={self.dm_id})>"


class MapFogData(BaseModel):
    """The single fog document of a map.

    ``fog_data_json`` is JSON text encoding an array of region descriptors.
    The server never looks inside the regions.
    """

    __tablename__ = "map_fog_data"

    map_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("game_maps.id", ondelete="CASCADE"),
        primary_key=True,
    )
    fog_data_json: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        size = len(self.fog_data_json or "")
        return f"<MapFogData(map_id={self.map_id}, bytes={size})>"


class MapElement(BaseModel):
    """A pin, text label or area placed on a map.

    Coordinates and sizes are fractions (0.0-1.0) of the base image size.
    Players only ever see elements with ``is_visible_to_players`` set.
    """

    __tablename__ = "map_elements"
    __table_args__ = (
        CheckConstraint(
            "element_type IN ('pin', 'text', 'area')",
            name="check_map_element_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    map_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("game_maps.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    element_type: Mapped[str] = mapped_column(String(20), nullable=False)
    x_coord_percent: Mapped[float] = mapped_column(Float, nullable=False)
    y_coord_percent: Mapped[float] = mapped_column(Float, nullable=False)
    width_percent: Mapped[Optional[float]] = mapped_column(Float)
    height_percent: Mapped[Optional[float]] = mapped_column(Float)
    label: Mapped[Optional[str]] = mapped_column(Text, default="")
    description: Mapped[Optional[str]] = mapped_column(Text, default="")
    is_visible_to_players: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    element_data: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    dm_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the field names clients expect."""
        return {
            "id": self.id,
            "map_id": self.map_id,
            "element_type": self.element_type,
            "x_coord_percent": self.x_coord_percent,
            "y_coord_percent": self.y_coord_percent,
            "width_percent": self.width_percent,
            "height_percent": self.height_percent,
            "label": self.label,
            "description": self.description,
            "element_data": self.element_data or {},
            "is_visible_to_players": bool(self.is_visible_to_players),
            "dm_id": self.dm_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_player_dict(self) -> Dict[str, Any]:
        """Serialize the fields a party snapshot carries (no owner, no timestamps)."""
        data = self.to_dict()
        for key in ("dm_id", "created_at", "updated_at"):
            data.pop(key)
        return data

    def __repr__(self) -> str:
        return (
            f"<MapElement(id={self.id}, map_id={self.map_id}, "
            f"type='{self.element_type}', visible={self.is_visible_to_players})>"
        )
