"""SQLAlchemy model for uploaded asset metadata."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aosha.db.base import BaseModel


class AssetVisibility:
    """Constants for asset visibility scopes."""

    DM_ONLY = "dm_only"
    PARTY_WIDE = "party_wide"


class Asset(BaseModel):
    """Metadata for a file held in external storage.

    Only ``filepath`` matters to the map subsystem: it is appended to the
    uploads URL prefix to build a map's base-image URL.
    """

    __tablename__ = "assets"
    __table_args__ = (
        CheckConstraint(
            "visibility_scope IN ('dm_only', 'party_wide')",
            name="check_asset_visibility_scope",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    filename_original: Mapped[str] = mapped_column(String(255), nullable=False)
    filename_stored: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    filepath: Mapped[str] = mapped_column(String(512), nullable=False)
    mimetype: Mapped[str] = mapped_column(String(100), nullable=False)
    filesize: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    uploader_user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
    )
    visibility_scope: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AssetVisibility.DM_ONLY,
    )

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, filepath='{self.filepath}')>"
