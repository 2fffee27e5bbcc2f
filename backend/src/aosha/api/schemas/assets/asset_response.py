"""Schema for asset response."""

from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from aosha.models.asset_db import Asset


class AssetResponse(BaseModel):
    id: int
    filename_original: str
    filename_stored: str
    filepath: str
    url: str
    mimetype: str
    filesize: int
    description: Optional[str]
    uploader_user_id: Optional[int]
    visibility_scope: str
    created_at: Optional[str]

    @staticmethod
    def from_model(asset: "Asset", uploads_url_prefix: str) -> "AssetResponse":
        return AssetResponse(
            id=asset.id,
            filename_original=asset.filename_original,
            filename_stored=asset.filename_stored,
            filepath=asset.filepath,
            url=f"{uploads_url_prefix}/{asset.filepath}",
            mimetype=asset.mimetype,
            filesize=asset.filesize,
            description=asset.description,
            uploader_user_id=asset.uploader_user_id,
            visibility_scope=asset.visibility_scope,
            created_at=asset.created_at.isoformat() if asset.created_at else None,
        )
