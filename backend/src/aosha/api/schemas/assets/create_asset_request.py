"""Schema for asset registration request."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class CreateAssetRequest(BaseModel):
    """Metadata for a file already placed in upload storage."""

    filename_original: str = Field(..., min_length=1, max_length=255)
    filepath: str = Field(..., min_length=1)
    mimetype: str = Field(..., min_length=1)
    filesize: int = Field(..., ge=0)
    description: Optional[str] = None
    visibility_scope: Literal["dm_only", "party_wide"] = "dm_only"
