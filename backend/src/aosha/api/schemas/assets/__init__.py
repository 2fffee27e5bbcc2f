"""Asset schema exports."""

from aosha.api.schemas.assets.create_asset_request import CreateAssetRequest
from aosha.api.schemas.assets.asset_response import AssetResponse

__all__ = [
    "CreateAssetRequest",
    "AssetResponse",
]
