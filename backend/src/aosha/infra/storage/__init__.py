"""Storage repositories."""

from aosha.infra.storage.asset_repository import AssetRepository
from aosha.infra.storage.errors import (
    AssetNotFoundError,
    ElementNotFoundError,
    MapNotFoundError,
)
from aosha.infra.storage.map_repository import MapRepository
from aosha.infra.storage.user_repository import UserRepository

__all__ = [
    "AssetNotFoundError",
    "AssetRepository",
    "ElementNotFoundError",
    "MapNotFoundError",
    "MapRepository",
    "UserRepository",
]
