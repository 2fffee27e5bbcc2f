"""Aosha models package - re-exports for public API"""

from aosha.auth.models import User, UserRole
from aosha.models.asset_db import Asset, AssetVisibility
from aosha.models.identity import Identity
from aosha.models.map_db import (
    EMPTY_FOG_DOCUMENT,
    ElementType,
    GameMap,
    MapElement,
    MapFogData,
)
from aosha.models.map_snapshot import MapSnapshot

__all__ = [
    # Accounts
    "User",
    "UserRole",
    "Identity",
    # Assets
    "Asset",
    "AssetVisibility",
    # Maps
    "EMPTY_FOG_DOCUMENT",
    "ElementType",
    "GameMap",
    "MapElement",
    "MapFogData",
    "MapSnapshot",
]
