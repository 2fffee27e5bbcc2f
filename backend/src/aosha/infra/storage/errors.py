"""Lookup errors raised by the storage repositories."""


class MapNotFoundError(LookupError):
    """Map does not exist or is not owned by the requesting DM."""

    def __init__(self, map_id, message: str = ""):
        self.map_id = map_id
        super().__init__(message or f"Map {map_id} not found or DM does not own it.")


class ElementNotFoundError(LookupError):
    """Element does not exist on the given map."""

    def __init__(self, map_id, element_id):
        self.map_id = map_id
        self.element_id = element_id
        super().__init__(f"Element {element_id} not found on map {map_id}.")


class AssetNotFoundError(LookupError):
    """Referenced asset does not exist."""

    def __init__(self, asset_id):
        self.asset_id = asset_id
        super().__init__(f"Asset with ID {asset_id} not found.")
