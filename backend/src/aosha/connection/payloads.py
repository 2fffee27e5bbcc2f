"""Pydantic models for inbound Socket.IO payloads.

Field aliases match the camelCase keys sent by the web client.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from aosha.models.map_db import ElementType


class SocketPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ChatMessagePayload(SocketPayload):
    text: StrictStr


class DiceRollPayload(SocketPayload):
    roll_string: StrictStr = Field(alias="rollString")
    result: Any = None
    details: Any = None


class WhisperPayload(SocketPayload):
    to_username: StrictStr = Field(alias="toUsername", min_length=1)
    text: StrictStr


class MapPayload(SocketPayload):
    map_id: StrictInt = Field(alias="mapId", gt=0)


class FogUpdateRequest(MapPayload):
    new_fog_data_json: Union[List[Any], StrictStr] = Field(alias="newFogDataJson")

    @field_validator("new_fog_data_json")
    @classmethod
    def _must_be_array(cls, value):
        if isinstance(value, str):
            try:
                decoded = json.loads(value)
            except ValueError:
                raise ValueError("newFogDataJson is not valid JSON")
            if not isinstance(decoded, list):
                raise ValueError("newFogDataJson must encode a JSON array")
        return value

    def fog_document(self) -> str:
        """The fog document as JSON text; string input is kept byte-for-byte."""
        if isinstance(self.new_fog_data_json, str):
            return self.new_fog_data_json
        return json.dumps(self.new_fog_data_json)


class ElementUpsertRequest(MapPayload):
    element_data: Dict[str, Any] = Field(alias="elementData")

    @field_validator("element_data")
    @classmethod
    def _check_element(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        element_id = value.get("id")
        if element_id is None or element_id == "" or isinstance(element_id, bool):
            raise ValueError("elementData.id is required")
        if value.get("element_type") not in ElementType.ALL:
            raise ValueError(f"elementData.element_type must be one of {', '.join(ElementType.ALL)}")
        return value


class ElementDeleteRequest(MapPayload):
    element_id: Union[StrictInt, StrictStr] = Field(alias="elementId")

    @field_validator("element_id")
    @classmethod
    def _not_blank(cls, value):
        if isinstance(value, str) and not value.strip():
            raise ValueError("elementId must not be empty")
        return value


class SetActiveMapRequest(MapPayload):
    pass
