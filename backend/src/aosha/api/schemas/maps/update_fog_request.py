"""Schema for fog document replacement request."""

from pydantic import BaseModel


class UpdateFogRequest(BaseModel):
    # JSON text of an array; checked by the route so bad input answers 400
    fog_data_json: str
