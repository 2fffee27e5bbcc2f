"""Schema for login request."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    # matched exactly against the stored address
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
