"""Schema for login response."""

from pydantic import BaseModel

from aosha.api.schemas.auth.user_response import UserResponse


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserResponse
