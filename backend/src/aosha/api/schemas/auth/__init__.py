"""Auth schema exports."""

from aosha.api.schemas.auth.login_request import LoginRequest
from aosha.api.schemas.auth.login_response import LoginResponse
from aosha.api.schemas.auth.user_response import UserResponse

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "UserResponse",
]
