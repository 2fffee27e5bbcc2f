"""Schema for user response."""

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from aosha.auth.models import User


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str

    @staticmethod
    def from_model(user: "User") -> "UserResponse":
        return UserResponse(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
        )
