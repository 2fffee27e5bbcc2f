"""
SQLAlchemy models for local account authentication
"""

from enum import Enum

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from aosha.db.base import BaseModel


class UserRole(str, Enum):
    """Campaign roles. Values are the wire strings clients see."""
    DM = "DM"
    PLAYER = "Player"


class User(BaseModel):
    """User account. One DM runs the campaign, everyone else is a Player."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('Player', 'DM')", name="check_user_role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)

    @property
    def is_dm(self) -> bool:
        return self.role == UserRole.DM.value

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
