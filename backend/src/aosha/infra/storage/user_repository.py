"""Repository for user accounts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from aosha.auth.models import User, UserRole
from aosha.auth.passwords import hash_password
from aosha.db.connection import DatabaseManager, db_manager

logger = logging.getLogger(__name__)


class UserRepository:
    """Lookup and seeding of user accounts."""

    def __init__(self, manager: Optional[DatabaseManager] = None):
        self.db_manager = manager or db_manager

    async def get_by_email(self, email: str) -> Optional[User]:
        try:
            async with self.db_manager.get_async_session() as session:
                result = await session.execute(select(User).where(User.email == email))
                return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error getting user by email: {e}")
            raise

    async def get_by_id(self, user_id: int) -> Optional[User]:
        try:
            async with self.db_manager.get_async_session() as session:
                return await session.get(User, user_id)

        except SQLAlchemyError as e:
            logger.error(f"Error getting user {user_id}: {e}")
            raise

    async def create_user(self, username: str, email: str, password: str, role: str) -> User:
        """Create a user with a bcrypt-hashed password."""
        role = UserRole(role).value
        try:
            async with self.db_manager.get_async_session() as session:
                user = User(
                    username=username,
                    email=email,
                    password_hash=hash_password(password),
                    role=role,
                )
                session.add(user)
                await session.commit()
                await session.refresh(user)
                logger.info(f"Created user {user.id} ({user.username}, {user.role})")
                return user

        except SQLAlchemyError as e:
            logger.error(f"Error creating user {username}: {e}")
            raise

    async def seed_users(self, users: Iterable[Dict[str, Any]]) -> List[User]:
        """Create the given users unless one with the same email exists.

        Returns:
            The users that were newly created
        """
        created = []
        for entry in users:
            if await self.get_by_email(entry["email"]):
                continue
            created.append(
                await self.create_user(
                    username=entry["username"],
                    email=entry["email"],
                    password=entry["password"],
                    role=entry.get("role", UserRole.PLAYER.value),
                )
            )
        if created:
            logger.info(f"{len(created)} predefined users seeded")
        return created


def load_seed_file(path: str) -> List[Dict[str, Any]]:
    """Read a JSON list of ``{username, email, password, role}`` entries."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a JSON list")
    return data
