"""Login and current-user endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from aosha.api.schemas.auth import LoginRequest, LoginResponse, UserResponse
from aosha.auth.dependencies import get_current_identity
from aosha.auth.passwords import verify_password
from aosha.auth.tokens import create_access_token
from aosha.infra.storage.user_repository import UserRepository
from aosha.models.identity import Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_user_repository() -> UserRepository:
    return UserRepository()


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
) -> LoginResponse:
    user = await users.get_by_email(req.email)
    if user is None or not verify_password(req.password, user.password_hash):
        logger.info("[auth] Failed login for %s", req.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")

    token = create_access_token(user.id, user.username, user.role)
    logger.info("[auth] %s logged in (%s)", user.username, user.role)
    return LoginResponse(
        message="Login successful!",
        token=token,
        user=UserResponse.from_model(user),
    )


@router.get("/me", response_model=UserResponse)
async def read_current_user(
    identity: Identity = Depends(get_current_identity),
    users: UserRepository = Depends(get_user_repository),
) -> UserResponse:
    user = await users.get_by_id(identity.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return UserResponse.from_model(user)
