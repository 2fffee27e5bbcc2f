"""FastAPI dependencies resolving the caller from a bearer token."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from aosha.auth.tokens import InvalidTokenError, verify_access_token
from aosha.models.identity import Identity

security = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Identity:
    """Verify the bearer token and return the caller's identity."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, no token provided",
        )
    try:
        return verify_access_token(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed",
        )


async def require_dm(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Allow only DM callers."""
    if not identity.is_dm:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. User role '{identity.role.value}' is not authorized for this resource.",
        )
    return identity
