"""
FastAPI dependencies for authentication, access checks and database sessions.
"""

import uuid
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.engines.files.registry import ServingRegistry, serving_registry
from src.engines.files.storage import FileStorage
from src.kernel.identity.identity_service import IdentityService
from src.kernel.identity.jwt import verify_access_token
from src.kernel.models.user import User
from src.kernel.permissions.access_gate import AccessGate


# Missing credentials are not an error here: some files are public
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user_optional(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> Optional[User]:
    """Get current user if authenticated, None otherwise."""
    if not credentials:
        return None

    payload = verify_access_token(credentials.credentials)
    if not payload:
        return None

    identity_service = IdentityService(db)
    user = await identity_service.get_user_by_id(uuid.UUID(payload.sub))

    if not user or not user.is_active:
        return None

    return user


OptionalUser = Annotated[Optional[User], Depends(get_current_user_optional)]


async def get_current_user(user: OptionalUser) -> User:
    """Get current authenticated user or raise 401."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> User:
    """Require the current user to be a site admin."""
    if not user.is_site_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


AdminUser = Annotated[User, Depends(require_admin)]


def get_access_gate(db: DbSession, user: OptionalUser) -> AccessGate:
    """Login predicates bound to this request's user."""
    return AccessGate(db, user)


Gate = Annotated[AccessGate, Depends(get_access_gate)]


def get_file_storage(db: DbSession) -> FileStorage:
    return FileStorage(db)


Storage = Annotated[FileStorage, Depends(get_file_storage)]


def get_serving_registry() -> ServingRegistry:
    return serving_registry


Registry = Annotated[ServingRegistry, Depends(get_serving_registry)]


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def get_user_agent(request: Request) -> Optional[str]:
    """Extract user agent from request."""
    return request.headers.get("User-Agent")
