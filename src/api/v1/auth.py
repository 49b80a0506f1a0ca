"""
Authentication endpoints.
"""

from fastapi import APIRouter, HTTPException, Request, status

from src.api.deps import DbSession, CurrentUser, get_client_ip, get_user_agent
from src.schemas.auth import UserLogin, UserResponse, TokenResponse
from src.kernel.identity.identity_service import IdentityService

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    data: UserLogin,
    db: DbSession,
):
    """
    Authenticate user and return a bearer token.
    """
    identity_service = IdentityService(db)

    result = await identity_service.authenticate(
        email=data.email,
        password=data.password,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )

    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    user, token, expires_in = result

    return TokenResponse(
        access_token=token,
        expires_in=expires_in,
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser):
    """Get the current user's profile."""
    return UserResponse.model_validate(user)
