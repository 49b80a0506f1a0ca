"""
Identity service for user lookup and authentication.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.kernel.models.user import User, UserRole
from src.kernel.models.event_log import EventType, EventCrud
from src.kernel.events.event_store import EventStore
from src.kernel.identity.password import hash_password, verify_password
from src.kernel.identity.jwt import JWTManager
from src.logging_config import get_logger

logger = get_logger(__name__)


class IdentityService:
    """
    Service for user identity operations.

    Handles account creation, password authentication and token issue.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.jwt_manager = JWTManager()
        self.event_store = EventStore(session)

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
        role: UserRole = UserRole.STUDENT,
    ) -> User:
        """
        Create a user account.

        Raises:
            ValueError: If email already exists
        """
        if await self.get_user_by_email(email):
            raise ValueError("Email already registered")

        user = User(
            email=email.lower().strip(),
            password_hash=hash_password(password),
            full_name=full_name.strip(),
            role=role,
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def authenticate(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[tuple[User, str, int]]:
        """
        Authenticate a user and issue an access token.

        Returns:
            Tuple of (User, access_token, expires_in_seconds), or None
        """
        user = await self.get_user_by_email(email)
        if not user or not user.is_active:
            return None

        if not verify_password(password, user.password_hash):
            logger.info("Failed login", extra={"email": email})
            return None

        role_value = UserRole(user.role).value
        token, _ = self.jwt_manager.create_access_token(
            user_id=user.id,
            email=user.email,
            role=role_value,
        )

        await self.event_store.log(
            event_type=EventType.USER_LOGGED_IN,
            entity_type="user",
            entity_id=user.id,
            user_id=user.id,
            crud=EventCrud.READ,
            payload={"method": "password"},
            ip_address=ip_address,
            user_agent=user_agent,
        )

        return user, token, self.jwt_manager.access_token_expire_minutes * 60

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        result = await self.session.execute(
            select(User).where(User.email == email.lower().strip())
        )
        return result.scalar_one_or_none()
