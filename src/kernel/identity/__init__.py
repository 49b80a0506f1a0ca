"""
Identity Core - Authentication and user management.
"""

from src.kernel.identity.password import PasswordHasher, verify_password, hash_password
from src.kernel.identity.jwt import (
    JWTManager,
    AccessTokenPayload,
    verify_access_token,
)
from src.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "JWTManager",
    "AccessTokenPayload",
    "verify_access_token",
    "IdentityService",
]
