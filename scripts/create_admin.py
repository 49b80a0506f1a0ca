"""Create a site administrator account.

Usage: python scripts/create_admin.py admin@example.com 'Password123' 'Site Admin'
"""
import asyncio
import sys
sys.path.insert(0, ".")

from src.database import async_session_maker, init_db, close_db
from src.kernel.identity.identity_service import IdentityService
from src.kernel.models.user import UserRole


async def main(email: str, password: str, full_name: str) -> int:
    await init_db()
    try:
        async with async_session_maker() as session:
            try:
                user = await IdentityService(session).create_user(
                    email=email,
                    password=password,
                    full_name=full_name,
                    role=UserRole.ADMIN,
                )
            except ValueError as e:
                print(f"Not created: {e}")
                return 1
            await session.commit()
            print(f"Created admin {user.email} ({user.id})")
            return 0
    finally:
        await close_db()


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(*sys.argv[1:])))
