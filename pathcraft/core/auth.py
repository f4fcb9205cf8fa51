"""Authentication utilities.

Authentication is handled outside this service. Until it is wired in,
every request resolves to the default guest user (id=1), and the guest
user row is created at startup so foreign keys hold.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pathcraft.core.logging import get_logger
from pathcraft.models.user import User

logger = get_logger(__name__)

# Default guest user - used when no authentication is required
DEFAULT_USER_ID = 1
DEFAULT_USERNAME = "guest"


def get_auth_user(request: Request) -> int:
    """Get the current authenticated user ID for HTTP requests.

    Returns the default user ID (1). A real implementation would read the
    session cookie set by the login flow.
    """
    return DEFAULT_USER_ID


async def ensure_default_user(db: AsyncSession) -> User:
    """Create the guest user if it does not exist yet."""
    user = await db.get(User, DEFAULT_USER_ID)
    if user is None:
        user = User(id=DEFAULT_USER_ID, username=DEFAULT_USERNAME)
        db.add(user)
        await db.flush()
        logger.info("Default user created", user_id=DEFAULT_USER_ID)
    return user


# Type alias for FastAPI dependency
CurrentUserDep = Annotated[int, Depends(get_auth_user)]
