"""Request identity: resolve the caller from the gateway-provided user id.

Token validation happens upstream; requests reaching this service carry the
authenticated user's id in the ``X-User-Id`` header.
"""

import structlog
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from finratio.core.database import get_db
from finratio.models.user import User

logger = structlog.get_logger()


async def get_current_user(
    x_user_id: int | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """FastAPI dependency: return the active local user named by ``X-User-Id``."""
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )

    result = await db.execute(
        select(User).where(
            User.id == x_user_id,
            User.is_active.is_(True),
            User.deleted_at.is_(None),
        )
    )
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("Rejected request for unknown user", user_id=x_user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown or inactive user",
        )
    return user
