"""User account API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from finratio.api.deps import get_current_user, get_db
from finratio.models.user import User
from finratio.services.user_service import UserService

router = APIRouter()


@router.delete("/me", status_code=204)
async def delete_account(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete the current user with their transactions and evaluations."""
    service = UserService(db)
    await service.delete_user(current_user)
