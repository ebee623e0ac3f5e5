"""Category hierarchy API routes (read-only)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from finratio.api.deps import get_current_user, get_db
from finratio.models.user import User
from finratio.schemas.category import (
    AccountTypeNode,
    AccountTypeResponse,
    CategoryResponse,
    SubcategoryResponse,
)
from finratio.services.category_service import CategoryHierarchyService

router = APIRouter()


@router.get("/tree", response_model=list[AccountTypeNode])
async def get_tree(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Full account type -> category -> subcategory tree."""
    service = CategoryHierarchyService(db)
    return await service.get_tree()


@router.get("/account-types", response_model=list[AccountTypeResponse])
async def list_account_types(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = CategoryHierarchyService(db)
    return await service.list_account_types()


@router.get("/account-types/{account_type_id}/categories", response_model=list[CategoryResponse])
async def list_categories(
    account_type_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = CategoryHierarchyService(db)
    return await service.list_categories(account_type_id)


@router.get("/{category_id}/subcategories", response_model=list[SubcategoryResponse])
async def list_subcategories(
    category_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = CategoryHierarchyService(db)
    return await service.list_subcategories(category_id)
