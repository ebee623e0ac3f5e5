"""Transaction API routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from finratio.api.deps import get_current_user, get_db
from finratio.models.user import User
from finratio.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate
from finratio.services.category_service import CategoryHierarchyService
from finratio.services.transaction_service import TransactionService

router = APIRouter()


@router.get("", response_model=list[TransactionResponse])
async def list_transactions(
    start_date: date | None = None,
    end_date: date | None = None,
    subcategory_id: int | None = None,
    is_bookmarked: bool | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the user's transactions, newest first."""
    service = TransactionService(db)
    return await service.list_transactions(
        current_user,
        start_date=start_date,
        end_date=end_date,
        subcategory_id=subcategory_id,
        is_bookmarked=is_bookmarked,
    )


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    data: TransactionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Record a transaction on a subcategory."""
    service = TransactionService(db)
    return await service.create_transaction(data, current_user)


@router.get("/balance-at-date")
async def get_balance_at_date(
    subcategory_id: int,
    date_at: date = Query(..., alias="date", description="Date to compute balance at (inclusive)"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Running balance of one subcategory: every transaction up to the date."""
    await CategoryHierarchyService(db).get_subcategory(subcategory_id)
    service = TransactionService(db)
    balance = await service.find_balance_as_of(current_user.id, subcategory_id, date_at)
    return {"date": date_at.isoformat(), "subcategory_id": subcategory_id, "balance": float(balance)}


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific transaction."""
    service = TransactionService(db)
    return await service.get_transaction(transaction_id, current_user)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a transaction (amount, date, subcategory, description, bookmark)."""
    service = TransactionService(db)
    return await service.update_transaction(transaction_id, data, current_user)


@router.delete("/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete a transaction."""
    service = TransactionService(db)
    await service.delete_transaction(transaction_id, current_user)
