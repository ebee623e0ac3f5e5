"""Transaction store: CRUD plus the filtered reads the evaluation engine consumes."""

from datetime import date, datetime, timezone
from decimal import Decimal

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from finratio.core.exceptions import ForbiddenError, NotFoundError
from finratio.models.category import Category, Subcategory
from finratio.models.transaction import Transaction
from finratio.models.user import User
from finratio.schemas.transaction import TransactionCreate, TransactionUpdate
from finratio.services.category_service import CategoryHierarchyService

logger = structlog.get_logger()


def _with_hierarchy():
    """Eager-load subcategory -> category -> account type."""
    return selectinload(Transaction.subcategory).selectinload(Subcategory.category).selectinload(Category.account_type)


class TransactionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ── Reads used by the evaluation engine ──────────

    async def find_transactions(
        self,
        user_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
        subcategory_id: int | None = None,
    ) -> list[Transaction]:
        """Non-deleted transactions of a user, each with its full hierarchy path."""
        query = (
            select(Transaction)
            .where(
                Transaction.user_id == user_id,
                Transaction.deleted_at.is_(None),
            )
            .options(_with_hierarchy())
        )
        if start_date:
            query = query.where(Transaction.date >= start_date)
        if end_date:
            query = query.where(Transaction.date <= end_date)
        if subcategory_id:
            query = query.where(Transaction.subcategory_id == subcategory_id)

        result = await self.db.execute(query.order_by(Transaction.date, Transaction.id))
        return list(result.scalars().all())

    async def find_balance_as_of(self, user_id: int, subcategory_id: int, as_of: date) -> Decimal:
        """Sum of every signed amount booked on a subcategory up to ``as_of`` (inclusive)."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(Transaction.amount), 0)).where(
                Transaction.user_id == user_id,
                Transaction.subcategory_id == subcategory_id,
                Transaction.date <= as_of,
                Transaction.deleted_at.is_(None),
            )
        )
        return Decimal(str(result.scalar() or 0))

    async def find_balances_as_of(
        self, user_id: int, subcategory_ids: list[int], as_of: date
    ) -> dict[int, Decimal]:
        """Running balance per subcategory up to ``as_of``; subcategories without entries are absent."""
        if not subcategory_ids:
            return {}
        result = await self.db.execute(
            select(Transaction.subcategory_id, func.sum(Transaction.amount))
            .where(
                Transaction.user_id == user_id,
                Transaction.subcategory_id.in_(subcategory_ids),
                Transaction.date <= as_of,
                Transaction.deleted_at.is_(None),
            )
            .group_by(Transaction.subcategory_id)
        )
        return {subcategory_id: Decimal(str(total or 0)) for subcategory_id, total in result.all()}

    # ── CRUD ─────────────────────────────────────────

    async def list_transactions(
        self,
        user: User,
        start_date: date | None = None,
        end_date: date | None = None,
        subcategory_id: int | None = None,
        is_bookmarked: bool | None = None,
    ) -> list[dict]:
        """List a user's transactions, newest first, with hierarchy names."""
        transactions = await self.find_transactions(user.id, start_date, end_date, subcategory_id)
        if is_bookmarked is not None:
            transactions = [t for t in transactions if t.is_bookmarked == is_bookmarked]
        transactions.sort(key=lambda t: (t.date, t.id), reverse=True)
        return [self._to_dict(t) for t in transactions]

    async def get_transaction(self, transaction_id: int, user: User) -> dict:
        txn = await self._get_user_transaction(transaction_id, user)
        return self._to_dict(txn)

    async def create_transaction(self, data: TransactionCreate, user: User) -> dict:
        await CategoryHierarchyService(self.db).get_subcategory(data.subcategory_id)

        txn = Transaction(
            user_id=user.id,
            subcategory_id=data.subcategory_id,
            amount=data.amount,
            date=data.date,
            description=data.description,
            is_bookmarked=data.is_bookmarked,
        )
        self.db.add(txn)
        await self.db.flush()
        logger.info("Transaction created", user_id=user.id, transaction_id=txn.id)
        return await self.get_transaction(txn.id, user)

    async def update_transaction(self, transaction_id: int, data: TransactionUpdate, user: User) -> dict:
        txn = await self._get_user_transaction(transaction_id, user)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "subcategory_id" in update_data:
            await CategoryHierarchyService(self.db).get_subcategory(update_data["subcategory_id"])

        for key, value in update_data.items():
            setattr(txn, key, value)
        await self.db.flush()
        # Reload so the response reflects a possibly new subcategory path
        self.db.expire(txn)
        return await self.get_transaction(transaction_id, user)

    async def delete_transaction(self, transaction_id: int, user: User) -> None:
        """Soft-delete: the row stays but drops out of listings and aggregation."""
        txn = await self._get_user_transaction(transaction_id, user)
        txn.deleted_at = datetime.now(timezone.utc)
        await self.db.flush()
        logger.info("Transaction deleted", user_id=user.id, transaction_id=transaction_id)

    async def _get_user_transaction(self, transaction_id: int, user: User) -> Transaction:
        """Fetch a live transaction and verify ownership."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id, Transaction.deleted_at.is_(None))
            .options(_with_hierarchy())
            .execution_options(populate_existing=True)
        )
        txn = result.scalar_one_or_none()
        if not txn:
            raise NotFoundError("Transaction")
        if txn.user_id != user.id:
            raise ForbiddenError()
        return txn

    @staticmethod
    def _to_dict(txn: Transaction) -> dict:
        subcategory = txn.subcategory
        return {
            "id": txn.id,
            "subcategory_id": txn.subcategory_id,
            "subcategory_name": subcategory.name,
            "category_name": subcategory.category.name,
            "account_type_name": subcategory.category.account_type.name,
            "amount": txn.amount,
            "date": txn.date,
            "description": txn.description,
            "is_bookmarked": txn.is_bookmarked,
            "created_at": txn.created_at,
        }
