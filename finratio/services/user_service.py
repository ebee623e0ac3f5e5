"""User account service: deletion cascade."""

from datetime import datetime, timezone

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from finratio.models.evaluation import EvaluationResult
from finratio.models.transaction import Transaction
from finratio.models.user import User

logger = structlog.get_logger()


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def delete_user(self, user: User) -> dict:
        """Soft-delete a user together with their transactions and evaluations.

        All statements run in the caller's transaction; nothing is committed
        here, so a failure part-way leaves no partial cascade behind.
        """
        now = datetime.now(timezone.utc)

        txn_result = await self.db.execute(
            update(Transaction)
            .where(Transaction.user_id == user.id, Transaction.deleted_at.is_(None))
            .values(deleted_at=now)
            .execution_options(synchronize_session=False)
        )
        eval_result = await self.db.execute(
            update(EvaluationResult)
            .where(EvaluationResult.user_id == user.id, EvaluationResult.deleted_at.is_(None))
            .values(deleted_at=now)
            .execution_options(synchronize_session=False)
        )
        user.deleted_at = now
        user.is_active = False
        await self.db.flush()

        counts = {
            "transactions": txn_result.rowcount,
            "evaluation_results": eval_result.rowcount,
        }
        logger.info("User soft-deleted", user_id=user.id, **counts)
        return counts
