"""Evaluation store: persisted ratio snapshots keyed by (user, ratio, window)."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from finratio.models.evaluation import EvaluationResult, EvaluationStatus

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_WINDOW_KEY = ("user_id", "ratio_id", "start_date", "end_date")


class EvaluationStore:
    def __init__(self, db: AsyncSession):
        self.db = db
        dialect = db.get_bind().dialect.name
        self._insert = _INSERT_BY_DIALECT.get(dialect)
        if self._insert is None:
            raise NotImplementedError(f"Evaluation upsert is not supported on {dialect}")

    async def upsert(
        self,
        user_id: int,
        ratio_id: int,
        start_date: date,
        end_date: date,
        value: float,
        status: EvaluationStatus,
        is_unbounded: bool,
        calculated_at: datetime,
    ) -> None:
        """Insert the snapshot or overwrite the one already stored for this window.

        A single ``INSERT ... ON CONFLICT DO UPDATE`` so that two concurrent
        calculations of the same window cannot both insert. A soft-deleted
        snapshot is revived.
        """
        stmt = self._insert(EvaluationResult).values(
            user_id=user_id,
            ratio_id=ratio_id,
            start_date=start_date,
            end_date=end_date,
            value=Decimal(str(value)),
            status=status,
            is_unbounded=is_unbounded,
            calculated_at=calculated_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=list(_WINDOW_KEY),
            set_={
                "value": stmt.excluded.value,
                "status": stmt.excluded.status,
                "is_unbounded": stmt.excluded.is_unbounded,
                "calculated_at": stmt.excluded.calculated_at,
                "deleted_at": None,
                "updated_at": func.now(),
            },
        )
        await self.db.execute(stmt)

    async def find_history(
        self,
        user_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[EvaluationResult]:
        """Live snapshots whose window overlaps ``[start_date, end_date]``.

        Either bound may be omitted. Newest windows first, then most recently
        calculated.
        """
        query = (
            select(EvaluationResult)
            .where(
                EvaluationResult.user_id == user_id,
                EvaluationResult.deleted_at.is_(None),
            )
            .options(selectinload(EvaluationResult.ratio))
            .execution_options(populate_existing=True)
        )
        if start_date:
            query = query.where(EvaluationResult.end_date >= start_date)
        if end_date:
            query = query.where(EvaluationResult.start_date <= end_date)

        result = await self.db.execute(
            query.order_by(
                EvaluationResult.start_date.desc(),
                EvaluationResult.calculated_at.desc(),
                EvaluationResult.id,
            )
        )
        return list(result.scalars().all())

    async def find_by_id(self, evaluation_id: int, user_id: int) -> EvaluationResult | None:
        """A live snapshot owned by ``user_id``, or None."""
        result = await self.db.execute(
            select(EvaluationResult)
            .where(
                EvaluationResult.id == evaluation_id,
                EvaluationResult.user_id == user_id,
                EvaluationResult.deleted_at.is_(None),
            )
            .options(selectinload(EvaluationResult.ratio))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
