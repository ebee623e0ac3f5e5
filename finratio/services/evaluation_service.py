"""Evaluation service: calculate, store and explain financial ratio snapshots."""

from datetime import date, datetime, timezone

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from finratio.config import settings
from finratio.core.exceptions import NotFoundError, ValidationError
from finratio.models.category import AccountNature
from finratio.models.evaluation import EvaluationResult
from finratio.schemas.evaluation import EvaluationDetail, EvaluationSnapshot, RatioEvaluationResult
from finratio.services.aggregation import AggregationEngine
from finratio.services.breakdown import breakdown_components, compute_conceptual_sums
from finratio.services.category_service import CategoryHierarchyService
from finratio.services.evaluation_store import EvaluationStore
from finratio.services.ratio_catalog import SUBCATEGORY_GROUPS, RatioCatalogService
from finratio.services.ratio_math import (
    calculate_value,
    clamp_for_storage,
    classify_status,
    ideal_range_display,
)
from finratio.services.transaction_service import TransactionService

logger = structlog.get_logger()


def validate_window(start_date: date, end_date: date) -> int:
    """Check an evaluation window and return its inclusive length in days."""
    if start_date is None or end_date is None:
        raise ValidationError("Start date and end date must be provided.")
    if end_date < start_date:
        raise ValidationError("End date cannot be before start date.")

    days = (end_date - start_date).days + 1
    if days > settings.evaluation_max_window_days:
        raise ValidationError(
            f"Evaluation window cannot exceed {settings.evaluation_max_window_days} days (got {days})."
        )
    if days < settings.evaluation_min_window_days:
        logger.warning(
            "Short evaluation window, flow ratios may be noisy",
            days=days,
            recommended_min=settings.evaluation_min_window_days,
        )
    return days


class EvaluationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.transactions = TransactionService(db)
        self.hierarchy = CategoryHierarchyService(db)
        self.catalog = RatioCatalogService(db)
        self.store = EvaluationStore(db)
        self.engine = AggregationEngine(self.transactions)

    async def calculate_and_store_evaluations(
        self, user_id: int, start_date: date, end_date: date
    ) -> list[RatioEvaluationResult]:
        """Evaluate every active ratio over the window and upsert one snapshot each.

        Ratios run one after another. A store failure on one ratio is logged and
        that ratio is left out of the result; the others still complete.
        """
        validate_window(start_date, end_date)

        transactions = await self.transactions.find_transactions(user_id, start_date, end_date)
        if not transactions:
            logger.warning(
                "No transactions in evaluation window, flow ratios will be empty",
                user_id=user_id,
                start_date=str(start_date),
                end_date=str(end_date),
            )

        ratios = await self.catalog.load_active_ratios()
        if not ratios:
            logger.warning("No active ratio definitions found", user_id=user_id)

        results: list[RatioEvaluationResult] = []
        for ratio in ratios:
            try:
                async with self.db.begin_nested():
                    numerator, denominator = await self.engine.compute_fraction(
                        user_id, ratio, start_date, end_date, transactions
                    )
                    raw_value = calculate_value(ratio, numerator, denominator)
                    status = classify_status(raw_value, ratio)
                    value, is_unbounded = clamp_for_storage(raw_value, status)

                    await self.store.upsert(
                        user_id=user_id,
                        ratio_id=ratio.id,
                        start_date=start_date,
                        end_date=end_date,
                        value=value,
                        status=status,
                        is_unbounded=is_unbounded,
                        calculated_at=datetime.now(timezone.utc),
                    )
            except SQLAlchemyError:
                logger.exception("Ratio evaluation failed, skipping", user_id=user_id, ratio=ratio.code)
                continue

            logger.debug(
                "Ratio evaluated",
                ratio=ratio.code,
                numerator=numerator,
                denominator=denominator,
                value=value,
                status=status.value,
            )
            results.append(RatioEvaluationResult(
                ratio_id=ratio.id,
                ratio_code=ratio.code,
                ratio_title=ratio.title,
                value=value,
                status=status,
                is_unbounded=is_unbounded,
                ideal_range_display=ideal_range_display(ratio),
            ))

        logger.info(
            "Evaluations calculated and stored",
            user_id=user_id,
            start_date=str(start_date),
            end_date=str(end_date),
            count=len(results),
        )
        return results

    async def get_evaluation_history(
        self,
        user_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[EvaluationSnapshot]:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date cannot be before start date.")
        snapshots = await self.store.find_history(user_id, start_date, end_date)
        return [self._to_snapshot(s) for s in snapshots]

    async def get_evaluation_detail(self, evaluation_id: int, user_id: int) -> EvaluationDetail:
        """A stored snapshot plus the figures behind it.

        Numerator and denominator are recomputed with the same engine over the
        snapshot's own window, so they agree with the stored value as long as
        the underlying transactions have not changed since.
        """
        snapshot = await self.store.find_by_id(evaluation_id, user_id)
        if snapshot is None:
            raise NotFoundError("Evaluation result")
        ratio = await self.catalog.load_ratio(snapshot.ratio_id)
        if ratio is None:
            raise NotFoundError("Ratio")

        transactions = await self.transactions.find_transactions(
            user_id, snapshot.start_date, snapshot.end_date
        )
        numerator, denominator = await self.engine.compute_fraction(
            user_id, ratio, snapshot.start_date, snapshot.end_date, transactions
        )
        stock_balances = await self._stock_balances(user_id, snapshot.end_date)
        sums = compute_conceptual_sums(transactions, stock_balances)

        return EvaluationDetail(
            **self._to_snapshot(snapshot).model_dump(),
            ideal_range_display=ideal_range_display(ratio),
            breakdown_components=breakdown_components(ratio.code, sums),
            calculated_numerator=numerator,
            calculated_denominator=denominator,
        )

    async def _stock_balances(self, user_id: int, as_of: date) -> dict[str, float]:
        """Balance at ``as_of`` of every stock subcategory used by the breakdown, keyed by name."""
        names = {name for group in SUBCATEGORY_GROUPS.values() for name in group}
        stock = [
            s for s in await self.hierarchy.find_subcategories_by_name(names)
            if s.category.account_type.nature is AccountNature.STOCK
        ]
        balances = await self.transactions.find_balances_as_of(user_id, [s.id for s in stock], as_of)

        by_name: dict[str, float] = {}
        for sub in stock:
            by_name[sub.name] = by_name.get(sub.name, 0.0) + float(balances.get(sub.id, 0))
        return by_name

    @staticmethod
    def _to_snapshot(result: EvaluationResult) -> EvaluationSnapshot:
        return EvaluationSnapshot(
            id=result.id,
            ratio_id=result.ratio_id,
            ratio_code=result.ratio.code,
            ratio_title=result.ratio.title,
            start_date=result.start_date,
            end_date=result.end_date,
            value=float(result.value),
            status=result.status,
            is_unbounded=result.is_unbounded,
            calculated_at=result.calculated_at,
        )
