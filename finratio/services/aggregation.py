"""Aggregation engine: turns transactions into numerator/denominator totals.

Each component is valued according to the nature of its account type:

- STOCK (asset, liability, equity): running balance of every transaction up
  to the window's end date, however old. A bank account is not reset to zero
  at the start of an evaluation window.
- FLOW (income, expense): sum of the transactions inside the window only.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from finratio.models.category import AccountNature
from finratio.models.ratio import Side
from finratio.models.transaction import Transaction
from finratio.services.ratio_catalog import ComponentDefinition, RatioDefinition
from finratio.services.transaction_service import TransactionService


class AggregationEngine:
    def __init__(self, transactions: TransactionService):
        self.transactions = transactions

    async def compute_side_total(
        self,
        user_id: int,
        components: Iterable[ComponentDefinition],
        side: Side,
        start_date: date,
        end_date: date,
        transactions_in_window: list[Transaction],
    ) -> float:
        total = Decimal("0")
        for component in components:
            if component.side != side:
                continue
            if component.nature is AccountNature.STOCK:
                subtotal = await self.transactions.find_balance_as_of(
                    user_id, component.subcategory_id, end_date
                )
            else:
                subtotal = sum(
                    (
                        t.amount
                        for t in transactions_in_window
                        if t.subcategory_id == component.subcategory_id
                        and start_date <= t.date <= end_date
                    ),
                    Decimal("0"),
                )
            total += subtotal * component.sign
        return float(total)

    async def compute_fraction(
        self,
        user_id: int,
        ratio: RatioDefinition,
        start_date: date,
        end_date: date,
        transactions_in_window: list[Transaction],
    ) -> tuple[float, float]:
        """Return ``(numerator, denominator)`` for one ratio."""
        numerator = await self.compute_side_total(
            user_id, ratio.components, Side.NUMERATOR, start_date, end_date, transactions_in_window
        )
        denominator = await self.compute_side_total(
            user_id, ratio.components, Side.DENOMINATOR, start_date, end_date, transactions_in_window
        )
        return numerator, denominator
