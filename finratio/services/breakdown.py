"""Conceptual sums shown next to an evaluation (liquid assets, net worth, ...).

Display only. Groups overlap on purpose (an invested asset is also a
non-liquid asset), so these figures must never feed the ratio math.
"""

from collections.abc import Iterable, Mapping

from finratio.models.transaction import Transaction
from finratio.services.ratio_catalog import SUBCATEGORY_GROUPS

CONCEPT_KEYS = (
    "liquid", "nonLiquid", "liabilities", "income", "expense", "savings",
    "debtPayments", "deductions", "invested", "totalAssets", "netWorth", "netIncome",
)

# Ratio code -> [(label, concept key)]
BREAKDOWN_LABELS: dict[str, list[tuple[str, str]]] = {
    "LIQUIDITY_RATIO": [
        ("Aset Likuid", "liquid"),
        ("Pengeluaran Bulanan", "expense"),
    ],
    "LIQUID_ASSETS_TO_NET_WORTH_RATIO": [
        ("Aset Likuid", "liquid"),
        ("Total Kekayaan Bersih", "netWorth"),
    ],
    "DEBT_TO_ASSET_RATIO": [
        ("Total Utang", "liabilities"),
        ("Total Aset", "totalAssets"),
    ],
    "SAVING_RATIO": [
        ("Total Tabungan", "savings"),
        ("Penghasilan Kotor", "income"),
    ],
    "DEBT_SERVICE_RATIO": [
        ("Total Pembayaran Utang", "debtPayments"),
        ("Penghasilan Bersih", "netIncome"),
    ],
    "INVESTMENT_ASSETS_TO_NET_WORTH_RATIO": [
        ("Total Aset Diinvestasikan", "invested"),
        ("Total Kekayaan Bersih", "netWorth"),
    ],
    "SOLVENCY_RATIO": [
        ("Total Kekayaan Bersih", "netWorth"),
        ("Total Aset", "totalAssets"),
    ],
}


def compute_conceptual_sums(
    transactions: Iterable[Transaction],
    stock_balances: Mapping[str, float] | None = None,
) -> dict[str, float]:
    """Bucket signed amounts by subcategory name into every matching concept.

    ``stock_balances`` maps stock subcategory names to their balance at the
    window end. Those subcategories contribute that balance instead of their
    in-window entries, matching how the ratio numerator and denominator value
    them. Everything else is summed from ``transactions``.
    """
    stock_balances = stock_balances or {}
    membership: dict[str, list[str]] = {}
    for concept, names in SUBCATEGORY_GROUPS.items():
        for name in names:
            membership.setdefault(name, []).append(concept)

    sums = {key: 0.0 for key in CONCEPT_KEYS}
    for txn in transactions:
        if txn.subcategory.name in stock_balances:
            continue
        for concept in membership.get(txn.subcategory.name, []):
            sums[concept] += float(txn.amount)
    for name, balance in stock_balances.items():
        for concept in membership.get(name, []):
            sums[concept] += float(balance)

    sums["totalAssets"] = sums["liquid"] + sums["nonLiquid"]
    sums["netWorth"] = sums["totalAssets"] - sums["liabilities"]
    sums["netIncome"] = sums["income"] - sums["deductions"]
    return sums


def breakdown_components(ratio_code: str, sums: dict[str, float]) -> list[dict]:
    """Labelled figures for one ratio; every concept for an unknown code."""
    labels = BREAKDOWN_LABELS.get(ratio_code)
    if labels is None:
        return [{"name": key, "value": round(sums[key], 2)} for key in CONCEPT_KEYS]
    return [{"name": label, "value": round(sums[key], 2)} for label, key in labels]
