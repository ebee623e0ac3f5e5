"""Conceptual breakdown projection."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from finratio.services.breakdown import CONCEPT_KEYS, breakdown_components, compute_conceptual_sums


def entry(subcategory: str, amount) -> SimpleNamespace:
    return SimpleNamespace(subcategory=SimpleNamespace(name=subcategory), amount=Decimal(str(amount)))


def test_in_window_entries_when_no_balances():
    sums = compute_conceptual_sums([entry("Gaji", 5000), entry("Pajak", 500), entry("Saham", 300)])

    assert sums["income"] == pytest.approx(5000)
    assert sums["netIncome"] == pytest.approx(4500)
    # Saham counts as both non-liquid and invested
    assert sums["nonLiquid"] == pytest.approx(300)
    assert sums["invested"] == pytest.approx(300)


def test_stock_balances_replace_window_entries():
    transactions = [entry("Uang Tunai", 200), entry("Makanan", 80), entry("Pinjaman", 50)]
    balances = {"Uang Tunai": 1200.0, "Pinjaman": 400.0, "Rumah": 0.0}

    sums = compute_conceptual_sums(transactions, balances)

    assert sums["liquid"] == pytest.approx(1200)
    assert sums["liabilities"] == pytest.approx(400)
    assert sums["expense"] == pytest.approx(80)
    assert sums["totalAssets"] == pytest.approx(1200)
    assert sums["netWorth"] == pytest.approx(800)


def test_unknown_code_lists_every_concept():
    components = breakdown_components("CUSTOM_RATIO", compute_conceptual_sums([]))
    assert [c["name"] for c in components] == list(CONCEPT_KEYS)
