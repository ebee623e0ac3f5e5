"""Ratio catalog install and active-ratio loading."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from finratio.core.exceptions import CatalogError
from finratio.models import Ratio, RatioComponent, RatioPolicy, Side, Subcategory
from finratio.models.category import AccountNature
from finratio.services import ratio_catalog
from finratio.services.ratio_catalog import DEFAULT_RATIOS, RatioCatalogService


async def count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_install_is_idempotent(db, catalog):
    expected_components = sum(len(r["components"]) for r in DEFAULT_RATIOS)
    assert await count(db, Ratio) == len(DEFAULT_RATIOS)
    assert await count(db, RatioComponent) == expected_components

    await RatioCatalogService(db).install_defaults()
    await db.commit()

    assert await count(db, Ratio) == len(DEFAULT_RATIOS)
    assert await count(db, RatioComponent) == expected_components


@pytest.mark.asyncio
async def test_install_rejects_unknown_subcategory(db, monkeypatch):
    broken = [{**DEFAULT_RATIOS[0], "components": [("Tidak Ada", Side.NUMERATOR, 1)]}]
    monkeypatch.setattr(ratio_catalog, "DEFAULT_RATIOS", broken)

    with pytest.raises(CatalogError):
        await RatioCatalogService(db).install_defaults()


@pytest.mark.asyncio
async def test_active_ratios_carry_policy_and_nature(db, catalog):
    definitions = {r.code: r for r in await RatioCatalogService(db).load_active_ratios()}

    assert set(definitions) == {r["code"] for r in DEFAULT_RATIOS}
    liquidity = definitions["LIQUIDITY_RATIO"]
    assert liquidity.policy is RatioPolicy.LIQUIDITY
    natures = {c.subcategory_name: c.nature for c in liquidity.components}
    assert natures["Uang Tunai"] is AccountNature.STOCK
    assert natures["Dividen"] is AccountNature.FLOW
    assert natures["Makanan"] is AccountNature.FLOW

    solvency = definitions["SOLVENCY_RATIO"]
    assert solvency.policy is RatioPolicy.SOLVENCY
    assert solvency.is_lower_bound_inclusive is False


@pytest.mark.asyncio
async def test_ratio_without_live_components_is_skipped(db, ratios):
    result = await db.execute(
        select(RatioComponent).where(RatioComponent.ratio_id == ratios["SAVING_RATIO"])
    )
    for comp in result.scalars().all():
        comp.deleted_at = datetime.now(timezone.utc)
    await db.commit()

    codes = {r.code for r in await RatioCatalogService(db).load_active_ratios()}
    assert "SAVING_RATIO" not in codes
    assert len(codes) == len(DEFAULT_RATIOS) - 1


@pytest.mark.asyncio
async def test_liquidity_kept_without_components(db, ratios):
    result = await db.execute(
        select(RatioComponent).where(RatioComponent.ratio_id == ratios["LIQUIDITY_RATIO"])
    )
    for comp in result.scalars().all():
        comp.deleted_at = datetime.now(timezone.utc)
    await db.commit()

    definitions = {r.code: r for r in await RatioCatalogService(db).load_active_ratios()}
    assert definitions["LIQUIDITY_RATIO"].components == ()


@pytest.mark.asyncio
async def test_deleted_subcategory_drops_its_components(db, catalog):
    result = await db.execute(select(Subcategory).where(Subcategory.name == "Tabungan"))
    result.scalar_one().deleted_at = datetime.now(timezone.utc)
    await db.commit()

    definitions = {r.code: r for r in await RatioCatalogService(db).load_active_ratios()}
    saving = definitions["SAVING_RATIO"]
    assert saving.side(Side.NUMERATOR) == []
    assert saving.side(Side.DENOMINATOR)


@pytest.mark.asyncio
async def test_load_ratio_ignores_deleted(db, ratios):
    service = RatioCatalogService(db)
    ratio = await db.get(Ratio, ratios["DEBT_TO_ASSET_RATIO"])
    ratio.deleted_at = datetime.now(timezone.utc)
    await db.commit()

    assert await service.load_ratio(ratios["DEBT_TO_ASSET_RATIO"]) is None
    assert (await service.load_ratio(ratios["SAVING_RATIO"])).code == "SAVING_RATIO"
