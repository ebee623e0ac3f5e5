"""Category hierarchy reads."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import select

from finratio.core.exceptions import NotFoundError
from finratio.models import AccountType, Category
from finratio.models.category import AccountNature, account_nature
from finratio.services.category_service import CategoryHierarchyService


@pytest.mark.parametrize(
    ("name", "nature"),
    [
        ("Aset", AccountNature.STOCK),
        ("Liabilitas", AccountNature.STOCK),
        ("Ekuitas", AccountNature.STOCK),
        ("Asset", AccountNature.STOCK),
        (" liability ", AccountNature.STOCK),
        ("Pemasukan", AccountNature.FLOW),
        ("Pengeluaran", AccountNature.FLOW),
        ("Something else", AccountNature.FLOW),
    ],
)
def test_account_nature(name, nature):
    assert account_nature(name) is nature


@pytest.mark.asyncio
async def test_tree_has_every_account_type(db, catalog):
    tree = await CategoryHierarchyService(db).get_tree()

    by_name = {node["name"]: node for node in tree}
    assert set(by_name) == {"Aset", "Liabilitas", "Pemasukan", "Pengeluaran", "Ekuitas"}
    assert by_name["Aset"]["nature"] == "stock"
    assert by_name["Pengeluaran"]["nature"] == "flow"

    kas = next(c for c in by_name["Aset"]["categories"] if c["name"] == "Kas")
    assert [s["name"] for s in kas["subcategories"]] == ["Uang E-Wallet", "Uang Rekening Bank", "Uang Tunai"]


@pytest.mark.asyncio
async def test_list_categories_and_subcategories(db, catalog):
    service = CategoryHierarchyService(db)
    account_types = await service.list_account_types()
    liabilitas = next(t for t in account_types if t.name == "Liabilitas")

    categories = await service.list_categories(liabilitas.id)
    assert [c.name for c in categories] == ["Utang", "Utang Hipotek", "Utang Wesel"]

    subcategories = await service.list_subcategories(categories[0].id)
    assert [s.name for s in subcategories] == ["Cicilan", "Pajak", "Saldo Kartu Kredit", "Tagihan"]


@pytest.mark.asyncio
async def test_unknown_parents_are_not_found(db, catalog):
    service = CategoryHierarchyService(db)
    with pytest.raises(NotFoundError):
        await service.list_categories(99999)
    with pytest.raises(NotFoundError):
        await service.list_subcategories(99999)
    with pytest.raises(NotFoundError):
        await service.get_subcategory(99999)


@pytest.mark.asyncio
async def test_deleted_ancestor_hides_subcategory(db, subcategories):
    category = (await db.execute(select(Category).where(Category.name == "Kas"))).scalar_one()
    category.deleted_at = datetime.now(timezone.utc)
    await db.commit()
    service = CategoryHierarchyService(db)

    with pytest.raises(NotFoundError):
        await service.get_subcategory(subcategories["Uang Tunai"])
    with pytest.raises(NotFoundError):
        await service.list_subcategories(category.id)

    aset = (await db.execute(select(AccountType).where(AccountType.name == "Aset"))).scalar_one()
    assert "Kas" not in [c.name for c in await service.list_categories(aset.id)]
