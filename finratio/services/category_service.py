"""Category hierarchy service (read-only): account types, categories, subcategories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from finratio.core.exceptions import NotFoundError
from finratio.models.category import AccountType, Category, Subcategory


class CategoryHierarchyService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_account_types(self) -> list[AccountType]:
        result = await self.db.execute(
            select(AccountType)
            .where(AccountType.deleted_at.is_(None))
            .order_by(AccountType.id)
        )
        return list(result.scalars().all())

    async def list_categories(self, account_type_id: int) -> list[Category]:
        """List active categories of an account type."""
        await self._get_active(AccountType, account_type_id, "Account type")
        result = await self.db.execute(
            select(Category)
            .where(
                Category.account_type_id == account_type_id,
                Category.deleted_at.is_(None),
            )
            .order_by(Category.name)
        )
        return list(result.scalars().all())

    async def list_subcategories(self, category_id: int) -> list[Subcategory]:
        """List active subcategories of a category."""
        await self._get_active(Category, category_id, "Category")
        result = await self.db.execute(
            select(Subcategory)
            .where(
                Subcategory.category_id == category_id,
                Subcategory.deleted_at.is_(None),
            )
            .order_by(Subcategory.name)
        )
        return list(result.scalars().all())

    async def get_tree(self) -> list[dict]:
        """Return the active hierarchy as nested dicts, one root per account type."""
        result = await self.db.execute(
            select(AccountType)
            .where(AccountType.deleted_at.is_(None))
            .options(selectinload(AccountType.categories).selectinload(Category.subcategories))
            .order_by(AccountType.id)
        )
        tree = []
        for account_type in result.scalars().all():
            tree.append({
                "id": account_type.id,
                "name": account_type.name,
                "nature": account_type.nature.value,
                "categories": [
                    {
                        "id": cat.id,
                        "name": cat.name,
                        "subcategories": [
                            {"id": sub.id, "name": sub.name}
                            for sub in sorted(cat.subcategories, key=lambda s: s.name)
                            if sub.deleted_at is None
                        ],
                    }
                    for cat in sorted(account_type.categories, key=lambda c: c.name)
                    if cat.deleted_at is None
                ],
            })
        return tree

    async def get_subcategory(self, subcategory_id: int) -> Subcategory:
        """Fetch an active subcategory with its category and account type loaded."""
        result = await self.db.execute(
            select(Subcategory)
            .where(Subcategory.id == subcategory_id)
            .options(selectinload(Subcategory.category).selectinload(Category.account_type))
        )
        subcategory = result.scalar_one_or_none()
        if not subcategory or not subcategory.is_active:
            raise NotFoundError("Subcategory")
        return subcategory

    async def find_subcategories_by_name(self, names: set[str]) -> list[Subcategory]:
        """Active subcategories with these names, category and account type loaded."""
        result = await self.db.execute(
            select(Subcategory)
            .where(Subcategory.name.in_(names))
            .options(selectinload(Subcategory.category).selectinload(Category.account_type))
        )
        return [s for s in result.scalars().all() if s.is_active]

    async def _get_active(self, model, obj_id: int, resource: str):
        obj = await self.db.get(model, obj_id)
        if not obj or obj.deleted_at is not None:
            raise NotFoundError(resource)
        return obj
