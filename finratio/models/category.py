"""Category hierarchy models: AccountType -> Category -> Subcategory."""

import enum

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finratio.models.base import Base, SoftDeleteMixin, TimestampMixin


class AccountNature(str, enum.Enum):
    """How amounts of an account type are valued.

    STOCK accounts hold a balance as of a date; FLOW accounts only exist as a
    sum over a period.
    """

    STOCK = "stock"
    FLOW = "flow"


# Account type names valued as balances (English and catalog names)
STOCK_ACCOUNT_TYPES = frozenset({
    "asset", "liability", "equity",
    "aset", "liabilitas", "ekuitas",
})


def account_nature(account_type_name: str) -> AccountNature:
    if account_type_name.strip().lower() in STOCK_ACCOUNT_TYPES:
        return AccountNature.STOCK
    return AccountNature.FLOW


class AccountType(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "account_types"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    # Relationships
    categories = relationship("Category", back_populates="account_type", lazy="select")

    @property
    def nature(self) -> AccountNature:
        return account_nature(self.name)


class Category(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_type_id: Mapped[int] = mapped_column(ForeignKey("account_types.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Relationships
    account_type = relationship("AccountType", back_populates="categories")
    subcategories = relationship("Subcategory", back_populates="category", lazy="select")

    __table_args__ = (
        UniqueConstraint("account_type_id", "name", name="uq_categories_account_type_name"),
    )


class Subcategory(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "subcategories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Relationships
    category = relationship("Category", back_populates="subcategories")
    transactions = relationship("Transaction", back_populates="subcategory", lazy="select")

    __table_args__ = (
        UniqueConstraint("category_id", "name", name="uq_subcategories_category_name"),
    )

    @property
    def is_active(self) -> bool:
        """True when neither this node nor any ancestor is soft-deleted.

        Requires ``category.account_type`` to be loaded.
        """
        return (
            self.deleted_at is None
            and self.category.deleted_at is None
            and self.category.account_type.deleted_at is None
        )
