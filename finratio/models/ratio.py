"""Ratio catalog models: Ratio and its weighted RatioComponents."""

import enum

from sqlalchemy import Boolean, Enum as SAEnum, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finratio.models.base import Base, SoftDeleteMixin, TimestampMixin


class Side(str, enum.Enum):
    NUMERATOR = "numerator"
    DENOMINATOR = "denominator"


class RatioPolicy(str, enum.Enum):
    """Closed set of evaluation behaviours a ratio can carry.

    STANDARD: plain division, NaN on a zero denominator, generic bound check.
    LIQUIDITY: zero denominator yields 0 or +inf, status is ``value >= lower``.
    SOLVENCY: status requires ``value > lower`` (strictly positive net worth).
    """

    STANDARD = "STANDARD"
    LIQUIDITY = "LIQUIDITY"
    SOLVENCY = "SOLVENCY"


class Ratio(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "ratios"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)  # immutable
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    multiplier: Mapped[float] = mapped_column(Float, default=1, nullable=False)  # 100 for percentages
    lower_bound: Mapped[float | None] = mapped_column(Float, nullable=True)
    upper_bound: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_lower_bound_inclusive: Mapped[bool] = mapped_column(Boolean, default=True)
    is_upper_bound_inclusive: Mapped[bool] = mapped_column(Boolean, default=True)
    ideal_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    policy: Mapped[RatioPolicy] = mapped_column(
        SAEnum(RatioPolicy, native_enum=False, length=20),
        default=RatioPolicy.STANDARD,
        nullable=False,
    )

    # Relationships
    components = relationship("RatioComponent", back_populates="ratio", lazy="select")
    evaluation_results = relationship("EvaluationResult", back_populates="ratio", lazy="select")


class RatioComponent(Base, TimestampMixin, SoftDeleteMixin):
    """One signed subcategory aggregate on one side of a ratio's fraction."""

    __tablename__ = "ratio_components"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    ratio_id: Mapped[int] = mapped_column(ForeignKey("ratios.id"), nullable=False, index=True)
    subcategory_id: Mapped[int] = mapped_column(ForeignKey("subcategories.id"), nullable=False)
    side: Mapped[Side] = mapped_column(SAEnum(Side, native_enum=False, length=20), nullable=False)
    sign: Mapped[int] = mapped_column(Integer, default=1, nullable=False)  # +1 or -1

    # Relationships
    ratio = relationship("Ratio", back_populates="components")
    subcategory = relationship("Subcategory")

    __table_args__ = (
        UniqueConstraint("ratio_id", "subcategory_id", "side", name="uq_ratio_components_ratio_subcategory_side"),
    )
