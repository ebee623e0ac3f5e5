"""EvaluationResult model: one persisted ratio snapshot per user and window."""

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Enum as SAEnum, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finratio.models.base import Base, SoftDeleteMixin, TimestampMixin


class EvaluationStatus(str, enum.Enum):
    IDEAL = "IDEAL"
    NOT_IDEAL = "NOT_IDEAL"
    INCOMPLETE = "INCOMPLETE"


class EvaluationResult(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "evaluation_results"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    ratio_id: Mapped[int] = mapped_column(ForeignKey("ratios.id"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(20, 6), nullable=False)  # always finite
    status: Mapped[EvaluationStatus] = mapped_column(
        SAEnum(EvaluationStatus, native_enum=False, length=20), nullable=False
    )
    # True when the computed value was +inf and ``value`` holds 0 in its place
    is_unbounded: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    calculated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relationships
    user = relationship("User", back_populates="evaluation_results")
    ratio = relationship("Ratio", back_populates="evaluation_results")

    __table_args__ = (
        UniqueConstraint(
            "user_id", "ratio_id", "start_date", "end_date",
            name="uq_evaluation_results_user_ratio_window",
        ),
    )
