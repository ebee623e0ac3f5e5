"""SQLAlchemy models."""

from finratio.models.base import Base
from finratio.models.category import AccountType, Category, Subcategory
from finratio.models.evaluation import EvaluationResult, EvaluationStatus
from finratio.models.ratio import Ratio, RatioComponent, RatioPolicy, Side
from finratio.models.transaction import Transaction
from finratio.models.user import User

__all__ = [
    "Base",
    "User",
    "AccountType",
    "Category",
    "Subcategory",
    "Transaction",
    "Ratio",
    "RatioComponent",
    "RatioPolicy",
    "Side",
    "EvaluationResult",
    "EvaluationStatus",
]
