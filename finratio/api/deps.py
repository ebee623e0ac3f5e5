"""Shared API dependencies."""

from finratio.core.database import get_db
from finratio.core.security import get_current_user

__all__ = ["get_db", "get_current_user"]
