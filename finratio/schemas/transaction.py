"""Transaction schemas for request/response validation."""

from datetime import date as date_type, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class TransactionCreate(BaseModel):
    subcategory_id: int
    amount: Decimal  # signed
    date: date_type
    description: str = Field(min_length=1, max_length=500)
    is_bookmarked: bool = False


class TransactionUpdate(BaseModel):
    subcategory_id: int | None = None
    amount: Decimal | None = None
    date: date_type | None = None
    description: str | None = Field(default=None, min_length=1, max_length=500)
    is_bookmarked: bool | None = None


class TransactionResponse(BaseModel):
    id: int
    subcategory_id: int
    subcategory_name: str | None = None
    category_name: str | None = None
    account_type_name: str | None = None
    amount: Decimal
    date: date_type
    description: str
    is_bookmarked: bool
    created_at: datetime

    model_config = {"from_attributes": True}
