"""Category hierarchy schemas."""

from pydantic import BaseModel


class AccountTypeResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class CategoryResponse(BaseModel):
    id: int
    account_type_id: int
    name: str

    model_config = {"from_attributes": True}


class SubcategoryResponse(BaseModel):
    id: int
    category_id: int
    name: str

    model_config = {"from_attributes": True}


class SubcategoryNode(BaseModel):
    id: int
    name: str


class CategoryNode(BaseModel):
    id: int
    name: str
    subcategories: list[SubcategoryNode]


class AccountTypeNode(BaseModel):
    id: int
    name: str
    nature: str  # stock, flow
    categories: list[CategoryNode]
