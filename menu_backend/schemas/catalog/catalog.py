# menu_backend/schemas/catalog/catalog.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..common.common import ApiModel


class TypeWrite(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class TypeRead(ApiModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime


class CategoryRead(ApiModel):
    id: int
    name: str
    preview: str
    order: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProductRead(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    price: int
    img: str
    article: int
    weight: Optional[int] = None
    in_stock: bool
    order: int
    category_id: Optional[int] = None
    type_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProductDetail(ProductRead):
    type: Optional[TypeRead] = None
    category: Optional[CategoryRead] = None
