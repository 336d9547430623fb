# menu_backend/db/models/catalog/category.py
from typing import Optional, List, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone

from .type import TypeCategory

if TYPE_CHECKING:
    from .product import Product
    from .type import Type

class Category(SQLModel, table=True):
    __tablename__ = "categories"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, unique=True)
    preview: str = Field(max_length=255)
    order: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    products: List["Product"] = Relationship(back_populates="category")
    types: List["Type"] = Relationship(back_populates="categories", link_model=TypeCategory)
