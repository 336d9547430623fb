# menu_backend/db/models/catalog/type.py
from typing import Optional, List, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone

if TYPE_CHECKING:
    from .category import Category
    from .product import Product

class TypeCategory(SQLModel, table=True):
    __tablename__ = "type_categories"
    id: Optional[int] = Field(default=None, primary_key=True)
    type_id: int = Field(foreign_key="types.id", index=True)
    category_id: int = Field(foreign_key="categories.id", index=True)

class Type(SQLModel, table=True):
    __tablename__ = "types"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, unique=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    products: List["Product"] = Relationship(back_populates="type")
    categories: List["Category"] = Relationship(back_populates="types", link_model=TypeCategory)
