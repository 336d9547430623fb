# menu_backend/db/models/catalog/product.py
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone

if TYPE_CHECKING:
    from .category import Category
    from .type import Type

class Product(SQLModel, table=True):
    __tablename__ = "products"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, unique=True)
    description: Optional[str] = Field(default=None, max_length=255)
    price: int
    img: str = Field(max_length=255)
    article: int
    weight: Optional[int] = None
    in_stock: bool = Field(default=True)
    order: int = Field(default=0)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    type_id: Optional[int] = Field(default=None, foreign_key="types.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    category: Optional["Category"] = Relationship(back_populates="products")
    type: Optional["Type"] = Relationship(back_populates="products")
