# menu_backend/db/models/users/user.py
from typing import Optional, List
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    login: str = Field(max_length=50, unique=True, index=True)
    password: str = Field(max_length=255)
    role: str = Field(default="USER", max_length=20)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    basket: Optional["Basket"] = Relationship(back_populates="user", sa_relationship_kwargs={"uselist": False})

class Basket(SQLModel, table=True):
    __tablename__ = "baskets"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    user: Optional[User] = Relationship(back_populates="basket")
    items: List["BasketProduct"] = Relationship(back_populates="basket")

class BasketProduct(SQLModel, table=True):
    __tablename__ = "basket_products"
    id: Optional[int] = Field(default=None, primary_key=True)
    basket_id: int = Field(foreign_key="baskets.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)

    basket: Optional[Basket] = Relationship(back_populates="items")
