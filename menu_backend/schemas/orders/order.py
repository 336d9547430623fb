# menu_backend/schemas/orders/order.py
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


class OrderItem(BaseModel):
    id: Union[int, str]
    article: Optional[Union[int, str]] = None
    quantity: int = Field(ge=1)


class OrderRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    # delivery address
    typeIsDelivery: Union[bool, int, str, None] = False
    street: Optional[str] = None
    houseNumber: Optional[str] = None
    entrance: Optional[str] = None
    floor: Optional[str] = None
    apartmentNumber: Optional[str] = None

    # pickup
    deliveryBranch: Optional[str] = None

    deliveryNow: bool = True
    time: Optional[str] = None  # "DD.MM.YYYY HH:MM"
    comment: Optional[str] = None

    items: List[OrderItem] = Field(min_length=1)
    persons: Optional[int] = 1


class OrderResponse(BaseModel):
    success: bool = True
    message: str
    frontpadOrderId: Optional[Any] = None
    frontpadOrderNumber: Optional[Any] = None
    warnings: Optional[Any] = None


class FrontpadProduct(BaseModel):
    id: Any
    name: Optional[str] = None
    price: float = 0
    saleEnabled: Optional[bool] = None


class ProductsResponse(BaseModel):
    success: bool = True
    products: List[FrontpadProduct]


class StopsResponse(BaseModel):
    success: bool = True
    stops: List[FrontpadProduct]
    message: Optional[str] = None
