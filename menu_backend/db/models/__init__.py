# Models package (re-export feature modules for stable imports)
from .users.user import User, Basket, BasketProduct
from .catalog.type import Type, TypeCategory
from .catalog.category import Category
from .catalog.product import Product
from .content.banner import Banner
from .content.setting import Setting

__all__ = [
    "User",
    "Basket",
    "BasketProduct",
    "Type",
    "TypeCategory",
    "Category",
    "Product",
    "Banner",
    "Setting",
]
