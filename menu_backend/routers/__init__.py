# Routers package
from . import auth_router
from . import type_router
from . import category_router
from . import product_router
from . import banner_router
from . import settings_router
from . import frontpad_router

__all__ = [
    "auth_router",
    "type_router",
    "category_router",
    "product_router",
    "banner_router",
    "settings_router",
    "frontpad_router",
]
