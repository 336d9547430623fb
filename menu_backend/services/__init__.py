# Services package (re-export feature modules for stable imports)
from .auth.auth_service import AuthService
from .storage.storage_service import StorageService
from .catalog.type_service import TypeService
from .catalog.category_service import CategoryService
from .catalog.product_service import ProductService
from .content.banner_service import BannerService
from .content.settings_service import SettingsService
from .orders.frontpad_service import FrontpadService

__all__ = [
    "AuthService",
    "StorageService",
    "TypeService",
    "CategoryService",
    "ProductService",
    "BannerService",
    "SettingsService",
    "FrontpadService",
]
