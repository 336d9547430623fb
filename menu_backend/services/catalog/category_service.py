# menu_backend/services/catalog/category_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import UploadFile
from sqlmodel import Session, select

from menu_backend.db.models import Category
from menu_backend.exceptions import ApiError
from menu_backend.services.auth.auth_service import sanitize_string
from menu_backend.services.storage.storage_service import StorageService

logger = logging.getLogger(__name__)


def parse_order(value: Optional[str]) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ApiError.bad_request("Invalid order value")


class CategoryService:
    def __init__(self, session: Session, storage: StorageService):
        self.session = session
        self.storage = storage

    def list_categories(self) -> List[Category]:
        return self.session.exec(select(Category).order_by(Category.order, Category.id)).all()

    def get_category(self, category_id: int) -> Category:
        category = self.session.get(Category, category_id)
        if not category:
            raise ApiError.not_found("Category not found")
        return category

    def create_category(self, name: str, order: Optional[str], img: Optional[UploadFile]) -> Category:
        name = sanitize_string(name or "")
        if not name:
            raise ApiError.bad_request("Category name is required")
        if img is None:
            raise ApiError.bad_request("Image is required")

        position = parse_order(order)
        filename = self.storage.save_category_preview(img, name)
        category = Category(name=name, preview=filename, order=position)
        try:
            self.session.add(category)
            self.session.commit()
        except Exception:
            self.session.rollback()
            self.storage.delete(filename)
            raise
        self.session.refresh(category)
        logger.info(f"Created category {category.id} ({category.name})")
        return category

    def update_category(self, category_id: int, name: Optional[str], order: Optional[str],
                        img: Optional[UploadFile]) -> Category:
        category = self.get_category(category_id)
        if name is not None:
            name = sanitize_string(name)
            if not name:
                raise ApiError.bad_request("Category name is required")
            category.name = name
        if order is not None:
            category.order = parse_order(order)

        old_preview = new_preview = None
        if img is not None:
            old_preview = category.preview
            new_preview = self.storage.save_category_preview(img, category.name)
            category.preview = new_preview

        category.updated_at = datetime.now(timezone.utc)
        try:
            self.session.add(category)
            self.session.commit()
        except Exception:
            self.session.rollback()
            self.storage.delete(new_preview)
            raise
        self.session.refresh(category)

        if old_preview and old_preview != new_preview:
            self.storage.delete(old_preview)
        return category

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        preview = category.preview
        self.session.delete(category)
        self.session.commit()
        self.storage.delete(preview)
        logger.info(f"Deleted category {category_id}")
