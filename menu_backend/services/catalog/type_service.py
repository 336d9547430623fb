# menu_backend/services/catalog/type_service.py
import logging
from datetime import datetime, timezone
from typing import List

from sqlmodel import Session, select

from menu_backend.db.models import Type
from menu_backend.exceptions import ApiError
from menu_backend.services.auth.auth_service import sanitize_string

logger = logging.getLogger(__name__)


class TypeService:
    def __init__(self, session: Session):
        self.session = session

    def list_types(self) -> List[Type]:
        return self.session.exec(select(Type).order_by(Type.id)).all()

    def get_type(self, type_id: int) -> Type:
        item = self.session.get(Type, type_id)
        if not item:
            raise ApiError.not_found("Type not found")
        return item

    def create_type(self, name: str) -> Type:
        item = Type(name=sanitize_string(name))
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        logger.info(f"Created type {item.id} ({item.name})")
        return item

    def update_type(self, type_id: int, name: str) -> Type:
        item = self.get_type(type_id)
        item.name = sanitize_string(name)
        item.updated_at = datetime.now(timezone.utc)
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        return item

    def delete_type(self, type_id: int) -> None:
        item = self.get_type(type_id)
        self.session.delete(item)
        self.session.commit()
        logger.info(f"Deleted type {type_id}")
