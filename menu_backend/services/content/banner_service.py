# menu_backend/services/content/banner_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import UploadFile
from sqlmodel import Session, select

from menu_backend.db.models import Banner
from menu_backend.exceptions import ApiError
from menu_backend.services.storage.storage_service import StorageService

logger = logging.getLogger(__name__)


def _order(value: Optional[str], fallback: int) -> int:
    try:
        return int(value) if value not in (None, "") else fallback
    except ValueError:
        raise ApiError.bad_request("Invalid order value")


class BannerService:
    def __init__(self, session: Session, storage: StorageService):
        self.session = session
        self.storage = storage

    def list_banners(self) -> List[Banner]:
        return self.session.exec(select(Banner).order_by(Banner.order, Banner.id)).all()

    def get_banner(self, banner_id: int) -> Banner:
        banner = self.session.get(Banner, banner_id)
        if not banner:
            raise ApiError.not_found("Banner not found")
        return banner

    def create_banner(self, link: str, order: Optional[str],
                      img_desktop: Optional[UploadFile], img_mobile: Optional[UploadFile]) -> Banner:
        if img_desktop is None or img_mobile is None:
            raise ApiError.bad_request("Both desktop and mobile images are required")

        position = _order(order, 0)
        desktop = self.storage.save_banner_image(img_desktop, "desktop")
        mobile = self.storage.save_banner_image(img_mobile, "mobile")
        banner = Banner(img_desktop=desktop, img_mobile=mobile, link=link or "", order=position)
        try:
            self.session.add(banner)
            self.session.commit()
        except Exception:
            self.session.rollback()
            self.storage.delete(desktop)
            self.storage.delete(mobile)
            raise
        self.session.refresh(banner)
        logger.info(f"Created banner {banner.id}")
        return banner

    def update_banner(self, banner_id: int, link: Optional[str], order: Optional[str],
                      img_desktop: Optional[UploadFile], img_mobile: Optional[UploadFile]) -> Banner:
        banner = self.get_banner(banner_id)
        if link:
            banner.link = link
        banner.order = _order(order, banner.order)

        replaced, stored = [], []
        if img_desktop is not None:
            replaced.append(banner.img_desktop)
            banner.img_desktop = self.storage.save_banner_image(img_desktop, "desktop")
            stored.append(banner.img_desktop)
        if img_mobile is not None:
            replaced.append(banner.img_mobile)
            banner.img_mobile = self.storage.save_banner_image(img_mobile, "mobile")
            stored.append(banner.img_mobile)

        banner.updated_at = datetime.now(timezone.utc)
        try:
            self.session.add(banner)
            self.session.commit()
        except Exception:
            self.session.rollback()
            for filename in stored:
                self.storage.delete(filename)
            raise
        self.session.refresh(banner)

        for filename in replaced:
            self.storage.delete(filename)
        return banner

    def delete_banner(self, banner_id: int) -> None:
        banner = self.get_banner(banner_id)
        files = (banner.img_desktop, banner.img_mobile)
        self.session.delete(banner)
        self.session.commit()
        for filename in files:
            self.storage.delete(filename)
        logger.info(f"Deleted banner {banner_id}")
