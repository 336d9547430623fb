# menu_backend/schemas/content/banner.py
from datetime import datetime

from ..common.common import ApiModel


class BannerRead(ApiModel):
    id: int
    img_desktop: str
    img_mobile: str
    link: str
    order: int
    created_at: datetime
    updated_at: datetime
