# menu_backend/db/models/content/banner.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone

class Banner(SQLModel, table=True):
    __tablename__ = "banners"
    id: Optional[int] = Field(default=None, primary_key=True)
    img_desktop: str = Field(max_length=255)
    img_mobile: str = Field(max_length=255)
    link: str = Field(max_length=255)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
