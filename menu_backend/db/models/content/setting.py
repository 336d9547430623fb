# menu_backend/db/models/content/setting.py
from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Text
from datetime import datetime, timezone

class Setting(SQLModel, table=True):
    __tablename__ = "settings"
    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(max_length=255, unique=True, index=True)
    value: str = Field(sa_column=Column(Text, nullable=False))
    # one of: string, number, boolean, json
    type: str = Field(default="string", max_length=16)
    description: Optional[str] = Field(default=None, max_length=255)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
