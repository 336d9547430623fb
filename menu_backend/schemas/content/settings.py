# menu_backend/schemas/content/settings.py
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..common.common import ApiModel

SettingType = Literal["string", "number", "boolean", "json"]


# Typed setting values, discriminated by ``type``
class StringValue(BaseModel):
    type: Literal["string"] = "string"
    value: str


class NumberValue(BaseModel):
    type: Literal["number"] = "number"
    value: Union[int, float]


class BooleanValue(BaseModel):
    type: Literal["boolean"] = "boolean"
    value: bool


class JsonValue(BaseModel):
    type: Literal["json"] = "json"
    value: Any = None


SettingValue = Annotated[
    Union[StringValue, NumberValue, BooleanValue, JsonValue],
    Field(discriminator="type"),
]


class SettingCreate(BaseModel):
    key: str = Field(min_length=1, max_length=255)
    value: Any = None
    type: SettingType = "string"
    description: Optional[str] = None
    order: Optional[int] = 0


class SettingUpdate(BaseModel):
    key: Optional[str] = Field(default=None, min_length=1, max_length=255)
    value: Any = None
    type: Optional[SettingType] = None
    description: Optional[str] = None
    order: Optional[int] = None


class SettingRead(ApiModel):
    id: int
    key: str
    value: Any = None
    type: SettingType
    description: Optional[str] = None
    order: int
    created_at: datetime
    updated_at: datetime
