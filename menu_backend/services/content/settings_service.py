# menu_backend/services/content/settings_service.py
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import TypeAdapter
from sqlmodel import Session, select

from menu_backend.db.models import Setting
from menu_backend.exceptions import ApiError
from menu_backend.schemas.content.settings import SettingCreate, SettingUpdate, SettingValue, StringValue

logger = logging.getLogger(__name__)

_setting_value = TypeAdapter(SettingValue)


def _number(value) -> Any:
    if isinstance(value, bool) or value is None:
        raise ValueError("not a number")
    number = float(value)
    if number != number or number in (float("inf"), float("-inf")):
        raise ValueError("not a finite number")
    return int(number) if number.is_integer() else number


def encode_value(value_type: str, value: Any) -> str:
    """Validate ``value`` for ``value_type`` and render it as stored text."""
    if value_type == "number":
        try:
            return str(_number(str(value).strip() if isinstance(value, str) else value))
        except (TypeError, ValueError):
            raise ApiError.bad_request("Invalid number value")
    if value_type == "boolean":
        return "true" if value is True or value == "true" else "false"
    if value_type == "json":
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            raise ApiError.bad_request("Invalid JSON value")
    return "" if value is None else str(value)


def decode_value(value_type: str, text: str) -> SettingValue:
    """Stored text -> typed value. Undecodable text is kept as a plain string."""
    try:
        if value_type == "number":
            raw = _number(text)
        elif value_type == "boolean":
            raw = text == "true"
        elif value_type == "json":
            raw = json.loads(text)
        else:
            return StringValue(value=text)
    except ValueError:
        logger.warning(f"Stored {value_type} setting value {text!r} does not decode")
        return StringValue(value=text)
    return _setting_value.validate_python({"type": value_type, "value": raw})


def present(setting: Setting) -> Dict[str, Any]:
    data = setting.model_dump()
    data["value"] = decode_value(setting.type, setting.value).value
    return data


class SettingsService:
    def __init__(self, session: Session):
        self.session = session

    def _all(self) -> List[Setting]:
        return self.session.exec(select(Setting).order_by(Setting.order, Setting.id)).all()

    def list_settings(self) -> List[Dict[str, Any]]:
        return [present(setting) for setting in self._all()]

    def settings_object(self) -> Dict[str, Any]:
        return {setting.key: decode_value(setting.type, setting.value).value for setting in self._all()}

    def get_by_key(self, key: str) -> Dict[str, Any]:
        setting = self.session.exec(select(Setting).where(Setting.key == key)).first()
        if not setting:
            raise ApiError.not_found("Setting not found")
        return present(setting)

    def _get(self, setting_id: int) -> Setting:
        setting = self.session.get(Setting, setting_id)
        if not setting:
            raise ApiError.not_found("Setting not found")
        return setting

    def create_setting(self, data: SettingCreate) -> Dict[str, Any]:
        setting = Setting(
            key=data.key,
            value=encode_value(data.type, data.value),
            type=data.type,
            description=data.description,
            order=data.order or 0,
        )
        self.session.add(setting)
        self.session.commit()
        self.session.refresh(setting)
        logger.info(f"Created setting {setting.key}")
        return present(setting)

    def update_setting(self, setting_id: int, data: SettingUpdate) -> Dict[str, Any]:
        setting = self._get(setting_id)
        sent = data.model_fields_set
        new_type = data.type or setting.type

        if "value" in sent:
            setting.value = encode_value(new_type, data.value)
        elif new_type != setting.type:
            # re-validate the current value under its new type
            current = decode_value(setting.type, setting.value).value
            setting.value = encode_value(new_type, current)
        setting.type = new_type

        if data.key is not None:
            setting.key = data.key
        if "description" in sent:
            setting.description = data.description
        if data.order is not None:
            setting.order = data.order

        setting.updated_at = datetime.now(timezone.utc)
        self.session.add(setting)
        self.session.commit()
        self.session.refresh(setting)
        return present(setting)

    def delete_setting(self, setting_id: int) -> None:
        setting = self._get(setting_id)
        key = setting.key
        self.session.delete(setting)
        self.session.commit()
        logger.info(f"Deleted setting {key}")
