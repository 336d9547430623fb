# menu_backend/routers/settings_router.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..db.session import get_session
from ..dependencies import require_admin
from ..schemas import MessageResponse, SettingCreate, SettingRead, SettingUpdate
from ..services.content.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=List[SettingRead])
def list_settings(session: Session = Depends(get_session)):
    return SettingsService(session).list_settings()


@router.get("/object", response_model=Dict[str, Any])
def settings_object(session: Session = Depends(get_session)):
    """All settings as a ``key -> typed value`` map."""
    return SettingsService(session).settings_object()


@router.get("/key/{key}", response_model=SettingRead)
def get_setting(key: str, session: Session = Depends(get_session)):
    return SettingsService(session).get_by_key(key)


@router.post("", response_model=SettingRead, dependencies=[Depends(require_admin)])
def create_setting(body: SettingCreate, session: Session = Depends(get_session)):
    return SettingsService(session).create_setting(body)


@router.put("/{setting_id}", response_model=SettingRead, dependencies=[Depends(require_admin)])
def update_setting(setting_id: int, body: SettingUpdate, session: Session = Depends(get_session)):
    return SettingsService(session).update_setting(setting_id, body)


@router.delete("/{setting_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_setting(setting_id: int, session: Session = Depends(get_session)):
    SettingsService(session).delete_setting(setting_id)
    return {"message": "Setting deleted"}
