# menu_backend/routers/auth_router.py
import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..core.config import Settings
from ..db.session import get_session
from ..dependencies import Principal, get_app_settings, get_current_principal
from ..exceptions import ApiError
from ..schemas import AuthResponse, LoginRequest
from ..services.auth.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    return AuthService(session, settings).login(body.login, body.password)


@router.get("/check", response_model=AuthResponse)
def check(
    principal: Principal = Depends(get_current_principal),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    """Re-issue a token for a still-valid session."""
    service = AuthService(session, settings)
    user = service.get_by_login(principal.login)
    if not user or user.id != principal.id:
        raise ApiError.unauthorized("User not found")
    return service.issue(user.id, user.login, user.role)
