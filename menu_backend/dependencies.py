import logging
import re
from dataclasses import dataclass

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .core.config import Settings
from .exceptions import ApiError
from .services.auth import decode_jwt_token, token_age_exceeded
from .services.auth.auth_service import ADMIN_ROLE
from .services.storage.storage_service import StorageService

logger = logging.getLogger(__name__)

# Auth scheme
oauth2_scheme = HTTPBearer(auto_error=False)

TOKEN_FORMAT_RE = re.compile(r"^[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*$")


@dataclass(frozen=True)
class Principal:
    id: int
    login: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageService:
    return request.app.state.storage


def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(oauth2_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Principal:
    if not credentials or not credentials.credentials:
        raise ApiError.unauthorized("Authorization header is required")

    token = credentials.credentials
    if not TOKEN_FORMAT_RE.match(token):
        raise ApiError.unauthorized("Invalid token format")

    try:
        payload = decode_jwt_token(settings, token)
    except jwt.ExpiredSignatureError:
        raise ApiError.unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"JWT token decode failed: {e}")
        raise ApiError.unauthorized("Invalid token")

    if token_age_exceeded(settings, payload):
        raise ApiError.unauthorized("Token is too old")

    try:
        user_id = int(payload.get("id", payload["sub"]))
    except (KeyError, ValueError, TypeError):
        raise ApiError.unauthorized("Invalid token: invalid user ID format")

    return Principal(id=user_id, login=payload.get("login", ""), role=payload.get("role", ""))


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise ApiError.forbidden("Admin access required")
    return principal
