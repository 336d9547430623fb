from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import jwt
from menu_backend.core.config import Settings

def create_jwt_token(settings: Settings, user_id: int, login: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "id": user_id,
        "login": login,
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=settings.JWT_EXPIRES_HOURS),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_jwt_token(settings: Settings, token: str) -> Dict[str, Any]:
    """Decode and verify a token; raises jwt.InvalidTokenError subclasses."""
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        options={"require": ["exp", "iat", "sub"]},
    )

def token_age_exceeded(settings: Settings, payload: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
    current = now or datetime.now(timezone.utc)
    return current - issued_at > timedelta(days=settings.JWT_MAX_TOKEN_AGE_DAYS)
