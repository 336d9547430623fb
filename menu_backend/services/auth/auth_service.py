# menu_backend/services/auth/auth_service.py
import logging
import re
from typing import Optional

from passlib.context import CryptContext
from sqlmodel import Session, select

from menu_backend.core.config import Settings
from menu_backend.db.models import User, Basket
from menu_backend.exceptions import ApiError
from . import create_jwt_token

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ADMIN_ROLE = "ADMIN"
LOGIN_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def sanitize_string(value: str) -> str:
    return value.replace("<", "").replace(">", "").strip()


def validate_login(login) -> bool:
    if not login or not isinstance(login, str):
        return False
    login = sanitize_string(login)
    return 3 <= len(login) <= 50 and LOGIN_RE.match(login) is not None


def validate_password(password) -> bool:
    if not password or not isinstance(password, str):
        return False
    return 6 <= len(password) <= 100


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Not a recognised hash (e.g. plain text left in the table)
        return False


class AuthService:
    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.settings = settings

    def get_by_login(self, login: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.login == login)).first()

    def login(self, login: str, password: str) -> dict:
        """Admin-only login; returns the public user view and a fresh token."""
        if not validate_login(login):
            raise ApiError.bad_request("Invalid login format")
        if not validate_password(password):
            raise ApiError.bad_request("Invalid password format")

        user = self.get_by_login(sanitize_string(login))
        if not user:
            raise ApiError.bad_request("User with this login not found")
        if user.role != ADMIN_ROLE:
            logger.warning(f"Non-admin login attempt for user {user.id}")
            raise ApiError.forbidden("Access denied. Admin only.")
        if not verify_password(password, user.password):
            raise ApiError.bad_request("Invalid password")

        logger.info(f"Admin {user.login} logged in")
        return self.issue(user.id, user.login, user.role)

    def issue(self, user_id: int, login: str, role: str) -> dict:
        token = create_jwt_token(self.settings, user_id, login, role)
        return {
            "user": {"id": user_id, "login": login, "role": role},
            "jwtToken": token,
        }

    def create_user(self, login: str, password: str, role: str = "USER") -> User:
        """Create a user with an empty basket."""
        if not validate_login(login):
            raise ApiError.bad_request("Invalid login format")
        if not validate_password(password):
            raise ApiError.bad_request("Invalid password format")

        user = User(login=sanitize_string(login), password=hash_password(password), role=role)
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)

        self.session.add(Basket(user_id=user.id))
        self.session.commit()
        return user
