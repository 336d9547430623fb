# menu_backend/schemas/auth/auth.py
from pydantic import BaseModel


class LoginRequest(BaseModel):
    login: str
    password: str


class AuthUser(BaseModel):
    id: int
    login: str
    role: str


class AuthResponse(BaseModel):
    user: AuthUser
    jwtToken: str
