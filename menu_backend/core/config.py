# menu_backend/core/config.py
import json
from pydantic_settings import BaseSettings
from pydantic import Field
from pydantic_settings import SettingsConfigDict
from typing import Optional, List, Dict
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True)

    # Application Settings
    APP_NAME: str = "Menu Backend API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # Database Settings
    DATABASE_URL: str = "sqlite:///./menu.db"

    # Security Settings
    SECRET_KEY: str = Field(default="change-me-in-prod", alias="JWT_SECRET_KEY")
    ALGORITHM: str = "HS256"
    JWT_EXPIRES_HOURS: int = 24
    JWT_ISSUER: str = "menu-backend"
    JWT_AUDIENCE: str = "menu-backend-admin"
    JWT_MAX_TOKEN_AGE_DAYS: int = 10

    # CORS Settings (comma-separated strings to avoid JSON parsing in env)
    ALLOWED_ORIGINS: str = "*"
    ALLOWED_METHODS: str = "GET,POST,PUT,DELETE,OPTIONS"
    ALLOWED_HEADERS: str = "Content-Type,Authorization"
    CORS_ALLOW_CREDENTIALS: bool = True
    GZIP_MIN_SIZE: int = 1000

    # Static files and uploads
    STATIC_DIR: str = "static"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB per request
    PRODUCT_IMAGE_MIN_SIZE: int = 100
    PRODUCT_IMAGE_MAX_SIZE: int = 50 * 1024 * 1024

    # Image resizing
    IMAGE_CACHE_ENABLED: bool = True  # false = always transcode, never touch the cache
    IMAGE_CACHE_MAX_AGE_DAYS: int = 30
    IMAGE_DEFAULT_QUALITY: int = 85
    IMAGE_DEFAULT_WIDTH: int = 800
    IMAGE_DEFAULT_HEIGHT: int = 600
    IMAGE_DEFAULT_FORMAT: str = "webp"

    # Rate Limiting (per client IP, window in seconds)
    RATE_LIMIT_WINDOW_SEC: int = 15 * 60
    RATE_LIMIT_PUBLIC_MAX: int = 5000
    RATE_LIMIT_AUTH_MAX: int = 10
    RATE_LIMIT_ADMIN_MAX: int = 1000
    REDIS_URL: Optional[str] = None

    # Frontpad order relay
    FRONTPAD_SECRET: str = ""
    FRONTPAD_API_URL: str = "https://app.frontpad.ru/api/index.php"
    FRONTPAD_ORDER_TIMEOUT_SEC: float = 30.0
    FRONTPAD_LOOKUP_TIMEOUT_SEC: float = 10.0
    # JSON object mapping pickup branch name -> Frontpad affiliate id
    FRONTPAD_AFFILIATES: str = "{}"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Helper methods for list envs
    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def allowed_methods_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_METHODS)

    @property
    def allowed_headers_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_HEADERS)

    @property
    def frontpad_affiliates(self) -> Dict[str, int]:
        try:
            raw = json.loads(self.FRONTPAD_AFFILIATES or "{}")
        except json.JSONDecodeError:
            return {}
        return {str(k): int(v) for k, v in raw.items()}

    @property
    def frontpad_configured(self) -> bool:
        # "###" is the placeholder shipped in deployment templates
        return bool(self.FRONTPAD_SECRET) and self.FRONTPAD_SECRET != "###"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
