import os
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Remote tabular datastore; unset means the local JSON store is the only backend
    DATABASE_URL: Optional[str] = None

    JWT_SECRET: str = "change-this-secret"
    TOKEN_TTL_HOURS: float = 8
    BCRYPT_ROUNDS: int = 8
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    DATA_DIR: str = "data"
    IMAGES_DIR: Optional[str] = None
    STATIC_DIR: Optional[str] = None
    LOCK_TIMEOUT_SECONDS: float = 10

    # S3-compatible object storage for product images
    STORAGE_BUCKET: Optional[str] = None
    STORAGE_ENDPOINT: Optional[str] = None
    STORAGE_REGION: Optional[str] = None
    STORAGE_ACCESS_KEY_ID: Optional[str] = None
    STORAGE_SECRET_ACCESS_KEY: Optional[str] = None
    STORAGE_PUBLIC_URL: Optional[str] = None
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 3000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def catalog_file(self) -> str:
        return os.path.join(self.DATA_DIR, "catalog.json")

    @property
    def users_file(self) -> str:
        return os.path.join(self.DATA_DIR, "users.json")

    @property
    def images_dir(self) -> str:
        return self.IMAGES_DIR or os.path.join(self.DATA_DIR, "images")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, built once at startup."""
    return Settings()
