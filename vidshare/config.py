# -*- coding: utf-8 -*-
"""
Settings loader for VidShare

- Loads env in priority order:
    1) .env (defaults, package dir then project root)
    2) .env.local        (if ENVIRONMENT != production)
       OR .env.production (if ENVIRONMENT=production)
    3) OS environment variables (highest priority)
- Exposes `settings` (pydantic-settings instance) plus a few flat constants
- Refuses to boot without SECRET_KEY outside development/test
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------- Env file discovery & loading ----------------
HERE = Path(__file__).resolve()
PACKAGE_DIR = HERE.parent
PROJECT_ROOT = PACKAGE_DIR.parent

_DEV_ENVS = {"dev", "development", "local", "test", "testing"}


def _load_env_chain() -> str:
    """
    Load env files in order. Returns resolved environment string (lowercased).
    """
    for p in (PACKAGE_DIR / ".env", PROJECT_ROOT / ".env"):
        load_dotenv(p, override=False)

    env_mode = os.getenv("ENVIRONMENT", os.getenv("ENV", "development")).strip().lower()

    if env_mode == "production":
        for p in (PACKAGE_DIR / ".env.production", PROJECT_ROOT / ".env.production"):
            load_dotenv(p, override=True)
    else:
        for p in (PACKAGE_DIR / ".env.local", PROJECT_ROOT / ".env.local"):
            load_dotenv(p, override=True)

    return env_mode


ENV_MODE = _load_env_chain()


def _split_csv(v: Optional[str]) -> List[str]:
    if not v:
        return []
    return [x.strip() for x in v.split(",") if x.strip()]


# ---------------- Settings model ----------------
class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", case_sensitive=False)

    # App
    APP_NAME: str = "VidShare API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = ENV_MODE
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Database
    DATABASE_URL: str = "sqlite:///./vidshare.db"
    DB_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    # JWT / Auth
    SECRET_KEY: Optional[str] = None
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    PASSWORD_HASH_SCHEMES: str = "bcrypt"

    # Uploads
    UPLOAD_DIR: str = str(PROJECT_ROOT / "uploads")
    MAX_VIDEO_SIZE_MB: int = 500
    MAX_IMAGE_SIZE_MB: int = 5
    ALLOWED_VIDEO_TYPES: str = (
        "video/mp4,video/mpeg,video/quicktime,video/x-msvideo,video/x-flv,video/webm"
    )
    ALLOWED_IMAGE_TYPES: str = "image/jpeg,image/jpg,image/png,image/webp"

    # CORS / Frontend
    FRONTEND_URL: Optional[str] = None
    CORS_ORIGINS: Optional[str] = None  # CSV list

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Convenience properties (not env fields)
    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() in {"production", "prod", "staging"}

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.strip().lower() in _DEV_ENVS

    @property
    def cors_origins_list(self) -> List[str]:
        # Merge FRONTEND_URL and CORS_ORIGINS (CSV) into one list (unique)
        items = set()
        if self.FRONTEND_URL:
            items.add(self.FRONTEND_URL.strip())
        for it in _split_csv(self.CORS_ORIGINS):
            items.add(it)
        return sorted(items)

    @property
    def password_schemes(self) -> List[str]:
        return _split_csv(self.PASSWORD_HASH_SCHEMES) or ["bcrypt"]

    @property
    def allowed_video_types(self) -> List[str]:
        return _split_csv(self.ALLOWED_VIDEO_TYPES)

    @property
    def allowed_image_types(self) -> List[str]:
        return _split_csv(self.ALLOWED_IMAGE_TYPES)

    @property
    def videos_dir(self) -> Path:
        return Path(self.UPLOAD_DIR) / "videos"

    @property
    def avatars_dir(self) -> Path:
        return Path(self.UPLOAD_DIR) / "avatars"


# Singleton instance
settings = Settings()

if not settings.SECRET_KEY:
    if not settings.is_development:
        raise RuntimeError("SECRET_KEY is required in non-development environments.")
    print(
        "WARNING: SECRET_KEY is not set; using an insecure development key.",
        file=sys.stderr,
    )
    settings.SECRET_KEY = "vidshare-dev-secret"

DATABASE_URL: str = settings.DATABASE_URL
ENVIRONMENT: str = settings.ENVIRONMENT
DEBUG: bool = settings.DEBUG

__all__ = ["settings", "Settings", "DATABASE_URL", "ENVIRONMENT", "DEBUG"]
