"""
Friendsgiving backend configuration.
Single source of truth for environment and app settings.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SUBSCRIBER_BUFFER = 5


def get_settings():
    """Return app settings (use as FastAPI Depends or call directly)."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    APP_TITLE: str = "Friendsgiving API"
    APP_VERSION: str = "1.0.0"
    ALLOWED_ORIGINS: list[str]
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Storage: one JSON file holding the whole menu
    MENU_FILE: Path
    STATIC_DIR: Path

    # Fan-out: pending snapshots kept per stream subscriber before drops start
    SUBSCRIBER_BUFFER: int = DEFAULT_SUBSCRIBER_BUFFER

    def __init__(self):
        self.APP_TITLE = (os.environ.get("APP_TITLE") or "Friendsgiving API").strip()
        self.APP_VERSION = (os.environ.get("APP_VERSION") or "1.0.0").strip()
        origins = os.environ.get("ALLOWED_ORIGINS", "*")
        self.ALLOWED_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()] or ["*"]
        self.LOG_LEVEL = (os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
        self.HOST = (os.environ.get("HOST") or "0.0.0.0").strip()
        self.PORT = _int_env("PORT", 8000)
        self.MENU_FILE = Path(os.environ.get("MENU_FILE", "data/menu.json"))
        self.STATIC_DIR = Path(os.environ.get("STATIC_DIR", "static"))
        buffer_size = _int_env("SUBSCRIBER_BUFFER", DEFAULT_SUBSCRIBER_BUFFER)
        self.SUBSCRIBER_BUFFER = buffer_size if buffer_size >= 1 else DEFAULT_SUBSCRIBER_BUFFER


def _int_env(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default
