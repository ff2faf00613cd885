# utils/config.py
"""
Application Settings

Version: 1.0.0
Settings come from one of two sources:
- Local: environment variables, optionally loaded from a .env file
- Streamlit Cloud: secrets.toml, sections [DB_CONFIG] and [APP]

Both are read through the same key names (DATABASE_URL, NUMBER_LOCALE,
ENABLE_CUSTOM_SEMAPHORE, ...) so .env.example documents every setting.
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///strategic_performance.db"

# key -> (default, type)
APP_SETTINGS: Dict[str, tuple] = {
    "DOCUMENT_ID": ("company_data", str),
    "DATA_FILE": ("", str),
    "NUMBER_LOCALE": ("pt_BR", str),
    "DEFAULT_ROLLING_WINDOW": (3, int),
    "CACHE_TTL_SECONDS": (300, int),
    "LOG_LEVEL": ("INFO", str),
    "ENABLE_CUSTOM_SEMAPHORE": (True, bool),
    "ENABLE_DEBUG_MODE": (False, bool),
}

Getter = Callable[[str], Optional[Any]]


def is_running_on_streamlit_cloud() -> bool:
    """True when Streamlit secrets are available"""
    try:
        import streamlit as st
        return len(st.secrets) > 0
    except Exception:
        # st.secrets raises when no secrets.toml exists
        return False


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _coerce(raw: Any, default: Any, kind: type) -> Any:
    if raw is None or raw == "":
        return default
    if kind is bool:
        return _as_bool(raw, default)
    try:
        return kind(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid setting value {raw!r}, using {default!r}")
        return default


@dataclass
class DatabaseConfig:
    """SQLAlchemy URL plus pool settings"""
    url: str = DEFAULT_DATABASE_URL
    pool_size: int = 5
    pool_recycle: int = 3600

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def masked_url(self) -> str:
        """URL with the password hidden, for logs"""
        if "@" not in self.url or "://" not in self.url:
            return self.url
        scheme, rest = self.url.split("://", 1)
        credentials, host = rest.rsplit("@", 1)
        user = credentials.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"

    @classmethod
    def from_getter(cls, get: Getter) -> "DatabaseConfig":
        return cls(
            url=get("DATABASE_URL") or DEFAULT_DATABASE_URL,
            pool_size=_coerce(get("DB_POOL_SIZE"), 5, int),
            pool_recycle=_coerce(get("DB_POOL_RECYCLE"), 3600, int),
        )


class Config:
    """
    Process-wide settings (singleton)

    Usage:
        from utils.config import config

        db_config = config.get_db_config()
        locale = config.get_app_setting("NUMBER_LOCALE", "pt_BR")

        if config.is_feature_enabled("CUSTOM_SEMAPHORE"):
            ...
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._initialized = False
            cls._instance = instance
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.is_cloud = is_running_on_streamlit_cloud()
        getter = self._cloud_getter() if self.is_cloud else self._local_getter()

        self._db_config = DatabaseConfig.from_getter(getter)
        self._app_config = {
            key: _coerce(getter(key), default, kind)
            for key, (default, kind) in APP_SETTINGS.items()
        }
        self._app_config["LOG_LEVEL"] = self._app_config["LOG_LEVEL"].upper()

        self._log_config_status()
        self._initialized = True

    @staticmethod
    def _cloud_getter() -> Getter:
        """Look keys up in [DB_CONFIG] then [APP] of secrets.toml"""
        import streamlit as st

        sections = [dict(st.secrets.get("DB_CONFIG", {})), dict(st.secrets.get("APP", {}))]
        logger.info("☁️ Settings from Streamlit secrets")

        def get(key: str) -> Optional[Any]:
            for section in sections:
                if key in section:
                    return section[key]
            return None

        return get

    @staticmethod
    def _local_getter() -> Getter:
        """Environment variables, after loading the first .env found"""
        for env_path in (Path.cwd() / ".env", Path(__file__).parent.parent / ".env"):
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded .env from: {env_path}")
                break

        logger.info("💻 Settings from local environment")
        return os.getenv

    def _log_config_status(self):
        logger.info(f"✅ Database: {self._db_config.masked_url()}")
        logger.info(
            f"✅ Document '{self._app_config['DOCUMENT_ID']}', "
            f"locale {self._app_config['NUMBER_LOCALE']}"
        )

    # ==================== ACCESSORS ====================

    def get_db_config(self) -> DatabaseConfig:
        return self._db_config

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Feature flag lookup: is_feature_enabled("DEBUG_MODE") reads ENABLE_DEBUG_MODE"""
        return bool(self._app_config.get(f"ENABLE_{feature.upper()}", False))

    @property
    def db_config(self) -> Dict[str, Any]:
        return asdict(self._db_config)

    @property
    def app_config(self) -> Dict[str, Any]:
        return dict(self._app_config)


config = Config()

IS_RUNNING_ON_CLOUD = config.is_cloud
DB_CONFIG = config.db_config
APP_CONFIG = config.app_config

__all__ = [
    'config',
    'Config',
    'DatabaseConfig',
    'IS_RUNNING_ON_CLOUD',
    'DB_CONFIG',
    'APP_CONFIG',
]
