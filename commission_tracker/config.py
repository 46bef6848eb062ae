# commission_tracker/config.py
"""
Centralized Configuration Management

Features:
- Support both local (.env) and Streamlit Cloud (secrets.toml)
- Singleton pattern for efficiency
- Type-safe getters with defaults
- Environment detection

Missing settings never raise: the dashboard falls back to defaults and
reports what is not configured in the log.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any
from dataclasses import dataclass

# Initialize logger
logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000"


def is_running_on_streamlit_cloud() -> bool:
    """Detect if running on Streamlit Cloud"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and len(st.secrets) > 0
    except Exception:
        return False


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid integer setting {value!r}, using {default}")
        return default


@dataclass
class ApiConfig:
    """Remote commission API configuration container"""
    base_url: str = DEFAULT_API_URL
    timeout_seconds: int = 15

    def to_dict(self) -> Dict[str, Any]:
        return {
            'base_url': self.base_url,
            'timeout_seconds': self.timeout_seconds,
        }

    def is_configured(self) -> bool:
        return bool(self.base_url)


class Config:
    """
    Centralized configuration management

    Usage:
        from commission_tracker.config import config

        # Get API config
        api_config = config.get_api_config()

        # Get app settings
        timeout = config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)

        # Check feature flags
        if config.is_feature_enabled("DEBUG_MODE"):
            ...
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.is_cloud = is_running_on_streamlit_cloud()
        self._load_config()
        self._initialized = True

    def _load_config(self):
        """Load configuration based on environment"""
        if self.is_cloud:
            settings = self._load_cloud_settings()
        else:
            settings = self._load_local_settings()

        self._api_config = ApiConfig(
            base_url=(settings.get("API_URL") or DEFAULT_API_URL).rstrip("/"),
            timeout_seconds=_as_int(settings.get("API_TIMEOUT_SECONDS"), 15),
        )

        self._load_app_config(settings)
        self._log_config_status()

    def _load_cloud_settings(self) -> Dict[str, Any]:
        """Load configuration from Streamlit Cloud secrets"""
        import streamlit as st

        settings: Dict[str, Any] = {}
        settings.update(dict(st.secrets.get("APP", {})))
        settings.update(dict(st.secrets.get("API", {})))

        logger.info("☁️ Running in STREAMLIT CLOUD")
        return settings

    def _load_local_settings(self) -> Dict[str, Any]:
        """Load configuration from local .env file"""
        # Find and load .env file
        env_paths = [
            Path.cwd() / ".env",
            Path(__file__).parent.parent / ".env",
        ]

        for env_path in env_paths:
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded .env from: {env_path}")
                break

        keys = [
            "API_URL", "API_TIMEOUT_SECONDS", "SESSION_TIMEOUT_HOURS",
            "CACHE_TTL_SECONDS", "CHART_LABEL_MAX_LENGTH", "CURRENCY",
            "ENABLE_DEBUG_MODE", "ENABLE_EXCEL_EXPORT",
        ]

        logger.info("💻 Running in LOCAL environment")
        return {key: os.getenv(key) for key in keys if os.getenv(key) is not None}

    def _load_app_config(self, settings: Dict[str, Any]):
        """Load application-specific settings"""
        self._app_config = {
            # Session
            "SESSION_TIMEOUT_HOURS": _as_int(settings.get("SESSION_TIMEOUT_HOURS"), 8),

            # Cache
            "CACHE_TTL_SECONDS": _as_int(settings.get("CACHE_TTL_SECONDS"), 300),

            # Display
            "CHART_LABEL_MAX_LENGTH": _as_int(settings.get("CHART_LABEL_MAX_LENGTH"), 15),
            "CURRENCY": str(settings.get("CURRENCY") or "CAD").upper(),

            # Feature flags
            "ENABLE_DEBUG_MODE": _as_bool(settings.get("ENABLE_DEBUG_MODE"), False),
            "ENABLE_EXCEL_EXPORT": _as_bool(settings.get("ENABLE_EXCEL_EXPORT"), True),
        }

    def _log_config_status(self):
        """Log configuration status"""
        logger.info(f"✅ Commission API: {self._api_config.base_url}")
        logger.info(f"✅ Currency: {self._app_config['CURRENCY']}")

    # ==================== PUBLIC GETTERS ====================

    def get_api_config(self) -> Dict[str, Any]:
        """Get API configuration as dictionary"""
        return self._api_config.to_dict()

    def get_api_url(self) -> str:
        """Get base URL of the commission API"""
        return self._api_config.base_url

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting with default"""
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Check if feature is enabled"""
        key = f"ENABLE_{feature.upper()}"
        return self._app_config.get(key, True)

    # ==================== PROPERTIES ====================

    @property
    def api_config(self) -> Dict[str, Any]:
        return self.get_api_config()

    @property
    def app_config(self) -> Dict[str, Any]:
        return self._app_config.copy()


# ==================== SINGLETON INSTANCE ====================

config = Config()

IS_RUNNING_ON_CLOUD = config.is_cloud
API_CONFIG = config.api_config
APP_CONFIG = config.app_config

__all__ = [
    'config',
    'Config',
    'ApiConfig',
    'IS_RUNNING_ON_CLOUD',
    'API_CONFIG',
    'APP_CONFIG',
]
