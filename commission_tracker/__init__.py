# commission_tracker/__init__.py
"""
Shared Package for the Commission Tracker Streamlit App

This package contains common pieces shared across all pages:
- auth: Session management (token from the OAuth redirect)
- config: Configuration management (local + Streamlit Cloud)
- api_client: REST client for the commission API
- errors: Exception hierarchy

Usage:
    from commission_tracker.auth import AuthManager
    from commission_tracker.config import config

    # Or import commonly used items directly
    from commission_tracker import AuthManager, TrackerApiClient, config
"""

# Errors
from .errors import (
    CommissionTrackerError,
    InvalidDateRangeError,
    ApiError,
    AuthenticationError,
)

# Configuration
from .config import (
    config,
    Config,
    IS_RUNNING_ON_CLOUD,
    API_CONFIG,
    APP_CONFIG,
)

# API
from .api_client import TrackerApiClient

# Authentication
from .auth import AuthManager

__all__ = [
    # Errors
    'CommissionTrackerError',
    'InvalidDateRangeError',
    'ApiError',
    'AuthenticationError',

    # Config
    'config',
    'Config',
    'IS_RUNNING_ON_CLOUD',
    'API_CONFIG',
    'APP_CONFIG',

    # API
    'TrackerApiClient',

    # Auth
    'AuthManager',
]

__version__ = '1.0.0'
