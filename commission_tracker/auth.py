# commission_tracker/auth.py
"""
Authentication Manager for the Commission Tracker

Features:
- OAuth redirect handling (?code= exchange or a verified ?token=)
- Session management with timeout (st.session_state)
- Admin flag from the API user block or the token claims

The remote API owns the OAuth flow; this module only keeps the token it
hands back and exposes it to the pages. Nothing below the page layer reads
st.session_state directly.
"""

import base64
import json
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

import streamlit as st

from .api_client import TrackerApiClient
from .config import config
from .errors import ApiError

logger = logging.getLogger(__name__)

SESSION_KEYS = [
    'authenticated', 'api_token', 'user_name', 'user_email',
    'is_admin', 'login_time',
]

CALLBACK_PARAMS = ('code', 'token', 'error')


def decode_token_claims(token: Optional[str]) -> Dict:
    """
    Read the (unverified) claims of a JWT.

    Only used for display and UI gating; the API re-checks every request.
    """
    if not token:
        return {}
    try:
        payload = token.split('.')[1]
        padded = payload + '=' * (-len(payload) % 4)
        claims = json.loads(base64.urlsafe_b64decode(padded.encode()).decode('utf-8'))
    except (IndexError, ValueError, UnicodeDecodeError):
        logger.warning("Could not decode token claims")
        return {}
    return claims if isinstance(claims, dict) else {}


class AuthManager:
    """Session provider for the Commission Tracker pages"""

    def __init__(self):
        self.last_error: Optional[str] = None
        self.session_timeout = timedelta(
            hours=config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
        )

    # ==================== LOGIN FLOW ====================

    def get_login_url(self) -> Optional[str]:
        """Ask the API for the OAuth consent URL"""
        try:
            return TrackerApiClient().get_auth_url()
        except ApiError as e:
            logger.error(f"Failed to get auth URL: {e}")
            return None

    def capture_token_from_query(self, client: Optional[TrackerApiClient] = None) -> bool:
        """
        Sign in from the OAuth redirect.

        Two callback shapes are accepted:
        - ?code=...  exchanged at the API for {user, token}
        - ?token=... verified against the API before it is kept

        Returns:
            True if a session was started
        """
        params = {key: st.query_params.get(key) for key in CALLBACK_PARAMS}
        if not any(params.values()):
            return False

        for key, value in params.items():
            if value is not None:
                del st.query_params[key]

        self.last_error = None
        if params['error']:
            logger.warning(f"OAuth provider returned an error: {params['error']}")
            self.last_error = "Authentication failed. Please try again."
            return False

        client = client or TrackerApiClient()

        try:
            if params['code']:
                data = client.exchange_auth_code(params['code'])
                self.login(data['token'], data['user'])
                return True

            client.token = params['token']
            valid = client.verify_token()
        except ApiError as e:
            logger.error(f"OAuth sign-in failed: {e}")
            self.last_error = "Authentication failed. Please try again."
            return False

        if not valid:
            logger.warning("OAuth token rejected by the API")
            self.logout()
            self.last_error = "Your sign-in link is no longer valid. Please sign in again."
            return False

        self.login(params['token'])
        return True

    def login(self, token: str, user: Optional[Dict] = None):
        """Initialize user session after the API handed back a token"""
        claims = decode_token_claims(token)
        user = user or {}

        st.session_state.authenticated = True
        st.session_state.api_token = token
        st.session_state.user_name = user.get('name') or claims.get('name') or 'Sales Rep'
        st.session_state.user_email = user.get('email') or claims.get('email') or ''
        st.session_state.is_admin = bool(user.get('isAdmin', claims.get('isAdmin', False)))
        st.session_state.login_time = datetime.now()

        logger.info(f"User {st.session_state.user_name} logged in (admin={st.session_state.is_admin})")

    def update_user(self, user: Optional[Dict]):
        """Refresh name/admin flag from the user block of an API response"""
        if not user or not self.check_session():
            return
        if user.get('name'):
            st.session_state.user_name = user['name']
        if user.get('email'):
            st.session_state.user_email = user['email']
        if 'isAdmin' in user:
            st.session_state.is_admin = bool(user['isAdmin'])

    def logout(self):
        """Clear user session and cache"""
        username = st.session_state.get('user_name', 'Unknown')

        for key in SESSION_KEYS:
            if key in st.session_state:
                del st.session_state[key]

        st.cache_data.clear()

        logger.info(f"User {username} logged out")

    # ==================== SESSION MANAGEMENT ====================

    def check_session(self) -> bool:
        """Check if user session is valid and not expired"""
        if not st.session_state.get('authenticated') or not st.session_state.get('api_token'):
            return False

        login_time = st.session_state.get('login_time')
        if login_time:
            elapsed = datetime.now() - login_time
            if elapsed > self.session_timeout:
                logger.info(f"Session expired for user: {st.session_state.get('user_name')}")
                self.logout()
                return False

        return True

    def get_token(self) -> Optional[str]:
        return st.session_state.get('api_token')

    # ==================== ACCESS CONTROL ====================

    def require_auth(self) -> bool:
        """
        Require authentication to access a page
        Use at the beginning of each protected page
        """
        if not self.check_session():
            st.warning("⚠️ Please login to access this page")
            st.info("Go to the main page to login")
            st.stop()
            return False
        return True

    def require_admin(self) -> bool:
        """Require the admin flag to access a page"""
        if not self.require_auth():
            return False

        if not self.is_admin():
            st.error("🚫 Access denied. Admin only.")
            st.stop()
            return False

        return True

    def is_admin(self) -> bool:
        return bool(st.session_state.get('is_admin', False))

    # ==================== USER INFO HELPERS ====================

    def get_user_display_name(self) -> str:
        return st.session_state.get('user_name') or 'User'


# ==================== MODULE EXPORTS ====================

__all__ = [
    'AuthManager',
    'decode_token_claims',
]
