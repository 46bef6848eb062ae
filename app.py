# app.py
"""
Commission Tracker - Main Entry Point

Sign-in (Zoho OAuth through the commission API) and the landing page.

Version: 1.0.0
"""

import streamlit as st
from commission_tracker.auth import AuthManager
from commission_tracker.config import config
import logging

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.is_feature_enabled("DEBUG_MODE") else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "Commission Tracker"
APP_ICON = "💰"
APP_VERSION = "1.0.0"

PAGES = [
    ("💰 Commission Tracker", "Commission by rep for the current month, the previous month or any range.", False),
    ("🧾 Invoices", "Invoices behind the commissions, grouped by rep. Sync from Zoho on demand.", False),
    ("🛠️ Admin Panel", "Choose which salespeople are tracked.", True),
]

st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .login-title {
        font-size: 2.5rem;
        font-weight: bold;
        color: #3965ff;
        margin-bottom: 0;
    }
</style>
""", unsafe_allow_html=True)

auth = AuthManager()

# ==================== VIEWS ====================

def show_login_page():
    """OAuth sign-in button (plus the error of a failed callback)"""
    _, col, _ = st.columns([1, 2, 1])

    with col:
        st.markdown(f'<p class="login-title">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
        st.caption("Sales commissions straight from your invoices")

        if auth.last_error:
            st.error(f"⚠️ {auth.last_error}")

        login_url = auth.get_login_url()
        if not login_url:
            st.error(f"⚠️ Could not reach the commission API at {config.get_api_url()}")
            st.info("Please check your network connection or try again later.")
            return

        st.link_button("🔑 Sign in with Zoho", login_url, type="primary", use_container_width=True)
        st.caption(
            f"You will be sent back here once Zoho grants access. "
            f"Sessions last {config.get_app_setting('SESSION_TIMEOUT_HOURS', 8)} hours."
        )


def show_main_app():
    """Landing page after sign-in"""
    with st.sidebar:
        st.markdown(f"### 👤 {auth.get_user_display_name()}")

        if auth.is_admin():
            st.success("🔓 Admin - All Reps")
        else:
            st.warning("👤 Personal Access")

        if st.button("🚪 Logout", use_container_width=True):
            auth.logout()
            st.rerun()

    st.title(f"Welcome, {auth.get_user_display_name()}! 👋")
    st.caption("Pick a page from the sidebar.")

    for title, description, admin_only in PAGES:
        if admin_only and not auth.is_admin():
            continue
        with st.container(border=True):
            st.markdown(f"**{title}**")
            st.caption(description)

    st.caption(f"{APP_NAME} v{APP_VERSION}")


# ==================== MAIN ====================

def main():
    """Main application entry point"""
    if auth.capture_token_from_query():
        st.rerun()

    if not auth.check_session():
        show_login_page()
    else:
        show_main_app()


if __name__ == "__main__":
    main()
