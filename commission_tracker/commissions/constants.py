# commission_tracker/commissions/constants.py
"""
Constants for Commission Tracker Module

Centralized configuration for:
- Role definitions
- Period definitions
- Invoice statuses
- Color schemes
- Chart settings
- Export settings
"""

# =====================================================================
# ROLE DEFINITIONS
# =====================================================================

# Full access: can view every rep's commissions and invoices
FULL_ACCESS_LEVEL = 'full'

# Self access: can only view own data
SELF_ACCESS_LEVEL = 'self'

# =====================================================================
# LABELS
# =====================================================================

UNASSIGNED_REP = "Unassigned"
UNKNOWN_REP = "Unknown"

ELLIPSIS = "..."

# =====================================================================
# PERIOD DEFINITIONS
# =====================================================================

PERIOD_CURRENT_MONTH = "Current Month"
PERIOD_PREVIOUS_MONTH = "Previous Month"
PERIOD_CUSTOM = "Custom Range"

PERIOD_TYPES = [PERIOD_CURRENT_MONTH, PERIOD_PREVIOUS_MONTH, PERIOD_CUSTOM]

# Month offset relative to the reference date
PERIOD_OFFSETS = {
    PERIOD_CURRENT_MONTH: 0,
    PERIOD_PREVIOUS_MONTH: -1,
}

# =====================================================================
# INVOICE STATUSES
# =====================================================================

# Observed set; unknown statuses pass through untouched
INVOICE_STATUSES = ['paid', 'pending', 'overdue', 'draft', 'void']

# =====================================================================
# CSV LAYOUT
# =====================================================================

CSV_HEADERS = ['Rep Name', 'Invoices', 'Commission', 'Avg per Invoice']

# =====================================================================
# COLOR SCHEME
# =====================================================================

COLORS = {
    # Primary metrics
    "commission": "#3965ff",           # Blue
    "previous": "#aec7e8",             # Light Blue
    "top_performer": "#ffa500",        # Orange

    # Invoice statuses
    "paid": "#28a745",
    "pending": "#ffc107",
    "overdue": "#dc3545",
    "draft": "#6c757d",
    "void": "#343a40",
    "other": "#bcbd22",

    # Misc
    "text_dark": "#333333",
    "text_light": "#666666",
}

# =====================================================================
# CHART DIMENSIONS
# =====================================================================

CHART_WIDTH = 800
CHART_HEIGHT = 400

PIE_CHART_WIDTH = 400
PIE_CHART_HEIGHT = 300

# Max characters of a rep name on a chart axis
CHART_LABEL_MAX_LENGTH = 15

# =====================================================================
# EXPORT SETTINGS
# =====================================================================

EXCEL_STYLES = {
    "header_fill_color": "3965ff",
    "header_font_color": "FFFFFF",
    "currency_format": '#,##0.00',
    "date_format": 'YYYY-MM-DD',
}

CSV_MIME = "text/csv"
EXCEL_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# =====================================================================
# DISPLAY FORMATS
# =====================================================================

DEFAULT_CURRENCY = "CAD"

CURRENCY_SYMBOLS = {
    "CAD": "$",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}
