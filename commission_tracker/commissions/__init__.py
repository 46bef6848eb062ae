# commission_tracker/commissions/__init__.py
"""
Commission Tracker Module

Utilities for the commission pages (tracker, invoices, admin).

Components:
- models: Records built from API rows, DateRange, aggregator outputs
- metrics: Month ranges, per-rep rollups, summary, invoice grouping, CSV
- access_control: Admin / own-rows-only data access
- queries: Cached API loading
- filters: Period, custom range and rep selector components
- charts: Altair visualizations
- export: CSV and formatted Excel report generation

Usage:
    from commission_tracker.commissions import (
        AccessControl,
        CommissionQueries,
        CommissionAggregator,
        CommissionFilters,
        CommissionCharts,
        CommissionExport,
    )
"""

from .models import (
    CommissionRecord,
    InvoiceRecord,
    DateRange,
    RepRollup,
    SummaryMetrics,
    ChartPoint,
    InvoiceFilter,
    Salesperson,
)
from .metrics import CommissionAggregator
from .access_control import AccessControl
from .queries import CommissionQueries, clear_cache
from .filters import CommissionFilters, validate_date_range, resolve_period
from .charts import CommissionCharts
from .export import CommissionExport, build_filename

# Constants
from .constants import (
    COLORS,
    PERIOD_TYPES,
    INVOICE_STATUSES,
    CSV_HEADERS,
    FULL_ACCESS_LEVEL,
    SELF_ACCESS_LEVEL,
    UNASSIGNED_REP,
    CHART_WIDTH,
    CHART_HEIGHT,
)

__all__ = [
    # Models
    'CommissionRecord',
    'InvoiceRecord',
    'DateRange',
    'RepRollup',
    'SummaryMetrics',
    'ChartPoint',
    'InvoiceFilter',
    'Salesperson',

    # Classes
    'CommissionAggregator',
    'AccessControl',
    'CommissionQueries',
    'CommissionFilters',
    'CommissionCharts',
    'CommissionExport',

    # Functions
    'clear_cache',
    'validate_date_range',
    'resolve_period',
    'build_filename',

    # Constants
    'COLORS',
    'PERIOD_TYPES',
    'INVOICE_STATUSES',
    'CSV_HEADERS',
    'FULL_ACCESS_LEVEL',
    'SELF_ACCESS_LEVEL',
    'UNASSIGNED_REP',
    'CHART_WIDTH',
    'CHART_HEIGHT',
]

__version__ = '1.0.0'
