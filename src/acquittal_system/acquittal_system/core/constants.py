"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_HOURS = 24
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2

DEFAULT_POOL_SIZE = 10

DEFAULT_ACTIVITY_LIMIT = 10
TOP_N = 10
CHART_MONTHS = 12
RECENT_UPLOAD_DAYS = 7
MONTH_WINDOW_DAYS = 30

DEFAULT_AUDIT_PAGE_SIZE = 50
MAX_AUDIT_PAGE_SIZE = 500

MANUAL_ENTRY_SOURCE = "Manual Entry"
REPORT_TITLE = "CHS Acquittals Report"
REPORT_FILENAME = "chs_acquittals_report"
