"""Project-wide constants (defaults for quota, paging and delivery)."""

DEFAULT_DAILY_LIMIT: int = 10
DEFAULT_RESULTS_PER_PAGE: int = 10
DEFAULT_SELECTION_TTL_SECONDS: int = 5 * 60
DEFAULT_SELECTION_SWEEP_INTERVAL_SECONDS: int = 60

DEFAULT_QUOTA_TIMEZONE: str = "UTC"

DEFAULT_DELIVERY_BASE_URL: str = "https://api.telegram.org"
DEFAULT_DELIVERY_TIMEOUT_SECONDS: int = 30

DEFAULT_DISPLAY_NAME: str = "file"
SEARCH_CALLBACK_PREFIX: str = "search_"
