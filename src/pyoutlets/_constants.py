"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8000"
USER_AGENT = "pyoutlets/1"

CHAT_PREFIX = "/api/v1/chat"
OUTLETS_PREFIX = "/api/v1/outlets"

#: Mean Earth radius used by the Haversine formula.
EARTH_RADIUS_KM = 6371.0

#: Service radius around each outlet.
DEFAULT_RADIUS_KM = 5.0

# ------------------------------------------------------------------
# Location sensor timeouts (milliseconds)
# ------------------------------------------------------------------

DEFAULT_TIMEOUT_MS = 15_000
MAX_TIMEOUT_MS = 60_000
RELAXED_TIMEOUT_FACTOR = 1.5
#: Cached positions younger than this are acceptable (5 minutes).
DEFAULT_MAXIMUM_AGE_MS = 300_000

# ------------------------------------------------------------------
# Chat backend budgets (seconds)
# ------------------------------------------------------------------

REQUEST_TIMEOUT_S = 30.0
#: First contact after idle periods can take close to a minute.
EXTENDED_TIMEOUT_S = 60.0

#: Number of request timings kept by ``ApiMetrics``.
METRICS_HISTORY = 100
