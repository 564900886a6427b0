"""pyoutlets - Async location-aware outlet map and chat kernel."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyoutlets")
except PackageNotFoundError:
    __version__ = "0+local"
from pyoutlets._metrics import ApiMetrics
from pyoutlets.chat import ChatBackend, HttpChatBackend, SessionCoordinator, parse_outlet_info
from pyoutlets.client import OutletsClient
from pyoutlets.config import OutletsConfig
from pyoutlets.exceptions import (
    LocationError,
    LocationNotSupportedError,
    LocationPermissionDeniedError,
    LocationTimeoutError,
    LocationUnavailableError,
    LocationUnknownError,
    OutletsApiError,
    OutletsConfigError,
    OutletsError,
    OutletsTimeoutError,
    OutletsTransportError,
    SessionBusyError,
    SessionCreateError,
    SessionDeleteError,
    SessionError,
    SessionErrorPendingError,
    SessionNotActiveError,
    SessionSendError,
)
from pyoutlets.location import LocationAcquisition, Platform, Position, PositionSensor, SensorError, SensorErrorCode
from pyoutlets.models import (
    ChatMessage,
    ChatSession,
    IntersectionIndex,
    IntersectionRecord,
    LocationPermission,
    LocationState,
    MessageRole,
    Neighbor,
    Outlet,
    OutletFeatures,
    SessionStatus,
    UserLocation,
)
from pyoutlets.proximity import ProximityEngine, SelectionHighlighter, compute_intersections

__all__ = [
    "__version__",
    "ApiMetrics",
    "ChatBackend",
    "ChatMessage",
    "ChatSession",
    "HttpChatBackend",
    "IntersectionIndex",
    "IntersectionRecord",
    "LocationAcquisition",
    "LocationError",
    "LocationNotSupportedError",
    "LocationPermission",
    "LocationPermissionDeniedError",
    "LocationState",
    "LocationTimeoutError",
    "LocationUnavailableError",
    "LocationUnknownError",
    "MessageRole",
    "Neighbor",
    "Outlet",
    "OutletFeatures",
    "OutletsApiError",
    "OutletsClient",
    "OutletsConfig",
    "OutletsConfigError",
    "OutletsError",
    "OutletsTimeoutError",
    "OutletsTransportError",
    "Platform",
    "Position",
    "PositionSensor",
    "ProximityEngine",
    "SelectionHighlighter",
    "SensorError",
    "SensorErrorCode",
    "SessionBusyError",
    "SessionCoordinator",
    "SessionCreateError",
    "SessionDeleteError",
    "SessionError",
    "SessionErrorPendingError",
    "SessionNotActiveError",
    "SessionSendError",
    "SessionStatus",
    "UserLocation",
    "compute_intersections",
    "parse_outlet_info",
]
