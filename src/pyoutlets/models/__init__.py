"""Data models for pyoutlets."""

from pyoutlets.models._base import ErrorInfo, OutletsBaseModel
from pyoutlets.models.chat import (
    ChatHistory,
    ChatMessage,
    ChatReply,
    ChatSession,
    CreateSessionResult,
    HealthStatus,
    HistoryEntry,
    MessageRole,
    SessionStatus,
)
from pyoutlets.models.intersection import IntersectionIndex, IntersectionRecord, Neighbor
from pyoutlets.models.location import LocationPermission, LocationState, UserLocation
from pyoutlets.models.outlet import Outlet, OutletFeatures, OutletId, OutletInfo, outlet_id_sort_key

__all__ = [
    "ChatHistory",
    "ChatMessage",
    "ChatReply",
    "ChatSession",
    "CreateSessionResult",
    "ErrorInfo",
    "HealthStatus",
    "HistoryEntry",
    "IntersectionIndex",
    "IntersectionRecord",
    "LocationPermission",
    "LocationState",
    "MessageRole",
    "Neighbor",
    "Outlet",
    "OutletFeatures",
    "OutletId",
    "OutletInfo",
    "OutletsBaseModel",
    "SessionStatus",
    "UserLocation",
    "outlet_id_sort_key",
]
