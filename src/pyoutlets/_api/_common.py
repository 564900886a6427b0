"""Shared helpers for endpoint modules.

It is internal to pyoutlets and may change at any time.
"""

from __future__ import annotations

from typing import Any

from pyoutlets.exceptions import OutletsTransportError


def expect_object(endpoint: str, decoded: Any) -> dict[str, Any]:
    """Return *decoded* as a dict or raise if the body had another shape."""
    if not isinstance(decoded, dict):
        raise OutletsTransportError(
            f"Expected a JSON object from {endpoint}, got {type(decoded).__name__}",
            endpoint=endpoint,
        )
    return dict(decoded)


def extract_items(decoded: Any, *keys: str) -> list[Any]:
    """Pull a list out of either a bare list or an envelope like ``{"outlets": [...]}``."""
    if isinstance(decoded, list):
        return decoded
    if isinstance(decoded, dict):
        for key in keys:
            value = decoded.get(key)
            if isinstance(value, list):
                return value
    return []
