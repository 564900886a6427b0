"""Base model and shared helpers for pyoutlets models.

Every backend response model inherits from :class:`OutletsBaseModel`
which provides:

* frozen instances (value equality, safe to share as snapshots),
* ``populate_by_name`` so both API keys and field names are accepted,
* a ``model_validator(mode="before")`` that drops the placeholder
  values the backend uses for "not available" (``""``, ``"--"``, NaN)
  so the field default is used instead.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

# Sentinel strings the backend uses for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan", "null"})


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip() in _SENTINELS:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


class OutletsBaseModel(BaseModel):
    """Base for backend response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_sentinels(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned


class ErrorInfo(BaseModel):
    """An error tag held in component state until explicitly cleared."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    details: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException, *, code: str | None = None) -> ErrorInfo:
        exc_code = getattr(exc, "code", None)
        resolved = code or (str(exc_code) if exc_code else type(exc).__name__)
        cause = exc.__cause__
        details = str(cause) if cause is not None and str(cause) else None
        return cls(code=resolved, message=str(exc) or type(exc).__name__, details=details)
