"""Per-client request metrics.

An ``ApiMetrics`` instance is created by whoever owns the transport and
passed in explicitly; there is no process-wide recorder.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from pyoutlets._constants import METRICS_HISTORY


@dataclass(frozen=True, slots=True)
class RequestTiming:
    """A single completed (or failed) request."""

    method: str
    url: str
    duration_ms: float
    status: int | None = None
    error: str | None = None

    @property
    def endpoint(self) -> str:
        return f"{self.method} {self.url}"


class EndpointTiming(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoint: str
    duration_ms: float


class MetricsSnapshot(BaseModel):
    """Aggregated view of everything recorded so far."""

    model_config = ConfigDict(frozen=True)

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_response_ms: float = 0.0
    slowest: EndpointTiming | None = None
    fastest: EndpointTiming | None = None
    requests_by_endpoint: dict[str, int] = Field(default_factory=dict)
    errors_by_endpoint: dict[str, int] = Field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests


class ApiMetrics:
    """Accumulates request timings for one transport."""

    def __init__(self, *, history: int = METRICS_HISTORY) -> None:
        self._timings: deque[RequestTiming] = deque(maxlen=history)
        self._total = 0
        self._successful = 0
        self._failed = 0
        self._duration_sum = 0.0
        self._duration_count = 0
        self._slowest: EndpointTiming | None = None
        self._fastest: EndpointTiming | None = None
        self._requests_by_endpoint: dict[str, int] = {}
        self._errors_by_endpoint: dict[str, int] = {}

    def record(self, timing: RequestTiming) -> None:
        endpoint = timing.endpoint
        self._total += 1
        self._requests_by_endpoint[endpoint] = self._requests_by_endpoint.get(endpoint, 0) + 1

        if timing.duration_ms > 0:
            self._duration_sum += timing.duration_ms
            self._duration_count += 1
            if self._slowest is None or timing.duration_ms > self._slowest.duration_ms:
                self._slowest = EndpointTiming(endpoint=endpoint, duration_ms=timing.duration_ms)
            if self._fastest is None or timing.duration_ms < self._fastest.duration_ms:
                self._fastest = EndpointTiming(endpoint=endpoint, duration_ms=timing.duration_ms)

        if timing.error is not None:
            self._failed += 1
            self._errors_by_endpoint[endpoint] = self._errors_by_endpoint.get(endpoint, 0) + 1
        elif timing.status is not None and timing.status < 400:
            self._successful += 1

        self._timings.append(timing)

    @property
    def recent(self) -> tuple[RequestTiming, ...]:
        return tuple(self._timings)

    def snapshot(self) -> MetricsSnapshot:
        average = round(self._duration_sum / self._duration_count) if self._duration_count else 0.0
        return MetricsSnapshot(
            total_requests=self._total,
            successful_requests=self._successful,
            failed_requests=self._failed,
            average_response_ms=float(average),
            slowest=self._slowest,
            fastest=self._fastest,
            requests_by_endpoint=dict(self._requests_by_endpoint),
            errors_by_endpoint=dict(self._errors_by_endpoint),
        )

    def reset(self) -> None:
        self._timings.clear()
        self._total = 0
        self._successful = 0
        self._failed = 0
        self._duration_sum = 0.0
        self._duration_count = 0
        self._slowest = None
        self._fastest = None
        self._requests_by_endpoint.clear()
        self._errors_by_endpoint.clear()
