"""Per-item lookup metrics."""

from __future__ import annotations

from typing import Any, Protocol

from lookup_manager import config
from lookup_manager.logging import get_logger

logger = get_logger("metrics")

UNKNOWN_LABEL = "unknown"
MAX_LABEL_LENGTH = 128
OUTCOME_OK = "ok"
OUTCOME_EMPTY = "empty"
OUTCOME_ERROR = "error"


class LookupMetricsBackend(Protocol):
    def record_item(self, *, kind: str, name: str, outcome: str, duration: float) -> None: ...


class NoopLookupMetricsBackend:
    def record_item(self, *, kind: str, name: str, outcome: str, duration: float) -> None:
        return None


class PrometheusLookupMetricsBackend:
    _initialized = False
    _item_counter: Any
    _item_duration: Any

    def __init__(self) -> None:
        self._ensure_metrics()

    @classmethod
    def _ensure_metrics(cls) -> None:
        if cls._initialized:
            return

        from prometheus_client import REGISTRY, Counter, Histogram

        def _get_or_create(
            collector_cls: type, name: str, desc: str, labels: list[str]
        ):
            existing = REGISTRY._names_to_collectors.get(name)  # type: ignore[attr-defined]
            if existing is not None:
                return existing
            return collector_cls(name, desc, labels)

        cls._item_counter = _get_or_create(
            Counter,
            "lookup_items_total",
            "Total lookup items processed.",
            ["kind", "name", "outcome"],
        )
        cls._item_duration = _get_or_create(
            Histogram,
            "lookup_item_duration_seconds",
            "Lookup item duration in seconds.",
            ["kind"],
        )
        cls._initialized = True

    def record_item(self, *, kind: str, name: str, outcome: str, duration: float) -> None:
        self._item_counter.labels(
            kind=kind, name=metric_label(name), outcome=outcome
        ).inc()
        self._item_duration.labels(kind=kind).observe(max(duration, 0.0))


def metric_label(name: str | None) -> str:
    """
    Return a bounded label value for a resolved item name.

    Callers pass the registered identity of an item, never raw request
    input; unresolved items are recorded as ``unknown``.
    """
    if not name:
        return UNKNOWN_LABEL
    return name[:MAX_LABEL_LENGTH]


_metrics_backend: LookupMetricsBackend | None = None


def reset_lookup_metrics_backend_for_tests() -> None:
    global _metrics_backend
    _metrics_backend = None


def get_lookup_metrics_backend() -> LookupMetricsBackend:
    global _metrics_backend
    if _metrics_backend is not None:
        return _metrics_backend

    if not config.metrics_enabled():
        _metrics_backend = NoopLookupMetricsBackend()
        return _metrics_backend

    backend = config.metrics_backend()
    if backend.lower() == "prometheus":
        try:
            import prometheus_client  # noqa: F401
        except ImportError as exc:  # pragma: no cover - optional dependency
            logger.warning(
                "prometheus metrics backend unavailable",
                context={"error": type(exc).__name__, "message": str(exc)},
            )
            _metrics_backend = NoopLookupMetricsBackend()
            return _metrics_backend
        _metrics_backend = PrometheusLookupMetricsBackend()
        return _metrics_backend

    logger.warning(
        "unknown lookup metrics backend; falling back to noop",
        context={"backend": backend},
    )
    _metrics_backend = NoopLookupMetricsBackend()
    return _metrics_backend


def outcome_for(result: Any) -> str:
    """Classify a per-item result as ``ok`` or ``empty``."""
    if isinstance(result, dict) and "items" in result:
        return OUTCOME_OK if result["items"] else OUTCOME_EMPTY
    return OUTCOME_OK if result else OUTCOME_EMPTY
