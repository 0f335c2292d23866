"""Alerting helpers for readings outside the hydroponic optimal ranges."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

logger = logging.getLogger(__name__)


# metric -> display unit, optimal band, and the alert-settings toggle that gates it
OPTIMAL_RANGES: dict[str, dict[str, Any]] = {
    "temperature": {"unit": "°C", "low": 28.0, "high": 32.0, "toggle": "temperature_alerts"},
    "ph": {"unit": "", "low": 6.5, "high": 7.5, "toggle": "ph_alerts"},
    "tds_level": {"unit": "ppm", "low": 400.0, "high": 600.0, "toggle": "tds_level_alerts"},
}


def get_metric_unit(metric: str) -> str:
    """Return the display unit configured for *metric*."""

    return OPTIMAL_RANGES.get(metric, {}).get("unit", "")


def optimality_status(value: float, low: float, high: float) -> str:
    """Classify *value* as ``optimal``, ``low`` or ``high`` against ``[low, high]``.

    Outside the band the nearer bound decides the direction.
    """

    if low <= value <= high:
        return "optimal"
    if abs(value - low) < abs(value - high):
        return "low"
    return "high"


@dataclass(frozen=True)
class OptimalityAlert:
    """A reading outside the optimal band of an enabled metric."""

    metric: str
    value: float
    status: str
    low: float
    high: float
    unit: str
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def message(self) -> str:
        unit = f" {self.unit}" if self.unit else ""
        return f"{self.metric} is {self.status}: {self.value}{unit} (optimal {self.low}-{self.high}{unit})"

    def as_dict(self) -> dict[str, Any]:
        return {
            "metric": self.metric,
            "value": self.value,
            "status": self.status,
            "low": self.low,
            "high": self.high,
            "unit": self.unit,
            "message": self.message,
        }


def _enabled(settings: Any, toggle: str) -> bool:
    if settings is None:
        return True
    if isinstance(settings, dict):
        return bool(settings.get(toggle, False))
    return bool(getattr(settings, toggle, False))


def evaluate_reading(reading: Any, settings: Any = None) -> list[OptimalityAlert]:
    """Return alerts for each metric of *reading* outside its optimal band.

    *reading* is anything exposing ``temperature``, ``ph`` and ``tds_level``.
    A metric is skipped when its toggle in *settings* is off; with no settings
    every metric is checked.
    """

    alerts: list[OptimalityAlert] = []
    for metric, cfg in OPTIMAL_RANGES.items():
        if not _enabled(settings, cfg["toggle"]):
            continue
        value = getattr(reading, metric, None)
        if value is None:
            continue
        try:
            value = float(value)
        except (TypeError, ValueError):
            logger.warning("Non-numeric %s value in reading: %r", metric, value)
            continue
        status = optimality_status(value, cfg["low"], cfg["high"])
        if status == "optimal":
            continue
        alerts.append(
            OptimalityAlert(
                metric=metric,
                value=value,
                status=status,
                low=cfg["low"],
                high=cfg["high"],
                unit=get_metric_unit(metric),
            )
        )
    return alerts


def iter_ranges() -> Iterable[tuple[str, dict[str, Any]]]:
    """Utility for iterating optimal ranges; used by API endpoints."""

    return OPTIMAL_RANGES.items()
