# generator.py
# Plausible hydroponic readings with a daily pattern, for seeding and demo feeds.
# Deterministic for a given seed; the default seed is today's date (YYYYMMDD).

from __future__ import annotations
from datetime import date, datetime, timedelta
import math, random

DATA_POINTS_PER_DAY = 144
MAX_OUTLIERS_PER_DAY = 5

def daily_seed(day: date | None = None) -> int:
    d = day or date.today()
    return d.year * 10000 + d.month * 100 + d.day

def _step(prev: float, target: float, max_change: float) -> float:
    """Limit the change from *prev* towards *target* to *max_change*."""
    change = target - prev
    if abs(change) > max_change:
        return prev + (max_change if change > 0 else -max_change)
    return target

class SensorDataGenerator:
    def __init__(self, seed: int | None = None):
        self.rng = random.Random(daily_seed() if seed is None else seed)
        self.last_tds = 500.0
        self.last_ph = 7.0
        self.tds_outlier_count = 0
        self._last_day: date | None = None

    def temperature(self, ts: datetime) -> float:
        variation = math.sin((ts.hour - 6) * math.pi / 12) * 2
        noise = (self.rng.random() - 0.5) * 1.5
        return round(30 + variation + noise, 1)

    def ph(self, ts: datetime) -> float:
        variation = math.sin(ts.hour * math.pi / 12) * 0.15
        noise = (self.rng.random() - 0.5) * 0.2
        target = max(6.7, min(7.3, 7.0 + variation + noise))
        self.last_ph = _step(self.last_ph, target, 0.05)
        return round(self.last_ph, 2)

    def tds_level(self, ts: datetime) -> float:
        day = ts.date()
        if self._last_day is not None and day != self._last_day:
            self.tds_outlier_count = 0
        self._last_day = day

        outlier_p = MAX_OUTLIERS_PER_DAY / DATA_POINTS_PER_DAY
        if self.rng.random() < outlier_p and self.tds_outlier_count < MAX_OUTLIERS_PER_DAY:
            if self.rng.random() > 0.5:
                target = 650 + self.rng.random() * 150
            else:
                target = 200 + self.rng.random() * 150
            self.tds_outlier_count += 1
        else:
            variation = math.sin(ts.hour * math.pi / 12) * 30
            noise = (self.rng.random() - 0.5) * 40
            target = max(420.0, min(580.0, 500 + variation + noise))

        self.last_tds = _step(self.last_tds, target, 15)
        return round(self.last_tds, 2)

    def reading_at(self, ts: datetime) -> dict:
        return {
            "timestamp": ts,
            "temperature": self.temperature(ts),
            "ph": self.ph(ts),
            "tds_level": self.tds_level(ts),
        }

    def window(self, end: datetime, hours: int = 24, period_minutes: int = 10) -> list[dict]:
        """Readings from *end* - *hours* up to and including *end*, oldest first."""
        step = timedelta(minutes=period_minutes)
        n = int(timedelta(hours=hours) / step)
        return [self.reading_at(end - i * step) for i in range(n, -1, -1)]
