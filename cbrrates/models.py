"""Data models for rate records and aggregated results."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class RateRecord:
    """One feed entry normalised to a per-unit rate."""

    date: str  # DD/MM/YYYY, as requested from the feed
    code: str
    name: str
    value: float


@dataclass(slots=True)
class CurrencyAggregate:
    name: str
    total: float
    count: int

    @property
    def mean(self) -> float:
        return self.total / self.count


@dataclass(slots=True)
class Extremes:
    maximum: RateRecord
    minimum: RateRecord


@dataclass(slots=True)
class RateSummary:
    days_requested: int
    days_fetched: int
    record_count: int
    currencies: dict[str, CurrencyAggregate] = field(default_factory=dict)
    extremes: Extremes | None = None

    @property
    def has_data(self) -> bool:
        return self.record_count > 0 and self.extremes is not None
