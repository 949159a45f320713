"""Fold rate records into per-currency statistics and global extremes."""

from __future__ import annotations

from collections.abc import Iterable

from cbrrates.models import CurrencyAggregate, Extremes, RateRecord, RateSummary


class RateAggregator:
    """Running per-currency sums and the global max/min per-unit rate.

    The first name seen for a code is kept. Extremes only move on a strictly
    greater or strictly lesser value, so ties keep the earliest record.
    """

    def __init__(self) -> None:
        self.currencies: dict[str, CurrencyAggregate] = {}
        self.extremes: Extremes | None = None
        self.record_count = 0

    def add(self, record: RateRecord) -> None:
        stats = self.currencies.get(record.code)
        if stats is None:
            self.currencies[record.code] = CurrencyAggregate(
                name=record.name, total=record.value, count=1
            )
        else:
            stats.total += record.value
            stats.count += 1

        if self.extremes is None:
            self.extremes = Extremes(maximum=record, minimum=record)
        else:
            if record.value > self.extremes.maximum.value:
                self.extremes.maximum = record
            if record.value < self.extremes.minimum.value:
                self.extremes.minimum = record

        self.record_count += 1

    def add_all(self, records: Iterable[RateRecord]) -> RateAggregator:
        for record in records:
            self.add(record)
        return self

    def summary(self, days_requested: int, days_fetched: int) -> RateSummary:
        return RateSummary(
            days_requested=days_requested,
            days_fetched=days_fetched,
            record_count=self.record_count,
            currencies=dict(self.currencies),
            extremes=self.extremes,
        )


def aggregate(records: Iterable[RateRecord]) -> RateAggregator:
    """Fold ``records`` into a fresh aggregator."""
    return RateAggregator().add_all(records)
