"""Output formatters for table, JSON, and CSV."""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from cbrrates.models import RateRecord, RateSummary

NO_DATA_MESSAGE = "Failed to load rate data for the requested period."


def format_header(days: int) -> str:
    return f"CBR exchange rate report for the last {days} days."


def format_progress(index: int, total: int) -> str:
    return f"Processing day {index}/{total}..."


def _fmt_rate(value: float) -> str:
    """Format a per-unit rate with 4 decimal places."""
    return f"{value:.4f}"


def _fmt_extreme(label: str, record: RateRecord) -> str:
    return (
        f"{label}: {_fmt_rate(record.value)} RUB per 1 {record.code} ({record.name})\n"
        f"Recorded on: {record.date}\n"
    )


def _sorted_codes(summary: RateSummary) -> list[str]:
    return sorted(summary.currencies)


def format_table(summary: RateSummary) -> str:
    """Format the summary as a Rich table rendered to string."""
    if not summary.has_data:
        return NO_DATA_MESSAGE + "\n"
    assert summary.extremes is not None

    buf = io.StringIO()
    rich_console = Console(file=buf, width=120, no_color=True, highlight=False)

    header = (
        f"Processed {summary.record_count} rate records in total.\n"
        + _fmt_extreme("Maximum rate", summary.extremes.maximum)
        + _fmt_extreme("Minimum rate", summary.extremes.minimum)
        + f"Distinct currencies: {len(summary.currencies)}\n"
    )

    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("Code", style="bold", min_width=6)
    table.add_column("Currency name", min_width=30)
    table.add_column("Average rate (RUB)", justify="right", min_width=15)

    for code in _sorted_codes(summary):
        stats = summary.currencies[code]
        table.add_row(Text(code), Text(stats.name), _fmt_rate(stats.mean))

    rich_console.print(header, end="", markup=False)
    rich_console.print(table)

    return buf.getvalue()


def format_json(summary: RateSummary) -> str:
    """Format the summary as JSON."""
    if not summary.has_data:
        return json.dumps({"error": NO_DATA_MESSAGE}, indent=2)
    assert summary.extremes is not None

    def _record(r: RateRecord) -> dict[str, Any]:
        return {
            "date": r.date,
            "code": r.code,
            "name": r.name,
            "value": round(r.value, 4),
        }

    data: dict[str, Any] = {
        "days_requested": summary.days_requested,
        "days_fetched": summary.days_fetched,
        "record_count": summary.record_count,
        "maximum": _record(summary.extremes.maximum),
        "minimum": _record(summary.extremes.minimum),
        "currency_count": len(summary.currencies),
        "currencies": [],
    }

    for code in _sorted_codes(summary):
        stats = summary.currencies[code]
        data["currencies"].append(
            {
                "code": code,
                "name": stats.name,
                "count": stats.count,
                "average": round(stats.mean, 4),
            }
        )

    return json.dumps(data, indent=2, ensure_ascii=False)


def format_csv(summary: RateSummary) -> str:
    """Format per-currency averages as CSV."""
    if not summary.has_data:
        return NO_DATA_MESSAGE + "\n"

    buf = io.StringIO()
    fields = ["code", "name", "count", "average"]
    writer = csv.DictWriter(buf, fieldnames=fields)
    writer.writeheader()

    for code in _sorted_codes(summary):
        stats = summary.currencies[code]
        writer.writerow(
            {
                "code": code,
                "name": stats.name,
                "count": stats.count,
                "average": _fmt_rate(stats.mean),
            }
        )

    return buf.getvalue()
