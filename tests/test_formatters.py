"""Tests for output formatters."""

from __future__ import annotations

import json

from cbrrates.aggregator import aggregate
from cbrrates.formatters import (
    NO_DATA_MESSAGE,
    _fmt_rate,
    format_csv,
    format_header,
    format_json,
    format_progress,
    format_table,
)
from cbrrates.models import RateRecord, RateSummary


def _make_summary() -> RateSummary:
    records = [
        RateRecord(date="19/10/2026", code="USD", name="US Dollar", value=90.0),
        RateRecord(date="18/10/2026", code="USD", name="US Dollar", value=92.5),
        RateRecord(date="18/10/2026", code="EUR", name="Euro", value=100.0),
        RateRecord(date="18/10/2026", code="AMD", name="Armenian Dram", value=0.2345),
    ]
    return aggregate(records).summary(days_requested=2, days_fetched=2)


def _empty_summary() -> RateSummary:
    return RateSummary(days_requested=3, days_fetched=0, record_count=0)


class TestSmallFormatters:
    def test_header(self) -> None:
        assert format_header(90) == "CBR exchange rate report for the last 90 days."

    def test_progress(self) -> None:
        assert format_progress(3, 90) == "Processing day 3/90..."

    def test_fmt_rate(self) -> None:
        assert _fmt_rate(91.25) == "91.2500"
        assert _fmt_rate(6.71234) == "6.7123"


class TestFormatTable:
    def test_summary_block(self) -> None:
        output = format_table(_make_summary())
        assert "Processed 4 rate records in total." in output
        assert "Maximum rate: 100.0000 RUB per 1 EUR (Euro)" in output
        assert "Minimum rate: 0.2345 RUB per 1 AMD (Armenian Dram)" in output
        assert "Recorded on: 18/10/2026" in output
        assert "Distinct currencies: 3" in output

    def test_rows_sorted_by_code(self) -> None:
        output = format_table(_make_summary())
        table = output[output.index("Average rate (RUB)"):]
        assert table.index("AMD") < table.index("EUR") < table.index("USD")
        assert "91.2500" in table

    def test_bracketed_names_printed_verbatim(self) -> None:
        summary = aggregate(
            [
                RateRecord(date="19/10/2026", code="XDR", name="SDR [/] units", value=110.0),
                RateRecord(date="19/10/2026", code="XAU", name="[bold]Gold[/bold]", value=9000.0),
            ]
        ).summary(days_requested=1, days_fetched=1)
        output = format_table(summary)
        table = output[output.index("Average rate (RUB)"):]
        assert "SDR [/] units" in table
        assert "[bold]Gold[/bold]" in table
        assert "Maximum rate: 9000.0000 RUB per 1 XAU ([bold]Gold[/bold])" in output

    def test_no_data(self) -> None:
        output = format_table(_empty_summary())
        assert output.strip() == NO_DATA_MESSAGE
        assert "Average rate" not in output


class TestFormatJson:
    def test_structure(self) -> None:
        data = json.loads(format_json(_make_summary()))
        assert data["record_count"] == 4
        assert data["days_fetched"] == 2
        assert data["maximum"]["code"] == "EUR"
        assert data["minimum"]["code"] == "AMD"
        assert data["currency_count"] == 3
        usd = next(c for c in data["currencies"] if c["code"] == "USD")
        assert usd["count"] == 2
        assert usd["average"] == 91.25

    def test_no_data(self) -> None:
        data = json.loads(format_json(_empty_summary()))
        assert data == {"error": NO_DATA_MESSAGE}


class TestFormatCsv:
    def test_rows(self) -> None:
        lines = format_csv(_make_summary()).splitlines()
        assert lines[0] == "code,name,count,average"
        assert lines[1] == "AMD,Armenian Dram,1,0.2345"
        assert lines[3] == "USD,US Dollar,2,91.2500"

    def test_no_data(self) -> None:
        assert format_csv(_empty_summary()).strip() == NO_DATA_MESSAGE
