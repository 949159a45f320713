"""CLI entry point for CBR Rates."""

from __future__ import annotations

import asyncio
from datetime import date

import click
import httpx

from cbrrates import feed, formatters
from cbrrates.aggregator import RateAggregator
from cbrrates.dates import generate_dates
from cbrrates.logger import get_logger, set_verbose
from cbrrates.models import RateSummary

REPORT_DAYS = 90

LOGGER = get_logger(__name__)


async def _run_report(
    days: int,
    delay: float,
    timeout: float,
    base_url: str,
    progress_to_stderr: bool,
    today: date | None = None,
) -> RateSummary:
    dates = generate_dates(days, today)

    def _progress(index: int, total: int, date_str: str) -> None:
        click.echo(formatters.format_progress(index, total), err=progress_to_stderr)

    async with httpx.AsyncClient(
        timeout=timeout, headers={"User-Agent": feed.USER_AGENT}
    ) as client:
        results = await feed.collect_rates(
            client, dates, delay=delay, base_url=base_url, on_day=_progress
        )

    aggregator = RateAggregator().add_all(results.records)
    return aggregator.summary(results.days_requested, results.days_fetched)


@click.command()
@click.option(
    "--days",
    default=REPORT_DAYS,
    show_default=True,
    type=click.IntRange(min=0),
    help="Number of days to look back, starting today",
)
@click.option(
    "--delay",
    default=feed.API_CALL_DELAY,
    show_default=True,
    type=click.FloatRange(min=0),
    help="Seconds to wait between feed requests",
)
@click.option(
    "--timeout",
    default=feed.DEFAULT_TIMEOUT,
    show_default=True,
    type=click.FloatRange(min=0, min_open=True),
    help="HTTP timeout in seconds",
)
@click.option("--base-url", default=feed.BASE_URL, show_default=True, help="Feed host")
@click.option(
    "--output",
    "output_format",
    default="table",
    type=click.Choice(["table", "json", "csv"]),
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Log per-day fetch results")
def main(
    days: int,
    delay: float,
    timeout: float,
    base_url: str,
    output_format: str,
    verbose: bool,
) -> None:
    """CBR exchange rate statistics.

    Fetches daily rates from the Central Bank of Russia over the last DAYS days,
    then reports the average per-unit rate of every currency together with the
    highest and lowest rate seen in the window.
    """
    set_verbose(verbose)
    machine_readable = output_format != "table"

    if not machine_readable:
        click.echo(formatters.format_header(days))

    summary = asyncio.run(
        _run_report(days, delay, timeout, base_url, progress_to_stderr=machine_readable)
    )

    if not summary.has_data:
        LOGGER.error("No rate data collected for %d day(s)", days)

    if output_format == "json":
        click.echo(formatters.format_json(summary))
    elif output_format == "csv":
        click.echo(formatters.format_csv(summary), nl=False)
    else:
        click.echo(formatters.format_table(summary), nl=False)


if __name__ == "__main__":
    main()
