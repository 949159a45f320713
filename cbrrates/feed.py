"""Async client for the Central Bank of Russia daily rates XML feed.

The feed publishes one document per date:

    <ValCurs Date="19.10.2026" name="Foreign Currency Market">
        <Valute ID="R01235">
            <NumCode>840</NumCode>
            <CharCode>USD</CharCode>
            <Nominal>1</Nominal>
            <Name>US Dollar</Name>
            <Value>81,2543</Value>
        </Valute>
        ...
    </ValCurs>

Values are quoted per ``Nominal`` units with a comma decimal separator, and
the document is usually declared as windows-1251.
No API key required. Base URL: http://www.cbr.ru
"""

from __future__ import annotations

import asyncio
import codecs
import math
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import httpx
from lxml import etree

from cbrrates.logger import get_logger
from cbrrates.models import RateRecord

BASE_URL = "http://www.cbr.ru"
FEED_PATH = "/scripts/XML_daily_eng.asp"
API_CALL_DELAY = 0.1
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "cbr-rates/0.1"

LOGGER = get_logger(__name__)

_DECLARATION_RE = re.compile(
    rb"""^(\s*<\?xml[^>]*?encoding\s*=\s*["'])([A-Za-z0-9._:-]+)(["'])"""
)


class FeedDecodeError(ValueError):
    """The feed body could not be transcoded or parsed as a rates document."""


@dataclass(slots=True)
class DayResults:
    records: list[RateRecord] = field(default_factory=list)
    days_requested: int = 0
    days_fetched: int = 0


def build_url(date_str: str, base_url: str = BASE_URL) -> str:
    """Feed URL for a DD/MM/YYYY date."""
    return f"{base_url.rstrip('/')}{FEED_PATH}?date_req={date_str}"


def transcode(content: bytes) -> bytes:
    """Re-encode a body declared in a legacy charset as UTF-8.

    Bodies without a declaration, or already declared as UTF-8, pass through.
    """
    match = _DECLARATION_RE.match(content)
    if match is None:
        return content

    declared = match.group(2).decode("ascii")
    try:
        codec = codecs.lookup(declared)
    except LookupError as exc:
        raise FeedDecodeError(f"Unknown charset {declared!r}") from exc
    if codec.name == "utf-8":
        return content

    try:
        text = content.decode(codec.name)
    except UnicodeDecodeError as exc:
        raise FeedDecodeError(f"Body is not valid {declared}: {exc}") from exc

    body = text.encode("utf-8")
    return _DECLARATION_RE.sub(rb"\g<1>UTF-8\g<3>", body, count=1)


def per_unit_value(value: float, nominal: int) -> float:
    """Rate for one unit of currency from a rate quoted per ``nominal`` units."""
    return value / nominal


def _parse_value(raw: str) -> float:
    return float(raw.strip().replace(",", "."))


def parse_entry(element: etree._Element, date_str: str) -> RateRecord | None:
    """Build a record from one <Valute> element, or None if it is malformed."""
    code = (element.findtext("CharCode") or "").strip()
    name = (element.findtext("Name") or "").strip()
    raw_nominal = element.findtext("Nominal")
    raw_value = element.findtext("Value")

    if not code or raw_nominal is None or raw_value is None:
        LOGGER.debug("Skipping incomplete entry on %s", date_str)
        return None

    try:
        value = _parse_value(raw_value)
        nominal = int(raw_nominal.strip())
        if nominal <= 0 or not math.isfinite(value) or value <= 0:
            raise ValueError("rate and nominal must be positive")
        unit_value = per_unit_value(value, nominal)
    except (ValueError, OverflowError):
        LOGGER.debug("Skipping %s on %s: value %r, nominal %r",
                     code, date_str, raw_value, raw_nominal)
        return None

    # Huge nominals can underflow the division to 0.0
    if not math.isfinite(unit_value) or unit_value <= 0:
        LOGGER.debug("Skipping %s on %s: per-unit value %r", code, date_str, unit_value)
        return None

    return RateRecord(date=date_str, code=code, name=name, value=unit_value)


def parse_feed(content: bytes, date_str: str) -> list[RateRecord]:
    """Parse a feed document into per-unit rate records.

    Raises FeedDecodeError when the body is not a well-formed ValCurs document.
    """
    try:
        root = etree.fromstring(transcode(content))
    except etree.XMLSyntaxError as exc:
        raise FeedDecodeError(f"Malformed XML for {date_str}: {exc}") from exc

    if root.tag != "ValCurs":
        raise FeedDecodeError(f"Unexpected root element {root.tag!r} for {date_str}")

    records: list[RateRecord] = []
    for element in root.iterfind("Valute"):
        record = parse_entry(element, date_str)
        if record is not None:
            records.append(record)
    return records


async def fetch_day(
    client: httpx.AsyncClient,
    date_str: str,
    base_url: str = BASE_URL,
) -> list[RateRecord]:
    """Fetch and parse the rates published for one date.

    Raises httpx.RequestError, httpx.HTTPStatusError or FeedDecodeError.
    """
    resp = await client.get(build_url(date_str, base_url))
    resp.raise_for_status()
    return parse_feed(resp.content, date_str)


async def collect_rates(
    client: httpx.AsyncClient,
    dates: Sequence[str],
    *,
    delay: float = API_CALL_DELAY,
    base_url: str = BASE_URL,
    on_day: Callable[[int, int, str], None] | None = None,
) -> DayResults:
    """Fetch every date in turn, skipping days that fail.

    Sleeps ``delay`` seconds between consecutive requests whatever their outcome.
    """
    results = DayResults(days_requested=len(dates))

    for index, date_str in enumerate(dates, start=1):
        if index > 1 and delay > 0:
            await asyncio.sleep(delay)
        if on_day is not None:
            on_day(index, len(dates), date_str)

        try:
            records = await fetch_day(client, date_str, base_url)
        except httpx.HTTPStatusError as exc:
            LOGGER.warning("Skipping %s: HTTP %s", date_str, exc.response.status_code)
            continue
        except httpx.RequestError as exc:
            LOGGER.warning("Skipping %s: request failed: %s", date_str, exc)
            continue
        except FeedDecodeError as exc:
            LOGGER.warning("Skipping %s: %s", date_str, exc)
            continue

        LOGGER.info("Fetched %d rates for %s", len(records), date_str)
        results.days_fetched += 1
        results.records.extend(records)

    return results
