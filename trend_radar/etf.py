"""
Spot-ETF flow snapshot.

Scrapes the daily flow tables published by Farside Investors for the
bitcoin, ethereum and solana spot ETFs and summarizes the last week of
net flows. An asset whose page cannot be read is reported as None.
"""

import asyncio
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp
from bs4 import BeautifulSoup

from trend_radar.collectors.base import CollectionError

logger = logging.getLogger(__name__)

FARSIDE_URLS = {
    "bitcoin": "https://farside.co.uk/bitcoin-etf-flow-all-data/",
    "ethereum": "https://farside.co.uk/ethereum-etf-flow-all-data/",
    "solana": "https://farside.co.uk/sol/",
}

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SUMMARY_DAYS = 7
REQUEST_DELAY_SECONDS = 2.0

_LEADING_NUMBER = re.compile(r"^[-+]?\d*\.?\d+")


def parse_flow_table(html: str) -> Optional[Dict[str, Any]]:
    """
    Parse the first table of a flow page.

    Values written in parentheses are negative flows: "(12.5)" becomes
    "-12.5". Rows without a value in the first (date) column are dropped.

    Args:
        html: Page HTML

    Returns:
        {"headers": [...], "records": [{header: value}, ...]}, or None if
        the page has no table
    """
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        return None

    rows = table.find_all("tr")
    if not rows:
        return {"headers": [], "records": []}

    headers = [cell.get_text(strip=True) for cell in rows[0].find_all(["th", "td"])]
    first_header = headers[0] if headers else "col0"

    records = []
    for row in rows[1:]:
        cells = row.find_all("td")
        if not cells:
            continue

        record = {}
        for index, cell in enumerate(cells):
            header = headers[index] if index < len(headers) and headers[index] else f"col{index}"
            value = cell.get_text(strip=True)
            if value.startswith("(") and value.endswith(")"):
                value = "-" + value[1:-1]
            record[header] = value

        if record.get(first_header):
            records.append(record)

    return {"headers": headers, "records": records}


def _parse_flow(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    match = _LEADING_NUMBER.match(value.replace(",", "").replace("$", "").strip())
    return float(match.group(0)) if match else None


def summarize_flows(table: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Summarize the most recent week of a flow table.

    Args:
        table: Output of parse_flow_table

    Returns:
        Summary dict, or None when the table has no "total" column or no
        records
    """
    if not table or not table.get("records"):
        return None

    headers = table["headers"]
    total_header = next((h for h in headers if "total" in h.lower()), None)
    if total_header is None:
        return None

    records = table["records"]
    weekly_flow = 0.0
    for record in records[:SUMMARY_DAYS]:
        flow = _parse_flow(record.get(total_header))
        if flow is not None:
            weekly_flow += flow

    return {
        "latest_date": records[0].get(headers[0]),
        "latest_flow": records[0].get(total_header),
        "weekly_flow": f"{weekly_flow:.1f}",
        "total_records": len(records),
    }


async def fetch_flow_page(session: aiohttp.ClientSession, url: str) -> str:
    async with session.get(url) as resp:
        if resp.status != 200:
            raise CollectionError(f"{url} returned status {resp.status}")
        return await resp.text()


async def fetch_etf_flows(
    session: Optional[aiohttp.ClientSession] = None,
    delay_seconds: float = REQUEST_DELAY_SECONDS,
    timeout_seconds: float = 30.0,
) -> Dict[str, Any]:
    """
    Fetch and summarize flows for every tracked asset.

    Pages are fetched one at a time with a short pause in between.

    Args:
        session: Optional HTTP session; a private one is opened if None
        delay_seconds: Pause between page requests
        timeout_seconds: Per-request timeout when opening a private session

    Returns:
        Snapshot with one table and one summary per asset
    """
    if session is None:
        timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        async with aiohttp.ClientSession(
            timeout=timeout, headers={"User-Agent": BROWSER_USER_AGENT}
        ) as own_session:
            return await fetch_etf_flows(own_session, delay_seconds, timeout_seconds)

    snapshot: Dict[str, Any] = {"last_updated": datetime.utcnow().isoformat()}

    assets: List[str] = list(FARSIDE_URLS)
    for index, asset in enumerate(assets):
        if index and delay_seconds:
            await asyncio.sleep(delay_seconds)

        try:
            table = parse_flow_table(await fetch_flow_page(session, FARSIDE_URLS[asset]))
        except Exception as e:
            logger.error(f"Failed to scrape {asset} ETF flows: {e}")
            table = None

        snapshot[asset] = table
        snapshot[f"{asset}_summary"] = summarize_flows(table)

        records = len(table["records"]) if table else 0
        logger.info(f"{asset.capitalize()}: {records} records")

    return snapshot
