"""
Enrichment stage.

Looks up the top of the ranked list on Know Your Meme and tags each trend
with its status there. Lookups run one after another to stay polite to the
site, and any failure only costs the trend its optional boost.
"""

import asyncio
import logging
import re
from typing import List, Optional

import aiohttp
from bs4 import BeautifulSoup

from trend_radar.observability.metrics import enrichment_lookups_counter
from trend_radar.processing.interfaces import EnrichmentError, MemeLookup
from trend_radar.processing.normalizer import clamp, clean_label, round_half_up
from trend_radar.types import Enrichment, EnrichmentStatus, Trend

logger = logging.getLogger(__name__)

KYM_MEME_URL = "https://knowyourmeme.com/memes/{slug}"
CONFIRMED_BOOST = 1.2

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")
_YEAR = re.compile(r"\b(1[89]\d\d|2\d\d\d)\b")


def meme_slug(display_name: str) -> str:
    """
    Build the Know Your Meme slug for a display name.

    Example:
        meme_slug("#Moon Doge!") == "moon-doge"
    """
    return _SLUG_SEPARATORS.sub("-", clean_label(display_name).lower()).strip("-")


def parse_meme_page(html: str, url: str) -> Enrichment:
    """
    Extract status, origin and year from a meme entry page.

    The entry details are a definition list of <dt>/<dd> pairs. Missing
    fields stay None; an unrecognized status maps to UNKNOWN.

    Args:
        html: Entry page HTML
        url: Entry URL

    Returns:
        Enrichment for the entry
    """
    soup = BeautifulSoup(html, "html.parser")

    details = {}
    for dt in soup.find_all("dt"):
        dd = dt.find_next_sibling("dd")
        if dd is not None:
            details[dt.get_text(strip=True).lower()] = dd.get_text(" ", strip=True)

    try:
        status = EnrichmentStatus(details.get("status", "").lower())
    except ValueError:
        status = EnrichmentStatus.UNKNOWN

    year = None
    year_match = _YEAR.search(details.get("year", ""))
    if year_match:
        year = int(year_match.group(1))

    return Enrichment(
        status=status,
        origin=details.get("origin") or None,
        year=year,
        url=url,
    )


class KnowYourMemeLookup:
    """Meme lookup against knowyourmeme.com entry pages."""

    async def lookup(
        self, session: aiohttp.ClientSession, name: str
    ) -> Optional[Enrichment]:
        slug = meme_slug(name)
        if not slug:
            return None

        url = KYM_MEME_URL.format(slug=slug)

        try:
            async with session.get(url) as resp:
                if resp.status == 404:
                    return Enrichment(status=EnrichmentStatus.UNKNOWN)
                if resp.status != 200:
                    raise EnrichmentError(f"Lookup for '{slug}' returned status {resp.status}")
                html = await resp.text()
        except aiohttp.ClientError as e:
            raise EnrichmentError(f"Lookup for '{slug}' failed: {e}") from e

        return parse_meme_page(html, url)


def apply_enrichment(trend: Trend, enrichment: Enrichment) -> None:
    """Attach an enrichment result, boosting confirmed memes."""
    trend.enrichment = enrichment
    if enrichment.status == EnrichmentStatus.CONFIRMED:
        trend.aggregate_score = round_half_up(clamp(trend.aggregate_score * CONFIRMED_BOOST))


async def enrich_trends(
    session: aiohttp.ClientSession,
    trends: List[Trend],
    lookup: MemeLookup,
    top_n: int = 10,
    timeout: float = 8.0,
    deadline: Optional[float] = None,
) -> List[Trend]:
    """
    Enrich the top of a ranked list.

    Args:
        session: HTTP session for the lookups
        trends: Ranked trends
        lookup: Meme knowledge lookup
        top_n: Number of leading trends to look up
        timeout: Per-lookup timeout in seconds
        deadline: Event-loop time after which no further lookups start

    Returns:
        The same trends, re-sorted by score (stable) after boosts
    """
    loop = asyncio.get_running_loop()

    for trend in trends[:top_n]:
        budget = timeout
        if deadline is not None:
            budget = min(timeout, deadline - loop.time())
            if budget <= 0:
                logger.warning("Pipeline deadline reached, stopping enrichment early")
                break

        try:
            enrichment = await asyncio.wait_for(
                lookup.lookup(session, trend.display_name), budget
            )
        except asyncio.TimeoutError:
            logger.warning(f"Enrichment lookup for '{trend.display_name}' timed out")
            enrichment_lookups_counter.labels(status="failure").inc()
            continue
        except Exception as e:
            logger.warning(f"Enrichment lookup for '{trend.display_name}' failed: {e}")
            enrichment_lookups_counter.labels(status="failure").inc()
            continue

        if enrichment is None:
            enrichment_lookups_counter.labels(status="not_found").inc()
            continue

        found = enrichment.status != EnrichmentStatus.UNKNOWN
        enrichment_lookups_counter.labels(status="found" if found else "not_found").inc()
        apply_enrichment(trend, enrichment)

    return sorted(trends, key=lambda t: t.aggregate_score, reverse=True)
