"""
Twitter/X collector plugin.

Scrapes the public trend ranking published by trends24.in. The page lists
one ranking per hour; only the most recent one is used.
"""

import logging
from typing import List
from urllib.parse import quote

import aiohttp
from bs4 import BeautifulSoup

from trend_radar.collectors.base import CollectionError, CollectorPlugin, register_collector
from trend_radar.collectors.utils import parse_compact_number, rank_growth_estimate
from trend_radar.types import PluginMetadata, RawObservation, SourceType

logger = logging.getLogger(__name__)

TWITTER_SEARCH_URL = "https://twitter.com/search?q={query}"


@register_collector
class TwitterCollector(CollectorPlugin):
    """Collector plugin for the trends24 microblog trend ranking."""

    metadata = PluginMetadata(
        name="twitter",
        description="Collects trending topics from the trends24 ranking page",
        source_type=SourceType.TWITTER,
        max_items=30,
    )

    async def collect(self, session: aiohttp.ClientSession) -> List[RawObservation]:
        url = self.settings.twitter_trends_url

        async with session.get(url) as resp:
            if resp.status != 200:
                raise CollectionError(f"Trend page returned status {resp.status}")
            html = await resp.text()

        return self.parse_page(html)

    def parse_page(self, html: str) -> List[RawObservation]:
        """
        Parse the ranking page.

        Args:
            html: Page HTML

        Returns:
            Observations ranked 1..N in page order

        Raises:
            CollectionError: If no trend list is present
        """
        soup = BeautifulSoup(html, "html.parser")

        trend_list = soup.select_one("ol.trend-card__list") or soup.find("ol")
        if trend_list is None:
            raise CollectionError("No trend list found on page")

        entries = []
        for li in trend_list.find_all("li"):
            link = li.find("a")
            label = (link.get_text() if link else li.get_text()).strip()
            if not label:
                continue

            count_tag = li.find(class_="tweet-count")
            count = None
            if count_tag is not None:
                count = count_tag.get("data-count") or count_tag.get_text()
            entries.append((label, parse_compact_number(count)))

        entries = entries[: self.max_items]
        total = len(entries)

        return [
            RawObservation(
                label=label,
                magnitude=count,
                growth24h=rank_growth_estimate(rank, total, self.settings.rank_growth_scale),
                keywords=label.lstrip("#$").lower().split(),
                url=TWITTER_SEARCH_URL.format(query=quote(label)),
                rank=rank,
            )
            for rank, (label, count) in enumerate(entries, start=1)
        ]
