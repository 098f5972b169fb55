"""
Google Trends collector plugin.

Fetches the daily trending-searches RSS feed for a region and maps each
entry to a ranked observation.
"""

import logging
from typing import List
from urllib.parse import quote_plus

import aiohttp
import feedparser

from trend_radar.collectors.base import CollectionError, CollectorPlugin, register_collector
from trend_radar.collectors.utils import parse_compact_number, rank_growth_estimate
from trend_radar.types import Article, PluginMetadata, RawObservation, SourceType

logger = logging.getLogger(__name__)

GOOGLE_TRENDS_RSS_URL = "https://trends.google.com/trending/rss?geo={geo}"


@register_collector
class GoogleTrendsCollector(CollectorPlugin):
    """
    Collector plugin for Google Trends daily searches.

    The feed carries no growth figure, so growth24h is estimated from the
    entry's rank. Attached news items become related articles.
    """

    metadata = PluginMetadata(
        name="google_trends",
        description="Collects trending searches from the Google Trends RSS feed",
        source_type=SourceType.GOOGLE_TRENDS,
        max_items=20,
    )

    async def collect(self, session: aiohttp.ClientSession) -> List[RawObservation]:
        """
        Collect trending searches.

        Raises:
            CollectionError: If the feed cannot be fetched or parsed
        """
        url = GOOGLE_TRENDS_RSS_URL.format(geo=self.settings.google_trends_geo)

        async with session.get(url) as resp:
            if resp.status != 200:
                raise CollectionError(f"Google Trends feed returned status {resp.status}")
            body = await resp.text()

        return self.parse_feed(body)

    def parse_feed(self, body: str) -> List[RawObservation]:
        """
        Parse the RSS document into observations.

        Args:
            body: RSS XML

        Returns:
            Observations ranked 1..N in feed order
        """
        feed = feedparser.parse(body)
        if feed.bozo and not feed.entries:
            raise CollectionError(f"Malformed Google Trends feed: {feed.get('bozo_exception')}")

        entries = [e for e in feed.entries if e.get("title", "").strip()][: self.max_items]
        total = len(entries)
        geo = self.settings.google_trends_geo

        observations = []
        for rank, entry in enumerate(entries, start=1):
            title = entry.get("title", "").strip()

            articles = []
            news_url = entry.get("ht_news_item_url")
            news_title = entry.get("ht_news_item_title")
            if news_url and news_title:
                articles.append(
                    Article(
                        title=news_title.strip(),
                        url=news_url,
                        source=entry.get("ht_news_item_source"),
                    )
                )

            observations.append(
                RawObservation(
                    label=title,
                    magnitude=parse_compact_number(entry.get("ht_approx_traffic")),
                    growth24h=rank_growth_estimate(
                        rank, total, self.settings.rank_growth_scale
                    ),
                    keywords=title.lower().split(),
                    url=entry.get("link")
                    or f"https://trends.google.com/trends/explore?q={quote_plus(title)}&geo={geo}",
                    description=news_title.strip() if news_title else "",
                    rank=rank,
                    articles=articles,
                )
            )

        return observations
