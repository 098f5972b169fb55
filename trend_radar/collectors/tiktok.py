"""
TikTok collector plugin.

Reads the dataset of the last run of an Apify TikTok trends scraper actor.
When the actor has never run, a new run is started and nothing is returned
for this invocation; the data shows up on a later refresh.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import aiohttp

from trend_radar.collectors.base import CollectionError, CollectorPlugin, register_collector
from trend_radar.types import PluginMetadata, RawObservation, SourceType

logger = logging.getLogger(__name__)

APIFY_BASE_URL = "https://api.apify.com/v2"
MIN_VIEWS = 10_000

_LABEL_FIELDS = ("hashtag", "name", "title", "challengeName")
_DIGITS = re.compile(r"[^0-9]")


def _parse_count(value: Any) -> int:
    """Parse a view count that may arrive as a formatted string."""
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    digits = _DIGITS.sub("", str(value))
    return int(digits) if digits else 0


def _parse_float(value: Any) -> float:
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def _first(item: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


@register_collector
class TikTokCollector(CollectorPlugin):
    """
    Collector plugin for TikTok trending hashtags via Apify.

    The scraper's output shape varies between actor versions, so the
    label, view count and growth figures are read from several candidate
    fields. Figures that are absent stay at zero.
    """

    metadata = PluginMetadata(
        name="tiktok",
        description="Collects trending hashtags from an Apify TikTok scraper run",
        source_type=SourceType.TIKTOK,
        max_items=30,
    )

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.settings.apify_token}"}

    async def collect(self, session: aiohttp.ClientSession) -> List[RawObservation]:
        """
        Collect hashtags from the last scraper run.

        Returns:
            Observations for the trending hashtags

        Raises:
            CollectionError: If the Apify API answers with an error
        """
        if not self.settings.apify_token:
            logger.warning("APIFY_TOKEN is not set, skipping TikTok collection")
            return []

        actor_id = self.settings.apify_actor_id
        url = f"{APIFY_BASE_URL}/acts/{actor_id}/runs/last/dataset/items"

        async with session.get(url, headers=self._headers(), params={"clean": "true"}) as resp:
            if resp.status == 404:
                logger.info(f"No previous run for actor {actor_id}, starting one")
                await self.start_run(session)
                return []

            if resp.status != 200:
                raise CollectionError(f"Apify API returned status {resp.status}")

            data = await resp.json()

        return self.parse_items(data)

    async def start_run(self, session: aiohttp.ClientSession) -> None:
        """
        Start a new asynchronous scraper run.

        Raises:
            CollectionError: If the run could not be started
        """
        url = f"{APIFY_BASE_URL}/acts/{self.settings.apify_actor_id}/runs"

        async with session.post(
            url, headers=self._headers(), json={"maxItems": self.max_items}
        ) as resp:
            if resp.status not in (200, 201):
                raise CollectionError(f"Failed to start Apify run (status {resp.status})")

        logger.info("Apify run started, TikTok data will be available on a later refresh")

    def parse_items(self, data: Any) -> List[RawObservation]:
        """
        Map a dataset payload to observations.

        Args:
            data: Decoded JSON: a list of items, or a dict wrapping one
                under 'hashtags' or 'trends'

        Returns:
            Observations for items that carry a label
        """
        if isinstance(data, list):
            items = data
        elif isinstance(data, dict):
            items = data.get("hashtags") or data.get("trends") or []
        else:
            raise CollectionError(f"Unexpected dataset payload type: {type(data).__name__}")

        observations = []
        for item in items[: self.max_items]:
            if not isinstance(item, dict):
                continue

            observation = self._parse_item(item)
            if observation is not None:
                observations.append(observation)

        return observations

    def _parse_item(self, item: Dict[str, Any]) -> Optional[RawObservation]:
        label = _first(item, *_LABEL_FIELDS)
        if not label or not str(label).strip("# "):
            return None

        label = str(label).strip()
        hashtag = label if label.startswith("#") else f"#{label}"
        tag_name = hashtag.lstrip("#").lower()

        stats = item.get("stats") or {}
        views = _parse_count(
            _first(item, "views", "videoCount")
            or stats.get("videoCount")
            or stats.get("viewCount")
        )

        keywords = item.get("keywords")
        if not isinstance(keywords, list) or not keywords:
            keywords = [tag_name]

        return RawObservation(
            label=hashtag,
            magnitude=views,
            growth5h=_parse_float(_first(item, "growth5h", "growthRate")),
            growth24h=_parse_float(_first(item, "growth24h", "trend")),
            growth7d=_parse_float(item.get("growth7d")),
            keywords=[str(k) for k in keywords],
            url=item.get("url") or f"https://www.tiktok.com/tag/{tag_name}",
            description=_first(item, "description", "desc") or "",
        )

    def validate(self, observation: RawObservation) -> bool:
        if not super().validate(observation):
            return False

        if observation.magnitude < MIN_VIEWS:
            logger.debug(f"Dropped {observation.label}: {observation.magnitude} views")
            return False

        return True
