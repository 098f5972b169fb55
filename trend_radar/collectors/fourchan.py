"""
4chan collector plugin.

Reads a board catalog through the read-only JSON API and reports the most
active threads.
"""

import logging
from typing import Any, Dict, List, Optional

import aiohttp
from bs4 import BeautifulSoup

from trend_radar.collectors.base import CollectionError, CollectorPlugin, register_collector
from trend_radar.types import PluginMetadata, RawObservation, SourceType

logger = logging.getLogger(__name__)

CATALOG_URL = "https://a.4cdn.org/{board}/catalog.json"
THREAD_URL = "https://boards.4chan.org/{board}/thread/{no}"
MIN_REPLIES = 50
LABEL_WORDS = 8


def strip_comment(comment: str) -> str:
    """Strip the HTML markup 4chan uses in post comments."""
    return BeautifulSoup(comment, "html.parser").get_text(" ", strip=True)


@register_collector
class FourChanCollector(CollectorPlugin):
    """
    Collector plugin for 4chan board activity.

    Magnitude is the reply count; the image count travels in
    `metadata["images"]` for the image-heavy thread boost.
    """

    metadata = PluginMetadata(
        name="fourchan",
        description="Collects the most active threads from a 4chan board catalog",
        source_type=SourceType.FOURCHAN,
        max_items=20,
    )

    async def collect(self, session: aiohttp.ClientSession) -> List[RawObservation]:
        board = self.settings.fourchan_board

        async with session.get(CATALOG_URL.format(board=board)) as resp:
            if resp.status != 200:
                raise CollectionError(f"4chan catalog returned status {resp.status}")
            pages = await resp.json()

        return self.parse_catalog(pages, board)

    def parse_catalog(self, pages: Any, board: str) -> List[RawObservation]:
        """
        Map catalog pages to observations.

        Args:
            pages: Decoded catalog: a list of pages, each with 'threads'
            board: Board the catalog belongs to

        Returns:
            Observations sorted by reply count, highest first
        """
        if not isinstance(pages, list):
            raise CollectionError(f"Unexpected catalog payload type: {type(pages).__name__}")

        observations = []
        for page in pages:
            for thread in page.get("threads", []):
                observation = self._parse_thread(thread, board)
                if observation is not None:
                    observations.append(observation)

        observations.sort(key=lambda o: o.magnitude, reverse=True)
        return observations[: self.max_items]

    def _parse_thread(self, thread: Dict[str, Any], board: str) -> Optional[RawObservation]:
        if thread.get("sticky"):
            return None

        replies = thread.get("replies", 0)
        if replies < MIN_REPLIES:
            return None

        label = strip_comment(thread.get("sub") or "")
        comment = strip_comment(thread.get("com") or "")
        if not label:
            label = " ".join(comment.split()[:LABEL_WORDS])
        if not label:
            return None

        return RawObservation(
            label=label,
            magnitude=replies,
            keywords=label.lower().split(),
            url=THREAD_URL.format(board=board, no=thread.get("no")),
            description=comment[:300],
            metadata={"images": thread.get("images", 0)},
        )
