"""
Reddit collector plugin.

Collects hot posts from a set of meme subreddits using Reddit's public
JSON listing. Cross-posts of the same title are collapsed into a single
observation so the multi-community boost can be applied when scoring.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import aiohttp

from trend_radar.collectors.base import CollectionError, CollectorPlugin, register_collector
from trend_radar.processing.normalizer import identity_key
from trend_radar.types import PluginMetadata, RawObservation, SourceType

logger = logging.getLogger(__name__)

REDDIT_URL = "https://www.reddit.com/r/{subreddits}/hot.json?limit=100"
MIN_SCORE = 1000


@register_collector
class RedditCollector(CollectorPlugin):
    """
    Collector plugin for Reddit hot posts.

    Stickied and pinned posts are skipped, as are posts under MIN_SCORE
    upvotes. Magnitude is the summed score of every post sharing a title,
    and `metadata["subreddits"]` lists the distinct communities it hit.
    """

    metadata = PluginMetadata(
        name="reddit",
        description="Collects hot posts from meme subreddits",
        source_type=SourceType.REDDIT,
        max_items=30,
    )

    async def collect(self, session: aiohttp.ClientSession) -> List[RawObservation]:
        """
        Collect hot posts from the configured subreddits.

        Raises:
            CollectionError: If Reddit answers with an error
        """
        url = REDDIT_URL.format(subreddits=self.settings.reddit_subreddits)

        async with session.get(url) as resp:
            if resp.status != 200:
                raise CollectionError(f"Reddit API returned status {resp.status}")
            data = await resp.json()

        return self.parse_listing(data)

    def parse_listing(
        self, data: Dict[str, Any], now: Optional[float] = None
    ) -> List[RawObservation]:
        """
        Map a listing payload to observations.

        Args:
            data: Decoded `hot.json` payload
            now: Current UNIX time, used to compute upvotes per hour

        Returns:
            Observations ordered by summed score, highest first
        """
        if not isinstance(data, dict):
            raise CollectionError(f"Unexpected listing payload type: {type(data).__name__}")

        now = now if now is not None else time.time()
        grouped: Dict[str, RawObservation] = {}

        for child in data.get("data", {}).get("children", []):
            post = child.get("data") or {}

            if post.get("stickied") or post.get("pinned"):
                continue

            score = post.get("score") or 0
            title = (post.get("title") or "").strip()
            if score < MIN_SCORE or not title:
                continue

            key = identity_key(title)
            if not key:
                continue

            age_hours = max(1.0, (now - float(post.get("created_utc") or now)) / 3600)
            subreddit = post.get("subreddit", "")

            existing = grouped.get(key)
            if existing is None:
                grouped[key] = RawObservation(
                    label=title,
                    magnitude=score,
                    growth24h=score / age_hours,
                    keywords=title.lower().split(),
                    url="https://www.reddit.com" + post.get("permalink", ""),
                    description=(post.get("selftext") or "")[:500],
                    metadata={
                        "subreddits": [subreddit] if subreddit else [],
                        "comments": post.get("num_comments", 0),
                    },
                )
                continue

            # Cross-post: sum scores, keep the fastest growth
            existing.magnitude += score
            existing.growth24h = max(existing.growth24h, score / age_hours)
            existing.metadata["comments"] += post.get("num_comments", 0)
            if subreddit and subreddit not in existing.metadata["subreddits"]:
                existing.metadata["subreddits"].append(subreddit)

        observations = sorted(grouped.values(), key=lambda o: o.magnitude, reverse=True)
        return observations[: self.max_items]
