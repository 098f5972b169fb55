"""
Test fixtures and sample data.

Payloads mirror the shapes the real sources return, trimmed to the fields
the collectors read.
"""

from typing import Dict, List

from trend_radar.config import Settings
from trend_radar.types import (
    Category,
    RawObservation,
    SourceType,
    Trend,
    TrendMetrics,
)


def create_test_settings(**overrides) -> Settings:
    """Settings with enrichment off and short timeouts."""
    values = {
        "apify_token": "test-token",
        "enrichment_enabled": False,
        "adapter_timeout_seconds": 2.0,
        "pipeline_timeout_seconds": 5.0,
    }
    values.update(overrides)
    return Settings(**values)


# ============================================================================
# Sample Trends
# ============================================================================


def create_sample_trend(
    key: str,
    scores: Dict[SourceType, float],
    category: Category = Category.UNKNOWN,
    display_name: str = "",
    growth24h: float = 0.0,
) -> Trend:
    """Create a trend as the normalizer would, with explicit scores."""
    return Trend(
        identity_key=key,
        display_name=display_name or key,
        sources=list(scores),
        per_source_score=dict(scores),
        category=category,
        metrics=TrendMetrics(growth24h=growth24h),
    )


def create_moondoge_observations() -> Dict[SourceType, RawObservation]:
    """MoonDoge as seen by the short-video and forum-link sources."""
    return {
        SourceType.TIKTOK: RawObservation(
            label="#MoonDoge",
            magnitude=250_000,
            growth5h=500,
            growth24h=500,
            growth7d=500,
            keywords=["moondoge"],
            url="https://www.tiktok.com/tag/moondoge",
        ),
        SourceType.REDDIT: RawObservation(
            label="Moon Doge",
            magnitude=9_999,
            growth24h=120,
            keywords=["moon", "doge"],
            url="https://www.reddit.com/r/memes/comments/abc/moon_doge/",
            description="When the doge goes to the moon",
            metadata={"subreddits": ["memes"]},
        ),
    }


# ============================================================================
# Sample Source Payloads
# ============================================================================


def create_apify_items() -> List[dict]:
    return [
        {
            "hashtag": "moondoge",
            "views": "1,250,000",
            "growth5h": 120,
            "growth24h": 480,
            "growth7d": 900,
            "description": "Doge to the moon",
        },
        {
            "name": "#SkibidiSahur",
            "stats": {"videoCount": 45_000},
            "growthRate": "75.5",
            "trend": 300,
        },
        {"challengeName": "tinytrend", "videoCount": 500},
        {"views": 99_999},
    ]


GOOGLE_TRENDS_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss xmlns:ht="https://trends.google.com/trending/rss" version="2.0">
  <channel>
    <title>Daily Search Trends</title>
    <item>
      <title>moo deng</title>
      <ht:approx_traffic>200K+</ht:approx_traffic>
      <link>https://trends.google.com/trending/rss?geo=US</link>
      <ht:news_item>
        <ht:news_item_title>Baby hippo Moo Deng goes viral again</ht:news_item_title>
        <ht:news_item_url>https://news.example.com/moo-deng</ht:news_item_url>
        <ht:news_item_source>Example News</ht:news_item_source>
      </ht:news_item>
    </item>
    <item>
      <title>skibidi toilet</title>
      <ht:approx_traffic>50K+</ht:approx_traffic>
    </item>
    <item>
      <title>tax deadline</title>
      <ht:approx_traffic>2,000+</ht:approx_traffic>
    </item>
  </channel>
</rss>
"""


def create_reddit_listing(now: float) -> dict:
    def post(**fields):
        data = {
            "title": "",
            "score": 0,
            "subreddit": "memes",
            "permalink": "/r/memes/comments/x/",
            "created_utc": now - 2 * 3600,
            "num_comments": 10,
        }
        data.update(fields)
        return {"kind": "t3", "data": data}

    return {
        "data": {
            "children": [
                post(title="Welcome to r/memes", score=50_000, stickied=True),
                post(title="Moon Doge!", score=12_000, permalink="/r/memes/comments/a/moon_doge/"),
                post(title="moon doge", score=3_000, subreddit="dankmemes",
                     permalink="/r/dankmemes/comments/b/moon_doge/"),
                post(title="Capybara chilling", score=8_000, created_utc=now - 4 * 3600),
                post(title="low effort", score=999),
                post(title="Mod announcement", score=20_000, pinned=True),
            ]
        }
    }


TRENDS24_HTML = """
<html><body>
  <div class="trend-card">
    <h3 class="trend-card__time">1 hour ago</h3>
    <ol class="trend-card__list">
      <li><a href="#">$DOGE</a><span class="tweet-count" data-count="12.5K"></span></li>
      <li><a href="#">#MooDeng</a><span class="tweet-count">3K</span></li>
      <li><a href="#">Ohio</a></li>
    </ol>
  </div>
  <div class="trend-card">
    <h3 class="trend-card__time">2 hours ago</h3>
    <ol class="trend-card__list">
      <li><a href="#">Old Trend</a></li>
    </ol>
  </div>
</body></html>
"""


def create_fourchan_catalog() -> list:
    return [
        {
            "page": 1,
            "threads": [
                {"no": 1, "sticky": 1, "sub": "Rules", "replies": 500, "images": 0},
                {"no": 100, "sub": "Frog posting thread", "replies": 120, "images": 40},
                {"no": 101, "com": "what is this <br><b>brainrot</b> even about anymore guys seriously",
                 "replies": 300, "images": 2},
                {"no": 102, "sub": "quiet thread", "replies": 10, "images": 1},
            ],
        },
        {
            "page": 2,
            "threads": [
                {"no": 200, "sub": "Ohio final boss", "replies": 75, "images": 12},
            ],
        },
    ]


KYM_CONFIRMED_HTML = """
<html><body>
  <aside class="left">
    <dl>
      <dt>Status</dt>
      <dd>Confirmed</dd>
      <dt>Year</dt>
      <dd><a href="/memes/year/2013">2013</a></dd>
      <dt>Origin</dt>
      <dd><a href="/memes/sites/tumblr">Tumblr</a></dd>
    </dl>
  </aside>
</body></html>
"""


FARSIDE_HTML = """
<html><body>
  <table>
    <tr><th>Date</th><th>IBIT</th><th>FBTC</th><th>Total</th></tr>
    <tr><td>14 Jan 2024</td><td>100.0</td><td>(20.5)</td><td>79.5</td></tr>
    <tr><td>13 Jan 2024</td><td>50.0</td><td>0.0</td><td>(1,020.0)</td></tr>
    <tr></tr>
    <tr><td></td><td>1.0</td><td>1.0</td><td>2.0</td></tr>
    <tr><td>12 Jan 2024</td><td>-</td><td>-</td><td>-</td></tr>
    <tr><td>11 Jan 2024</td><td>10.0</td><td>5.0</td><td>$15.0</td></tr>
  </table>
</body></html>
"""
