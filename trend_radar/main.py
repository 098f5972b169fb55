"""
Run one refresh from the command line and print the ranking.

Usage:
    python -m trend_radar.main
"""

import asyncio
import logging

from trend_radar.config import get_settings
from trend_radar.observability.logging import setup_logging
from trend_radar.processing.pipeline import TrendPipeline

logger = logging.getLogger(__name__)


async def main():
    """Collect, rank and print the current trending memes."""
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    print("🔍 Collecting trending memes...")
    result = await TrendPipeline(settings=settings).run()

    for source, count in sorted(result.source_counts.items()):
        marker = " (timed out)" if source in result.timed_out_sources else ""
        print(f"   {source}: {count} observations{marker}")

    print(f"\n🔥 Top Trends ({len(result.trends)} total):\n")
    print("=" * 80)

    for i, trend in enumerate(result.trends[:20], 1):
        sources = ", ".join(s.value for s in trend.sources)
        print(f"#{i:<3} {trend.display_name:<40} {trend.aggregate_score:>3}  [{trend.category.value}]")
        print(f"     sources: {sources}")
        if trend.enrichment is not None:
            print(f"     knowyourmeme: {trend.enrichment.status.value}")

    print("=" * 80)
    print(f"\n✅ Done in {result.duration_seconds:.1f}s")


if __name__ == "__main__":
    asyncio.run(main())
