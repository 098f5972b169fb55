"""
Cross-source aggregation of normalized trends.

Trends sharing an identity key are merged into one accumulator record using
the named merge rules below, then scored with the source-weighted mean and
the multi-source and category boosts, and finally ranked.
"""

import logging
from typing import Dict, List, Optional

from trend_radar.categories import category_precedence
from trend_radar.processing.normalizer import clamp, round_half_up
from trend_radar.types import Article, Category, SourceType, Trend, TrendMetrics

logger = logging.getLogger(__name__)

SOURCE_WEIGHTS: Dict[SourceType, float] = {
    SourceType.TWITTER: 0.30,
    SourceType.REDDIT: 0.25,
    SourceType.TIKTOK: 0.20,
    SourceType.GOOGLE_TRENDS: 0.15,
    SourceType.FOURCHAN: 0.10,
}
DEFAULT_SOURCE_WEIGHT = 0.1

# (minimum distinct sources, boost), checked in order
MULTI_SOURCE_BOOSTS = ((3, 1.30), (2, 1.15))

CATEGORY_BOOSTS: Dict[Category, float] = {
    Category.ANIMAL: 1.4,
    Category.AI: 1.3,
    Category.ABSURDIST: 1.2,
    Category.CRYPTO: 1.0,
    Category.UNKNOWN: 1.0,
}

MAX_ARTICLES = 5


# ============================================================================
# Merge rules
# ============================================================================


def merge_sources(existing: List[SourceType], incoming: List[SourceType]) -> List[SourceType]:
    """Ordered union; never drops a source."""
    return existing + [s for s in incoming if s not in existing]


def merge_scores(
    existing: Dict[SourceType, float], incoming: Dict[SourceType, float]
) -> Dict[SourceType, float]:
    """Insert or overwrite per source; a recurring source overwrites."""
    merged = dict(existing)
    merged.update(incoming)
    return merged


def merge_metrics(existing: TrendMetrics, incoming: TrendMetrics) -> TrendMetrics:
    """Element-wise maximum, so a spike seen by any source is kept."""
    return TrendMetrics(
        magnitude=max(existing.magnitude, incoming.magnitude),
        growth5h=max(existing.growth5h, incoming.growth5h),
        growth24h=max(existing.growth24h, incoming.growth24h),
        growth7d=max(existing.growth7d, incoming.growth7d),
    )


def merge_keywords(existing: List[str], incoming: List[str]) -> List[str]:
    """Ordered union."""
    return existing + [k for k in incoming if k not in existing]


def merge_articles(
    existing: List[Article], incoming: List[Article], limit: int = MAX_ARTICLES
) -> List[Article]:
    """Union by URL, capped at `limit`."""
    merged = list(existing)
    urls = {a.url for a in merged}
    for article in incoming:
        if article.url not in urls:
            merged.append(article)
            urls.add(article.url)
    return merged[:limit]


def merge_description(existing: str, incoming: str) -> str:
    """The longer description wins; ties keep the existing one."""
    return incoming if len(incoming) > len(existing) else existing


def merge_category(existing: Category, incoming: Category) -> Category:
    """The category declared earlier in the keyword table wins."""
    if category_precedence(incoming) < category_precedence(existing):
        return incoming
    return existing


# ============================================================================
# Scoring
# ============================================================================


def source_weight(source: SourceType) -> float:
    return SOURCE_WEIGHTS.get(source, DEFAULT_SOURCE_WEIGHT)


def weighted_mean(per_source_score: Dict[SourceType, float]) -> float:
    """
    Source-weighted mean over the sources actually present.

    Args:
        per_source_score: Score per contributing source

    Returns:
        Weighted mean, 0.0 when no source contributed
    """
    total_weight = sum(source_weight(s) for s in per_source_score)
    if total_weight <= 0:
        return 0.0
    weighted = sum(score * source_weight(s) for s, score in per_source_score.items())
    return weighted / total_weight


def multi_source_boost(source_count: int) -> float:
    for minimum, boost in MULTI_SOURCE_BOOSTS:
        if source_count >= minimum:
            return boost
    return 1.0


def compute_aggregate_score(trend: Trend) -> int:
    """
    Compute the final ranking value for a merged trend.

    Boosts compound multiplicatively and the value is clamped to [0, 100]
    after each multiplication, then rounded to the nearest integer.
    """
    score = clamp(weighted_mean(trend.per_source_score))
    score = clamp(score * multi_source_boost(len(trend.sources)))
    score = clamp(score * CATEGORY_BOOSTS.get(trend.category, 1.0))
    return round_half_up(score)


# ============================================================================
# Aggregation
# ============================================================================


class TrendAccumulator:
    """
    Owned, mutable aggregation record for one identity key.

    The accumulator copies the first trend it sees so that merging never
    mutates the caller's objects.
    """

    def __init__(self, trend: Trend):
        self.trend = trend.model_copy(deep=True)
        self.observations = 1

    @property
    def identity_key(self) -> str:
        return self.trend.identity_key

    def merge(self, other: Trend) -> None:
        """
        Fold another observation of the same topic into this record.

        Args:
            other: Trend with the same identity key

        Raises:
            ValueError: If the identity keys differ
        """
        if other.identity_key != self.trend.identity_key:
            raise ValueError(
                f"Cannot merge '{other.identity_key}' into '{self.trend.identity_key}'"
            )

        trend = self.trend
        trend.sources = merge_sources(trend.sources, other.sources)
        trend.per_source_score = merge_scores(trend.per_source_score, other.per_source_score)
        trend.metrics = merge_metrics(trend.metrics, other.metrics)
        trend.keywords = merge_keywords(trend.keywords, other.keywords)
        trend.articles = merge_articles(trend.articles, other.articles)
        trend.description = merge_description(trend.description, other.description)
        trend.category = merge_category(trend.category, other.category)
        if not trend.url:
            trend.url = other.url
        self.observations += 1

    def finalize(self) -> Trend:
        """Score the record and hand out the finished trend."""
        self.trend.aggregate_score = compute_aggregate_score(self.trend)
        return self.trend


def aggregate(trends: List[Trend]) -> List[Trend]:
    """
    Merge per-source trends and rank them.

    Args:
        trends: Normalized trends, in encounter order

    Returns:
        Merged trends sorted by aggregate score descending; ties keep
        encounter order (the sort is stable)
    """
    accumulators: Dict[str, TrendAccumulator] = {}

    for trend in trends:
        accumulator: Optional[TrendAccumulator] = accumulators.get(trend.identity_key)
        if accumulator is None:
            accumulators[trend.identity_key] = TrendAccumulator(trend)
        else:
            accumulator.merge(trend)

    merged = [acc.finalize() for acc in accumulators.values()]
    # Stable: equal scores keep encounter order
    merged.sort(key=lambda t: t.aggregate_score, reverse=True)

    multi_source = sum(1 for t in merged if len(t.sources) > 1)
    logger.info(
        f"Aggregated {len(trends)} observations into {len(merged)} trends "
        f"({multi_source} seen by multiple sources)"
    )

    return merged
