"""
Normalization of collector observations into canonical trends.

Every function here is pure. The per-source scoring formulas live in an
explicit registry keyed by source tag so each one can be tested on its own.
"""

import logging
import math
import re
import unicodedata
from typing import Callable, Dict, Iterable, List

from trend_radar.categories import classify
from trend_radar.processing.interfaces import NormalizationError
from trend_radar.types import RawObservation, SourceType, Trend, TrendMetrics

logger = logging.getLogger(__name__)

TOPIC_MARKERS = "#$"
NEUTRAL_SCORE = 50.0
SHORT_VIDEO_DIVISOR = 10.0

# A marker at the start of a word: cashtags start with a letter, hashtags with
# a letter or digit
_CASHTAG = re.compile(r"(?:^|\s)\$[^\W\d_]")
_HASHTAG = re.compile(r"(?:^|\s)#[^\W_]")


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp a value into [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clean_label(label: str) -> str:
    """
    Strip whitespace and a leading topic marker from a label.

    Args:
        label: Display label as seen on the source

    Returns:
        Label without the leading '#' or '$'
    """
    label = label.strip()
    if label and label[0] in TOPIC_MARKERS:
        label = label[1:]
    return label.strip()


def _fold_accent(ch: str) -> str:
    # "é" -> "e"; letters without an ASCII base (kana, CJK...) are kept as-is
    base = "".join(c for c in unicodedata.normalize("NFKD", ch) if not unicodedata.combining(c))
    return base.lower() if base.isascii() and base.isalnum() else ch


def identity_key(label: str) -> str:
    """
    Derive the grouping key for a display label.

    Letters and digits of any script are kept; accented Latin letters fold
    to their base letter so "Pokémon" and "Pokemon" group together.

    Example:
        identity_key("#Moon_Doge!") == identity_key("moondoge") == "moondoge"
    """
    text = unicodedata.normalize("NFC", clean_label(label).lower())
    return "".join(_fold_accent(ch) for ch in text if ch.isalnum())


def normalize_keywords(keywords: Iterable[str]) -> List[str]:
    """Lowercase, strip and dedupe keywords, keeping first-seen order."""
    seen = []
    for keyword in keywords:
        keyword = keyword.strip().lower()
        if keyword and keyword not in seen:
            seen.append(keyword)
    return seen


# ============================================================================
# Per-source scoring
# ============================================================================


def score_short_video(observation: RawObservation) -> float:
    """Average of the three growth figures, scaled down."""
    growth = (observation.growth5h + observation.growth24h + observation.growth7d) / 3
    return clamp(growth / SHORT_VIDEO_DIVISOR)


def score_search_trend(observation: RawObservation) -> float:
    """Linear decay by rank: 100 - rank*4."""
    if observation.rank is None:
        return NEUTRAL_SCORE
    return clamp(100 - observation.rank * 4)


def score_forum_link(observation: RawObservation) -> float:
    """Log-scaled upvotes, +20% per extra subreddit."""
    subreddits = max(1, len(observation.metadata.get("subreddits", [])))
    base = math.log10(max(0.0, observation.magnitude) + 1) * 20
    return clamp(base * (1 + 0.2 * (subreddits - 1)))


def score_microblog_trend(observation: RawObservation) -> float:
    """Linear decay by rank: 100 - rank*3, boosted for cashtags and hashtags."""
    if observation.rank is None:
        return NEUTRAL_SCORE

    score = 100 - observation.rank * 3
    if _CASHTAG.search(observation.label):
        score *= 1.3
    if _HASHTAG.search(observation.label):
        score *= 1.1
    return clamp(score)


def score_forum_activity(observation: RawObservation) -> float:
    """Log-scaled reply count, x1.2 for image-heavy threads."""
    score = math.log10(max(0.0, observation.magnitude) + 1) * 30
    if observation.metadata.get("images", 0) > 10:
        score *= 1.2
    return clamp(score)


SOURCE_SCORERS: Dict[SourceType, Callable[[RawObservation], float]] = {
    SourceType.TIKTOK: score_short_video,
    SourceType.GOOGLE_TRENDS: score_search_trend,
    SourceType.REDDIT: score_forum_link,
    SourceType.TWITTER: score_microblog_trend,
    SourceType.FOURCHAN: score_forum_activity,
}


def score_observation(observation: RawObservation, source: SourceType) -> float:
    """
    Score an observation with its source's formula.

    Args:
        observation: Observation to score
        source: Source the observation came from

    Returns:
        Score in [0, 100]; unknown sources get a neutral 50
    """
    scorer = SOURCE_SCORERS.get(source)
    if scorer is None:
        return NEUTRAL_SCORE
    return scorer(observation)


# ============================================================================
# Normalization
# ============================================================================


def normalize(observation: RawObservation, source: SourceType) -> Trend:
    """
    Convert an observation into a canonical Trend.

    Args:
        observation: Observation produced by a collector
        source: Tag of the collector that produced it

    Returns:
        Trend observed by exactly one source

    Raises:
        NormalizationError: If the label has no alphanumeric characters
    """
    key = identity_key(observation.label)
    if not key:
        raise NormalizationError(f"Label {observation.label!r} yields an empty identity key")

    keywords = normalize_keywords(observation.keywords)
    score = score_observation(observation, source)

    return Trend(
        identity_key=key,
        display_name=observation.label.strip(),
        sources=[source],
        per_source_score={source: score},
        aggregate_score=round_half_up(score),
        category=classify(key, keywords),
        metrics=TrendMetrics(
            magnitude=observation.magnitude,
            growth5h=observation.growth5h,
            growth24h=observation.growth24h,
            growth7d=observation.growth7d,
        ),
        keywords=keywords,
        description=observation.description,
        url=observation.url,
        articles=list(observation.articles),
    )
