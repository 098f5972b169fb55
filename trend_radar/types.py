"""
Shared type definitions for Trend Radar.

This module contains the models passed between the collectors, the
processing stages, the cache gateway and the API. They are the contract
between those layers.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Enums
# ============================================================================


class SourceType(str, Enum):
    """Tag identifying the origin of an observation."""

    TIKTOK = "tiktok"  # Short-video hashtag scraper
    GOOGLE_TRENDS = "google_trends"  # Search-trends feed
    REDDIT = "reddit"  # Social-link aggregator
    TWITTER = "twitter"  # Microblog trend ranking
    FOURCHAN = "fourchan"  # Forum-activity catalog
    CUSTOM = "custom"


class Category(str, Enum):
    """Meme category classification."""

    ANIMAL = "animal"
    AI = "ai"
    ABSURDIST = "absurdist"
    CRYPTO = "crypto"
    UNKNOWN = "unknown"


class EnrichmentStatus(str, Enum):
    """Status of a trend on the meme knowledge site."""

    UNKNOWN = "unknown"
    SUBMISSION = "submission"
    CONFIRMED = "confirmed"


# ============================================================================
# Core Data Models
# ============================================================================


class TrendMetrics(BaseModel):
    """Magnitude and growth figures for a trend."""

    magnitude: float = 0.0  # Views, upvotes, replies... depending on source
    growth5h: float = 0.0
    growth24h: float = 0.0
    growth7d: float = 0.0

    class Config:
        frozen = True


class Article(BaseModel):
    """A related article or post attached to a trend."""

    title: str
    url: str
    source: Optional[str] = None

    class Config:
        frozen = True


class RawObservation(BaseModel):
    """One item as produced by a collector, before normalization."""

    label: str
    magnitude: float = 0.0
    growth5h: float = 0.0
    growth24h: float = 0.0
    growth7d: float = 0.0
    keywords: List[str] = Field(default_factory=list)
    url: str = ""
    description: str = ""
    rank: Optional[int] = None  # 1-based position for ranked sources
    articles: List[Article] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = False


class Enrichment(BaseModel):
    """Meme knowledge lookup result."""

    status: EnrichmentStatus = EnrichmentStatus.UNKNOWN
    origin: Optional[str] = None
    year: Optional[int] = None
    url: Optional[str] = None

    class Config:
        frozen = True


class Trend(BaseModel):
    """A canonical, deduplicated trending topic."""

    identity_key: str
    display_name: str
    sources: List[SourceType] = Field(default_factory=list)
    per_source_score: Dict[SourceType, float] = Field(default_factory=dict)
    aggregate_score: int = 0
    category: Category = Category.UNKNOWN
    metrics: TrendMetrics = Field(default_factory=TrendMetrics)
    keywords: List[str] = Field(default_factory=list)
    description: str = ""
    url: str = ""
    articles: List[Article] = Field(default_factory=list)
    enrichment: Optional[Enrichment] = None

    class Config:
        frozen = False


# ============================================================================
# Pipeline Models
# ============================================================================


class PipelineResult(BaseModel):
    """Result of one pipeline run."""

    trends: List[Trend] = Field(default_factory=list)
    source_counts: Dict[str, int] = Field(default_factory=dict)
    timed_out_sources: List[str] = Field(default_factory=list)
    observations_collected: int = 0
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: float = 0.0

    class Config:
        frozen = False


class CacheEntry(BaseModel):
    """A serialized payload stored under a cache key."""

    payload: Dict[str, Any]
    created_at: datetime
    ttl_seconds: int

    class Config:
        frozen = True

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_seconds)

    def is_fresh(self, now: datetime) -> bool:
        """Return True while the entry is inside its TTL window."""
        return now < self.expires_at


# ============================================================================
# Plugin Models
# ============================================================================


class PluginMetadata(BaseModel):
    """Metadata for a collector plugin."""

    name: str
    version: str = "1.0.0"
    description: str
    source_type: SourceType
    enabled: bool = True
    max_items: int = 30

    class Config:
        frozen = True
