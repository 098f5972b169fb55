"""
API schemas for the trend and ETF snapshot endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TrendsResponse(BaseModel):
    """Response of GET /trends."""

    success: bool = Field(..., description="False when the snapshot could not be built")
    trends: List[Dict[str, Any]] = Field(
        default_factory=list, description="Ranked trends, highest score first"
    )
    count: int = Field(0, ge=0, description="Number of trends")
    sources: Dict[str, int] = Field(
        default_factory=dict, description="Observations contributed per source"
    )
    timestamp: str = Field(..., description="When the snapshot was computed (ISO 8601)")
    cached: bool = Field(False, description="Whether the snapshot was served from cache")
    error: Optional[str] = Field(None, description="Failure reason when success is false")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "trends": [
                    {
                        "identity_key": "moondoge",
                        "display_name": "#MoonDoge",
                        "sources": ["tiktok", "reddit"],
                        "per_source_score": {"tiktok": 50.0, "reddit": 80.0},
                        "aggregate_score": 100,
                        "category": "animal",
                        "metrics": {
                            "magnitude": 250000.0,
                            "growth5h": 300.0,
                            "growth24h": 500.0,
                            "growth7d": 700.0,
                        },
                        "keywords": ["moondoge", "doge"],
                        "description": "",
                        "url": "https://www.tiktok.com/tag/moondoge",
                        "articles": [],
                    }
                ],
                "count": 1,
                "sources": {"tiktok": 1, "reddit": 1, "google_trends": 0},
                "timestamp": "2024-01-15T10:30:00Z",
                "cached": False,
            }
        }


class ETFFlowsResponse(BaseModel):
    """Response of GET /etf-flows."""

    success: bool = True
    cached: bool = False
    data: Dict[str, Any] = Field(
        default_factory=dict, description="Per-asset flow tables and weekly summaries"
    )
