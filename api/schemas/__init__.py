"""
API request and response schemas.
"""

from api.schemas.common import ErrorResponse, HealthResponse
from api.schemas.trends import ETFFlowsResponse, TrendsResponse

__all__ = ["ErrorResponse", "HealthResponse", "ETFFlowsResponse", "TrendsResponse"]
