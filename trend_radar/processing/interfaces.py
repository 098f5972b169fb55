"""
Processing layer interface contracts.

This module defines the Protocol for the enrichment lookup and the
exceptions raised by the processing stages.
"""

from typing import Optional, Protocol

import aiohttp

from trend_radar.types import Enrichment


class MemeLookup(Protocol):
    """Interface for a meme knowledge lookup."""

    async def lookup(
        self, session: aiohttp.ClientSession, name: str
    ) -> Optional[Enrichment]:
        """
        Look up a trend by its cleaned display name.

        Args:
            session: HTTP session to issue the request with
            name: Cleaned display name of the trend

        Returns:
            Enrichment (status UNKNOWN when the site has no entry), or
            None if the name cannot be looked up

        Raises:
            EnrichmentError: If the lookup fails
        """
        ...


# ============================================================================
# Exceptions
# ============================================================================


class ProcessingError(Exception):
    """Base exception for processing errors."""

    pass


class NormalizationError(ProcessingError):
    """Exception raised when an observation cannot be normalized."""

    pass


class PipelineError(ProcessingError):
    """Exception raised when shared merge or scoring logic fails."""

    pass


class EnrichmentError(ProcessingError):
    """Exception raised when an enrichment lookup fails."""

    pass
