"""
Unit tests for the Know Your Meme enrichment stage.
"""

import asyncio
from typing import Dict, Optional

import aiohttp
import pytest

from tests.fixtures import KYM_CONFIRMED_HTML, create_sample_trend
from tests.mocks.http import MockResponse, MockSession
from trend_radar.processing.enrich import (
    KnowYourMemeLookup,
    enrich_trends,
    meme_slug,
    parse_meme_page,
)
from trend_radar.processing.interfaces import EnrichmentError
from trend_radar.types import Enrichment, EnrichmentStatus, SourceType


class StubLookup:
    """Lookup answering from a table, raising for names mapped to exceptions."""

    def __init__(self, answers: Dict[str, object], delay: float = 0.0):
        self.answers = answers
        self.delay = delay
        self.calls = []

    async def lookup(self, session, name: str) -> Optional[Enrichment]:
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        answer = self.answers.get(name)
        if isinstance(answer, Exception):
            raise answer
        return answer


CONFIRMED = Enrichment(status=EnrichmentStatus.CONFIRMED, origin="Tumblr", year=2013)


def ranked_trends(*scores):
    trends = []
    for index, score in enumerate(scores):
        trend = create_sample_trend(f"meme{index}", {SourceType.REDDIT: score})
        trend.aggregate_score = score
        trends.append(trend)
    return trends


# ============================================================================
# Parsing
# ============================================================================


@pytest.mark.parametrize(
    "name,slug",
    [("#Moon Doge!", "moon-doge"), ("$PEPE", "pepe"), ("Skibidi   Toilet", "skibidi-toilet")],
)
def test_meme_slug(name, slug):
    assert meme_slug(name) == slug


def test_parse_confirmed_page():
    enrichment = parse_meme_page(KYM_CONFIRMED_HTML, "https://knowyourmeme.com/memes/doge")

    assert enrichment.status == EnrichmentStatus.CONFIRMED
    assert enrichment.origin == "Tumblr"
    assert enrichment.year == 2013
    assert enrichment.url == "https://knowyourmeme.com/memes/doge"


def test_parse_page_without_details():
    enrichment = parse_meme_page("<html><body>nothing</body></html>", "u")

    assert enrichment.status == EnrichmentStatus.UNKNOWN
    assert enrichment.origin is None
    assert enrichment.year is None


# ============================================================================
# Lookup
# ============================================================================


class TestKnowYourMemeLookup:
    """Tests for the HTTP lookup."""

    @pytest.mark.asyncio
    async def test_found(self):
        session = MockSession({"/memes/doge": MockResponse(text=KYM_CONFIRMED_HTML)})

        enrichment = await KnowYourMemeLookup().lookup(session, "#Doge")

        assert enrichment.status == EnrichmentStatus.CONFIRMED
        assert session.requests[0][1] == "https://knowyourmeme.com/memes/doge"

    @pytest.mark.asyncio
    async def test_not_found_is_unknown(self):
        enrichment = await KnowYourMemeLookup().lookup(MockSession(), "never heard of it")
        assert enrichment == Enrichment(status=EnrichmentStatus.UNKNOWN)

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        session = MockSession({"knowyourmeme": MockResponse(status=503)})
        with pytest.raises(EnrichmentError):
            await KnowYourMemeLookup().lookup(session, "doge")

    @pytest.mark.asyncio
    async def test_network_error_raises(self):
        session = MockSession({"knowyourmeme": aiohttp.ClientConnectionError("reset")})
        with pytest.raises(EnrichmentError):
            await KnowYourMemeLookup().lookup(session, "doge")

    @pytest.mark.asyncio
    async def test_unsluggable_name(self):
        session = MockSession()
        assert await KnowYourMemeLookup().lookup(session, "###") is None
        assert session.requests == []


# ============================================================================
# Stage
# ============================================================================


class TestEnrichTrends:
    """Tests for the enrichment stage."""

    @pytest.mark.asyncio
    async def test_confirmed_boost_and_resort(self):
        trends = ranked_trends(80, 70, 60)
        lookup = StubLookup({"meme2": CONFIRMED})

        result = await enrich_trends(MockSession(), trends, lookup)

        assert [t.identity_key for t in result] == ["meme0", "meme2", "meme1"]
        assert result[1].aggregate_score == 72
        assert result[1].enrichment == CONFIRMED

    @pytest.mark.asyncio
    async def test_boost_reclamped(self):
        trends = ranked_trends(95)
        result = await enrich_trends(MockSession(), trends, StubLookup({"meme0": CONFIRMED}))
        assert result[0].aggregate_score == 100

    @pytest.mark.asyncio
    async def test_submission_not_boosted(self):
        trends = ranked_trends(50)
        submission = Enrichment(status=EnrichmentStatus.SUBMISSION)

        result = await enrich_trends(MockSession(), trends, StubLookup({"meme0": submission}))

        assert result[0].aggregate_score == 50
        assert result[0].enrichment.status == EnrichmentStatus.SUBMISSION

    @pytest.mark.asyncio
    async def test_only_top_n_looked_up_in_order(self):
        trends = ranked_trends(90, 80, 70, 60, 50)
        lookup = StubLookup({})

        await enrich_trends(MockSession(), trends, lookup, top_n=3)

        assert lookup.calls == ["meme0", "meme1", "meme2"]

    @pytest.mark.asyncio
    async def test_failures_are_absorbed(self):
        trends = ranked_trends(90, 80, 70)
        lookup = StubLookup(
            {
                "meme0": EnrichmentError("503"),
                "meme1": RuntimeError("parser exploded"),
                "meme2": CONFIRMED,
            }
        )

        result = await enrich_trends(MockSession(), trends, lookup)

        assert [t.identity_key for t in result] == ["meme0", "meme2", "meme1"]
        assert result[0].enrichment is None
        assert result[1].aggregate_score == 84

    @pytest.mark.asyncio
    async def test_slow_lookup_times_out(self):
        trends = ranked_trends(90)
        lookup = StubLookup({"meme0": CONFIRMED}, delay=1.0)

        result = await enrich_trends(MockSession(), trends, lookup, timeout=0.05)

        assert result[0].enrichment is None
        assert result[0].aggregate_score == 90

    @pytest.mark.asyncio
    async def test_stops_at_deadline(self):
        trends = ranked_trends(90, 80)
        lookup = StubLookup({})
        deadline = asyncio.get_running_loop().time() - 1

        result = await enrich_trends(MockSession(), trends, lookup, deadline=deadline)

        assert lookup.calls == []
        assert [t.aggregate_score for t in result] == [90, 80]
