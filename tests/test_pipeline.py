"""
Integration tests for the collection and processing pipeline.

Collectors and the enrichment lookup are test doubles; no network access.
"""

from unittest.mock import patch

import pytest

from tests.fixtures import create_moondoge_observations, create_test_settings
from tests.mocks.collectors import failing_collector, slow_collector, static_collector
from trend_radar.processing.interfaces import PipelineError
from trend_radar.processing.pipeline import TrendPipeline
from trend_radar.service import build_trends_payload
from trend_radar.types import Enrichment, EnrichmentStatus, RawObservation, SourceType


class ConfirmEverything:
    def __init__(self):
        self.calls = []

    async def lookup(self, session, name):
        self.calls.append(name)
        return Enrichment(status=EnrichmentStatus.CONFIRMED)


@pytest.fixture
def settings():
    return create_test_settings()


@pytest.fixture
def moondoge_collectors(settings):
    observations = create_moondoge_observations()
    return [
        static_collector("tiktok", SourceType.TIKTOK, [observations[SourceType.TIKTOK]], settings),
        static_collector("reddit", SourceType.REDDIT, [observations[SourceType.REDDIT]], settings),
        static_collector(
            "twitter",
            SourceType.TWITTER,
            [RawObservation(label="Ohio", rank=2), RawObservation(label="#TaxSeason", rank=9)],
            settings,
        ),
    ]


@pytest.mark.asyncio
async def test_merges_across_sources(moondoge_collectors, settings):
    result = await TrendPipeline(moondoge_collectors, settings).run()

    assert [t.identity_key for t in result.trends] == ["moondoge", "ohio", "taxseason"]
    assert result.trends[0].sources == [SourceType.TIKTOK, SourceType.REDDIT]
    assert result.trends[0].aggregate_score == 100
    assert result.source_counts == {"tiktok": 1, "reddit": 1, "twitter": 2}
    assert result.observations_collected == 4
    assert result.timed_out_sources == []
    assert result.completed_at is not None


@pytest.mark.asyncio
async def test_all_sources_empty_yields_no_trends(settings):
    collectors = [
        static_collector("tiktok", SourceType.TIKTOK, [], settings),
        failing_collector("reddit", SourceType.REDDIT, settings),
        failing_collector("fourchan", SourceType.FOURCHAN, settings),
    ]

    result = await TrendPipeline(collectors, settings).run()

    assert result.trends == []
    assert result.source_counts == {"tiktok": 0, "reddit": 0, "fourchan": 0}
    assert build_trends_payload(result)["trends"] == []


@pytest.mark.asyncio
async def test_failing_source_does_not_affect_others(settings):
    collectors = [
        failing_collector("reddit", SourceType.REDDIT, settings),
        static_collector("twitter", SourceType.TWITTER, [RawObservation(label="Tax Day", rank=1)],
                         settings),
    ]

    result = await TrendPipeline(collectors, settings).run()

    assert [t.identity_key for t in result.trends] == ["taxday"]
    assert result.trends[0].aggregate_score == 97


@pytest.mark.asyncio
async def test_pipeline_deadline_keeps_partial_results():
    settings = create_test_settings(pipeline_timeout_seconds=0.2, adapter_timeout_seconds=5)
    slow = slow_collector("fourchan", SourceType.FOURCHAN, 3.0,
                          [RawObservation(label="late thread", magnitude=500)], settings)
    fast = static_collector("twitter", SourceType.TWITTER, [RawObservation(label="Ohio", rank=1)],
                            settings)

    result = await TrendPipeline([slow, fast], settings).run()

    assert [t.identity_key for t in result.trends] == ["ohio"]
    assert result.timed_out_sources == ["fourchan"]
    assert result.source_counts["fourchan"] == 0


@pytest.mark.asyncio
async def test_unusable_labels_are_skipped(settings):
    collectors = [
        static_collector(
            "twitter",
            SourceType.TWITTER,
            [RawObservation(label="#!!", rank=1), RawObservation(label="Ohio", rank=2)],
            settings,
        )
    ]

    result = await TrendPipeline(collectors, settings).run()

    assert [t.identity_key for t in result.trends] == ["ohio"]


@pytest.mark.asyncio
async def test_enrichment_runs_when_enabled(moondoge_collectors):
    settings = create_test_settings(enrichment_enabled=True, enrichment_top_n=2)
    lookup = ConfirmEverything()

    result = await TrendPipeline(moondoge_collectors, settings, lookup=lookup).run()

    assert lookup.calls == ["#MoonDoge", "Ohio"]
    assert result.trends[0].enrichment.status == EnrichmentStatus.CONFIRMED
    assert result.trends[-1].enrichment is None


@pytest.mark.asyncio
async def test_aggregation_failure_raises_pipeline_error(moondoge_collectors, settings):
    with patch(
        "trend_radar.processing.pipeline.aggregate", side_effect=KeyError("weights")
    ):
        with pytest.raises(PipelineError):
            await TrendPipeline(moondoge_collectors, settings).run()


@pytest.mark.asyncio
async def test_no_collectors(settings):
    result = await TrendPipeline([], settings).run()
    assert result.trends == []
    assert result.source_counts == {}


def test_payload_shape(settings):
    from datetime import datetime

    from trend_radar.types import PipelineResult

    result = PipelineResult(
        source_counts={"reddit": 0},
        started_at=datetime(2024, 1, 15, 10, 30),
        completed_at=datetime(2024, 1, 15, 10, 30, 5),
    )

    payload = build_trends_payload(result)

    assert payload == {
        "trends": [],
        "count": 0,
        "sources": {"reddit": 0},
        "timed_out_sources": [],
        "timestamp": "2024-01-15T10:30:05Z",
    }
