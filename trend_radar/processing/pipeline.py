"""
Collection and processing pipeline.

Orchestrates one refresh: every collector runs concurrently, then the
observations are normalized, merged, ranked and enriched. A collector that
fails or misses the deadline contributes nothing; it never fails the run.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import aiohttp

from trend_radar.collectors.base import USER_AGENT, CollectorPlugin, PluginRegistry
from trend_radar.config import Settings, get_settings
from trend_radar.observability.logging import log_context
from trend_radar.observability.metrics import pipeline_duration, pipeline_runs_counter
from trend_radar.processing.aggregate import aggregate
from trend_radar.processing.enrich import KnowYourMemeLookup, enrich_trends
from trend_radar.processing.interfaces import MemeLookup, NormalizationError, PipelineError
from trend_radar.processing.normalizer import normalize
from trend_radar.types import PipelineResult, RawObservation, Trend

logger = logging.getLogger(__name__)

Collected = Tuple[CollectorPlugin, List[RawObservation]]


class TrendPipeline:
    """
    Fetch, normalize, aggregate and enrich trends from all collectors.

    Example:
        pipeline = TrendPipeline()
        result = await pipeline.run()
        for trend in result.trends[:10]:
            print(trend.display_name, trend.aggregate_score)
    """

    def __init__(
        self,
        collectors: Optional[List[CollectorPlugin]] = None,
        settings: Optional[Settings] = None,
        lookup: Optional[MemeLookup] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            collectors: Collectors to run (defaults to every registered one)
            settings: Runtime settings
            lookup: Meme lookup used by the enrichment stage
        """
        self.settings = settings or get_settings()
        if collectors is None:
            # Registers the built-in collectors
            import trend_radar.collectors  # noqa: F401

            collectors = PluginRegistry.create_collectors(self.settings)
        self.collectors = collectors
        self.lookup = lookup or KnowYourMemeLookup()

    async def run(self) -> PipelineResult:
        """
        Run one refresh.

        Returns:
            PipelineResult with the ranked trends

        Raises:
            PipelineError: If merging or scoring fails
        """
        run_id = uuid.uuid4().hex[:8]
        started_at = datetime.utcnow()
        start = time.monotonic()

        with log_context(run_id=run_id):
            logger.info(f"Starting pipeline run with {len(self.collectors)} collectors")

            try:
                result = await self._run(started_at)
            except Exception:
                pipeline_runs_counter.labels(status="failure").inc()
                raise

            result.completed_at = datetime.utcnow()
            result.duration_seconds = time.monotonic() - start
            pipeline_duration.observe(result.duration_seconds)
            pipeline_runs_counter.labels(status="success").inc()

            logger.info(
                f"Pipeline run finished in {result.duration_seconds:.2f}s: "
                f"{len(result.trends)} trends from {result.observations_collected} observations"
            )
            return result

    async def _run(self, started_at: datetime) -> PipelineResult:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.settings.pipeline_timeout_seconds

        timeout = aiohttp.ClientTimeout(total=self.settings.adapter_timeout_seconds)
        async with aiohttp.ClientSession(
            timeout=timeout, headers={"User-Agent": USER_AGENT}
        ) as session:
            collected, timed_out = await self.collect(session)

            trends = self.normalize_all(collected)

            try:
                ranked = aggregate(trends)
            except Exception as e:
                raise PipelineError(f"Aggregation failed: {e}") from e

            if self.settings.enrichment_enabled and ranked:
                ranked = await enrich_trends(
                    session,
                    ranked,
                    self.lookup,
                    top_n=self.settings.enrichment_top_n,
                    timeout=self.settings.enrichment_timeout_seconds,
                    deadline=deadline,
                )

        return PipelineResult(
            trends=ranked,
            source_counts={c.name: len(observations) for c, observations in collected},
            timed_out_sources=timed_out,
            observations_collected=sum(len(observations) for _, observations in collected),
            started_at=started_at,
        )

    async def collect(
        self, session: aiohttp.ClientSession
    ) -> Tuple[List[Collected], List[str]]:
        """
        Run every collector concurrently and wait for all of them.

        Collectors still running at the pipeline deadline are cancelled and
        contribute nothing.

        Args:
            session: Shared HTTP session

        Returns:
            (collector, observations) pairs in collector order, and the
            names of the collectors that missed the deadline
        """
        if not self.collectors:
            return [], []

        tasks: Dict[asyncio.Task, CollectorPlugin] = {
            asyncio.create_task(collector.fetch(session)): collector
            for collector in self.collectors
        }

        done, pending = await asyncio.wait(
            tasks.keys(), timeout=self.settings.pipeline_timeout_seconds
        )

        timed_out = []
        for task in pending:
            task.cancel()
            timed_out.append(tasks[task].name)
            logger.warning(f"Collector '{tasks[task].name}' missed the pipeline deadline")

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        collected = []
        for task, collector in tasks.items():
            if task not in done or task.cancelled():
                collected.append((collector, []))
                continue

            error = task.exception()
            if error is not None:
                logger.error(f"Collector '{collector.name}' raised: {error}")
                collected.append((collector, []))
                continue

            collected.append((collector, task.result()))

        return collected, sorted(timed_out)

    def normalize_all(
        self, collected: List[Collected]
    ) -> List[Trend]:
        """Normalize observations in collector order, skipping unusable ones."""
        trends = []
        for collector, observations in collected:
            source = collector.metadata.source_type
            for observation in observations:
                try:
                    trends.append(normalize(observation, source))
                except NormalizationError as e:
                    logger.warning(f"Skipping observation from {collector.name}: {e}")
        return trends
