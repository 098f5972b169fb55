"""
Base classes for source collectors.

This module defines the abstract interface that every source adapter
implements and the registry used to discover them. A collector's public
`fetch()` never raises: any failure inside `collect()` is logged and the
collector contributes an empty list.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import aiohttp

from trend_radar.config import Settings, get_settings
from trend_radar.observability.metrics import record_collector_run
from trend_radar.types import PluginMetadata, RawObservation

logger = logging.getLogger(__name__)

USER_AGENT = "TrendRadar/1.0 (+https://github.com/trend-radar/trend-radar)"


class CollectorPlugin(ABC):
    """
    Abstract base class for source collectors.

    Subclasses define `metadata` and implement `collect()`. They may raise
    CollectionError (or anything else) from `collect()`; `fetch()` contains it.
    """

    # Plugin metadata (must be overridden by subclasses)
    metadata: PluginMetadata

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the collector.

        Args:
            settings: Runtime settings (defaults to the process settings)
        """
        if not hasattr(self, "metadata"):
            raise NotImplementedError(
                f"{self.__class__.__name__} must define 'metadata' attribute"
            )
        self.settings = settings or get_settings()

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def max_items(self) -> int:
        return min(self.metadata.max_items, self.settings.max_items_per_source)

    @abstractmethod
    async def collect(self, session: aiohttp.ClientSession) -> List[RawObservation]:
        """
        Collect observations from the source.

        Args:
            session: HTTP session to issue requests with

        Returns:
            Observations collected from the source

        Raises:
            CollectionError: If collection fails
        """
        pass

    def validate(self, observation: RawObservation) -> bool:
        """
        Validate an observation.

        Default implementation only requires a non-blank label. Override
        for source-specific rules.

        Args:
            observation: The observation to validate

        Returns:
            True if the observation is valid
        """
        return bool(observation.label.strip())

    async def fetch(
        self, session: Optional[aiohttp.ClientSession] = None
    ) -> List[RawObservation]:
        """
        Collect, validate and bound observations without raising.

        Args:
            session: Optional shared session; a private one is opened if None

        Returns:
            Valid observations (at most `max_items`), or [] on any failure
        """
        timeout_seconds = self.settings.adapter_timeout_seconds

        try:
            if session is None:
                timeout = aiohttp.ClientTimeout(total=timeout_seconds)
                async with aiohttp.ClientSession(
                    timeout=timeout, headers={"User-Agent": USER_AGENT}
                ) as own_session:
                    items = await asyncio.wait_for(self.collect(own_session), timeout_seconds)
            else:
                items = await asyncio.wait_for(self.collect(session), timeout_seconds)

        except asyncio.TimeoutError:
            logger.error(f"Collector '{self.name}' timed out after {timeout_seconds}s")
            record_collector_run(self.name, "timeout")
            return []
        except Exception as e:
            logger.error(f"Collector '{self.name}' failed: {e}", exc_info=True)
            record_collector_run(self.name, "failure")
            return []

        valid = [item for item in items if self.validate(item)][: self.max_items]

        logger.info(f"Collected {len(valid)} observations from {self.name}")
        record_collector_run(self.name, "success" if valid else "empty", len(valid))
        return valid

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} ({self.metadata.name})>"


class PluginRegistry:
    """
    Registry of collector classes.

    Collector modules register their class with `@register_collector`;
    `create_collectors()` instantiates the enabled ones.
    """

    _plugins: Dict[str, Type[CollectorPlugin]] = {}

    @classmethod
    def register(cls, plugin_class: Type[CollectorPlugin]) -> None:
        """
        Register a collector class.

        Args:
            plugin_class: The collector class to register

        Raises:
            ValueError: If the class has no metadata or its name is taken
        """
        metadata = getattr(plugin_class, "metadata", None)
        if metadata is None:
            raise ValueError(f"Failed to register {plugin_class.__name__}: no metadata")

        if metadata.name in cls._plugins:
            raise ValueError(f"Collector '{metadata.name}' is already registered")

        cls._plugins[metadata.name] = plugin_class

    @classmethod
    def get_plugin_class(cls, name: str) -> Optional[Type[CollectorPlugin]]:
        return cls._plugins.get(name)

    @classmethod
    def get_plugin_names(cls) -> List[str]:
        return list(cls._plugins.keys())

    @classmethod
    def create_collectors(cls, settings: Optional[Settings] = None) -> List[CollectorPlugin]:
        """
        Instantiate every enabled collector.

        Args:
            settings: Settings passed to each collector

        Returns:
            Collector instances in registration order
        """
        return [
            plugin_class(settings)
            for plugin_class in cls._plugins.values()
            if plugin_class.metadata.enabled
        ]

    @classmethod
    def unregister(cls, name: str) -> bool:
        if name in cls._plugins:
            del cls._plugins[name]
            return True
        return False


def register_collector(plugin_class: Type[CollectorPlugin]) -> Type[CollectorPlugin]:
    """
    Decorator for registering collector classes.

    Usage:
        @register_collector
        class MyCollector(CollectorPlugin):
            ...

    Args:
        plugin_class: The collector class to register

    Returns:
        The class (unchanged)
    """
    PluginRegistry.register(plugin_class)
    return plugin_class


class CollectionError(Exception):
    """Exception raised when data collection fails."""

    pass
