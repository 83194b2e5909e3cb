# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Quota segment: decides cache vs. fetch and produces the statusline text.

Per invocation:

    load cache ── valid ──────────────────────────────▶ USE_CACHE
        │
        └─ missing/stale ─▶ fetch ── non-empty ─▶ save ─▶ FETCH
                                │
                                └─ empty ─▶ previous cache (even stale)
                                              ├─ has quotas ─▶ FETCH_EMPTY_FALLBACK
                                              └─ none ───────▶ NO_DATA

A segment with no quotas, or whose quotas render to nothing, produces no
output at all.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from .aggregator import aggregate_quotas
from .cache import QuotaCache, format_rfc3339
from .core.config import QuotaSegmentConfig
from .core.types import CachedQuotas, ModelQuota, SegmentData, SegmentState
from .fetcher import FetcherFactory, QuotaFetcher
from .formatter import format_tracked_output

lib_logger = logging.getLogger("cliproxy_quota")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class QuotaResolution:
    """The quotas chosen for this invocation and where they came from."""

    state: SegmentState
    quotas: List[ModelQuota] = field(default_factory=list)
    cached_at: Optional[str] = None


class QuotaSegment:
    """Orchestrates QuotaCache, QuotaFetcher, the aggregator and the formatter."""

    def __init__(
        self,
        cache: Optional[QuotaCache] = None,
        fetcher_factory: Optional[FetcherFactory] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            cache: Cache store (defaults to the per-user cache file)
            fetcher_factory: Builds a fetcher from (host, key)
            clock: Returns the current aware datetime
        """
        self.cache = cache or QuotaCache()
        self._fetcher_factory = fetcher_factory or QuotaFetcher
        self._clock = clock or _utc_now
        self.last_state: Optional[SegmentState] = None

    def resolve_quotas(
        self, config: QuotaSegmentConfig, force_refresh: bool = False
    ) -> QuotaResolution:
        """
        Pick the quota set for this invocation, fetching and caching as needed.

        Args:
            config: Validated segment config
            force_refresh: Fetch even if the cache is still valid

        Returns:
            QuotaResolution; its state is NO_DATA when nothing is available
        """
        cached = self.cache.load()
        now = self._clock()

        if (
            cached is not None
            and not force_refresh
            and self.cache.is_valid(cached, config.cache_duration, now=now)
        ):
            lib_logger.debug(f"Using cached quotas from {cached.cached_at}")
            return self._finish(
                QuotaResolution(SegmentState.USE_CACHE, cached.quotas, cached.cached_at)
            )

        fetcher = self._fetcher_factory(config.host, config.key)
        fetched = fetcher.fetch_all(config.auth_type)

        if fetched:
            snapshot = CachedQuotas(quotas=fetched, cached_at=format_rfc3339(now))
            self.cache.save(snapshot)
            return self._finish(
                QuotaResolution(SegmentState.FETCH, fetched, snapshot.cached_at)
            )

        if cached is not None and cached.quotas:
            lib_logger.debug(
                f"Fetch returned nothing; falling back to cache from {cached.cached_at}"
            )
            return self._finish(
                QuotaResolution(
                    SegmentState.FETCH_EMPTY_FALLBACK, cached.quotas, cached.cached_at
                )
            )

        return self._finish(QuotaResolution(SegmentState.NO_DATA))

    def _finish(self, resolution: QuotaResolution) -> QuotaResolution:
        self.last_state = resolution.state
        return resolution

    def collect(
        self, config: QuotaSegmentConfig, force_refresh: bool = False
    ) -> Optional[SegmentData]:
        """
        Produce the segment's output.

        Returns:
            SegmentData, or None when the segment should be omitted
        """
        resolution = self.resolve_quotas(config, force_refresh=force_refresh)
        if not resolution.quotas:
            return None

        primary = format_tracked_output(aggregate_quotas(resolution.quotas), config)
        if not primary:
            return None

        return SegmentData(
            primary=primary,
            secondary="",
            metadata={
                "raw_text": "true",
                "quota_source": resolution.state.value,
            },
        )

    def collect_with_options(
        self, options: Optional[Mapping[str, Any]], force_refresh: bool = False
    ) -> Optional[SegmentData]:
        """
        Convenience wrapper taking the host's raw options map.

        Raises:
            ConfigError: If an option is malformed
        """
        config = QuotaSegmentConfig.from_options(options)
        return self.collect(config, force_refresh=force_refresh)
