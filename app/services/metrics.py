"""Metrics service for tracking API usage and ingestion runs."""

import logging
from datetime import datetime
from typing import Any

from app.services.cache import CacheService

logger = logging.getLogger(__name__)

METRICS_PREFIX = "metrics:"
KEY_REQUEST_COUNT = f"{METRICS_PREFIX}requests"
KEY_ERROR_COUNT = f"{METRICS_PREFIX}errors"
KEY_LATENCY_SUM = f"{METRICS_PREFIX}latency_sum"
KEY_LATENCY_COUNT = f"{METRICS_PREFIX}latency_count"
KEY_CACHE_HITS = f"{METRICS_PREFIX}cache_hits"
KEY_CACHE_MISSES = f"{METRICS_PREFIX}cache_misses"
KEY_INGESTION_RUNS = f"{METRICS_PREFIX}ingestion_runs"
KEY_INGESTION_FAILURES = f"{METRICS_PREFIX}ingestion_failures"
KEY_LAST_RESET = f"{METRICS_PREFIX}last_reset"

COUNTER_KEYS = [
    KEY_REQUEST_COUNT,
    KEY_ERROR_COUNT,
    KEY_LATENCY_SUM,
    KEY_LATENCY_COUNT,
    KEY_CACHE_HITS,
    KEY_CACHE_MISSES,
    KEY_INGESTION_RUNS,
    KEY_INGESTION_FAILURES,
]


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0


class MetricsService:
    """Counters kept in Redis, shared by the API and the worker.

    Counting never fails the caller: Redis errors are logged and dropped.
    """

    def __init__(self, cache: CacheService):
        self.cache = cache

    async def increment(self, key: str, amount: int = 1) -> None:
        try:
            client = await self.cache.get_client()
            await client.incrby(key, amount)
        except Exception as e:
            logger.debug(f"Failed to increment metric {key}: {e}")

    async def read_counters(self) -> dict[str, int]:
        """Every counter in one round trip; unreadable or missing counters are 0."""
        try:
            client = await self.cache.get_client()
            values = await client.mget(COUNTER_KEYS)
        except Exception as e:
            logger.debug(f"Failed to read metrics: {e}")
            values = [None] * len(COUNTER_KEYS)
        return {key: int(value) if value else 0 for key, value in zip(COUNTER_KEYS, values)}

    async def track_request(self) -> None:
        await self.increment(KEY_REQUEST_COUNT)

    async def track_error(self) -> None:
        await self.increment(KEY_ERROR_COUNT)

    async def track_latency(self, latency_ms: float) -> None:
        await self.increment(KEY_LATENCY_SUM, int(latency_ms))
        await self.increment(KEY_LATENCY_COUNT)

    async def track_cache(self, hit: bool) -> None:
        await self.increment(KEY_CACHE_HITS if hit else KEY_CACHE_MISSES)

    async def track_ingestion(self, success: bool) -> None:
        await self.increment(KEY_INGESTION_RUNS)
        if not success:
            await self.increment(KEY_INGESTION_FAILURES)

    async def get_metrics(self) -> dict[str, Any]:
        counters = await self.read_counters()
        requests = counters[KEY_REQUEST_COUNT]
        errors = counters[KEY_ERROR_COUNT]
        samples = counters[KEY_LATENCY_COUNT]
        hits = counters[KEY_CACHE_HITS]
        misses = counters[KEY_CACHE_MISSES]

        try:
            client = await self.cache.get_client()
            last_reset = await client.get(KEY_LAST_RESET)
        except Exception:
            last_reset = None

        return {
            "requests": {
                "total": requests,
                "errors": errors,
                "error_rate_percent": _percent(errors, requests),
            },
            "latency": {
                "avg_ms": round(counters[KEY_LATENCY_SUM] / samples, 2) if samples else 0,
                "samples": samples,
            },
            "cache": {
                "hits": hits,
                "misses": misses,
                "hit_rate_percent": _percent(hits, hits + misses),
            },
            "ingestion": {
                "runs": counters[KEY_INGESTION_RUNS],
                "failures": counters[KEY_INGESTION_FAILURES],
            },
            "last_reset": last_reset,
            "collected_at": datetime.now().isoformat(),
        }

    async def reset(self) -> None:
        """Zero every counter and record when it happened."""
        try:
            client = await self.cache.get_client()
            await client.delete(*COUNTER_KEYS)
            await client.set(KEY_LAST_RESET, datetime.now().isoformat())
        except Exception as e:
            logger.error(f"Failed to reset metrics: {e}")
