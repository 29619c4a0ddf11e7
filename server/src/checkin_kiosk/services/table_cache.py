import json
import logging
from datetime import date, datetime
from typing import Any, List, Optional

import redis

logger = logging.getLogger(__name__)


class SnapshotTooLargeError(ValueError):
    """Serialized snapshot exceeds the cache entry size limit"""


def _json_default(value: Any):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class TableSnapshotCache:
    """
    Read-through, write-invalidate cache for the attendee grid.

    Holds a single JSON snapshot of the whole table under one fixed Redis key
    with a fixed TTL. Failures here never reach the caller:
    - put: oversized payloads and Redis errors are logged and skipped
    - get: Redis errors and corrupted payloads count as a miss
    - invalidate: Redis errors are logged (stale data expires with the TTL)
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        key: str = "SHEET_DATA",
        ttl_seconds: int = 600,
        max_bytes: int = 100_000,
    ):
        """
        Args:
            redis_client: Redis client instance (from dependency injection)
            key: Fixed cache key for the snapshot
            ttl_seconds: Time-to-live in seconds (default: 600 = 10 minutes)
            max_bytes: Largest serialized snapshot that will be stored
        """
        self.redis_client = redis_client
        self.key = key
        self.ttl_seconds = ttl_seconds
        self.max_bytes = max_bytes

    def get(self) -> Optional[List[List[Any]]]:
        """Return the cached grid, or None on a miss"""
        try:
            payload = self.redis_client.get(self.key)
        except redis.RedisError as e:
            logger.error(f"Redis error reading {self.key}, treating as miss: {e}")
            return None

        if not payload:
            return None

        try:
            grid = json.loads(payload)
        except json.JSONDecodeError:
            grid = None

        if not isinstance(grid, list):
            logger.error(f"Corrupted snapshot under {self.key}, treating as miss")
            return None
        return grid

    def put(self, grid: List[List[Any]]) -> bool:
        """
        Store the grid with the fixed TTL.

        Returns:
            True if the snapshot was cached
        """
        try:
            payload = json.dumps(grid, default=_json_default, ensure_ascii=False)
            size = len(payload.encode("utf-8"))
            if size > self.max_bytes:
                raise SnapshotTooLargeError(
                    f"snapshot is {size} bytes, limit is {self.max_bytes}"
                )
            self.redis_client.setex(self.key, self.ttl_seconds, payload)
            return True
        except (TypeError, ValueError, redis.RedisError) as e:
            logger.warning(f"Cache put failed (likely too big): {e}")
            return False

    def invalidate(self) -> None:
        """Drop the snapshot; a missing key is not an error"""
        try:
            self.redis_client.delete(self.key)
            logger.info("Cache invalidated")
        except redis.RedisError as e:
            logger.error(f"Redis error invalidating {self.key}: {e}")
