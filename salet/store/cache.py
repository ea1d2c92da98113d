"""Local snapshot of the last dashboard views for degraded-mode display."""
import logging
import time
from pathlib import Path
from typing import Optional

import aiofiles
import orjson
from pydantic import ValidationError

from salet.parse.models import CachedSnapshot, DashboardData

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 3_600_000


def now_ms() -> int:
    return int(time.time() * 1000)


class SnapshotCache:
    """Stores {monthly, products, orders, timestamp} as one JSON file."""

    def __init__(self, path: Path, ttl_ms: int = DEFAULT_TTL_MS):
        self.path = Path(path)
        self.ttl_ms = ttl_ms

    async def save(self, data: DashboardData, timestamp: Optional[int] = None) -> None:
        """Write a snapshot, replacing any previous one."""
        snapshot = CachedSnapshot(
            monthly=data.monthly,
            products=data.products,
            orders=data.orders,
            timestamp=timestamp if timestamp is not None else now_ms(),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, "wb") as f:
            await f.write(orjson.dumps(snapshot.model_dump(mode="json", by_alias=True)))
        logger.debug(f"Cached dashboard snapshot to {self.path}")

    async def load(self, now: Optional[int] = None) -> Optional[DashboardData]:
        """Return the cached views if younger than the TTL, else None."""
        if not self.path.exists():
            return None
        try:
            async with aiofiles.open(self.path, "rb") as f:
                snapshot = CachedSnapshot.model_validate(orjson.loads(await f.read()))
        except (orjson.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Error parsing cached data: {e}")
            return None

        age = (now if now is not None else now_ms()) - snapshot.timestamp
        if age >= self.ttl_ms:
            logger.info(f"Cached data is stale ({age} ms old)")
            return None
        return DashboardData(
            monthly=snapshot.monthly,
            products=snapshot.products,
            orders=snapshot.orders,
        )
