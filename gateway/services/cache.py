import asyncio
import hashlib
import json
import logging
import time
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from gateway.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

MINUTE = 60.0


@dataclass(frozen=True)
class CachePolicy:
    staleness: float  # seconds an entry is served without refetching
    eviction: float  # seconds since last access before the entry is dropped

    def __post_init__(self):
        if self.staleness > self.eviction:
            raise ValueError("staleness must not exceed eviction")


CACHE_POLICIES: dict[tuple[str, str], CachePolicy] = {
    ("hotels", "search"): CachePolicy(5 * MINUTE, 10 * MINUTE),
    ("hotels", "details"): CachePolicy(10 * MINUTE, 30 * MINUTE),
    ("hotels", "availability"): CachePolicy(2 * MINUTE, 5 * MINUTE),
    ("hotels", "reference"): CachePolicy(60 * MINUTE, 24 * 60 * MINUTE),
    ("hotels", "destinations"): CachePolicy(60 * MINUTE, 24 * 60 * MINUTE),
    ("rentals", "search"): CachePolicy(5 * MINUTE, 10 * MINUTE),
    ("rentals", "details"): CachePolicy(10 * MINUTE, 30 * MINUTE),
    ("rentals", "availability"): CachePolicy(2 * MINUTE, 5 * MINUTE),
    ("rentals", "reference"): CachePolicy(60 * MINUTE, 24 * 60 * MINUTE),
    ("restaurants", "search"): CachePolicy(5 * MINUTE, 10 * MINUTE),
    ("restaurants", "details"): CachePolicy(10 * MINUTE, 30 * MINUTE),
    ("restaurants", "availability"): CachePolicy(1 * MINUTE, 2 * MINUTE),
    ("restaurants", "reference"): CachePolicy(60 * MINUTE, 24 * 60 * MINUTE),
}
DEFAULT_POLICY = CachePolicy(5 * MINUTE, 10 * MINUTE)


def params_digest(params: Any) -> str:
    canonical = json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]


@dataclass(frozen=True)
class CacheKey:
    domain: str
    operation: str
    digest: str

    @classmethod
    def build(cls, domain: str, operation: str, params: Any) -> "CacheKey":
        return cls(domain, operation, params_digest(params))

    def __str__(self) -> str:
        return f"{self.domain}:{self.operation}:{self.digest}"


@dataclass
class _Entry:
    envelope: Envelope
    fetched_at: float
    accessed_at: float


class CacheOrchestrator:
    """Read-through cache for adapter reads.

    Entries younger than the policy staleness are served as-is; older ones
    are refetched before answering. Entries untouched for longer than the
    eviction window are purged on every access. Only successful envelopes are
    stored, and identical concurrent reads share a single fetch.
    """

    def __init__(
        self,
        policies: dict[tuple[str, str], CachePolicy] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._policies = CACHE_POLICIES if policies is None else policies
        self._clock = clock
        self._entries: dict[CacheKey, _Entry] = {}
        self._inflight: dict[CacheKey, asyncio.Task] = {}
        self._generations: dict[str, int] = defaultdict(int)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def policy_for(self, domain: str, operation: str) -> CachePolicy:
        return self._policies.get((domain, operation), DEFAULT_POLICY)

    async def get_or_fetch(
        self,
        domain: str,
        operation: str,
        params: Any,
        fetch: Callable[[], Awaitable[Envelope]],
    ) -> Envelope:
        key = CacheKey.build(domain, operation, params)
        now = self._clock()
        self.purge(now)

        entry = self._entries.get(key)
        if entry is not None and now - entry.fetched_at < self.policy_for(domain, operation).staleness:
            entry.accessed_at = now
            logger.debug("Cache hit %s", key)
            return entry.envelope

        task = self._inflight.get(key)
        if task is None:
            logger.debug("Cache miss %s", key)
            task = asyncio.create_task(self._fetch(key, fetch, self._generations[domain]))
            self._inflight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
        return await asyncio.shield(task)

    async def _fetch(
        self, key: CacheKey, fetch: Callable[[], Awaitable[Envelope]], generation: int
    ) -> Envelope:
        envelope = await fetch()
        if not envelope.success:
            return envelope
        if self._generations[key.domain] != generation:
            logger.debug("Discarding %s fetched before invalidation", key)
            return envelope
        now = self._clock()
        self._entries[key] = _Entry(envelope=envelope, fetched_at=now, accessed_at=now)
        return envelope

    def _forget(self, key: CacheKey, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def purge(self, now: float | None = None) -> int:
        now = self._clock() if now is None else now
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.accessed_at >= self.policy_for(key.domain, key.operation).eviction
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def invalidate(self, domain: str) -> int:
        """Drop every entry of a domain; fetches already running will not write."""
        self._generations[domain] += 1
        removed = [key for key in self._entries if key.domain == domain]
        for key in removed:
            del self._entries[key]
        for key in [k for k in self._inflight if k.domain == domain]:
            del self._inflight[key]
        logger.info("Invalidated %d cached %s entries", len(removed), domain)
        return len(removed)
