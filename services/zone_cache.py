"""
services/zone_cache.py

Process-wide availability-zone cache (single-flight, memoized)
==============================================================

The zone list of a region changes rarely; looking it up once per process is
enough. ``ZoneCache`` guarantees the EC2 ``DescribeAvailabilityZones`` call
runs at most once per attempt no matter how many callers ask concurrently.

State machine::

    ABSENT --first get_zones()--> PENDING --ok--> RESOLVED
                                     |
                                     +--error--> FAILED  (retry_failed_lookup=False)
                                     +--error--> ABSENT  (retry_failed_lookup=True)

Notes:
- The ABSENT -> PENDING transition happens under a ``threading.Lock``, so
  concurrent first calls from tasks, event loops or threads start one lookup.
- The attempt is a ``concurrent.futures.Future``; every waiter awaits the same
  object and observes the same zones or the same ``ZoneLookupError``.
- The boto3 call is blocking; it runs in the event loop's default executor.
- RESOLVED returns the cached list without suspending.
- An optional deadline applies to the attempt, not to each waiter: when it
  passes, the attempt fails once for every waiter and a late lister result is
  discarded.
- A stale attempt (one replaced by ``reset()``) still completes its own
  waiters but never touches the cache state.

Minimal IAM permission:
- ec2:DescribeAvailabilityZones
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from enum import Enum
from functools import partial
from typing import Any

from contracts.services import ServicesFactory
from infra.aws_config import SDK_CONFIG
from infra.config import get_settings
from infra.logging_config import StructuredLogger
from services.aws_common import safe_region_from_client

_LOGGER = StructuredLogger(__name__)

ZoneLister = Callable[[], Sequence[str]]


class ZoneLookupError(RuntimeError):
    """Raised to every waiter of a failed or expired zone lookup."""


class ZoneIndexError(IndexError):
    """Raised when a zone index falls outside the resolved zone list."""


class ZoneCacheState(str, Enum):
    ABSENT = "absent"
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


def describe_zone_names(ec2: Any) -> list[str]:
    """Return the names of the available zones of the client's region, in API order."""
    resp = ec2.describe_availability_zones(Filters=[{"Name": "state", "Values": ["available"]}])
    return [
        str(zone["ZoneName"])
        for zone in resp.get("AvailabilityZones", []) or []
        if isinstance(zone, dict) and zone.get("ZoneName")
    ]


class ZoneCache:
    """Single-flight memoized accessor for a region's availability zones."""

    def __init__(
        self,
        lister: ZoneLister,
        *,
        region: str = "",
        lookup_timeout: float | None = None,
        retry_failed_lookup: bool = False,
    ) -> None:
        if lookup_timeout is not None and lookup_timeout <= 0:
            raise ValueError("lookup_timeout must be positive or None")
        self._lister = lister
        self._region = region
        self._lookup_timeout = lookup_timeout
        self._retry_failed_lookup = retry_failed_lookup
        self._lock = threading.Lock()
        self._state = ZoneCacheState.ABSENT
        self._attempt: Future[tuple[str, ...]] | None = None
        self._zones: tuple[str, ...] | None = None
        self._lookups_started = 0

    @property
    def state(self) -> ZoneCacheState:
        return self._state

    @property
    def lookups_started(self) -> int:
        """Number of lookups started over the cache lifetime."""
        return self._lookups_started

    def _attach(self) -> tuple[Future[tuple[str, ...]], bool]:
        """Return the current attempt, starting one when ABSENT.

        The boolean is True for the caller that must run the lookup.
        """
        with self._lock:
            if self._state is ZoneCacheState.ABSENT or self._attempt is None:
                attempt: Future[tuple[str, ...]] = Future()
                # A running future cannot be cancelled by one impatient waiter.
                attempt.set_running_or_notify_cancel()
                self._attempt = attempt
                self._state = ZoneCacheState.PENDING
                self._lookups_started += 1
                return attempt, True
            return self._attempt, False

    def _start_deadline(self, attempt: Future[tuple[str, ...]]) -> threading.Timer | None:
        if self._lookup_timeout is None:
            return None
        timer = threading.Timer(self._lookup_timeout, self._expire, args=(attempt,))
        timer.daemon = True
        timer.start()
        return timer

    def _lookup_error(self, exc: BaseException) -> ZoneLookupError:
        error = ZoneLookupError(f"availability zone lookup failed for region {self._region or '?'}: {exc}")
        error.__cause__ = exc
        return error

    def _fail(self, attempt: Future[tuple[str, ...]], error: ZoneLookupError, *, error_type: str) -> bool:
        """Complete ``attempt`` with ``error``; False when it already finished.

        Only the current attempt moves the state machine.
        """
        with self._lock:
            if attempt.done():
                return False
            if attempt is self._attempt:
                self._state = ZoneCacheState.ABSENT if self._retry_failed_lookup else ZoneCacheState.FAILED
            attempt.set_exception(error)
        _LOGGER.error(
            "zone_lookup_failed",
            region=self._region,
            error_type=error_type,
            retry_allowed=self._retry_failed_lookup,
        )
        return True

    def _resolve(self, attempt: Future[tuple[str, ...]], zones: tuple[str, ...]) -> bool:
        with self._lock:
            if attempt.done():
                return False
            if attempt is self._attempt:
                self._zones = zones
                self._state = ZoneCacheState.RESOLVED
            attempt.set_result(zones)
        _LOGGER.info("zone_lookup_completed", region=self._region, zone_count=len(zones))
        return True

    def _expire(self, attempt: Future[tuple[str, ...]]) -> None:
        error = ZoneLookupError(
            f"availability zone lookup for region {self._region or '?'} timed out after {self._lookup_timeout}s"
        )
        self._fail(attempt, error, error_type="TimeoutError")

    def _run_lookup(self, attempt: Future[tuple[str, ...]], deadline: threading.Timer | None) -> None:
        _LOGGER.info("zone_lookup_started", region=self._region)
        try:
            zones = tuple(str(z) for z in self._lister())
        except BaseException as exc:
            self._fail(attempt, self._lookup_error(exc), error_type=type(exc).__name__)
            if not isinstance(exc, Exception):
                raise
            return
        finally:
            if deadline is not None:
                deadline.cancel()

        if not self._resolve(attempt, zones):
            _LOGGER.warning("zone_lookup_discarded", region=self._region, zone_count=len(zones))

    async def get_zones(self) -> list[str]:
        """Return the region's zone names, looking them up at most once.

        Raises:
            ZoneLookupError: the lookup failed or passed its deadline (cached
                according to the retry policy).
        """
        zones = self._zones
        if zones is not None:
            return list(zones)

        attempt, owner = self._attach()
        if owner:
            deadline = self._start_deadline(attempt)
            try:
                asyncio.get_running_loop().run_in_executor(None, self._run_lookup, attempt, deadline)
            except Exception as exc:
                if deadline is not None:
                    deadline.cancel()
                self._fail(attempt, self._lookup_error(exc), error_type=type(exc).__name__)

        return list(await asyncio.wrap_future(attempt))

    async def get_zone(self, index: int) -> str:
        """Return the zone at ``index`` of :meth:`get_zones`.

        Raises:
            ZoneIndexError: ``index`` is negative or past the end of the list.
        """
        zones = await self.get_zones()
        if not 0 <= index < len(zones):
            raise ZoneIndexError(f"zone index {index} out of range for {len(zones)} zone(s)")
        return zones[index]

    def reset(self) -> None:
        """
        Forget the cached zones and any failure. (Mostly useful for tests.)
        """
        with self._lock:
            self._state = ZoneCacheState.ABSENT
            self._attempt = None
            self._zones = None


# =============================================================================
# Process-wide cache
# =============================================================================

_DEFAULT_CACHE: ZoneCache | None = None
_DEFAULT_CACHE_LOCK = threading.Lock()


def build_zone_cache(ec2: Any) -> ZoneCache:
    """Build a cache backed by ``ec2``, configured from settings."""
    cfg = get_settings().zones
    return ZoneCache(
        partial(describe_zone_names, ec2),
        region=safe_region_from_client(ec2),
        lookup_timeout=cfg.lookup_timeout_seconds,
        retry_failed_lookup=cfg.retry_failed_lookup,
    )


def get_zone_cache(*, factory: ServicesFactory | None = None) -> ZoneCache:
    """Return the process-wide cache for the configured default region."""
    global _DEFAULT_CACHE
    with _DEFAULT_CACHE_LOCK:
        if _DEFAULT_CACHE is None:
            region = get_settings().aws.default_region
            factory = factory or ServicesFactory(sdk_config=SDK_CONFIG)
            _DEFAULT_CACHE = build_zone_cache(factory.for_region(region).ec2)
        return _DEFAULT_CACHE


def set_zone_cache(cache: ZoneCache) -> None:
    """Install ``cache`` as the process-wide cache."""
    global _DEFAULT_CACHE
    with _DEFAULT_CACHE_LOCK:
        _DEFAULT_CACHE = cache


def reset_zone_cache() -> None:
    """Drop the process-wide cache."""
    global _DEFAULT_CACHE
    with _DEFAULT_CACHE_LOCK:
        _DEFAULT_CACHE = None


async def get_availability_zones() -> list[str]:
    return await get_zone_cache().get_zones()


async def get_availability_zone(index: int) -> str:
    """Return one zone of the default region, for resources that take a single zone."""
    return await get_zone_cache().get_zone(index)
