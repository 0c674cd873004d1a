"""
Async collection cache: one server collection plus its fetch status.

    IDLE --fetch--> LOADING --ok--> READY
                            --error--> FAILED
    READY | FAILED --fetch--> LOADING

A fetch requested while one is already LOADING is dropped, not queued.
`invalidate()` empties the cache; a fetch still in flight at that point belongs
to an older generation and its result is thrown away when it lands.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

from estate_client.infrastructure.gateway import GatewayError
from estate_client.utils.logger import get_logger

logger = get_logger()

R = TypeVar("R")

FETCH_FAILED_MESSAGE = "Something went wrong"


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class Snapshot(Generic[R]):
    items: tuple[R, ...] = ()
    status: FetchStatus = FetchStatus.IDLE
    error: str | None = None
    last_fetched_at: datetime | None = None


def as_sequence(payload: Any) -> list[Any]:
    """
    Coerce a collection payload to a list.

    Lists pass through; `{"data": [...]}` envelopes are unwrapped; anything
    else reads as an empty collection.
    """
    if isinstance(payload, (list, tuple)):
        return list(payload)
    if isinstance(payload, Mapping):
        inner = payload.get("data")
        if isinstance(inner, (list, tuple)):
            return list(inner)
    if payload is not None:
        logger.warning("Expected a collection payload, got %s; treating as empty", type(payload).__name__)
    return []


class CollectionCache(Generic[R]):
    """
    Cache for one resource type.

    Args:
        name: Resource name used in log lines (e.g. "bookings").
        loader: Coroutine function returning the raw payload.
        parse: Turns one raw record into an R, or None to skip it.
        clock: Timestamp source for `last_fetched_at`.
    """

    def __init__(
        self,
        name: str,
        loader: Callable[[], Awaitable[Any]],
        parse: Callable[[Any], R | None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.name = name
        self._loader = loader
        self._parse = parse or (lambda raw: raw)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._snapshot: Snapshot[R] = Snapshot()
        self._generation = 0
        self._listeners: list[Callable[[Snapshot[R]], None]] = []

    def current(self) -> Snapshot[R]:
        return self._snapshot

    def subscribe(self, listener: Callable[[Snapshot[R]], None]) -> Callable[[], None]:
        """Call `listener` on every snapshot change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, snapshot: Snapshot[R]) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)

    def _parse_items(self, payload: Any) -> tuple[R, ...]:
        items: list[R] = []
        skipped = 0
        for raw in as_sequence(payload):
            item = self._parse(raw)
            if item is None:
                skipped += 1
                continue
            items.append(item)
        if skipped:
            logger.warning("%s: skipped %d unparseable records", self.name, skipped)
        return tuple(items)

    def _record_failure(self, generation: int, message: str) -> None:
        if generation != self._generation:
            logger.info("%s: fetch superseded by invalidation failed: %s", self.name, message)
            self._set(Snapshot(status=FetchStatus.FAILED, error=message))
            return
        self._set(replace(self._snapshot, status=FetchStatus.FAILED, error=message))

    async def fetch(self) -> None:
        """Load the collection. A no-op while a fetch is already in flight."""
        if self._snapshot.status is FetchStatus.LOADING:
            logger.debug("%s: fetch already in flight, ignoring", self.name)
            return
        generation = self._generation
        self._set(replace(self._snapshot, status=FetchStatus.LOADING, error=None))
        try:
            payload = await self._loader()
        except GatewayError as e:
            logger.warning("%s: fetch failed: %s", self.name, e.message)
            self._record_failure(generation, e.message)
            return
        except Exception as e:
            logger.exception("%s: unexpected error during fetch: %s", self.name, e)
            self._record_failure(generation, FETCH_FAILED_MESSAGE)
            return

        if generation != self._generation:
            logger.info("%s: dropping result of a fetch superseded by invalidation", self.name)
            self._set(Snapshot())
            return
        items = self._parse_items(payload)
        logger.info("%s: cached %d items", self.name, len(items))
        self._set(Snapshot(items=items, status=FetchStatus.READY, last_fetched_at=self._clock()))

    def invalidate(self) -> None:
        """
        Forget cached items. The next fetch goes to the server.

        If a fetch is in flight the status stays LOADING (so no second request
        starts) but its eventual result is discarded. Fetches requested in the
        meantime are dropped, not queued: when the old fetch lands the cache
        goes back to IDLE and notifies subscribers, and it is up to them to
        call `fetch()` again.
        """
        self._generation += 1
        status = FetchStatus.LOADING if self._snapshot.status is FetchStatus.LOADING else FetchStatus.IDLE
        self._set(Snapshot(status=status))
