"""CatalogService: cache-aside pipeline over the price source.

get_catalog():
  1. Probe the cache. Hit → CacheHit, no background work. Redis failure →
     CacheUnavailableError, no fallback fetch.
  2. Miss → spawn a fetch task that reports over a bounded asyncio.Queue
     (FetchPayload..., then FetchDone | FetchFailed) and return a
     CatalogStream reading that queue.
  3. After FetchDone the task writes every emitted item to the cache (TTL 300s)
     and, when a session factory is configured, replaces the items snapshot.
     A failed fetch writes nothing.

Fetch tasks belong to the service, not to the request: a client that hangs up
does not cancel its fetch, and the cache is still populated. drain() awaits
whatever is still running (shutdown, tests).

By default every miss fetches on its own. With single_flight=True a miss that
finds a fetch already running for the same key waits for that fetch's
outcome instead of starting another one.
"""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.sm_catalog.domain.models import (
    CatalogItem,
    FetchDone,
    FetchFailed,
    FetchMessage,
    FetchPayload,
)
from src.sm_catalog.domain.repository import CatalogCacheProtocol, PriceSourceProtocol
from src.sm_catalog.infrastructure.persistence import CatalogRepository
from src.sm_common.errors import CacheUnavailableError, CatalogFetchError

logger = logging.getLogger(__name__)

CHANNEL_CAPACITY = 8


@dataclass
class CacheHit:
    items: list[CatalogItem]


class CatalogStream:
    """Async iterator of item batches read from one fetch channel.

    Ends on FetchDone; raises CatalogFetchError on FetchFailed.
    """

    def __init__(self, channel: "asyncio.Queue[FetchMessage]") -> None:
        self._channel = channel
        self._finished = False

    def __aiter__(self) -> "CatalogStream":
        return self

    async def __anext__(self) -> list[CatalogItem]:
        if self._finished:
            raise StopAsyncIteration
        message = await self._channel.get()
        if isinstance(message, FetchPayload):
            return message.items
        self._finished = True
        if isinstance(message, FetchFailed):
            raise CatalogFetchError() from message.error
        raise StopAsyncIteration


class CatalogService:
    def __init__(
        self,
        cache: CatalogCacheProtocol,
        source: PriceSourceProtocol,
        snapshot_sessions: async_sessionmaker[AsyncSession] | None = None,
        repo: CatalogRepository | None = None,
        single_flight: bool = False,
    ) -> None:
        self._cache = cache
        self._source = source
        self._snapshot_sessions = snapshot_sessions
        self._repo = repo or CatalogRepository()
        self._single_flight = single_flight
        self._tasks: set[asyncio.Task[None]] = set()
        self._in_flight: dict[str, asyncio.Future[FetchMessage]] = {}

    async def get_catalog(self) -> CacheHit | CatalogStream:
        cached = await self._cache.get()
        if cached is not None:
            return CacheHit(items=cached)

        channel: asyncio.Queue[FetchMessage] = asyncio.Queue(maxsize=CHANNEL_CAPACITY)
        outcome: asyncio.Future[FetchMessage] | None = None
        if self._single_flight:
            leader = self._in_flight.get(self._cache.key)
            if leader is not None:
                logger.debug("Joining in-flight catalog fetch for %s", self._cache.key)
                self._spawn(self._follow(leader, channel))
                return CatalogStream(channel)
            # Registered before the task runs so an immediate second miss sees it
            outcome = asyncio.get_running_loop().create_future()
            self._in_flight[self._cache.key] = outcome

        self._spawn(self._fetch(channel, outcome))
        return CatalogStream(channel)

    async def drain(self) -> None:
        """Wait until every spawned fetch task has finished."""
        while self._tasks:
            results = await asyncio.gather(*list(self._tasks), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error("Catalog task ended with an error: %r", result)

    # ------------------------------------------------------------------
    # Task bodies
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch(
        self,
        channel: "asyncio.Queue[FetchMessage]",
        outcome: "asyncio.Future[FetchMessage] | None",
    ) -> None:
        try:
            try:
                items = await self._source.fetch_catalog()
            except Exception as exc:
                logger.exception("Catalog fetch failed")
                failed = FetchFailed(error=exc)
                self._resolve(outcome, failed)
                await channel.put(failed)
                return

            payload = FetchPayload(items=items)
            self._resolve(outcome, payload)
            await channel.put(payload)
            await channel.put(FetchDone())
        finally:
            if outcome is not None:
                if self._in_flight.get(self._cache.key) is outcome:
                    del self._in_flight[self._cache.key]
                self._resolve(
                    outcome,
                    FetchFailed(error=CatalogFetchError("Catalog fetch was interrupted")),
                )

        # Clean termination only from here on
        await self._populate(payload.items)

    async def _follow(
        self,
        leader: "asyncio.Future[FetchMessage]",
        channel: "asyncio.Queue[FetchMessage]",
    ) -> None:
        outcome = await asyncio.shield(leader)
        await channel.put(outcome)
        if isinstance(outcome, FetchPayload):
            await channel.put(FetchDone())

    @staticmethod
    def _resolve(
        outcome: "asyncio.Future[FetchMessage] | None", message: FetchMessage
    ) -> None:
        if outcome is not None and not outcome.done():
            outcome.set_result(message)

    async def _populate(self, items: list[CatalogItem]) -> None:
        try:
            await self._cache.set(items)
        except CacheUnavailableError:
            # The next miss fetches again
            logger.warning("Catalog cache not populated: key=%s", self._cache.key)
        else:
            logger.info("Catalog cache populated: key=%s items=%d", self._cache.key, len(items))

        if self._snapshot_sessions is None:
            return
        try:
            async with self._snapshot_sessions() as db, db.begin():
                written = await self._repo.replace_items(db, items)
        except SQLAlchemyError:
            logger.exception("Failed to persist catalog snapshot")
            return
        logger.info("Catalog snapshot replaced: rows=%d", written)
