"""Lecture catalog access with request coalescing.

``CoalescingCache`` stores the in-flight fetch itself under its key, so every
caller asking for a key while it is loading attaches to the same operation
and sees the same result or the same failure.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from planner.domain.errors import CatalogFetchError
from planner.domain.models import Lecture

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAJORS = "majors"
LIBERAL_ARTS = "liberalArts"

RESOURCES = {
    MAJORS: "schedules-majors.json",
    LIBERAL_ARTS: "schedules-liberal-arts.json",
}

_lecture_list = TypeAdapter(list[Lecture])


class CoalescingCache(Generic[T]):
    """Key -> pending-or-resolved future map with at most one fetch per key.

    Entries live until cleared. A failed fetch is dropped once it settles so
    the next request retries. The check-and-insert in ``get`` never awaits,
    which makes it atomic for callers on the same event loop.
    """

    def __init__(self, fetch: Callable[[Hashable], Awaitable[T]]) -> None:
        self._fetch = fetch
        self._entries: dict[Hashable, asyncio.Future[T]] = {}

    def get(self, key: Hashable) -> asyncio.Future[T]:
        entry = self._entries.get(key)
        if entry is not None:
            logger.debug("Catalog cache hit for %r", key)
            return entry

        logger.debug("Catalog cache miss for %r, fetching", key)
        future = asyncio.ensure_future(self._fetch(key))
        self._entries[key] = future
        future.add_done_callback(functools.partial(self._settle, key))
        return future

    async def fetch(self, key: Hashable) -> T:
        """Await the shared result for *key*.

        Cancelling the caller does not cancel the shared fetch.
        """
        return await asyncio.shield(self.get(key))

    def _settle(self, key: Hashable, future: asyncio.Future[T]) -> None:
        if future.cancelled():
            error: BaseException | None = asyncio.CancelledError()
        else:
            error = future.exception()
        if error is None:
            return
        logger.warning("Catalog fetch for %r failed: %s", key, error)
        # Only drop the entry if it was not replaced after a clear()
        if self._entries.get(key) is future:
            del self._entries[key]

    def clear(self, key: Hashable | None = None) -> None:
        """Forget one key, or everything. In-flight callers are unaffected."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class HttpCatalogProvider:
    """Fetches lecture lists from a static JSON catalog over HTTP."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, key: str) -> list[Lecture]:
        path = RESOURCES.get(key)
        if path is None:
            raise CatalogFetchError(key, "unknown resource")

        url = f"{self.base_url}/{path}"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return _lecture_list.validate_python(response.json())
        except httpx.HTTPError as exc:
            raise CatalogFetchError(key, str(exc)) from exc
        except (ValueError, ValidationError) as exc:
            raise CatalogFetchError(key, f"invalid payload: {exc}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()


class LectureCatalog:
    """Coalesced access to the lecture catalog resources."""

    def __init__(self, provider: HttpCatalogProvider) -> None:
        self.provider = provider
        self.cache: CoalescingCache[list[Lecture]] = CoalescingCache(provider.fetch)
        self._sources: list[list[Lecture]] = []
        self._combined: list[Lecture] = []

    async def lectures(self, key: str) -> list[Lecture]:
        return await self.cache.fetch(key)

    async def all_lectures(self) -> list[Lecture]:
        """Majors and liberal-arts lectures, fetched concurrently.

        The combined list is rebuilt only when one of its sources changed,
        so repeated calls return the same list object.
        """
        results = await asyncio.gather(self.lectures(MAJORS), self.lectures(LIBERAL_ARTS))
        if len(results) != len(self._sources) or any(
            new is not old for new, old in zip(results, self._sources)
        ):
            self._combined = [lecture for result in results for lecture in result]
            self._sources = list(results)
        return self._combined
