"""Decide when the product list must be fetched from the server."""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchKey:
    """Everything that determines which server page is on display."""

    sort_by: str
    sort_order: str
    item_page: int
    search: str = ""


RefreshFn = Callable[[int, "str | None", str, str], Awaitable[object]]


class FetchOrchestrator:
    """Issue at most one fetch per distinct key.

    ``on_refresh(page, search, sort_by, sort_order)`` is the backend
    boundary. Its errors propagate to the caller; nothing is retried here.
    """

    def __init__(self, on_refresh: RefreshFn):
        self._on_refresh = on_refresh
        self._mounted = False
        self._last_key: FetchKey | None = None
        self._in_flight: set[FetchKey] = set()
        self.fetch_count = 0

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def last_key(self) -> FetchKey | None:
        return self._last_key

    def is_in_flight(self, key: FetchKey) -> bool:
        return key in self._in_flight

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def mount(self, key: FetchKey) -> bool:
        """Perform the initial fetch exactly once."""
        if self._mounted:
            return False
        self._mounted = True
        await self._fetch(key)
        return True

    async def sync(self, key: FetchKey) -> bool:
        """Fetch when *key* differs from the last fetched key.

        Returns True if a request was issued.
        """
        if not self._mounted:
            return False
        if key == self._last_key:
            return False
        if key in self._in_flight:
            logger.debug("Fetch for %s already in flight", key)
            return False
        await self._fetch(key)
        return True

    async def refresh(self, key: FetchKey) -> bool:
        """Re-fetch *key* even if it was fetched before (e.g. after a delete)."""
        if not self._mounted:
            return False
        if key in self._in_flight:
            return False
        await self._fetch(key)
        return True

    def skip_next(self, key: FetchKey) -> None:
        """Mark *key* as satisfied so the next ``sync`` for it is skipped."""
        self._last_key = key

    def unmount(self) -> None:
        self._mounted = False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch(self, key: FetchKey) -> None:
        self._last_key = key
        self._in_flight.add(key)
        self.fetch_count += 1
        logger.debug("Fetching product list for %s", key)
        try:
            await self._on_refresh(key.item_page, key.search or None, key.sort_by, key.sort_order)
        finally:
            self._in_flight.discard(key)
