"""Product list controller.

Merges server-side pagination of raw product items with client-side
grouping of those items by product, and keeps search, sort and the two page
cursors consistent. Also dispatches the row actions (view, edit, delete).
"""
import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from config import GROUPS_PER_PAGE, PRODUCT_PAGE_LIMIT, SEARCH_DEBOUNCE_SECONDS, SORT_FIELDS, SORT_ORDERS
from src.models.product_group import ProductGroup
from src.models.product_item import Pagination, ProductItem, ProductListPage
from src.services.api_client import PharmacyApiClient
from src.services.debouncer import Debouncer
from src.services.fetch_orchestrator import FetchKey, FetchOrchestrator
from src.services.page_reconciler import PageMove, PageReconciler
from src.services.product_grouping import (
    estimate_total_group_pages,
    group_product_items,
    loaded_group_pages,
    window_groups,
)
from src.ui.notifier import Notifier

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Product item not found or failed to load."

RefreshFn = Callable[[int, Optional[str], str, str], Awaitable[Optional[ProductListPage]]]
FetchItemFn = Callable[[str], Awaitable[Optional[ProductItem]]]
DeleteItemFn = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class DetailView:
    """State of the item detail dialog."""

    is_open: bool = False
    item: ProductItem | None = None
    error: str | None = None


class ProductListController:
    """State and behaviour behind the grouped product table.

    Parameters
    ----------
    on_refresh : async (page, search, sort_by, sort_order) -> ProductListPage | None
        Backend boundary. A returned page is applied with :meth:`receive`;
        an owner that pushes data itself may return None and call
        :meth:`receive` directly.
    fetch_item : async (item_id) -> ProductItem | None
    delete_item : async (item_id) -> str
        Resolves with the user-facing success message.
    notifier : Notifier
    navigate : (path) -> None, optional
    """

    def __init__(
        self,
        on_refresh: RefreshFn,
        fetch_item: FetchItemFn,
        delete_item: DeleteItemFn,
        notifier: Notifier,
        navigate: Callable[[str], None] | None = None,
        *,
        groups_per_page: int = GROUPS_PER_PAGE,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
        sort_by: str = "Name",
        sort_order: str = "asc",
        search: str = "",
    ):
        self._on_refresh = on_refresh
        self._fetch_item = fetch_item
        self._delete_item = delete_item
        self._notifier = notifier
        self._navigate = navigate
        self.groups_per_page = groups_per_page

        self.product_list: list[ProductItem] = []
        self.pagination = Pagination()
        self.groups: list[ProductGroup] = []

        self.sort_by = sort_by
        self.sort_order = sort_order
        self.search_text = search or ""
        self.search = self.search_text.strip()

        self.pages = PageReconciler()
        self.fetcher = FetchOrchestrator(self._refresh)
        self._debouncer = Debouncer(debounce_seconds, self._apply_search)

        self.detail = DetailView()
        self.pending_delete: str | None = None
        self.loading = False
        self._loads_in_flight = 0
        self._mounted = False
        self._listeners: list[Callable[[], None]] = []

    @classmethod
    def for_api(
        cls,
        client: PharmacyApiClient,
        notifier: Notifier,
        navigate: Callable[[str], None] | None = None,
        limit: int = PRODUCT_PAGE_LIMIT,
        **kwargs,
    ) -> "ProductListController":
        """Wire a controller to the blocking REST client via the default executor."""

        async def _in_executor(fn, *args, **kw):
            return await asyncio.get_event_loop().run_in_executor(
                None, functools.partial(fn, *args, **kw),
            )

        async def on_refresh(page, search, sort_by, sort_order):
            return await _in_executor(
                client.fetch_product_list,
                page=page, limit=limit, search=search,
                sort_by=sort_by, sort_order=sort_order,
            )

        async def fetch_item(item_id):
            return await _in_executor(client.fetch_product_item_by_id, item_id)

        async def delete_item(item_id):
            return await _in_executor(client.delete_product_item_by_id, item_id)

        return cls(on_refresh, fetch_item, delete_item, notifier, navigate, **kwargs)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def fetch_key(self) -> FetchKey:
        return FetchKey(self.sort_by, self.sort_order, self.pages.item_page, self.search)

    @property
    def group_page(self) -> int:
        return self.pages.group_page

    @property
    def item_page(self) -> int:
        return self.pages.item_page

    @property
    def visible_groups(self) -> list[ProductGroup]:
        return window_groups(self.groups, self.pages.group_page, self.groups_per_page)

    @property
    def loaded_group_pages(self) -> int:
        return loaded_group_pages(len(self.groups), self.groups_per_page)

    @property
    def estimated_group_pages(self) -> int:
        """Approximate group pages across every server page (see estimator)."""
        return estimate_total_group_pages(
            len(self.groups), len(self.product_list), self.pagination.total, self.groups_per_page,
        )

    @property
    def can_go_next(self) -> bool:
        return (
            self.pages.group_page < self.loaded_group_pages
            or self.pagination.page < self.pagination.total_pages
        )

    @property
    def can_go_previous(self) -> bool:
        return self.pages.group_page > 1 or self.pagination.page > 1

    @property
    def mounted(self) -> bool:
        return self._mounted

    def on_change(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def _changed(self) -> None:
        if not self._mounted:
            return
        for callback in list(self._listeners):
            callback()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def mount(self) -> bool:
        """Load the first page. Only the first call fetches."""
        if self._mounted:
            return False
        self._mounted = True
        return await self._load(self.fetcher.mount)

    def unmount(self) -> None:
        """Stop timers; responses that arrive later are ignored."""
        self._mounted = False
        self._debouncer.cancel()
        self.fetcher.unmount()

    async def refresh(self) -> bool:
        """Re-fetch the current page, sort and search."""
        return await self._load(self.fetcher.refresh)

    # ------------------------------------------------------------------
    # Server data
    # ------------------------------------------------------------------

    async def _refresh(self, page: int, search: str | None, sort_by: str, sort_order: str) -> None:
        requested = FetchKey(sort_by, sort_order, page, search or "")
        result = await self._on_refresh(page, search, sort_by, sort_order)
        if not self._mounted:
            logger.debug("Ignoring product list response after unmount")
            return
        if result is None:
            return
        if requested != self.fetch_key():
            logger.debug("Discarding stale response for %s", requested)
            return
        self.receive(result)

    def receive(self, page: ProductListPage) -> None:
        """Apply a server page of items and its pagination."""
        if not self._mounted:
            return
        self.product_list = list(page.items)
        self.pagination = page.pagination
        self.groups = group_product_items(self.product_list)
        if self.pages.on_pagination(page.pagination.page):
            self.fetcher.skip_next(self.fetch_key())
        self.pages.clamp(self.loaded_group_pages)
        self._changed()

    async def _load(self, action: Callable[[FetchKey], Awaitable[bool]]) -> bool:
        key = self.fetch_key()
        self._loads_in_flight += 1
        self.loading = True
        self._changed()
        try:
            return await action(key)
        except Exception as exc:
            if not self._mounted:
                logger.debug("Fetch for %s finished after unmount: %s", key, exc)
                return False
            if key != self.fetch_key():
                # A newer request owns the cursors now
                logger.debug("Ignoring failure of superseded fetch %s: %s", key, exc)
                return False
            logger.warning("Product list fetch failed for %s: %s", key, exc)
            self._notifier.error(f"Failed to load products: {exc}")
            # Previous data stays on screen; point the cursors back at it
            self.pages.abandon()
            self.fetcher.skip_next(self.fetch_key())
            return False
        finally:
            self._loads_in_flight -= 1
            self.loading = self._loads_in_flight > 0
            self._changed()

    # ------------------------------------------------------------------
    # Search, sort and paging
    # ------------------------------------------------------------------

    async def set_sort(self, sort_by: str, sort_order: str | None = None) -> bool:
        """Change sort field / direction. Always restarts from page 1."""
        sort_order = sort_order or self.sort_order
        if sort_by not in SORT_FIELDS:
            raise ValueError(f"Unknown sort field: {sort_by!r}")
        if sort_order not in SORT_ORDERS:
            raise ValueError(f"Unknown sort order: {sort_order!r}")
        if (sort_by, sort_order) == (self.sort_by, self.sort_order):
            return False
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.pages.reset()
        return await self._load(self.fetcher.sync)

    def set_search_text(self, text: str | None) -> None:
        """Record raw input; the server sees it after the quiet period."""
        self.search_text = text or ""
        if self._mounted:
            self._debouncer.trigger(self.search_text)

    async def _apply_search(self, text: str) -> bool:
        term = text.strip()
        if term == self.search:
            return False
        self.search = term
        self.pages.reset()
        return await self._load(self.fetcher.sync)

    async def next_page(self) -> PageMove:
        move = self.pages.next(self.loaded_group_pages, self.pagination)
        if move is PageMove.ITEM:
            await self._load(self.fetcher.sync)
        elif move is PageMove.GROUP:
            self._changed()
        return move

    async def previous_page(self) -> PageMove:
        move = self.pages.previous(self.pagination)
        if move is PageMove.ITEM:
            await self._load(self.fetcher.sync)
        elif move is PageMove.GROUP:
            self._changed()
        return move

    # ------------------------------------------------------------------
    # Row actions
    # ------------------------------------------------------------------

    async def view(self, item_id: str) -> DetailView:
        """Load one item for the detail dialog. The dialog opens either way."""
        try:
            item = await self._fetch_item(item_id)
        except Exception as exc:
            logger.warning("Failed to load product item %s: %s", item_id, exc)
            item = None
        if not self._mounted:
            return self.detail
        if item is None:
            self.detail = DetailView(is_open=True, item=None, error=NOT_FOUND_MESSAGE)
        else:
            self.detail = DetailView(is_open=True, item=item)
        self._changed()
        return self.detail

    def close_detail(self) -> None:
        self.detail = DetailView()
        self._changed()

    def edit(self, item_id: str) -> str:
        path = f"/products/edit/{item_id}"
        if self._navigate is not None:
            self._navigate(path)
        return path

    def request_delete(self, item_id: str) -> None:
        self.pending_delete = item_id
        self._changed()

    def cancel_delete(self) -> None:
        self.pending_delete = None
        self._changed()

    async def confirm_delete(self) -> bool:
        """Delete the pending item. On failure it stays selected for a retry."""
        item_id = self.pending_delete
        if item_id is None:
            self._notifier.info("No product item selected.")
            return False
        try:
            message = await self._delete_item(item_id)
        except Exception as exc:
            logger.warning("Failed to delete product item %s: %s", item_id, exc)
            if self._mounted:
                self._notifier.error(f"Failed to delete product item: {exc}")
                self._changed()
            return False

        if self.pending_delete == item_id:
            self.pending_delete = None
        if not self._mounted:
            return True
        logger.info("Deleted product item %s", item_id)
        self._notifier.success(message or "Product deleted successfully")
        await self.refresh()
        return True
