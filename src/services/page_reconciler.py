"""Reconcile the server item-page cursor with the client group-page cursor.

The product table pages twice: the server pages raw items, and the client
pages the product groups built from the loaded items. This state machine
keeps the two cursors consistent.
"""
import logging
from enum import Enum

from src.models.product_item import Pagination

logger = logging.getLogger(__name__)


class ReconcileState(Enum):
    IDLE = "idle"
    AWAITING_NEW_ITEM_PAGE = "awaiting_new_item_page"
    SYNCING_FROM_PAGINATION = "syncing_from_pagination"


class PageMove(Enum):
    """Result of a navigation request."""

    NONE = "none"      # already at the edge
    GROUP = "group"    # moved inside the loaded item page
    ITEM = "item"      # a different item page must be fetched


_TRANSITIONS: dict[ReconcileState, set[ReconcileState]] = {
    ReconcileState.IDLE: {
        ReconcileState.AWAITING_NEW_ITEM_PAGE,
        # page changed without a navigation request, e.g. after a sort reset
        ReconcileState.SYNCING_FROM_PAGINATION,
    },
    ReconcileState.AWAITING_NEW_ITEM_PAGE: {
        ReconcileState.SYNCING_FROM_PAGINATION,
        ReconcileState.IDLE,
    },
    ReconcileState.SYNCING_FROM_PAGINATION: {ReconcileState.IDLE},
}


class InvalidTransition(RuntimeError):
    """Raised on a state change the machine does not allow."""


class PageReconciler:
    """Holds ``item_page`` / ``group_page`` and guards their transitions."""

    def __init__(self):
        self.item_page = 1
        self.group_page = 1
        self.state = ReconcileState.IDLE
        self._received_page: int | None = None

    @property
    def received_page(self) -> int | None:
        """Item page of the data currently on display."""
        return self._received_page

    def _transition(self, target: ReconcileState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransition(f"{self.state.value} -> {target.value}")
        logger.debug("Page state %s -> %s", self.state.value, target.value)
        self.state = target

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next(self, loaded_group_pages: int, pagination: Pagination) -> PageMove:
        if self.state is not ReconcileState.IDLE:
            return PageMove.NONE
        if self.group_page < loaded_group_pages:
            self.group_page += 1
            return PageMove.GROUP
        if pagination.page < pagination.total_pages:
            self.item_page = pagination.page + 1
            self._transition(ReconcileState.AWAITING_NEW_ITEM_PAGE)
            return PageMove.ITEM
        return PageMove.NONE

    def previous(self, pagination: Pagination) -> PageMove:
        if self.state is not ReconcileState.IDLE:
            return PageMove.NONE
        if self.group_page > 1:
            self.group_page -= 1
            return PageMove.GROUP
        if pagination.page > 1:
            self.item_page = pagination.page - 1
            self._transition(ReconcileState.AWAITING_NEW_ITEM_PAGE)
            return PageMove.ITEM
        return PageMove.NONE

    # ------------------------------------------------------------------
    # Server responses
    # ------------------------------------------------------------------

    def on_pagination(self, page: int) -> bool:
        """Apply the item page reported by a fresh server response.

        Returns True when ``item_page`` was adopted from the response, in
        which case the caller must mark the fetch trigger "skip once".
        """
        previous, self._received_page = self._received_page, page

        if previous is not None and page != previous:
            self._transition(ReconcileState.SYNCING_FROM_PAGINATION)
            self.group_page = 1
            self.item_page = page
            self._transition(ReconcileState.IDLE)
            return True

        if self.state is ReconcileState.AWAITING_NEW_ITEM_PAGE:
            self._transition(ReconcileState.IDLE)
        if self.item_page != page:
            self.item_page = page
            return True
        return False

    def abandon(self) -> None:
        """A requested item page failed to load; keep showing the current one."""
        if self.state is ReconcileState.AWAITING_NEW_ITEM_PAGE:
            self._transition(ReconcileState.IDLE)
        self.item_page = self._received_page or 1

    def reset(self) -> None:
        """Start a fresh query: both cursors back to the first page."""
        self.item_page = 1
        self.group_page = 1
        self.state = ReconcileState.IDLE

    def clamp(self, loaded_group_pages: int) -> None:
        self.group_page = min(self.group_page, max(1, loaded_group_pages))
