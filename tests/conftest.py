"""Shared test fixtures and fakes."""
import asyncio
from datetime import date

import pytest

from src.models.product_item import Pagination, ProductDescriptor, ProductItem, ProductListPage


def make_item(
    item_id,
    product_id,
    stock=10,
    expiry=None,
    is_active=True,
    name=None,
):
    return ProductItem(
        item_id=str(item_id),
        product_id=str(product_id),
        stock=stock,
        expiry_date=expiry,
        is_active=is_active,
        product=ProductDescriptor(name=name or f"Product {product_id}", category="Analgesic"),
    )


def make_page(items, page=1, total_pages=1, total=None, limit=100):
    return ProductListPage(
        items=tuple(items),
        pagination=Pagination(
            page=page,
            limit=limit,
            total=len(items) * total_pages if total is None else total,
            total_pages=total_pages,
        ),
    )


def items_for(products, per_product=3, id_offset=0):
    """``per_product`` batches for each product id, expiring a month apart."""
    items = []
    n = id_offset
    for pid in products:
        for month in range(per_product, 0, -1):
            n += 1
            items.append(make_item(n, pid, expiry=date(2027, month, 1)))
    return items


class FakeNotifier:
    """Records notifications as (level, message) tuples."""

    def __init__(self):
        self.messages = []

    def success(self, message):
        self.messages.append(("success", message))

    def warning(self, message):
        self.messages.append(("warning", message))

    def error(self, message):
        self.messages.append(("error", message))

    def info(self, message):
        self.messages.append(("info", message))

    def levels(self):
        return [level for level, _ in self.messages]


class FakeBackend:
    """Serves canned product list pages keyed by item page number."""

    def __init__(self, pages):
        self.pages = pages
        self.calls = []
        self.fail_pages = set()

    async def on_refresh(self, page, search, sort_by, sort_order):
        self.calls.append((page, search, sort_by, sort_order))
        if page in self.fail_pages:
            raise RuntimeError("backend unavailable")
        return self.pages[page]


@pytest.fixture
def notifier():
    return FakeNotifier()


class GatedBackend:
    """Backend whose responses are released one call at a time.

    Each call waits on its own event; ``outcomes[(page, sort_by, search)]`` is
    either a page to return or an exception to raise.
    """

    def __init__(self, outcomes):
        self.outcomes = outcomes
        self.calls = []
        self.gates = {}

    async def on_refresh(self, page, search, sort_by, sort_order):
        key = (page, sort_by, search)
        self.calls.append(key)
        gate = self.gates.setdefault(key, asyncio.Event())
        await gate.wait()
        outcome = self.outcomes[key]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def release(self, page, sort_by, search=None):
        self.gates.setdefault((page, sort_by, search), asyncio.Event()).set()
