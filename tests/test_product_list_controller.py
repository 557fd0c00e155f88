"""Tests for the product list controller."""
import asyncio

import pytest

from src.services.page_reconciler import PageMove
from src.services.product_list_controller import NOT_FOUND_MESSAGE, ProductListController

from conftest import FakeBackend, GatedBackend, items_for, make_item, make_page


def build(backend, notifier, fetch_item=None, delete_item=None, **kwargs):
    async def _fetch_item(item_id):
        return None

    async def _delete_item(item_id):
        return "Product deleted successfully"

    kwargs.setdefault("groups_per_page", 5)
    kwargs.setdefault("debounce_seconds", 0.01)
    return ProductListController(
        backend.on_refresh,
        fetch_item or _fetch_item,
        delete_item or _delete_item,
        notifier,
        navigate=kwargs.pop("navigate", None),
        **kwargs,
    )


@pytest.fixture
def two_page_backend():
    # 12 items across 4 products per item page, two item pages
    return FakeBackend({
        1: make_page(items_for("ABCD"), page=1, total_pages=2),
        2: make_page(items_for("EFGH", id_offset=100), page=2, total_pages=2),
    })


def test_mount_loads_first_page(two_page_backend, notifier):
    ctrl = build(two_page_backend, notifier)
    asyncio.run(ctrl.mount())
    assert two_page_backend.calls == [(1, None, "Name", "asc")]
    assert len(ctrl.product_list) == 12
    assert [g.product_id for g in ctrl.visible_groups] == list("ABCD")
    assert ctrl.loading is False


def test_next_crosses_to_next_item_page_without_refetching(two_page_backend, notifier):
    ctrl = build(two_page_backend, notifier)

    async def run():
        await ctrl.mount()
        assert ctrl.group_page == 1
        move = await ctrl.next_page()
        assert move is PageMove.ITEM
        # nothing left to navigate to, and no repeat fetch of either page
        await ctrl.fetcher.sync(ctrl.fetch_key())

    asyncio.run(run())
    assert [c[0] for c in two_page_backend.calls] == [1, 2]
    assert ctrl.group_page == 1
    assert ctrl.item_page == 2
    assert [g.product_id for g in ctrl.visible_groups] == list("EFGH")


def test_group_paging_never_fetches(notifier):
    backend = FakeBackend({1: make_page(items_for("ABCDEFG", per_product=1), total_pages=3)})
    ctrl = build(backend, notifier)

    async def run():
        await ctrl.mount()
        assert await ctrl.next_page() is PageMove.GROUP
        assert await ctrl.previous_page() is PageMove.GROUP

    asyncio.run(run())
    assert len(backend.calls) == 1
    assert ctrl.group_page == 1


def test_sort_change_resets_both_cursors(two_page_backend, notifier):
    two_page_backend.pages[1] = make_page(items_for("ABCDEFG", per_product=1), page=1, total_pages=2)
    ctrl = build(two_page_backend, notifier)

    async def run():
        await ctrl.mount()
        await ctrl.next_page()
        assert ctrl.group_page == 2
        await ctrl.next_page()
        assert ctrl.item_page == 2
        await ctrl.set_sort("Stock", "desc")

    asyncio.run(run())
    assert two_page_backend.calls[-1] == (1, None, "Stock", "desc")
    assert (ctrl.item_page, ctrl.group_page) == (1, 1)


def test_unchanged_sort_does_not_fetch(two_page_backend, notifier):
    ctrl = build(two_page_backend, notifier)

    async def run():
        await ctrl.mount()
        assert await ctrl.set_sort("Name", "asc") is False

    asyncio.run(run())
    assert len(two_page_backend.calls) == 1


def test_unknown_sort_field_is_rejected(two_page_backend, notifier):
    ctrl = build(two_page_backend, notifier)
    with pytest.raises(ValueError):
        asyncio.run(ctrl.set_sort("Price"))


def test_failed_fetch_keeps_previous_data(two_page_backend, notifier):
    two_page_backend.fail_pages.add(2)
    ctrl = build(two_page_backend, notifier)

    async def run():
        await ctrl.mount()
        await ctrl.next_page()

    asyncio.run(run())
    assert notifier.levels() == ["error"]
    assert "backend unavailable" in notifier.messages[0][1]
    assert ctrl.item_page == 1
    assert [g.product_id for g in ctrl.visible_groups] == list("ABCD")
    assert ctrl.loading is False


def test_late_response_after_unmount_is_ignored(notifier):
    release = None
    calls = []

    async def slow(page, search, sort_by, sort_order):
        calls.append(page)
        await release.wait()
        return make_page(items_for("AB"))

    async def no_item(item_id):
        return None

    async def no_delete(item_id):
        return ""

    ctrl = ProductListController(slow, no_item, no_delete, notifier)
    rendered = []
    ctrl.on_change(lambda: rendered.append(True))

    async def run():
        nonlocal release
        release = asyncio.Event()
        task = asyncio.create_task(ctrl.mount())
        await asyncio.sleep(0)
        ctrl.unmount()
        rendered.clear()
        release.set()
        await task

    asyncio.run(run())
    assert calls == [1]
    assert ctrl.product_list == []
    assert rendered == []


def test_search_is_debounced_and_resets_paging(two_page_backend, notifier):
    two_page_backend.pages[1] = make_page(items_for("A"), page=1, total_pages=2)
    ctrl = build(two_page_backend, notifier)

    async def run():
        await ctrl.mount()
        await ctrl.next_page()
        ctrl.set_search_text("a")
        ctrl.set_search_text("amox")
        ctrl.set_search_text("amox ")
        await asyncio.sleep(0.1)

    asyncio.run(run())
    assert two_page_backend.calls[-1] == (1, "amox", "Name", "asc")
    assert len(two_page_backend.calls) == 3
    assert ctrl.search == "amox"
    assert ctrl.item_page == 1


def test_view_opens_detail(two_page_backend, notifier):
    item = make_item(42, "A")

    async def fetch_item(item_id):
        return item if item_id == "42" else None

    ctrl = build(two_page_backend, notifier, fetch_item=fetch_item)

    async def run():
        await ctrl.mount()
        found = await ctrl.view("42")
        assert found.is_open and found.item is item and found.error is None
        missing = await ctrl.view("999")
        assert missing.is_open and missing.item is None
        assert missing.error == NOT_FOUND_MESSAGE

    asyncio.run(run())
    ctrl.close_detail()
    assert ctrl.detail.is_open is False


def test_view_failure_shows_inline_error(two_page_backend, notifier):
    async def fetch_item(item_id):
        raise RuntimeError("timeout")

    ctrl = build(two_page_backend, notifier, fetch_item=fetch_item)

    async def run():
        await ctrl.mount()
        return await ctrl.view("1")

    detail = asyncio.run(run())
    assert detail.error == NOT_FOUND_MESSAGE
    assert notifier.messages == []


def test_edit_navigates_to_edit_route(two_page_backend, notifier):
    visited = []
    ctrl = build(two_page_backend, notifier, navigate=visited.append)
    assert ctrl.edit("17") == "/products/edit/17"
    assert visited == ["/products/edit/17"]


def test_confirmed_delete_notifies_and_refreshes(two_page_backend, notifier):
    deleted = []

    async def delete_item(item_id):
        deleted.append(item_id)
        return "Product deleted successfully"

    ctrl = build(two_page_backend, notifier, delete_item=delete_item)

    async def run():
        await ctrl.mount()
        ctrl.request_delete("5")
        assert await ctrl.confirm_delete() is True

    asyncio.run(run())
    assert deleted == ["5"]
    assert notifier.messages == [("success", "Product deleted successfully")]
    assert [c[0] for c in two_page_backend.calls] == [1, 1]
    assert ctrl.pending_delete is None


def test_failed_delete_reports_error(two_page_backend, notifier):
    async def delete_item(item_id):
        raise RuntimeError("forbidden")

    ctrl = build(two_page_backend, notifier, delete_item=delete_item)

    async def run():
        await ctrl.mount()
        ctrl.request_delete("5")
        return await ctrl.confirm_delete()

    assert asyncio.run(run()) is False
    assert notifier.messages == [("error", "Failed to delete product item: forbidden")]
    assert len(two_page_backend.calls) == 1
    # still selected so the user can retry or cancel
    assert ctrl.pending_delete == "5"


def test_cancelled_delete_does_nothing(two_page_backend, notifier):
    ctrl = build(two_page_backend, notifier)

    async def run():
        await ctrl.mount()
        ctrl.request_delete("5")
        ctrl.cancel_delete()
        return await ctrl.confirm_delete()

    assert asyncio.run(run()) is False
    assert notifier.messages == [("info", "No product item selected.")]


def test_failure_of_superseded_fetch_keeps_latest_request(notifier):
    backend = GatedBackend({
        (1, "Name", None): make_page(items_for("ABCD"), page=1, total_pages=2),
        (1, "Stock", None): RuntimeError("sort fetch failed"),
        (2, "Stock", None): make_page(items_for("EFGH", id_offset=100), page=2, total_pages=2),
    })
    ctrl = build(backend, notifier)

    async def run():
        backend.release(1, "Name")
        await ctrl.mount()
        sort_task = asyncio.create_task(ctrl.set_sort("Stock"))
        await asyncio.sleep(0)
        page_task = asyncio.create_task(ctrl.next_page())
        await asyncio.sleep(0)
        assert ctrl.loading

        backend.release(1, "Stock")
        assert await sort_task is False
        assert ctrl.loading

        backend.release(2, "Stock")
        assert await page_task is PageMove.ITEM

    asyncio.run(run())
    assert backend.calls == [(1, "Name", None), (1, "Stock", None), (2, "Stock", None)]
    assert ctrl.item_page == 2
    assert [g.product_id for g in ctrl.visible_groups] == list("EFGH")
    assert notifier.messages == []
    assert ctrl.loading is False


def test_older_response_arriving_last_is_discarded(notifier):
    backend = GatedBackend({
        (1, "Name", None): make_page(items_for("ABCD")),
        (1, "Stock", None): make_page(items_for("WX", id_offset=200)),
        (1, "ExpiryDate", None): make_page(items_for("PQ", id_offset=300)),
    })
    ctrl = build(backend, notifier)

    async def run():
        backend.release(1, "Name")
        await ctrl.mount()
        by_stock = asyncio.create_task(ctrl.set_sort("Stock"))
        await asyncio.sleep(0)
        by_expiry = asyncio.create_task(ctrl.set_sort("ExpiryDate"))
        await asyncio.sleep(0)

        backend.release(1, "ExpiryDate")
        await by_expiry
        backend.release(1, "Stock")
        await by_stock

    asyncio.run(run())
    assert len(backend.calls) == 3
    assert ctrl.sort_by == "ExpiryDate"
    assert [g.product_id for g in ctrl.visible_groups] == ["P", "Q"]
    assert notifier.messages == []


def test_unmount_cancels_pending_search(two_page_backend, notifier):
    ctrl = build(two_page_backend, notifier, debounce_seconds=0.01)

    async def run():
        await ctrl.mount()
        ctrl.set_search_text("amox")
        ctrl.unmount()
        await asyncio.sleep(0.05)

    asyncio.run(run())
    assert len(two_page_backend.calls) == 1
    assert ctrl.search == ""
