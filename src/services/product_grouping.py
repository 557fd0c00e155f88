"""Group loaded product items by product and window the groups into pages.

Everything here is pure: the same item list always yields the same groups.
"""
import math
from datetime import date
from typing import Iterable

from config import GROUPS_PER_PAGE
from src.models.product_group import ProductGroup
from src.models.product_item import ProductItem


def _expiry_key(item: ProductItem) -> tuple[bool, date]:
    # Items without an expiry date sort after every dated item
    return (item.expiry_date is None, item.expiry_date or date.max)


def is_listable(item: ProductItem) -> bool:
    """Only active batches that still have stock are shown."""
    return item.is_active and item.stock > 0


def group_product_items(items: Iterable[ProductItem]) -> list[ProductGroup]:
    """Group listable items by product id.

    Groups keep the order in which their product first appears in *items*
    (the server's sort order); items inside a group are sorted ascending by
    expiry so the soonest-expiring batch is the primary row.
    """
    buckets: dict[str, list[ProductItem]] = {}
    for item in items:
        if not is_listable(item):
            continue
        buckets.setdefault(item.product_id, []).append(item)

    return [
        ProductGroup(product_id=pid, items=tuple(sorted(members, key=_expiry_key)))
        for pid, members in buckets.items()
    ]


def loaded_group_pages(group_count: int, per_page: int = GROUPS_PER_PAGE) -> int:
    """Exact number of group pages over the groups currently loaded."""
    return max(1, math.ceil(group_count / per_page))


def window_groups(
    groups: list[ProductGroup], page: int, per_page: int = GROUPS_PER_PAGE,
) -> list[ProductGroup]:
    """Return the groups shown on 1-based group *page*."""
    start = (max(1, page) - 1) * per_page
    return groups[start:start + per_page]


def estimate_total_group_pages(
    group_count: int,
    loaded_item_count: int,
    total_items: int,
    per_page: int = GROUPS_PER_PAGE,
) -> int:
    """Estimate group pages across *all* server pages.

    This is an approximation: grouping only happens over the loaded item
    page, so the loaded groups-per-item ratio is extrapolated to the
    server-reported item total. Callers must present it as an estimate.
    """
    if group_count <= 0 or loaded_item_count <= 0:
        return loaded_group_pages(group_count, per_page)
    # integer ceil of total * groups / items
    estimated_groups = -(-max(total_items, loaded_item_count) * group_count // loaded_item_count)
    return max(loaded_group_pages(group_count, per_page), math.ceil(estimated_groups / per_page))
