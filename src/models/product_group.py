"""Derived product group: all active batches of one product."""
from __future__ import annotations

from dataclasses import dataclass

from src.models.product_item import ProductItem


@dataclass(frozen=True)
class ProductGroup:
    product_id: str
    items: tuple[ProductItem, ...]

    @property
    def primary(self) -> ProductItem:
        """The soonest-expiring item, shown on the collapsed row."""
        return self.items[0]

    @property
    def secondary(self) -> tuple[ProductItem, ...]:
        return self.items[1:]

    @property
    def total_stock(self) -> int:
        return sum(i.stock for i in self.items)

    def __len__(self) -> int:
        return len(self.items)
