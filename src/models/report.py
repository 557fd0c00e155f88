"""Report row models for the reports endpoints."""
from __future__ import annotations

from dataclasses import dataclass

from src.models.product_item import _to_int


@dataclass(frozen=True)
class ReorderItem:
    product_id: str
    name: str
    total_stock: int
    reorder_level: int
    status: str = ""
    reorder_quantity: int | None = None

    @classmethod
    def from_api(cls, data: dict) -> "ReorderItem":
        qty = data.get("reorderQuantity")
        return cls(
            product_id=str(data.get("productId", "")),
            name=data.get("name") or "",
            total_stock=_to_int(data.get("totalStock")),
            reorder_level=_to_int(data.get("reorderLevel")),
            status=data.get("status") or "",
            reorder_quantity=_to_int(qty) if qty not in (None, "") else None,
        )


@dataclass(frozen=True)
class TopItem:
    name: str
    sold: int
    product_id: str | None = None
    category: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "TopItem":
        return cls(
            name=data.get("name") or "",
            sold=_to_int(data.get("sold")),
            product_id=data.get("productId"),
            category=data.get("category"),
        )
