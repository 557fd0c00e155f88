"""Product item (inventory batch) model as returned by the backend."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

logger = logging.getLogger(__name__)


def parse_date(value: Any) -> date | None:
    """Parse an ISO date / datetime string from the API into a ``date``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug("Unparseable date from API: %r", value)
        return None


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    # decimal strings such as "40.00" from SUM() columns
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _to_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ProductDescriptor:
    name: str = ""
    generic_name: str = ""
    brand: str = ""
    category: str = ""
    price: float | None = None
    image: str | None = None

    @classmethod
    def from_api(cls, data: dict | None) -> "ProductDescriptor":
        data = data or {}
        return cls(
            name=data.get("Name") or "",
            generic_name=data.get("GenericName") or "",
            brand=data.get("Brand") or "",
            category=data.get("Category") or "",
            price=_to_float(data.get("SellingPrice")),
            image=data.get("Image") or None,
        )


@dataclass(frozen=True)
class ProductItem:
    """One inventory batch/lot with its own stock count and expiry."""

    item_id: str
    product_id: str
    stock: int = 0
    expiry_date: date | None = None
    last_purchase_date: date | None = None
    is_active: bool = True
    product: ProductDescriptor = field(default_factory=ProductDescriptor)

    @classmethod
    def from_api(cls, data: dict) -> "ProductItem":
        product = data.get("Product") or {}
        return cls(
            item_id=str(data.get("ProductItemID", "")),
            product_id=str(data.get("ProductID", "")),
            stock=_to_int(data.get("Stock")),
            expiry_date=parse_date(data.get("ExpiryDate")),
            last_purchase_date=parse_date(
                data.get("LastPurchaseDate") or product.get("LastPurchaseDate")
            ),
            is_active=bool(data.get("IsActive", True)),
            product=ProductDescriptor.from_api(product),
        )

    @property
    def name(self) -> str:
        return self.product.name

    def __repr__(self) -> str:
        return f"<ProductItem id={self.item_id!r} product={self.product_id!r} stock={self.stock}>"


@dataclass(frozen=True)
class Pagination:
    """Server-side pagination metadata for the raw item list."""

    page: int = 1
    limit: int = 0
    total: int = 0
    total_pages: int = 0

    @classmethod
    def from_api(cls, data: dict | None) -> "Pagination":
        data = data or {}
        return cls(
            page=max(1, _to_int(data.get("page"), 1)),
            limit=_to_int(data.get("limit")),
            total=_to_int(data.get("total")),
            total_pages=_to_int(data.get("totalPages")),
        )


@dataclass(frozen=True)
class ProductListPage:
    """One page of raw product items plus its pagination."""

    items: tuple[ProductItem, ...] = ()
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def from_api(cls, payload: dict) -> "ProductListPage":
        rows = payload.get("data") or []
        return cls(
            items=tuple(ProductItem.from_api(r) for r in rows if isinstance(r, dict)),
            pagination=Pagination.from_api(payload.get("pagination")),
        )
