"""Data models package."""
from src.models.product_item import Pagination, ProductDescriptor, ProductItem, ProductListPage, parse_date
from src.models.product_group import ProductGroup
from src.models.report import ReorderItem, TopItem

__all__ = [
    "Pagination",
    "ProductDescriptor",
    "ProductItem",
    "ProductListPage",
    "ProductGroup",
    "ReorderItem",
    "TopItem",
    "parse_date",
]
