"""Reusable UI components."""
from src.ui.components.helpers import avatar_color, format_date, format_price, product_thumbnail
from src.ui.components.product_table import product_table

__all__ = ["avatar_color", "format_date", "format_price", "product_thumbnail", "product_table"]
