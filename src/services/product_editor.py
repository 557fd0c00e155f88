"""Validate and save edits to a product item and its parent product."""
import asyncio
import functools
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from src.models.product_item import ProductItem, parse_date
from src.services.api_client import ApiError, PharmacyApiClient
from src.ui.notifier import Notifier

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Product updated successfully!"


@dataclass
class ProductEditForm:
    """Editable fields of the edit page, as entered by the user."""

    name: str = ""
    generic_name: str = ""
    brand: str = ""
    category: str = ""
    price: Any = None
    stock: Any = 0
    expiry_date: Any = None

    @classmethod
    def from_item(cls, item: ProductItem) -> "ProductEditForm":
        return cls(
            name=item.product.name,
            generic_name=item.product.generic_name,
            brand=item.product.brand,
            category=item.product.category,
            price=item.product.price,
            stock=item.stock,
            expiry_date=item.expiry_date,
        )

    def validate(self) -> str | None:
        """Return the first problem with the form, or None when it can be saved."""
        required = (self.name, self.generic_name, self.brand, self.category)
        if any(not (v or "").strip() for v in required) or self.price in (None, ""):
            return "Please fill in all required fields"
        try:
            stock = int(self.stock)
        except (TypeError, ValueError):
            return "Stock must be a whole number"
        if stock < 0:
            return "Stock cannot be negative"
        try:
            price = float(self.price)
        except (TypeError, ValueError):
            return "Price must be a number"
        if price <= 0:
            return "Price must be greater than 0"
        if self.expiry() is None:
            return "Expiry date is required"
        return None

    def expiry(self) -> date | None:
        return parse_date(self.expiry_date)


async def save_product_edit(
    client: PharmacyApiClient,
    item: ProductItem,
    form: ProductEditForm,
    notifier: Notifier,
) -> bool:
    """Validate *form*, then update the batch and its product.

    The blocking client calls run in the default executor. Every outcome is
    reported through *notifier*.
    """
    problem = form.validate()
    if problem:
        notifier.error(problem)
        return False

    try:
        await _in_executor(
            client.update_product_item, item.item_id, int(form.stock), form.expiry(),
        )
        await _in_executor(
            client.update_product,
            item.product_id,
            name=form.name.strip(),
            generic_name=form.generic_name.strip(),
            brand=form.brand.strip(),
            category=form.category.strip(),
            selling_price=float(form.price),
        )
    except ApiError as exc:
        logger.warning("Failed to update product item %s: %s", item.item_id, exc)
        notifier.error(f"Failed to update product: {exc}")
        return False

    logger.info("Updated product item %s (product %s)", item.item_id, item.product_id)
    notifier.success(SAVED_MESSAGE)
    return True


async def _in_executor(fn, *args, **kwargs):
    return await asyncio.get_event_loop().run_in_executor(
        None, functools.partial(fn, *args, **kwargs),
    )
