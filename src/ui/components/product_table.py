"""Grouped product table: one primary row per product, batches on expand."""
from typing import Callable

from nicegui import ui

from src.models.product_group import ProductGroup
from src.models.product_item import ProductItem
from src.ui.components.helpers import format_date, format_price, product_thumbnail

_COLUMNS = [
    ("ID", "w-24"),
    ("Product", "flex-1"),
    ("Category", "w-32"),
    ("Brand", "w-32"),
    ("Price", "w-24"),
    ("Quantity", "w-20"),
    ("Expiry", "w-28"),
    ("Action", "w-32"),
]


def product_table(
    groups: list[ProductGroup],
    open_groups: set[str],
    on_toggle: Callable[[str], None],
    on_view: Callable[[str], None],
    on_edit: Callable[[str], None],
    on_delete: Callable[[str], None],
):
    """Render *groups*; product ids in *open_groups* show their secondary rows."""
    with ui.card().classes("w-full p-0 gap-0"):
        with ui.row().classes("w-full items-center gap-2 px-4 py-3 bg-primary text-white no-wrap"):
            for label, width in _COLUMNS:
                ui.label(label.upper()).classes(f"{width} text-caption font-bold")

        if not groups:
            ui.label("No products found.").classes(
                "w-full text-center text-body2 text-secondary py-8"
            )
            return

        for group in groups:
            is_open = group.product_id in open_groups
            _item_row(
                group.primary, group, is_open, on_toggle, on_view, on_edit, on_delete,
                primary=True,
            )
            if is_open:
                for item in group.secondary:
                    _item_row(
                        item, group, is_open, on_toggle, on_view, on_edit, on_delete,
                        primary=False,
                    )


def _item_row(
    item: ProductItem,
    group: ProductGroup,
    is_open: bool,
    on_toggle,
    on_view,
    on_edit,
    on_delete,
    primary: bool,
):
    bg = "bg-white hover:bg-blue-50" if primary else "bg-blue-50 hover:bg-blue-100"
    with ui.row().classes(f"w-full items-center gap-2 px-4 py-2 no-wrap {bg}"):
        ui.label(item.product_id if primary else "").classes("w-24 text-body2")
        with ui.row().classes("flex-1 items-center gap-3 no-wrap"):
            product_thumbnail(item.product.name, item.product.image, size=40)
            ui.label(item.product.name).classes("text-body2 font-medium")
            if primary and group.secondary:
                ui.button(
                    icon="expand_less" if is_open else "expand_more",
                    on_click=lambda _, pid=group.product_id: on_toggle(pid),
                ).props("flat round dense size=sm color=primary").tooltip(
                    f"{len(group.secondary)} more batch(es)"
                )
        ui.label(item.product.category).classes("w-32 text-body2")
        ui.label(item.product.brand).classes("w-32 text-body2")
        ui.label(format_price(item.product.price)).classes("w-24 text-body2")
        ui.label(str(item.stock)).classes("w-20 text-body2")
        ui.label(format_date(item.expiry_date)).classes("w-28 text-body2")
        with ui.row().classes("w-32 gap-1 no-wrap"):
            ui.button(
                icon="visibility", on_click=lambda _, iid=item.item_id: on_view(iid),
            ).props("flat round dense size=sm").tooltip("View product details")
            ui.button(
                icon="edit", on_click=lambda _, iid=item.item_id: on_edit(iid),
            ).props("flat round dense size=sm").tooltip("Edit product item")
            ui.button(
                icon="delete", on_click=lambda _, iid=item.item_id: on_delete(iid),
            ).props("flat round dense size=sm color=negative").tooltip("Delete product item")
