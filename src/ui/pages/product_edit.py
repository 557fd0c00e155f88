"""Product item edit page - target of the table's edit action."""
import asyncio
import logging

from nicegui import ui

from src.services.api_client import ApiError, PharmacyApiClient
from src.services.product_editor import ProductEditForm, save_product_edit
from src.ui.components.helpers import format_date, product_thumbnail
from src.ui.layout import build_layout
from src.ui.notifier import NiceGuiNotifier

logger = logging.getLogger(__name__)


def product_edit_page(item_id: str, client: PharmacyApiClient | None = None):
    """Render the edit form for one product item."""
    content = build_layout()
    client = client or PharmacyApiClient()
    notifier = NiceGuiNotifier(content)

    with content:
        with ui.row().classes("items-center gap-2 w-full"):
            ui.button(
                icon="arrow_back", on_click=lambda: ui.navigate.to("/products"),
            ).props("flat round")
            ui.label("Edit Product").classes("text-h5 font-bold")

        body = ui.column().classes("w-full")
        with body:
            ui.spinner(size="lg")

    def _render_form(item):
        form = ProductEditForm.from_item(item)

        with ui.card().classes("w-full p-4"):
            with ui.row().classes("items-start gap-6 no-wrap w-full"):
                product_thumbnail(item.product.name, item.product.image, size=160)
                with ui.column().classes("flex-1 gap-2"):
                    with ui.row().classes("w-full gap-4"):
                        ui.input("Product Name").bind_value(form, "name").props(
                            "outlined dense"
                        ).classes("flex-1")
                        ui.input("Generic Name").bind_value(form, "generic_name").props(
                            "outlined dense"
                        ).classes("flex-1")
                    with ui.row().classes("w-full gap-4"):
                        ui.input("Brand").bind_value(form, "brand").props(
                            "outlined dense"
                        ).classes("flex-1")
                        ui.input("Category").bind_value(form, "category").props(
                            "outlined dense"
                        ).classes("flex-1")
                    with ui.row().classes("w-full gap-4"):
                        ui.number("Selling Price", min=0, step=0.01, format="%.2f").bind_value(
                            form, "price"
                        ).props("outlined dense").classes("w-40")
                        ui.number("Stock", min=0, step=1, format="%d").bind_value(
                            form, "stock"
                        ).props("outlined dense").classes("w-32")
                        expiry_input = ui.input(
                            "Expiry Date",
                            value=item.expiry_date.isoformat() if item.expiry_date else "",
                        ).props("outlined dense").classes("w-44")
                        with expiry_input.add_slot("append"):
                            ui.icon("event").classes("cursor-pointer")
                        with ui.menu().props("no-parent-event") as date_menu:
                            ui.date().bind_value(expiry_input)
                        expiry_input.on("click", date_menu.open)
                    ui.label(
                        f"Item {item.item_id} of product {item.product_id} | "
                        f"last purchased {format_date(item.last_purchase_date)}"
                    ).classes("text-caption text-secondary")

            async def _save():
                form.expiry_date = expiry_input.value
                save_btn.disable()
                try:
                    saved = await save_product_edit(client, item, form, notifier)
                finally:
                    save_btn.enable()
                if saved:
                    ui.timer(1.5, lambda: ui.navigate.to("/products"), once=True)

            with ui.row().classes("w-full justify-end gap-2 mt-4"):
                ui.button("Cancel", on_click=lambda: ui.navigate.to("/products")).props("flat")
                save_btn = ui.button("Save Changes", icon="save", on_click=_save).props(
                    "color=primary"
                )

    async def _load():
        try:
            item = await asyncio.get_event_loop().run_in_executor(
                None, client.fetch_product_item_by_id, item_id,
            )
        except ApiError as exc:
            logger.warning("Failed to load product item %s: %s", item_id, exc)
            notifier.error(f"Failed to load product item: {exc}")
            item = None

        body.clear()
        with body:
            if item is None:
                ui.label("Product item not found.").classes("text-negative text-h6")
                ui.button("Return to Product List", on_click=lambda: ui.navigate.to("/products"))
                return
            _render_form(item)

    ui.timer(0.1, _load, once=True)
