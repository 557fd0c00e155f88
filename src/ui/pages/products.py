"""Products page -- grouped inventory list backed by the pharmacy API."""
import logging

from nicegui import ui

from config import SORT_FIELDS, SORT_ORDERS
from src.services.api_client import PharmacyApiClient
from src.services.csv_exporter import CsvReportExporter, product_item_rows
from src.services.product_list_controller import ProductListController
from src.ui.components.export_dialog import ExportPreviewDialog
from src.ui.components.helpers import format_date, format_price, page_header, product_thumbnail
from src.ui.components.product_table import product_table
from src.ui.layout import build_layout
from src.ui.notifier import NiceGuiNotifier

logger = logging.getLogger(__name__)


def products_page(search: str | None = None, client: PharmacyApiClient | None = None):
    """Render the products browser page.

    Args:
        search: Optional search term to pre-fill the search input (from URL query param).
        client: API client; a default one is built from config when omitted.
    """
    content = build_layout()
    notifier = NiceGuiNotifier(content)
    controller = ProductListController.for_api(
        client or PharmacyApiClient(),
        notifier,
        navigate=ui.navigate.to,
        search=search or "",
    )
    exporter = CsvReportExporter(notifier, download=lambda data, name: ui.download(data, name))
    open_groups: set[str] = set()

    with content:
        with ui.row().classes("w-full items-center justify-between"):
            page_header("Products", subtitle="Inventory batches grouped by product.", icon="inventory_2")
            with ui.row().classes("gap-2"):
                ui.button(
                    icon="refresh", on_click=controller.refresh,
                ).props("flat round").tooltip("Reload")
                ui.button(
                    "Export CSV", icon="download",
                    on_click=lambda: export_dialog.open(
                        "Product List", product_item_rows(controller.product_list),
                    ),
                ).props("color=primary outline")

        # --- Search and sort ---
        with ui.row().classes("w-full items-center gap-4"):
            search_input = ui.input(
                label="Search products",
                placeholder="Name, brand, category...",
                value=controller.search_text,
            ).props("clearable outlined dense").classes("w-72")
            search_input.props('prepend-inner-icon="search"')
            sort_select = ui.select(
                SORT_FIELDS, value=controller.sort_by, label="Sort by",
            ).props("outlined dense").classes("w-40")
            order_select = ui.select(
                SORT_ORDERS, value=controller.sort_order, label="Order",
            ).props("outlined dense").classes("w-40")

        search_input.on_value_change(lambda e: controller.set_search_text(e.value))

        async def _on_sort(_=None):
            await controller.set_sort(sort_select.value, order_select.value)

        sort_select.on_value_change(_on_sort)
        order_select.on_value_change(_on_sort)

        # --- Table ---
        def _toggle(product_id: str):
            if product_id in open_groups:
                open_groups.discard(product_id)
            else:
                open_groups.add(product_id)
            _table.refresh()

        @ui.refreshable
        def _table():
            if controller.loading and not controller.product_list:
                with ui.row().classes("w-full justify-center py-8"):
                    ui.spinner(size="lg")
                    ui.label("Loading products...").classes("text-body1 text-secondary")
                return
            product_table(
                controller.visible_groups,
                open_groups,
                on_toggle=_toggle,
                on_view=controller.view,
                on_edit=controller.edit,
                on_delete=controller.request_delete,
            )

        _table()

        # --- Pagination ---
        @ui.refreshable
        def _pagination():
            with ui.row().classes("w-full items-center justify-between"):
                shown = len(controller.visible_groups)
                ui.label(
                    f"Showing {shown} of {len(controller.groups)} products "
                    f"(item page {controller.pagination.page} of "
                    f"{max(1, controller.pagination.total_pages)}, "
                    f"{controller.pagination.total} batches)"
                ).classes("text-body2 text-secondary")
                with ui.row().classes("items-center gap-2"):
                    ui.button(
                        icon="chevron_left", on_click=controller.previous_page,
                    ).props("flat dense round").set_enabled(
                        controller.can_go_previous and not controller.loading
                    )
                    # The total is extrapolated from the loaded page, hence "~"
                    ui.label(
                        f"Page {controller.group_page} of ~{controller.estimated_group_pages}"
                    ).classes("text-body2 font-bold")
                    ui.button(
                        icon="chevron_right", on_click=controller.next_page,
                    ).props("flat dense round").set_enabled(
                        controller.can_go_next and not controller.loading
                    )

        _pagination()

    # --- Detail dialog ---
    with ui.dialog() as detail_dialog, ui.card().classes("w-full").style("min-width: 640px"):
        @ui.refreshable
        def _detail():
            detail = controller.detail
            if detail.error:
                ui.label(detail.error).classes("text-negative font-bold")
            elif detail.item is not None:
                item = detail.item
                with ui.row().classes("items-start gap-6 no-wrap"):
                    product_thumbnail(item.product.name, item.product.image, size=160)
                    with ui.column().classes("gap-1"):
                        ui.label(item.product.name).classes("text-h5 font-bold")
                        if item.product.generic_name:
                            ui.label(item.product.generic_name).classes("text-caption text-secondary")
                        ui.separator()
                        ui.label(f"Brand: {item.product.brand}").classes("text-body1")
                        ui.label(f"Category: {item.product.category}").classes("text-body1")
                        ui.label(f"Price: {format_price(item.product.price)}").classes("text-body1")
                        ui.label(f"Stock: {item.stock}").classes("text-body1")
                        ui.label(
                            f"Expiry Date: {format_date(item.expiry_date, long=True)}"
                        ).classes("text-body1")
            else:
                ui.label("No product selected.").classes("text-body2 text-secondary")
            with ui.row().classes("w-full justify-end mt-2"):
                ui.button("Close", on_click=controller.close_detail).props("flat")

        _detail()

    # --- Delete confirmation ---
    with ui.dialog() as delete_dialog, ui.card():
        ui.label("Delete this product item?").classes("text-subtitle1 font-bold")
        ui.label(
            "The batch will be deactivated and removed from the product list."
        ).classes("text-body2 text-secondary")
        with ui.row().classes("justify-end gap-2 mt-4"):
            ui.button("Cancel", on_click=controller.cancel_delete).props("flat")
            ui.button("Delete", on_click=controller.confirm_delete).props("color=negative")

    export_dialog = ExportPreviewDialog(exporter)

    def _render():
        _table.refresh()
        _pagination.refresh()
        _detail.refresh()
        detail_dialog.value = controller.detail.is_open
        delete_dialog.value = controller.pending_delete is not None

    controller.on_change(_render)
    detail_dialog.on("hide", lambda _: controller.detail.is_open and controller.close_detail())
    delete_dialog.on("hide", lambda _: controller.pending_delete and controller.cancel_delete())

    ui.context.client.on_disconnect(controller.unmount)
    ui.timer(0.1, controller.mount, once=True)
