"""Reports page - reorder and top-selling reports with CSV export."""
import asyncio
import logging
from datetime import datetime

from nicegui import ui

from config import EXPORTS_DIR, TOP_ITEMS_LIMIT
from src.services.api_client import ApiError, PharmacyApiClient
from src.services.csv_exporter import (
    CsvReportExporter,
    previous_exports,
    reorder_rows,
    top_item_rows,
)
from src.ui.components.export_dialog import ExportPreviewDialog
from src.ui.components.helpers import page_header, section_header
from src.ui.layout import build_layout
from src.ui.notifier import NiceGuiNotifier

logger = logging.getLogger(__name__)

_TOP_TYPES = {"product": "Products", "category": "Categories"}


def reports_page(client: PharmacyApiClient | None = None):
    """Render the reports page."""
    content = build_layout("/reports")
    client = client or PharmacyApiClient()
    notifier = NiceGuiNotifier(content)
    state = {"reorder": [], "top": [], "top_type": "product"}

    def _download(data: bytes, filename: str):
        ui.download(data, filename)
        _history.refresh()

    exporter = CsvReportExporter(notifier, download=_download)

    with content:
        page_header("Reports", subtitle="Stock alerts and sales rankings.", icon="assessment")

        # --- Reorder report ---
        with ui.card().classes("w-full p-4"):
            with ui.row().classes("w-full items-center justify-between"):
                section_header("Reorder Report", icon="production_quantity_limits",
                               subtitle="Products at or below their reorder level.")
                ui.button(
                    "Export CSV", icon="download",
                    on_click=lambda: export_dialog.open(
                        "Reorder Report", reorder_rows(state["reorder"]),
                    ),
                ).props("color=primary outline dense")

            @ui.refreshable
            def _reorder_table():
                items = state["reorder"]
                if not items:
                    ui.label("No products need reordering.").classes("text-body2 text-secondary")
                    return
                columns = [
                    {"name": "name", "label": "Product", "field": "name", "align": "left", "sortable": True},
                    {"name": "stock", "label": "Current Qty", "field": "stock", "sortable": True},
                    {"name": "level", "label": "Reorder Level", "field": "level"},
                    {"name": "suggested", "label": "Suggested Qty", "field": "suggested"},
                    {"name": "status", "label": "Status", "field": "status", "align": "left"},
                ]
                rows = [
                    {
                        "name": r.name,
                        "stock": r.total_stock,
                        "level": r.reorder_level,
                        "suggested": r.reorder_quantity if r.reorder_quantity is not None else "-",
                        "status": r.status or "-",
                    }
                    for r in items
                ]
                ui.table(columns=columns, rows=rows, row_key="name").props(
                    "dense flat bordered"
                ).classes("w-full")

            _reorder_table()

        # --- Top items report ---
        with ui.card().classes("w-full p-4"):
            with ui.row().classes("w-full items-center justify-between"):
                section_header("Top Selling", icon="trending_up")
                with ui.row().classes("items-center gap-2"):
                    type_select = ui.select(
                        _TOP_TYPES, value="product", label="Rank by",
                    ).props("outlined dense").classes("w-40")
                    ui.button(
                        "Export CSV", icon="download",
                        on_click=lambda: export_dialog.open(
                            f"Top {_TOP_TYPES[state['top_type']]}",
                            top_item_rows(state["top"], state["top_type"]),
                        ),
                    ).props("color=primary outline dense")

            @ui.refreshable
            def _top_table():
                rows = top_item_rows(state["top"], state["top_type"])
                if not rows:
                    ui.label("No sales recorded yet.").classes("text-body2 text-secondary")
                    return
                label = "Product" if state["top_type"] == "product" else "Category"
                columns = [
                    {"name": "Rank", "label": "#", "field": "Rank"},
                    {"name": label, "label": label, "field": label, "align": "left"},
                    {"name": "QuantitySold", "label": "Quantity Sold", "field": "QuantitySold"},
                ]
                ui.table(columns=columns, rows=rows, row_key="Rank").props(
                    "dense flat bordered"
                ).classes("w-full")

            _top_table()

        # --- Previous exports ---
        with ui.card().classes("w-full p-4"):
            ui.label("Previous Exports").classes("text-subtitle1 font-bold mb-2")

            @ui.refreshable
            def _history():
                files = previous_exports(EXPORTS_DIR)
                if not files:
                    ui.label("No exports yet.").classes("text-body2 text-secondary")
                    return
                for f in files:
                    with ui.row().classes("items-center gap-2"):
                        ui.icon("description").classes("text-secondary")
                        ui.label(f.name).classes("text-body2")
                        size_kb = f.stat().st_size / 1024
                        modified = datetime.fromtimestamp(f.stat().st_mtime)
                        ui.label(
                            f"({size_kb:.1f} KB, {modified.strftime('%Y-%m-%d %H:%M')})"
                        ).classes("text-caption text-secondary")
                        ui.button(
                            icon="download",
                            on_click=lambda _, p=f: ui.download(p),
                        ).props("flat dense round size=sm")

            _history()

    export_dialog = ExportPreviewDialog(exporter)

    async def _load_reorder():
        try:
            state["reorder"] = await asyncio.get_event_loop().run_in_executor(
                None, client.fetch_reorder_items,
            )
        except ApiError as exc:
            logger.warning("Reorder report failed: %s", exc)
            notifier.error(f"Failed to load reorder report: {exc}")
        _reorder_table.refresh()

    async def _load_top():
        item_type = type_select.value
        try:
            items = await asyncio.get_event_loop().run_in_executor(
                None, lambda: client.fetch_top_items(item_type, TOP_ITEMS_LIMIT),
            )
        except ApiError as exc:
            logger.warning("Top items report failed: %s", exc)
            notifier.error(f"Failed to load top items: {exc}")
            return
        state["top"] = items
        state["top_type"] = item_type
        _top_table.refresh()

    type_select.on_value_change(lambda _: _load_top())

    async def _load_all():
        await asyncio.gather(_load_reorder(), _load_top())

    ui.timer(0.1, _load_all, once=True)
