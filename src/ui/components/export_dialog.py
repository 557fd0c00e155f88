"""Confirmation dialog that previews a CSV export before download."""
from nicegui import ui

from src.services.csv_exporter import CsvReportExporter, ExportPreview


class ExportPreviewDialog:
    """Shows the first rows of a prepared export; Download confirms it."""

    def __init__(self, exporter: CsvReportExporter):
        self.exporter = exporter
        with ui.dialog() as self.dialog, ui.card().classes("w-full").style("min-width: 720px"):
            self._body = ui.column().classes("w-full gap-2")
            with ui.row().classes("w-full justify-end gap-2 mt-2"):
                ui.button("Cancel", on_click=self._cancel).props("flat")
                ui.button("Download CSV", icon="download", on_click=self._confirm).props(
                    "color=positive"
                )

    def open(self, report_name: str, rows: list[dict]) -> None:
        preview = self.exporter.prepare(report_name, rows)
        if preview is None:
            return
        self._render(preview)
        self.dialog.open()

    def _render(self, preview: ExportPreview) -> None:
        self._body.clear()
        with self._body:
            ui.label(f"Download {preview.report_name}?").classes("text-subtitle1 font-bold")
            caption = f"{len(preview.rows)} row(s) will be saved as {preview.filename}."
            if preview.truncated:
                caption += f" Showing the first {preview.preview_limit}."
            ui.label(caption).classes("text-caption text-secondary")
            columns = [
                {"name": h, "label": h, "field": h, "align": "left"}
                for h in preview.headers
            ]
            rows = [
                {h: "" if row.get(h) is None else str(row.get(h)) for h in preview.headers}
                for row in preview.preview_rows
            ]
            ui.table(columns=columns, rows=rows).props("dense flat bordered").classes(
                "w-full"
            ).style("max-height: 420px")

    def _cancel(self) -> None:
        self.exporter.cancel()
        self.dialog.close()

    def _confirm(self) -> None:
        self.exporter.confirm()
        self.dialog.close()
