"""Export report rows as CSV with a capped on-screen preview."""
import csv
import io
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from config import EXPORT_PREVIEW_LIMIT, EXPORTS_DIR
from src.models.product_item import ProductItem
from src.models.report import ReorderItem, TopItem
from src.ui.notifier import Notifier

logger = logging.getLogger(__name__)

EMPTY_EXPORT_MESSAGE = "No report available to download."

Row = dict[str, Any]


# ------------------------------------------------------------------
# Row builders (fixed column order)
# ------------------------------------------------------------------

def product_item_rows(items: Iterable[ProductItem]) -> list[Row]:
    """Flatten loaded product items into report rows."""
    return [
        {
            "Item ID": item.item_id,
            "Product ID": item.product_id,
            "Product": item.product.name,
            "Generic Name": item.product.generic_name,
            "Brand": item.product.brand,
            "Category": item.product.category,
            "Price": item.product.price,
            "Stock": item.stock,
            "Expiry Date": item.expiry_date,
            "Last Purchase": item.last_purchase_date,
        }
        for item in items
    ]


def reorder_rows(items: Iterable[ReorderItem]) -> list[Row]:
    return [
        {
            "Name": r.name,
            "CurrentQty": r.total_stock,
            "ReorderLevel": r.reorder_level,
            "SuggestedReorderQuantity": r.reorder_quantity,
        }
        for r in items
    ]


def top_item_rows(items: Iterable[TopItem], item_type: str = "product") -> list[Row]:
    label = "Product" if item_type == "product" else "Category"
    rows = []
    for rank, it in enumerate(items, start=1):
        if item_type == "product":
            name = it.name or "Unknown Product"
        else:
            name = it.category or "Uncategorized"
        rows.append({"Rank": rank, label: name, "QuantitySold": it.sold})
    return rows


# ------------------------------------------------------------------
# Pure transformations
# ------------------------------------------------------------------

def _has_value(value: Any) -> bool:
    return value is not None and value != ""


def prune_rows(rows: Iterable[Row | None]) -> list[Row]:
    """Drop empty rows and rows whose every value is blank."""
    return [r for r in rows if r and any(_has_value(v) for v in r.values())]


def union_headers(rows: Iterable[Row]) -> list[str]:
    """All column names, in order of first appearance."""
    headers: dict[str, None] = {}
    for row in rows:
        for key in row:
            headers.setdefault(key, None)
    return list(headers)


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_csv(rows: list[Row], headers: list[str] | None = None) -> str:
    """Serialize every row: text cells quoted (quotes doubled), numbers bare."""
    headers = headers or union_headers(rows)
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(headers)
    writer = csv.writer(buf, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for row in rows:
        writer.writerow([_cell(row.get(h)) for h in headers])
    return buf.getvalue()


def export_filename(report_name: str, today: date | None = None) -> str:
    slug = "_".join(report_name.lower().split()) or "report"
    return f"{slug}_{(today or date.today()).isoformat()}.csv"


# ------------------------------------------------------------------
# Preview / confirm flow
# ------------------------------------------------------------------

@dataclass(frozen=True)
class ExportPreview:
    report_name: str
    filename: str
    headers: list[str]
    rows: list[Row]
    preview_limit: int = EXPORT_PREVIEW_LIMIT

    @property
    def preview_rows(self) -> list[Row]:
        return self.rows[:self.preview_limit]

    @property
    def truncated(self) -> bool:
        return len(self.rows) > self.preview_limit


class CsvReportExporter:
    """Two-step export: ``prepare`` a preview, then ``confirm`` the download.

    ``download(content, filename)`` is the browser save-as boundary.
    """

    def __init__(
        self,
        notifier: Notifier,
        download: Callable[[bytes, str], None],
        exports_dir: Path | None = EXPORTS_DIR,
        preview_limit: int = EXPORT_PREVIEW_LIMIT,
    ):
        self._notifier = notifier
        self._download = download
        self.exports_dir = exports_dir
        self.preview_limit = preview_limit
        self.pending: ExportPreview | None = None

    def prepare(
        self, report_name: str, rows: Iterable[Row | None], today: date | None = None,
    ) -> ExportPreview | None:
        kept = prune_rows(rows)
        if not kept:
            self.pending = None
            self._notifier.warning(EMPTY_EXPORT_MESSAGE)
            return None
        self.pending = ExportPreview(
            report_name=report_name,
            filename=export_filename(report_name, today),
            headers=union_headers(kept),
            rows=kept,
            preview_limit=self.preview_limit,
        )
        return self.pending

    def cancel(self) -> None:
        self.pending = None

    def confirm(self) -> str | None:
        """Serialize the full row set and hand it to the download boundary."""
        export = self.pending
        if export is None:
            self._notifier.info("Nothing to export.")
            return None
        self.pending = None

        content = to_csv(export.rows, export.headers).encode("utf-8")
        if self.exports_dir is not None:
            try:
                self.exports_dir.mkdir(parents=True, exist_ok=True)
                (self.exports_dir / export.filename).write_bytes(content)
            except OSError:
                logger.exception("Failed to keep a copy of %s", export.filename)

        self._download(content, export.filename)
        logger.info("Exported %d rows to %s", len(export.rows), export.filename)
        self._notifier.success(f"Export saved: {export.filename}")
        return export.filename


def previous_exports(exports_dir: Path = EXPORTS_DIR, limit: int = 10) -> list[Path]:
    """Most recent exported CSV files, newest first."""
    if not exports_dir.exists():
        return []
    files = sorted(exports_dir.glob("*.csv"), key=lambda p: p.stat().st_mtime, reverse=True)
    return files[:limit]
