"""Tests for CSV report export."""
from datetime import date

from src.models.report import ReorderItem, TopItem
from src.services.csv_exporter import (
    EMPTY_EXPORT_MESSAGE,
    CsvReportExporter,
    export_filename,
    previous_exports,
    product_item_rows,
    prune_rows,
    reorder_rows,
    to_csv,
    top_item_rows,
    union_headers,
)

from conftest import make_item


def test_fields_are_quoted_and_quotes_doubled():
    csv_text = to_csv([{"A": "x,y", "B": 'He said "hi"'}])
    assert csv_text.splitlines() == ["A,B", '"x,y","He said ""hi"""']


def test_filename_carries_report_name_and_date():
    assert export_filename("Reorder Report", date(2026, 3, 9)) == "reorder_report_2026-03-09.csv"
    assert export_filename("Top Products", date(2026, 3, 9)).endswith("_2026-03-09.csv")


def test_filename_defaults_to_today():
    assert export_filename("Stock").endswith(f"_{date.today().isoformat()}.csv")


def test_empty_and_blank_rows_are_pruned():
    rows = [None, {}, {"A": None, "B": ""}, {"A": 0, "B": ""}]
    assert prune_rows(rows) == [{"A": 0, "B": ""}]


def test_headers_are_union_in_first_seen_order():
    rows = [{"Name": "x", "Qty": 1}, {"Qty": 2, "Note": "n"}]
    assert union_headers(rows) == ["Name", "Qty", "Note"]
    lines = to_csv(rows).splitlines()
    assert lines[0] == "Name,Qty,Note"
    assert lines[2] == '"",2,"n"'


def test_cells_are_normalised():
    lines = to_csv([{"Active": True, "Expiry": date(2027, 1, 31), "Price": 12.5}]).splitlines()
    assert lines[1] == '"true","2027-01-31",12.5'


def test_report_row_builders():
    reorder = reorder_rows([ReorderItem("1", "Paracetamol", 3, 10, "Low", 20)])
    assert reorder == [{
        "Name": "Paracetamol", "CurrentQty": 3, "ReorderLevel": 10, "SuggestedReorderQuantity": 20,
    }]
    top = top_item_rows([TopItem("", 9, category=None)], "category")
    assert top == [{"Rank": 1, "Category": "Uncategorized", "QuantitySold": 9}]
    items = product_item_rows([make_item(7, "A", stock=4)])
    assert items[0]["Item ID"] == "7"
    assert items[0]["Stock"] == 4


def test_empty_export_warns_and_writes_nothing(notifier, tmp_path):
    downloads = []
    exporter = CsvReportExporter(notifier, lambda c, f: downloads.append(f), exports_dir=tmp_path)
    assert exporter.prepare("Reorder Report", [None, {"A": ""}]) is None
    assert notifier.messages == [("warning", EMPTY_EXPORT_MESSAGE)]
    assert exporter.confirm() is None
    assert downloads == []
    assert list(tmp_path.iterdir()) == []


def test_preview_is_capped_but_download_has_every_row(notifier, tmp_path):
    downloads = []
    exporter = CsvReportExporter(
        notifier, lambda content, name: downloads.append((content, name)),
        exports_dir=tmp_path, preview_limit=50,
    )
    rows = [{"Name": f"Item {n}", "Qty": n} for n in range(120)]
    preview = exporter.prepare("Stock Levels", rows, today=date(2026, 1, 2))

    assert preview.filename == "stock_levels_2026-01-02.csv"
    assert len(preview.preview_rows) == 50
    assert preview.truncated

    assert exporter.confirm() == "stock_levels_2026-01-02.csv"
    content, name = downloads[0]
    assert name == "stock_levels_2026-01-02.csv"
    assert len(content.decode("utf-8").splitlines()) == 121
    assert (tmp_path / name).read_bytes() == content
    assert notifier.messages[-1] == ("success", f"Export saved: {name}")
    assert previous_exports(tmp_path) == [tmp_path / name]


def test_cancel_discards_prepared_export(notifier, tmp_path):
    downloads = []
    exporter = CsvReportExporter(notifier, lambda c, f: downloads.append(f), exports_dir=tmp_path)
    exporter.prepare("Reorder Report", [{"A": 1}])
    exporter.cancel()
    assert exporter.confirm() is None
    assert downloads == []
    assert notifier.messages == [("info", "Nothing to export.")]
