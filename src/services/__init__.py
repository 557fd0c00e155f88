"""Services package."""
from src.services.api_client import ApiError, PharmacyApiClient
from src.services.csv_exporter import CsvReportExporter, ExportPreview, to_csv
from src.services.fetch_orchestrator import FetchKey, FetchOrchestrator
from src.services.page_reconciler import PageMove, PageReconciler, ReconcileState
from src.services.product_grouping import group_product_items, window_groups
from src.services.product_editor import ProductEditForm, save_product_edit
from src.services.product_list_controller import ProductListController

__all__ = [
    "ApiError",
    "PharmacyApiClient",
    "CsvReportExporter",
    "ExportPreview",
    "to_csv",
    "FetchKey",
    "FetchOrchestrator",
    "PageMove",
    "PageReconciler",
    "ReconcileState",
    "group_product_items",
    "window_groups",
    "ProductEditForm",
    "save_product_edit",
    "ProductListController",
]
