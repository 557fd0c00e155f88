"""Pharmacy Inventory Admin - Main entry point."""
import logging

from nicegui import app, ui

from config import APP_TITLE, APP_PORT, APP_HOST, LOG_LEVEL
from src.ui.pages.products import products_page
from src.ui.pages.product_edit import product_edit_page
from src.ui.pages.reports import reports_page

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@ui.page("/")
def index():
    ui.navigate.to("/products")


@ui.page("/products")
def products_view(search: str | None = None):
    products_page(search=search)


@ui.page("/products/edit/{item_id}")
def product_edit_view(item_id: str):
    product_edit_page(item_id)


@ui.page("/reports")
def reports_view():
    reports_page()


@app.get("/_health")
async def health_check():
    return {"status": "ok", "app": "pharmacy-inventory-admin"}


ui.run(
    title=APP_TITLE,
    host=APP_HOST,
    port=APP_PORT,
    reload=False,
    dark=False,
)
