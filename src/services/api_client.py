"""Client for the pharmacy inventory REST backend."""
import logging
from datetime import date
from typing import Optional

import requests

from config import API_BASE_URL, API_TIMEOUT, API_TOKEN
from src.models.product_item import ProductItem, ProductListPage
from src.models.report import ReorderItem, TopItem

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when a backend request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PharmacyApiClient:
    """requests wrapper around the product-list and reports endpoints."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token: str = API_TOKEN,
        timeout: float = API_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    # ------------------------------------------------------------------
    # Product list
    # ------------------------------------------------------------------

    def fetch_product_list(
        self,
        page: int = 1,
        limit: int = 100,
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        only_active: bool = True,
    ) -> ProductListPage:
        """Fetch one server page of raw product items.

        Parameters
        ----------
        page : int
            1-based item page.
        limit : int
            Items per page.
        search : str | None
            Free-text filter; omitted from the query when empty.
        sort_by : str | None
            One of ``Name``, ``Stock``, ``ExpiryDate``.
        sort_order : str | None
            ``asc`` or ``desc``.
        only_active : bool
            Ask the server to drop deactivated items.
        """
        params: dict = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        if sort_by:
            params["sortBy"] = sort_by
        if sort_order:
            params["sortOrder"] = sort_order
        params["onlyActive"] = "true" if only_active else "false"

        payload = self._request("GET", "/product-list", params=params)
        if not isinstance(payload, dict):
            raise ApiError("Unexpected product list response")
        return ProductListPage.from_api(payload)

    def fetch_product_item_by_id(self, item_id: str) -> Optional[ProductItem]:
        """Return a single product item, or None when the server has no such item."""
        try:
            payload = self._request("GET", f"/product-list/{item_id}")
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise
        if not isinstance(payload, dict) or not payload:
            return None
        return ProductItem.from_api(payload)

    def delete_product_item_by_id(self, item_id: str) -> str:
        """Deactivate a product item; returns the server's message."""
        payload = self._request("PATCH", f"/product-list/{item_id}", json={"IsActive": False})
        message = payload.get("message") if isinstance(payload, dict) else None
        return message or "Product deleted successfully"

    def update_product_item(self, item_id: str, stock: int, expiry_date: date) -> dict:
        """Update a batch's stock count and expiry date."""
        payload = self._request(
            "PUT", f"/product-items/{item_id}",
            json={"Stock": stock, "ExpiryDate": expiry_date.isoformat()},
        )
        return payload if isinstance(payload, dict) else {}

    def update_product(
        self,
        product_id: str,
        name: str,
        generic_name: str,
        brand: str,
        category: str,
        selling_price: float,
    ) -> dict:
        """Update the catalogue fields shared by every batch of a product."""
        payload = self._request(
            "PUT", f"/products/{product_id}",
            json={
                "Name": name,
                "GenericName": generic_name,
                "Brand": brand,
                "Category": category,
                "SellingPrice": selling_price,
            },
        )
        return payload if isinstance(payload, dict) else {}

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def fetch_reorder_items(self) -> list[ReorderItem]:
        """Low-stock products at or below their reorder level."""
        payload = self._request("GET", "/reports/reorder")
        rows = payload.get("lowStock") if isinstance(payload, dict) else None
        return [ReorderItem.from_api(r) for r in rows or [] if isinstance(r, dict)]

    def fetch_top_items(self, item_type: str = "product", limit: int = 5) -> list[TopItem]:
        """Top selling products or categories."""
        payload = self._request(
            "GET", "/reports/top_items", params={"type": item_type, "limit": limit},
        )
        rows = payload.get("items") if isinstance(payload, dict) else None
        return [TopItem.from_api(r) for r in rows or [] if isinstance(r, dict)]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise ApiError(f"Could not reach the server: {exc}") from exc

        if resp.status_code >= 400:
            message = self._error_message(resp)
            logger.warning("%s %s -> %d: %s", method, url, resp.status_code, message)
            raise ApiError(message, status_code=resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("Invalid JSON from %s %s", method, url)
            raise ApiError("Invalid response from the server") from exc

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            data = resp.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return f"Request failed with status {resp.status_code}"
