"""Application configuration."""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Paths
BASE_DIR = Path(__file__).parent
DATA_DIR = Path(os.getenv("PHARMACY_DATA_DIR", str(BASE_DIR / "data")))
EXPORTS_DIR = DATA_DIR / "exports"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
EXPORTS_DIR.mkdir(exist_ok=True)

# Pharmacy REST backend
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5001/api").rstrip("/")
API_TOKEN = os.getenv("API_TOKEN", "")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "15"))

# Product list
PRODUCT_PAGE_LIMIT = int(os.getenv("PRODUCT_PAGE_LIMIT", "100"))  # raw items per server page
GROUPS_PER_PAGE = 5
SEARCH_DEBOUNCE_SECONDS = float(os.getenv("SEARCH_DEBOUNCE_SECONDS", "0.5"))

# Sort options offered by the backend: value -> label
SORT_FIELDS: dict[str, str] = {
    "Name": "Name",
    "Stock": "Quantity",
    "ExpiryDate": "Expiry Date",
}
SORT_ORDERS: dict[str, str] = {
    "asc": "Ascending",
    "desc": "Descending",
}

# Reports
EXPORT_PREVIEW_LIMIT = 50
TOP_ITEMS_LIMIT = int(os.getenv("TOP_ITEMS_LIMIT", "10"))

# App settings
APP_TITLE = "Pharmacy Inventory Admin"
APP_PORT = int(os.getenv("APP_PORT", "8080"))
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CURRENCY_SYMBOL = "₱"
