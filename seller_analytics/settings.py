import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

# --- Filename Configuration ---
DATASET_FILENAME = os.getenv("DATASET_FILENAME", "sales_data.json")
REPORT_FILENAME_BASE = os.getenv("REPORT_FILENAME_BASE", "seller_report")

# Fallback CSV inputs, used when the JSON dataset is not present.
SELLERS_CSV = "sellers.csv"
PRODUCTS_CSV = "products.csv"
PURCHASE_RECORDS_CSV = "purchase_records.csv"
PURCHASE_ITEMS_CSV = "purchase_items.csv"

# --- Outputs ---
SAVE_JSON_OUTPUT = _env_flag("SAVE_JSON_OUTPUT", "true")

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Shared Business Logic ---
# How many best-selling SKUs are kept per seller in the report.
TOP_PRODUCTS_LIMIT = int(os.getenv("TOP_PRODUCTS_LIMIT", "10"))

# Fall back to the built-in revenue/bonus formulas when none are supplied.
USE_DEFAULT_CALCULATORS = _env_flag("USE_DEFAULT_CALCULATORS", "true")

# Bonus share of profit by finishing position.
BONUS_RATE_FIRST = 0.15
BONUS_RATE_RUNNER_UP = 0.10
BONUS_RATE_DEFAULT = 0.05
BONUS_RATE_LAST = 0.0
