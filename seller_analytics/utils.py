import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from . import settings

logger = logging.getLogger(__name__)

ENCODINGS = ("utf-8-sig", "latin-1")
RECEIPT_ID_DTYPE = {"receipt_id": str}


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def load_csv(file_path: Path, dtype: dict[str, Any] | None = None) -> pd.DataFrame | None:
    """
    A CSV loader with an encoding fallback: UTF-8 (BOM aware) first, then
    latin-1, which can read any byte. Returns None when the file is missing
    or cannot be parsed.
    """
    try:
        return pd.read_csv(file_path, encoding="utf-8-sig", dtype=dtype)

    except UnicodeDecodeError:
        logger.info(
            f"INFO: UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(file_path, encoding="latin-1", dtype=dtype)
        except (OSError, ValueError) as e_latin1:
            logger.error(
                f"ERROR: Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.info(f"INFO: Report not found at {file_path}, skipping.")
        return None

    except (OSError, ValueError) as e_general:
        logger.error(
            f"ERROR: An unexpected error occurred while reading {file_path.name}. Reason: {e_general}"
        )
        return None


def load_json(file_path: Path) -> Any | None:
    """Same encoding fallback as load_csv, for JSON documents."""
    if not file_path.exists():
        logger.info(f"INFO: Dataset not found at {file_path}, skipping.")
        return None

    for encoding in ENCODINGS:
        try:
            with open(file_path, encoding=encoding) as f:
                return json.load(f)
        except UnicodeDecodeError:
            logger.info(
                f"INFO: {encoding} decoding failed for {file_path.name}. Trying the next encoding."
            )
        except json.JSONDecodeError as e:
            logger.error(f"ERROR: {file_path.name} is not valid JSON. Reason: {e}")
            return None
        except OSError as e:
            logger.error(f"ERROR: Could not read {file_path}. Reason: {e}")
            return None

    return None


def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
    # NaN -> None so optional fields validate as missing
    df = df.astype(object).where(pd.notna(df), None)
    return [{str(k): v for k, v in rec.items()} for rec in df.to_dict("records")]


def load_csv_dataset(input_dir: Path) -> dict[str, list] | None:
    """
    Builds the dataset from flat CSV exports. Purchase items live in their own
    file and are attached to their purchase record through receipt_id.
    """
    sellers_df = load_csv(input_dir / settings.SELLERS_CSV)
    products_df = load_csv(input_dir / settings.PRODUCTS_CSV)
    # Keep receipt ids as text so "1" is not read back as 1.0 next to a blank
    records_df = load_csv(input_dir / settings.PURCHASE_RECORDS_CSV, dtype=RECEIPT_ID_DTYPE)
    items_df = load_csv(input_dir / settings.PURCHASE_ITEMS_CSV, dtype=RECEIPT_ID_DTYPE)

    if sellers_df is None or products_df is None or records_df is None:
        return None

    items_by_receipt: dict[str, list[dict[str, Any]]] = {}
    if items_df is not None:
        for item in _records(items_df):
            receipt_id = item.pop("receipt_id", None)
            if receipt_id is None:
                logger.warning("  > ⚠️  Skipping a purchase item without a receipt_id.")
                continue
            items_by_receipt.setdefault(receipt_id, []).append(item)

    purchase_records = []
    for record in _records(records_df):
        receipt_id = record.get("receipt_id")
        record["items"] = items_by_receipt.get(receipt_id, []) if receipt_id is not None else []
        purchase_records.append(record)

    return {
        "sellers": _records(sellers_df),
        "products": _records(products_df),
        "purchase_records": purchase_records,
    }


def load_dataset(
    input_dir: Path = settings.INPUT_DIR, filename: str = settings.DATASET_FILENAME
) -> dict[str, Any] | None:
    """Loads the JSON dataset, falling back to the CSV exports when it is absent."""
    json_path = input_dir / filename
    if json_path.exists():
        data = load_json(json_path)
        if data is not None:
            logger.info(f"  > Found: {json_path.name}")
        return data

    logger.info(f"  > {json_path.name} not found. Looking for CSV exports in {input_dir}.")
    return load_csv_dataset(input_dir)
