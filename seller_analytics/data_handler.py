import json
import logging
from pathlib import Path
from typing import Any, Optional

import pandas as pd
import requests

from . import settings
from . import utils
from .schemas import SellerReport, TopProduct

logger = logging.getLogger(__name__)


def format_top_products(top_products: list[TopProduct]) -> str:
    """Flattens top products into one CSV cell, e.g. 'SKU_001×12; SKU_007×9'."""
    return "; ".join(f"{p.sku}×{p.quantity}" for p in top_products)


def report_to_frame(rows: list[SellerReport]) -> pd.DataFrame:
    """One row per seller, with the model aliases as column headers."""
    columns = [info.alias for info in SellerReport.model_fields.values()]
    records = []
    for row in rows:
        record = row.model_dump(by_alias=True)
        record["Top Products"] = format_top_products(row.top_products)
        records.append(record)
    return pd.DataFrame(records, columns=columns)


def save_outputs(rows: list[SellerReport], filename_base: str) -> dict[str, Path]:
    """Saves the report to CSV and conditionally to JSON, with dated filenames."""
    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()
    saved: dict[str, Path] = {}

    csv_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.csv"
    report_to_frame(rows).to_csv(csv_path, index=False)
    logger.info(f"✅ Seller report saved to: {csv_path}")
    saved["csv"] = csv_path

    if settings.SAVE_JSON_OUTPUT:
        json_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.json"
        with open(json_path, "w", encoding="utf-8") as f:
            json_data = [row.model_dump(mode="json") for row in rows]
            json.dump(json_data, f, indent=2, ensure_ascii=False)
        logger.info(f"✅ JSON output saved to: {json_path}")
        saved["json"] = json_path
    else:
        logger.info("INFO: Skipping JSON file save as per configuration.")

    return saved


def post_to_webhook(
    validated_data: list[SellerReport],
    metadata: Optional[dict[str, Any]] = None,
    report_type: str = "seller",
) -> bool:
    """
    Posts the report rows and run metadata to the webhook.
    Network failures are logged, not raised. Returns True on success.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting {report_type} report to webhook: {settings.WEBHOOK_URL}")

    payload = {
        "reportType": report_type,
        "reportData": [row.model_dump(mode="json") for row in validated_data],
        "metadata": metadata or {},
    }

    try:
        response = requests.post(settings.WEBHOOK_URL, json=payload, timeout=15)
        response.raise_for_status()
        logger.info("✅ Report successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False
