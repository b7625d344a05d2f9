"""Pytest configuration and fixtures."""

import logging

import pytest

from seller_analytics import settings
from seller_analytics.calculations import calculate_simple_revenue


@pytest.fixture
def sales_data():
    """Three sellers, four products, a handful of receipts."""
    return {
        "sellers": [
            {"id": "seller_1", "first_name": "Alexey", "last_name": "Petrov"},
            {"id": "seller_2", "first_name": "Ivan", "last_name": "Smirnov"},
            {"id": "seller_3", "first_name": "Maria", "last_name": "Ivanova"},
        ],
        "products": [
            {"sku": "SKU_001", "name": "Milk", "purchase_price": 10.0},
            {"sku": "SKU_002", "name": "Bread", "purchase_price": 5.0},
            {"sku": "SKU_003", "name": "Cheese", "purchase_price": 20.0},
            {"sku": "SKU_004", "name": "Butter", "purchase_price": 8.0},
        ],
        "purchase_records": [
            {
                "receipt_id": "r1",
                "seller_id": "seller_1",
                "items": [
                    {"sku": "SKU_001", "quantity": 3, "sale_price": 20.0, "discount": 0},
                    {"sku": "SKU_002", "quantity": 1, "sale_price": 10.0, "discount": 10},
                ],
                "total_amount": 69.0,
            },
            {
                "receipt_id": "r2",
                "seller_id": "seller_2",
                "items": [
                    {"sku": "SKU_003", "quantity": 5, "sale_price": 40.0, "discount": 0},
                ],
            },
            {
                "receipt_id": "r3",
                "seller_id": "seller_1",
                "items": [
                    {"sku": "SKU_004", "quantity": 2, "sale_price": 12.0, "discount": 50},
                    {"sku": "SKU_UNKNOWN", "quantity": 7, "sale_price": 99.0, "discount": 0},
                ],
            },
            {
                "receipt_id": "r4",
                "seller_id": "ghost_seller",
                "items": [
                    {"sku": "SKU_001", "quantity": 100, "sale_price": 20.0, "discount": 0},
                ],
            },
        ],
    }


@pytest.fixture
def calculators():
    """Revenue and bonus functions supplied by the caller."""

    def bonus(index, total, seller):
        return seller.profit * (0.15 if index == 0 else 0.0)

    return {"calculate_revenue": calculate_simple_revenue, "calculate_bonus": bonus}


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    """Redirects report outputs into a temporary folder."""
    out = tmp_path / "output"
    monkeypatch.setattr(settings, "OUTPUT_DIR", out)
    monkeypatch.setattr(settings, "WEBHOOK_URL", None)
    return out


@pytest.fixture
def package_logger():
    """Drops any handlers setup_logger attached, so tests do not leak them."""
    logger = logging.getLogger("seller_analytics")
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
