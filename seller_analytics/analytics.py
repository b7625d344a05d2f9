import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from pydantic import ValidationError

from . import settings
from .calculations import (
    BonusCalculator,
    RevenueCalculator,
    calculate_bonus_by_profit,
    calculate_simple_revenue,
    round_currency,
)
from .errors import (
    InvalidConfigurationError,
    InvalidInputDataError,
    MissingCalculatorsError,
)
from .schemas import (
    Product,
    PurchaseRecord,
    SalesDataset,
    Seller,
    SellerReport,
    SellerStat,
    TopProduct,
)

logger = logging.getLogger(__name__)

REQUIRED_COLLECTIONS = ("sellers", "products", "purchase_records")


def validate_input(data: Any) -> SalesDataset:
    """
    Checks that sellers, products and purchase records are all present,
    are sequences and are non-empty, then parses them into models.
    Raises InvalidInputDataError before any processing happens.
    """
    if isinstance(data, SalesDataset):
        data = {name: getattr(data, name) for name in REQUIRED_COLLECTIONS}

    if not isinstance(data, Mapping):
        raise InvalidInputDataError("Invalid input data: expected a mapping of collections")

    for name in REQUIRED_COLLECTIONS:
        collection = data.get(name)
        if not isinstance(collection, Sequence) or isinstance(collection, (str, bytes)):
            raise InvalidInputDataError(
                f"Invalid input data: '{name}' is missing or not a list"
            )
        if len(collection) == 0:
            raise InvalidInputDataError(f"Invalid input data: '{name}' is empty")

    try:
        return SalesDataset.model_validate(
            {name: list(data[name]) for name in REQUIRED_COLLECTIONS}
        )
    except ValidationError as e:
        raise InvalidInputDataError(f"Invalid input data: {e}") from e


def resolve_calculators(
    calculate_revenue: Optional[RevenueCalculator],
    calculate_bonus: Optional[BonusCalculator],
    use_defaults: bool = False,
) -> tuple[RevenueCalculator, BonusCalculator]:
    if use_defaults:
        calculate_revenue = calculate_revenue or calculate_simple_revenue
        calculate_bonus = calculate_bonus or calculate_bonus_by_profit

    if not callable(calculate_revenue) or not callable(calculate_bonus):
        raise MissingCalculatorsError(
            "Missing required calculation functions: both calculate_revenue "
            "and calculate_bonus must be callables"
        )
    return calculate_revenue, calculate_bonus


def validate_top_limit(top_limit: int) -> int:
    if isinstance(top_limit, bool) or not isinstance(top_limit, int) or top_limit < 0:
        raise InvalidConfigurationError(
            f"Invalid top products limit: expected a non-negative integer, got {top_limit!r}"
        )
    return top_limit


# --- Indexer ---


def index_sellers(sellers: Sequence[Seller]) -> dict[str, SellerStat]:
    """Fresh, zeroed SellerStat per seller id, in input order."""
    return {
        seller.id: SellerStat(seller_id=seller.id, name=seller.full_name)
        for seller in sellers
    }


def index_products(products: Sequence[Product]) -> dict[str, Product]:
    return {product.sku: product for product in products}


# --- Aggregator ---


def aggregate_purchases(
    purchase_records: Sequence[PurchaseRecord],
    seller_index: dict[str, SellerStat],
    product_index: dict[str, Product],
    calculate_revenue: RevenueCalculator,
) -> None:
    """
    Accumulates revenue, profit, sales count and units per SKU onto the
    SellerStat objects in seller_index. Records for unknown sellers and items
    for unknown SKUs are skipped without raising.
    """
    skipped_records = 0
    skipped_items = 0

    for record in purchase_records:
        seller = seller_index.get(record.seller_id)
        if seller is None:
            skipped_records += 1
            continue

        seller.sales_count += 1

        for item in record.items:
            product = product_index.get(item.sku)
            if product is None:
                skipped_items += 1
                continue

            revenue = calculate_revenue(item, product)
            cost = product.purchase_price * item.quantity

            seller.revenue += revenue
            seller.profit += revenue - cost
            seller.products_sold[item.sku] = (
                seller.products_sold.get(item.sku, 0) + item.quantity
            )

    if skipped_records:
        logger.debug(f"Skipped {skipped_records} purchase records with an unknown seller.")
    if skipped_items:
        logger.debug(f"Skipped {skipped_items} items with an unknown SKU.")


# --- Ranker / Reporter ---


def build_top_products(
    products_sold: dict[str, int], limit: int = settings.TOP_PRODUCTS_LIMIT
) -> list[TopProduct]:
    """Most sold SKUs first; equal quantities fall back to ascending SKU."""
    validate_top_limit(limit)
    ranked = sorted(products_sold.items(), key=lambda entry: (-entry[1], entry[0]))
    return [TopProduct(sku=sku, quantity=quantity) for sku, quantity in ranked[:limit]]


def rank_sellers(
    seller_stats: Sequence[SellerStat],
    calculate_bonus: BonusCalculator,
    top_limit: int = settings.TOP_PRODUCTS_LIMIT,
) -> list[SellerStat]:
    """
    Orders sellers by profit, highest first, keeping input order on ties,
    then fills in each seller's bonus and top products.
    """
    ranked = sorted(seller_stats, key=lambda stat: stat.profit, reverse=True)
    total = len(ranked)

    for index, seller in enumerate(ranked):
        # The bonus function gets a copy so it cannot alter the totals.
        seller.bonus = calculate_bonus(index, total, seller.model_copy(deep=True))
        seller.top_products = build_top_products(seller.products_sold, top_limit)

    return ranked


def build_report(ranked: Sequence[SellerStat]) -> list[SellerReport]:
    return [
        SellerReport(
            seller_id=seller.seller_id,
            name=seller.name,
            revenue=round_currency(seller.revenue),
            profit=round_currency(seller.profit),
            sales_count=seller.sales_count,
            top_products=seller.top_products,
            bonus=round_currency(seller.bonus),
        )
        for seller in ranked
    ]


def analyze_sales_data(
    data: Union[SalesDataset, Mapping[str, Any]],
    calculate_revenue: Optional[RevenueCalculator] = None,
    calculate_bonus: Optional[BonusCalculator] = None,
    use_defaults: bool = False,
    top_limit: int = settings.TOP_PRODUCTS_LIMIT,
) -> list[SellerReport]:
    """
    Computes the seller report: one row per seller, ordered by profit
    (highest first), with revenue, profit, sales count, bonus and the
    top_limit best-selling SKUs.

    Both calculation functions are required unless use_defaults is set, in
    which case the built-in formulas stand in for whichever one is missing.
    Input and configuration problems raise before any aggregation starts.
    """
    dataset = validate_input(data)
    calculate_revenue, calculate_bonus = resolve_calculators(
        calculate_revenue, calculate_bonus, use_defaults
    )
    top_limit = validate_top_limit(top_limit)

    logger.info(
        f"Analyzing {len(dataset.purchase_records)} purchase records for "
        f"{len(dataset.sellers)} sellers and {len(dataset.products)} products..."
    )

    seller_index = index_sellers(dataset.sellers)
    product_index = index_products(dataset.products)

    aggregate_purchases(
        dataset.purchase_records, seller_index, product_index, calculate_revenue
    )

    ranked = rank_sellers(list(seller_index.values()), calculate_bonus, top_limit)
    report = build_report(ranked)

    logger.info(f"✅ Seller report built ({len(report)} rows).")
    return report
