import argparse
import logging
from pathlib import Path

from seller_analytics import settings
from seller_analytics.logger import setup_logger
from seller_analytics.pipelines.seller_report import SellerReportPipeline


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Rank sellers by profit and compute their bonuses and top products."
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=settings.INPUT_DIR / settings.DATASET_FILENAME,
        help="JSON dataset with sellers, products and purchase_records "
        "(CSV exports in the same folder are used when it is missing).",
    )
    parser.add_argument(
        "--top",
        type=non_negative_int,
        default=settings.TOP_PRODUCTS_LIMIT,
        help="How many best-selling products to keep per seller.",
    )
    parser.add_argument(
        "--test", action="store_true", help="Test mode: do not post to the webhook."
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def run_process(argv=None) -> int:
    """Main orchestration function to run the seller report."""
    args = parse_args(argv)
    logger = setup_logger(
        "seller_analytics", logging.DEBUG if args.verbose else None
    )
    logger.info("--- Starting Seller Report Process ---")

    pipeline = SellerReportPipeline(
        input_path=args.input, top_limit=args.top, test_mode=args.test
    )
    report = pipeline.run()
    if report is None:
        logger.error("❌ No report was produced.")
        return 1

    logger.info("\n--- Process Finished Successfully ---")
    return 0


if __name__ == "__main__":
    raise SystemExit(run_process())
