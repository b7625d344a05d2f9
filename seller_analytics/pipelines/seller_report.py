import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional

from seller_analytics import settings, utils
from seller_analytics.analytics import analyze_sales_data
from seller_analytics.calculations import BonusCalculator, RevenueCalculator
from seller_analytics.errors import SalesAnalyticsError
from seller_analytics.pipeline import DataPipeline
from seller_analytics.schemas import SellerReport

logger = logging.getLogger(__name__)


class SellerReportPipeline(DataPipeline):
    def __init__(
        self,
        input_path: Optional[Path] = None,
        calculate_revenue: Optional[RevenueCalculator] = None,
        calculate_bonus: Optional[BonusCalculator] = None,
        use_defaults: Optional[bool] = None,
        top_limit: int = settings.TOP_PRODUCTS_LIMIT,
        test_mode: bool = False,
    ):
        super().__init__("seller", test_mode=test_mode)
        self.system_date = date.today()

        if input_path is None:
            input_path = settings.INPUT_DIR / settings.DATASET_FILENAME
        self.input_path = Path(input_path)

        self.calculate_revenue = calculate_revenue
        self.calculate_bonus = calculate_bonus
        if use_defaults is None:
            use_defaults = settings.USE_DEFAULT_CALCULATORS
        self.use_defaults = use_defaults
        self.top_limit = top_limit

    def extract(self) -> dict[str, Any] | None:
        logger.info("--- Loading Sales Data ---")

        data = utils.load_dataset(self.input_path.parent, self.input_path.name)
        if not data:
            logger.warning(f"  > ⚠️  No dataset found at {self.input_path}. Skipping.")
            return None

        self.status_summary["Run Date"] = self.system_date.isoformat()
        self.status_summary["Source"] = self.input_path.name
        if isinstance(data, dict):
            for name in ("sellers", "products", "purchase_records"):
                collection = data.get(name)
                count = len(collection) if isinstance(collection, list) else 0
                logger.info(f"    - {name}: {count}")
                self.status_summary[name] = count

        return data

    def transform(self, raw_data: dict[str, Any]) -> list[SellerReport] | None:
        logger.info("\n--- Computing Seller Report ---")
        try:
            report = analyze_sales_data(
                raw_data,
                calculate_revenue=self.calculate_revenue,
                calculate_bonus=self.calculate_bonus,
                use_defaults=self.use_defaults,
                top_limit=self.top_limit,
            )
        except SalesAnalyticsError as e:
            logger.error("❌ Seller report could not be computed!")
            logger.error(e)
            return None

        self.status_summary["Sellers Ranked"] = len(report)
        self._log_ranking(report)
        return report

    def _log_ranking(self, report: list[SellerReport]):
        logger.info("\n--- Ranking ---")
        for position, row in enumerate(report, start=1):
            logger.info(
                f"  {position:>3}. {row.name:<30} profit={row.profit:>12.2f} "
                f"revenue={row.revenue:>12.2f} bonus={row.bonus:>10.2f} "
                f"sales={row.sales_count}"
            )
