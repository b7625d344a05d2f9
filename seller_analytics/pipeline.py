import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from . import data_handler, settings

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for report pipelines.
    Follows an Extract -> Transform -> Load (ETL) pattern.
    """

    def __init__(self, report_type: str, test_mode: bool = False):
        self.report_type = report_type
        self.test_mode = test_mode
        # Run metadata, sent along with the report
        self.status_summary: dict[str, Any] = {}
        self.saved_paths: dict[str, Any] = {}

    def run(self) -> Optional[list[Any]]:
        """
        Orchestrates the pipeline execution. Returns the validated rows, or
        None when there was nothing to report.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if not raw_data:
            logger.warning(f"⚠️ No data extracted for {self.report_type}. Nothing to report.")
            return None

        # --- 2. TRANSFORM ---
        validated_data = self.transform(raw_data)
        if validated_data is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(validated_data)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return validated_data

    @abstractmethod
    def extract(self) -> Any:
        """
        Responsible for finding and reading the input, and returning it raw.
        Should also populate self.status_summary as it goes.
        """
        pass

    @abstractmethod
    def transform(self, raw_data: Any) -> list[Any] | None:
        """
        Responsible for computing the report.
        Returns a list of validated Pydantic models.
        """
        pass

    def load(self, validated_data: list[Any]):
        """
        Saves data to disk and posts to webhook.
        """
        # 1. Print Status Summary
        if self.status_summary:
            logger.info("\n--- Final Status Summary ---")
            for key, value in self.status_summary.items():
                logger.info(f"{key}: {value}")

        # 2. Save Outputs (CSV/JSON)
        if validated_data:
            self.saved_paths = data_handler.save_outputs(
                validated_data, settings.REPORT_FILENAME_BASE
            )
        else:
            logger.warning("No data to save to disk.")

        # 3. Post to Webhook
        if not self.test_mode:
            data_handler.post_to_webhook(
                validated_data=validated_data,
                metadata=self.status_summary,
                report_type=self.report_type,
            )
        else:
            logger.info("🧪 Test Mode: Skipping webhook post.")
