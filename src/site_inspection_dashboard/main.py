"""Command-line entrypoint: aggregate a reports export and write dashboard files."""

import sys
import time

from . import __version__
from .config import settings
from .io import load_records
from .models.filters import DashboardFilters, DateRange, StatusFilter
from .processing import DrillDownProjector, StatsAggregator
from .report import export_drilldown_csv, export_stats_json
from .utils import setup_logging, get_logger
from .utils.exceptions import ProcessingError

logger = get_logger(__name__)


def filters_from_settings() -> DashboardFilters:
    """Build the dashboard filters from the SITEINSP_FILTER_* settings."""
    return DashboardFilters(
        date_range=DateRange(start=settings.filter_date_from, end=settings.filter_date_to),
        technician=settings.filter_technician,
        state_uf=settings.filter_state_uf,
        status=StatusFilter(settings.filter_status),
        site_type=settings.filter_site_type,
    )


def main() -> int:
    """
    Run one aggregation over the configured reports file.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    setup_logging(settings.log_level, json_format=settings.log_json)
    logger.info("=" * 80)
    logger.info(f"Starting Site Inspection Dashboard v{__version__}")
    logger.info(f"Input: {settings.input_path}, output: {settings.output_dir}")
    logger.info("=" * 80)

    start_time = time.time()

    try:
        # ===== STEP 1: Load records =====
        logger.info("STEP 1: Loading inspection records")
        records = load_records(settings.input_path)

        # ===== STEP 2: Aggregate =====
        logger.info("STEP 2: Aggregating statistics")
        filters = filters_from_settings()
        aggregator = StatsAggregator(
            reference_year=settings.reference_year,
            load_current_a=settings.assumed_load_current_a,
            daily_window_days=settings.daily_window_days,
            monthly_window_months=settings.monthly_window_months,
        )
        result = aggregator.aggregate(records, filters)

        # ===== STEP 3: Export =====
        logger.info("STEP 3: Exporting statistics and drill-downs")
        output_dir = settings.output_dir
        export_stats_json(result, output_dir / "stats.json")

        projector = DrillDownProjector(result)
        for selector in settings.drilldown_exports:
            drilldown = projector.project(selector)
            filename = selector.replace(":", "_") + ".csv"
            export_drilldown_csv(drilldown, output_dir / filename)

        duration = time.time() - start_time
        logger.info("=" * 80)
        logger.info(
            f"Done in {duration:.1f}s: {result.stats.total_sites} sites, "
            f"{result.stats.percent_ok}% OK, {result.stats.replacement.total} batteries to replace"
        )
        logger.info("=" * 80)
        return 0

    except ProcessingError as e:
        logger.error(f"Processing failed: {e}", exc_info=True)
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
