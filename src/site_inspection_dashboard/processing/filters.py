"""Pre-aggregation record filters and the post-aggregation status filter."""

from typing import Sequence

from ..models.derived import ACInfo, BatteryInfo, SiteInfo
from ..models.filters import ALL, DashboardFilters, StatusFilter
from ..models.inspection import InspectionRecord
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _matches_technician(record: InspectionRecord, needle: str) -> bool:
    return needle in (record.technician_name or "").lower()


def _matches_site_type(record: InspectionRecord, site_type: str) -> bool:
    wanted = site_type.upper()
    return any(
        wanted == tech.upper()
        for cabinet in record.declared_cabinets()
        for tech in cabinet.transport_technologies
    )


def apply_filters(records: Sequence[InspectionRecord], filters: DashboardFilters) -> list[InspectionRecord]:
    """
    Keep the records that satisfy every active filter (AND semantics).

    Args:
        records: Full record collection
        filters: Technician substring (case-insensitive), exact region,
            inclusive visit-date range and transport technology

    Returns:
        New list with the surviving records, original order preserved
    """
    filtered = list(records)

    technician = filters.technician.strip().lower()
    if technician:
        filtered = [r for r in filtered if _matches_technician(r, technician)]

    if filters.state_uf and filters.state_uf != ALL:
        filtered = [r for r in filtered if r.state_uf == filters.state_uf]

    start, end = filters.date_range.start, filters.date_range.end
    if start is not None:
        # Records without a valid timestamp cannot satisfy a date bound
        filtered = [r for r in filtered if r.created_at is not None and r.created_at.date() >= start]
    if end is not None:
        filtered = [r for r in filtered if r.created_at is not None and r.created_at.date() <= end]

    if filters.site_type and filters.site_type != ALL:
        filtered = [r for r in filtered if _matches_site_type(r, filters.site_type)]

    logger.debug(f"Filters kept {len(filtered)} of {len(records)} records")
    return filtered


def apply_status_filter(
    sites: list[SiteInfo],
    batteries: list[BatteryInfo],
    acs: list[ACInfo],
    status: StatusFilter,
) -> tuple[list[SiteInfo], list[BatteryInfo], list[ACInfo]]:
    """
    Narrow the drill-down rows by status.

    Each list uses its own predicate: ``has_problems`` for sites, physical
    state for batteries and operating status for ACs.
    """
    if status == StatusFilter.OK:
        return (
            [s for s in sites if not s.has_problems],
            [b for b in batteries if b.is_ok],
            [a for a in acs if a.status == "OK"],
        )
    if status == StatusFilter.NOK:
        return (
            [s for s in sites if s.has_problems],
            [b for b in batteries if not b.is_ok],
            [a for a in acs if a.status == "NOK"],
        )
    return list(sites), list(batteries), list(acs)
