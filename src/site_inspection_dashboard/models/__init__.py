"""Data models for the site inspection dashboard."""

from .inspection import (
    ClimatizationType,
    EquipmentStatus,
    BatteryBank,
    ACUnit,
    Cabinet,
    InspectionRecord,
)
from .derived import (
    ObsolescenceTier,
    AutonomyTier,
    RollupObsolescenceTier,
    ChemistryClass,
    BatteryInfo,
    ACInfo,
    CabinetInfo,
    SiteInfo,
)
from .filters import DashboardFilters, DateRange, StatusFilter
from .stats import PanelStats, OverviewStats, AutonomyRiskStats, ObsolescenceRollupStats
from .result import AggregationResult

__all__ = [
    "ClimatizationType",
    "EquipmentStatus",
    "BatteryBank",
    "ACUnit",
    "Cabinet",
    "InspectionRecord",
    "ObsolescenceTier",
    "AutonomyTier",
    "RollupObsolescenceTier",
    "ChemistryClass",
    "BatteryInfo",
    "ACInfo",
    "CabinetInfo",
    "SiteInfo",
    "DashboardFilters",
    "DateRange",
    "StatusFilter",
    "PanelStats",
    "OverviewStats",
    "AutonomyRiskStats",
    "ObsolescenceRollupStats",
    "AggregationResult",
]
