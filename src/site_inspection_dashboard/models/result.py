"""Output of one aggregation pass."""

from pydantic import BaseModel, Field

from .derived import ACInfo, BatteryInfo, CabinetInfo, SiteInfo
from .stats import PanelStats


class AggregationResult(BaseModel):
    """
    Statistics plus the row lists behind them.

    ``sites``, ``batteries`` and ``acs`` are already narrowed by the status
    filter; ``cabinets`` is always the full list.
    """

    stats: PanelStats
    sites: list[SiteInfo] = Field(default_factory=list)
    batteries: list[BatteryInfo] = Field(default_factory=list)
    acs: list[ACInfo] = Field(default_factory=list)
    cabinets: list[CabinetInfo] = Field(default_factory=list)
