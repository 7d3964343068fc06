"""Aggregate statistics consumed by the dashboard panels."""

from pydantic import BaseModel, Field


class ChartSlice(BaseModel):
    """One slice of a pie/donut chart."""

    name: str
    value: int
    color: str


class MonthlyCount(BaseModel):
    month: str = Field(description="pt-BR label, e.g. 'jan/26'")
    count: int


class DailyCount(BaseModel):
    day: str = Field(description="dd/MM label")
    count: int


class DailyTechnicianCount(BaseModel):
    day: str
    technician: str
    technician_id: str
    count: int


class DailyRegionCount(BaseModel):
    day: str
    uf: str
    count: int


class RegionDistribution(BaseModel):
    """Visits in a region split by site status."""

    name: str
    count: int
    ok: int
    nok: int


class RegionCount(BaseModel):
    uf: str
    count: int


class TechnicianRanking(BaseModel):
    """Visit count of one technician and the region they work most in."""

    id: str
    name: str
    count: int
    main_uf: str


class TierHistogram(BaseModel):
    """Counts of batteries per ok/warning/critical tier."""

    ok: int = 0
    warning: int = 0
    critical: int = 0

    @property
    def total(self) -> int:
        return self.ok + self.warning + self.critical


class BatteryStateHistogram(BaseModel):
    """
    Physical state counts.

    ``good`` counts OK batteries. The defect buckets are matched by substring
    on the free-text state, so one battery may land in several of them.
    """

    good: int = 0
    bulging: int = 0
    leaking: int = 0
    cracked: int = 0
    no_charge: int = 0


class AutonomyRiskStats(BaseModel):
    """Autonomy tiers per cabinet and per site (worst cabinet wins)."""

    gabinetes_ok: int = 0
    gabinetes_medio_risco: int = 0
    gabinetes_alto_risco: int = 0
    gabinetes_critico: int = 0
    gabinetes_sem_banco: int = 0
    sites_ok: int = 0
    sites_medio_risco: int = 0
    sites_alto_risco: int = 0
    sites_critico: int = 0
    sites_sem_banco: int = 0

    @property
    def gabinetes_classified(self) -> int:
        return (
            self.gabinetes_ok
            + self.gabinetes_medio_risco
            + self.gabinetes_alto_risco
            + self.gabinetes_critico
        )

    @property
    def sites_classified(self) -> int:
        return self.sites_ok + self.sites_medio_risco + self.sites_alto_risco + self.sites_critico


class ObsolescenceRollupStats(BaseModel):
    """Unified obsolescence badge per cabinet and per site."""

    gabinetes_ok: int = 0
    gabinetes_medio_risco: int = 0
    gabinetes_alto_risco: int = 0
    gabinetes_sem_banco: int = 0
    sites_ok: int = 0
    sites_medio_risco: int = 0
    sites_alto_risco: int = 0
    sites_sem_banco: int = 0

    @property
    def gabinetes_classified(self) -> int:
        return self.gabinetes_ok + self.gabinetes_medio_risco + self.gabinetes_alto_risco

    @property
    def sites_classified(self) -> int:
        return self.sites_ok + self.sites_medio_risco + self.sites_alto_risco


class ReplacementStats(BaseModel):
    """Batteries that must be replaced (defective or obsolete)."""

    total: int = 0
    by_uf: list[RegionCount] = Field(default_factory=list)


class OverviewStats(BaseModel):
    """Headline numbers for the overview panel."""

    total_sites: int = 0
    sites_ok: int = 0
    sites_nok: int = 0
    percent_ok: int = 0
    total_batteries: int = 0
    batteries_ok: int = 0
    batteries_critical: int = 0
    total_acs: int = 0
    acs_ok: int = 0
    acs_nok: int = 0
    sites_with_gmg: int = 0
    housekeeping_ok_count: int = 0
    last_update: str | None = Field(default=None, description="Latest visit timestamp, ISO-8601")


class PanelStats(BaseModel):
    """Every KPI, series and ranking produced by one aggregation pass."""

    overview: OverviewStats = Field(default_factory=OverviewStats)

    # General / DGOS
    total_sites: int = 0
    sites_ok: int = 0
    sites_nok: int = 0
    percent_ok: int = 0
    monthly_visits: list[MonthlyCount] = Field(default_factory=list)
    daily_visits: list[DailyCount] = Field(default_factory=list)
    daily_visits_by_technician: list[DailyTechnicianCount] = Field(default_factory=list)
    daily_visits_by_uf: list[DailyRegionCount] = Field(default_factory=list)
    uf_distribution: list[RegionDistribution] = Field(default_factory=list)

    # AC / energy
    total_acs: int = 0
    acs_ok: int = 0
    acs_nok: int = 0
    sites_with_gmg: int = 0
    sites_without_gmg: int = 0
    energy_status: list[ChartSlice] = Field(default_factory=list)

    # Housekeeping / tower
    housekeeping_ok: int = 0
    housekeeping_total: int = 0
    grounding_ok: int = 0
    fiber_protected: int = 0
    climatization_status: list[ChartSlice] = Field(default_factory=list)

    # Batteries
    total_batteries: int = 0
    batteries_ok: int = 0
    batteries_nok: int = 0
    batteries_over_5_years: int = 0
    batteries_over_8_years: int = 0
    battery_states: BatteryStateHistogram = Field(default_factory=BatteryStateHistogram)
    battery_ages: TierHistogram = Field(
        default_factory=TierHistogram, description="Unified 5/8-year bands"
    )
    obsolescence_histogram: TierHistogram = Field(
        default_factory=TierHistogram, description="Chemistry-aware tiers"
    )
    battery_state_chart: list[ChartSlice] = Field(default_factory=list)
    battery_age_chart: list[ChartSlice] = Field(default_factory=list)
    autonomy_risk: AutonomyRiskStats = Field(default_factory=AutonomyRiskStats)
    obsolescence: ObsolescenceRollupStats = Field(default_factory=ObsolescenceRollupStats)

    # Climatization
    climatization_total: int = 0
    ac_cabinets: int = 0
    fan_cabinets: int = 0
    na_cabinets: int = 0
    fan_ok: int = 0
    fan_nok: int = 0
    plc_ok: int = 0
    plc_nok: int = 0

    # Productivity
    technician_ranking: list[TechnicianRanking] = Field(default_factory=list)
    average_per_technician: float = 0.0

    # Battery chemistry and replacement
    lead_acid_total: int = 0
    lead_acid_by_uf: list[RegionCount] = Field(default_factory=list)
    lithium_total: int = 0
    lithium_by_uf: list[RegionCount] = Field(default_factory=list)
    replacement: ReplacementStats = Field(default_factory=ReplacementStats)
