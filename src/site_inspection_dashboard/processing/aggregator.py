"""Fold inspection records into dashboard statistics and drill-down rows."""

import math
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, Sequence, Tuple

from ..config.constants import (
    AGE_BAND_LABELS_PT,
    ASSUMED_LOAD_CURRENT_A,
    COLOR_DANGER,
    COLOR_INFO,
    COLOR_MUTED,
    COLOR_PRIMARY,
    COLOR_PURPLE,
    COLOR_SUCCESS,
    COLOR_WARNING,
    DAILY_WINDOW_DAYS,
    MONTH_ABBREVIATIONS_PT,
    MONTHLY_WINDOW_MONTHS,
    REFERENCE_YEAR,
    STATE_BULGING,
    STATE_CRACKED,
    STATE_LEAKING,
    STATE_NO_CHARGE,
)
from ..models.derived import (
    ACInfo,
    AutonomyTier,
    BatteryInfo,
    CabinetInfo,
    ChemistryClass,
    ObsolescenceTier,
    RollupObsolescenceTier,
    SiteInfo,
)
from ..models.filters import DashboardFilters
from ..models.inspection import Cabinet, ClimatizationType, EquipmentStatus, InspectionRecord
from ..models.result import AggregationResult
from ..models.stats import (
    AutonomyRiskStats,
    BatteryStateHistogram,
    ChartSlice,
    DailyCount,
    DailyRegionCount,
    DailyTechnicianCount,
    MonthlyCount,
    ObsolescenceRollupStats,
    OverviewStats,
    PanelStats,
    RegionCount,
    RegionDistribution,
    ReplacementStats,
    TechnicianRanking,
    TierHistogram,
)
from ..utils.dates import age_years
from ..utils.logger import get_logger
from .filters import apply_filters, apply_status_filter
from .risk import (
    autonomy_hours,
    autonomy_tier,
    classify_chemistry,
    obsolescence_tier,
    parse_capacity_ah,
    requires_replacement,
    rollup_obsolescence,
    unified_age_band,
    worst_autonomy,
    worst_obsolescence,
    worst_rollup_obsolescence,
)

logger = get_logger(__name__)

UNKNOWN = "N/A"


def percent(part: int, total: int) -> int:
    """Whole percentage rounded half up; 0 for an empty population."""
    if total <= 0:
        return 0
    return int(math.floor(part * 100 / total + 0.5))


def _normalize_status(status: str | None) -> str:
    """OK / NOK as reported, anything else is NA."""
    value = (status or "").strip().upper()
    if value in (EquipmentStatus.OK.value, EquipmentStatus.NOK.value):
        return value
    return EquipmentStatus.NA.value


def _normalize_battery_state(state: str | None) -> str:
    """Uninformed states default to OK; anything captured, NA included, is kept as typed."""
    value = (state or "").strip()
    if not value or value.upper() == "OK":
        return "OK"
    return value


def _is_problem_status(status: str | None) -> bool:
    """Housekeeping/grounding flag a problem only when informed and not OK."""
    value = (status or "").strip().upper()
    return bool(value) and value not in ("OK", "NA")


def _region_counts(regions: Iterable[str]) -> list[RegionCount]:
    counts = Counter(regions)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [RegionCount(uf=uf, count=count) for uf, count in ranked]


def _slices(entries: Iterable[Tuple[str, int, str]]) -> list[ChartSlice]:
    """Chart slices with empty entries dropped."""
    return [ChartSlice(name=name, value=value, color=color) for name, value, color in entries if value > 0]


class StatsAggregator:
    """
    Computes every panel statistic from a record collection.

    The instance only holds configuration; each ``aggregate`` call rebuilds
    all derived rows from scratch, so calls are independent and repeatable.
    """

    def __init__(
        self,
        reference_year: int = REFERENCE_YEAR,
        load_current_a: float = ASSUMED_LOAD_CURRENT_A,
        daily_window_days: int = DAILY_WINDOW_DAYS,
        monthly_window_months: int = MONTHLY_WINDOW_MONTHS,
    ):
        """
        Initialize the aggregator.

        Args:
            reference_year: Year battery ages are measured against
            load_current_a: Assumed cabinet load used to turn Ah into hours
            daily_window_days: Calendar days covered by the daily series
            monthly_window_months: Months kept in the monthly series
        """
        self.reference_year = reference_year
        self.load_current_a = load_current_a
        self.daily_window_days = daily_window_days
        self.monthly_window_months = monthly_window_months

    def aggregate(
        self, records: Sequence[InspectionRecord], filters: DashboardFilters | None = None
    ) -> AggregationResult:
        """
        Run one aggregation pass.

        Args:
            records: Normalized inspection records
            filters: Dashboard filters; defaults to no filtering

        Returns:
            Statistics over the filtered records plus status-filtered row lists
        """
        filters = filters or DashboardFilters()
        filtered = apply_filters(records, filters)
        logger.info(f"Aggregating {len(filtered)} of {len(records)} records")

        sites: list[SiteInfo] = []
        batteries: list[BatteryInfo] = []
        acs: list[ACInfo] = []
        cabinets: list[CabinetInfo] = []

        for record in filtered:
            site, site_batteries, site_acs, site_cabinets = self._expand_record(record)
            sites.append(site)
            batteries.extend(site_batteries)
            acs.extend(site_acs)
            cabinets.extend(site_cabinets)

        stats = self._build_stats(filtered, sites, batteries, acs, cabinets)

        final_sites, final_batteries, final_acs = apply_status_filter(sites, batteries, acs, filters.status)

        logger.info(
            f"Result: {stats.total_sites} sites ({stats.sites_nok} with problems), "
            f"{stats.total_batteries} batteries, {stats.total_acs} ACs, {len(cabinets)} cabinets"
        )

        return AggregationResult(
            stats=stats,
            sites=final_sites,
            batteries=final_batteries,
            acs=final_acs,
            cabinets=cabinets,
        )

    # ------------------------------------------------------------------
    # Per-record expansion
    # ------------------------------------------------------------------

    def _expand_record(
        self, record: InspectionRecord
    ) -> Tuple[SiteInfo, list[BatteryInfo], list[ACInfo], list[CabinetInfo]]:
        uf = record.state_uf or UNKNOWN
        batteries: list[BatteryInfo] = []
        acs: list[ACInfo] = []
        cabinets: list[CabinetInfo] = []
        climatization_issues = 0

        for cabinet in record.declared_cabinets():
            cabinet_info, cabinet_batteries = self._expand_cabinet(record, cabinet, uf)
            cabinets.append(cabinet_info)
            batteries.extend(cabinet_batteries)

            for unit in cabinet.populated_ac_units():
                acs.append(
                    ACInfo(
                        site_code=record.site_code,
                        uf=uf,
                        cabinet=cabinet.index,
                        unit=unit.index,
                        model=unit.model,
                        status=_normalize_status(unit.status),
                    )
                )

            if _normalize_status(cabinet.fan_status) == EquipmentStatus.NOK.value:
                climatization_issues += 1
            if _normalize_status(cabinet.plc_status) == EquipmentStatus.NOK.value:
                climatization_issues += 1

        battery_issues = sum(1 for b in batteries if not b.is_ok)
        ac_issues = sum(1 for a in acs if a.status == EquipmentStatus.NOK.value)
        has_problems = (
            battery_issues > 0
            or ac_issues > 0
            or _is_problem_status(record.housekeeping_status)
            or _is_problem_status(record.grounding_status)
        )

        site = SiteInfo(
            id=record.id,
            site_code=record.site_code,
            uf=uf,
            technician=record.technician_name or UNKNOWN,
            technician_id=record.technician_key,
            date=record.created_date,
            time=record.created_time,
            total_cabinets=record.total_cabinets,
            has_problems=has_problems,
            gmg_exists=record.gmg_exists,
            battery_issues=battery_issues,
            ac_issues=ac_issues,
            climatization_issues=climatization_issues,
            housekeeping_ok=record.housekeeping_ok,
            grounding_ok=record.grounding_ok,
            autonomy_tier=worst_autonomy(c.autonomy_tier for c in cabinets),
            obsolescence_tier=worst_rollup_obsolescence(c.obsolescence_tier for c in cabinets),
        )
        return site, batteries, acs, cabinets

    def _expand_cabinet(
        self, record: InspectionRecord, cabinet: Cabinet, uf: str
    ) -> Tuple[CabinetInfo, list[BatteryInfo]]:
        banks = cabinet.populated_banks()

        classified = []
        capacities = []
        for bank in banks:
            age = age_years(bank.manufacture_date, self.reference_year)
            chemistry_class = classify_chemistry(bank.chemistry)
            classified.append(
                (bank, age, chemistry_class, obsolescence_tier(age, chemistry_class), unified_age_band(age))
            )
            capacity = parse_capacity_ah(bank.capacity)
            if capacity is None:
                logger.debug(
                    f"Site {record.site_code} cabinet {cabinet.index} bank {bank.index}: "
                    f"capacity {bank.capacity!r} not informed, left out of autonomy"
                )
            else:
                capacities.append(capacity)

        total_capacity = sum(capacities)
        hours = autonomy_hours(total_capacity, self.load_current_a)
        # Without any informed capacity the cabinet is not rated, never critico
        cabinet_autonomy = autonomy_tier(hours, record.gmg_exists) if capacities else None

        if banks:
            worst_band = worst_obsolescence(band for *_, band in classified)
            cabinet_obsolescence = rollup_obsolescence(worst_band)
        else:
            logger.debug(f"Site {record.site_code} cabinet {cabinet.index} has no battery bank")
            cabinet_obsolescence = RollupObsolescenceTier.SEM_BANCO

        batteries = [
            BatteryInfo(
                site_code=record.site_code,
                uf=uf,
                cabinet=cabinet.index,
                bank=bank.index,
                chemistry=bank.chemistry,
                chemistry_class=chemistry_class,
                manufacturer=bank.manufacturer,
                capacity=bank.capacity,
                manufacture_date=bank.manufacture_date,
                state=_normalize_battery_state(bank.state),
                age_years=age,
                obsolescence_tier=tier,
                age_band=band,
                autonomy_tier=cabinet_autonomy,
            )
            for bank, age, chemistry_class, tier, band in classified
        ]

        chemistry_classes = list(dict.fromkeys(c for _, _, c, _, _ in classified))
        cabinet_info = CabinetInfo(
            site_code=record.site_code,
            uf=uf,
            cabinet=cabinet.index,
            gmg_exists=record.gmg_exists,
            total_batteries=len(batteries),
            total_capacity_ah=total_capacity,
            autonomy_hours=hours,
            autonomy_tier=cabinet_autonomy,
            obsolescence_tier=cabinet_obsolescence,
            chemistry_classes=chemistry_classes,
            climatization_type=cabinet.climatization_type,
            fan_status=cabinet.fan_status,
            plc_status=cabinet.plc_status,
            alarm_status=cabinet.alarm_status,
        )
        return cabinet_info, batteries

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def _build_stats(
        self,
        records: list[InspectionRecord],
        sites: list[SiteInfo],
        batteries: list[BatteryInfo],
        acs: list[ACInfo],
        cabinets: list[CabinetInfo],
    ) -> PanelStats:
        total_sites = len(sites)
        sites_nok = sum(1 for s in sites if s.has_problems)
        sites_ok = total_sites - sites_nok
        percent_ok = percent(sites_ok, total_sites)

        acs_ok = sum(1 for a in acs if a.status == EquipmentStatus.OK.value)
        acs_nok = sum(1 for a in acs if a.status == EquipmentStatus.NOK.value)
        sites_with_gmg = sum(1 for r in records if r.gmg_exists)
        housekeeping_ok = sum(1 for r in records if r.housekeeping_ok)
        grounding_ok = sum(1 for r in records if r.grounding_ok)
        fiber_protected = sum(1 for r in records if (r.fiber_protection or "").upper() == "SIM")

        batteries_ok = sum(1 for b in batteries if b.is_ok)
        battery_states = self._battery_states(batteries)
        battery_ages = TierHistogram(**Counter(b.age_band.value for b in batteries))
        obsolescence_histogram = TierHistogram(**Counter(b.obsolescence_tier.value for b in batteries))

        ranking, average_per_technician = self._technician_ranking(records)
        lead_acid = [b for b in batteries if b.chemistry_class == ChemistryClass.CHUMBO]
        lithium = [b for b in batteries if b.chemistry_class == ChemistryClass.LITIO]
        to_replace = [b for b in batteries if requires_replacement(b)]

        stats = PanelStats(
            total_sites=total_sites,
            sites_ok=sites_ok,
            sites_nok=sites_nok,
            percent_ok=percent_ok,
            monthly_visits=self._monthly_visits(records),
            uf_distribution=self._uf_distribution(sites),
            total_acs=len(acs),
            acs_ok=acs_ok,
            acs_nok=acs_nok,
            sites_with_gmg=sites_with_gmg,
            sites_without_gmg=total_sites - sites_with_gmg,
            energy_status=_slices(
                [
                    ("Com GMG", sites_with_gmg, COLOR_SUCCESS),
                    ("Sem GMG", total_sites - sites_with_gmg, COLOR_WARNING),
                ]
            ),
            housekeeping_ok=housekeeping_ok,
            housekeeping_total=total_sites,
            grounding_ok=grounding_ok,
            fiber_protected=fiber_protected,
            total_batteries=len(batteries),
            batteries_ok=batteries_ok,
            batteries_nok=len(batteries) - batteries_ok,
            batteries_over_5_years=battery_ages.warning + battery_ages.critical,
            batteries_over_8_years=battery_ages.critical,
            battery_states=battery_states,
            battery_ages=battery_ages,
            obsolescence_histogram=obsolescence_histogram,
            battery_state_chart=_slices(
                [
                    ("OK", battery_states.good, COLOR_SUCCESS),
                    ("Estufada", battery_states.bulging, COLOR_WARNING),
                    ("Vazando", battery_states.leaking, COLOR_INFO),
                    ("Trincada", battery_states.cracked, COLOR_DANGER),
                    ("Sem Carga", battery_states.no_charge, COLOR_PURPLE),
                ]
            ),
            battery_age_chart=_slices(
                [
                    (AGE_BAND_LABELS_PT[ObsolescenceTier.OK], battery_ages.ok, COLOR_SUCCESS),
                    (AGE_BAND_LABELS_PT[ObsolescenceTier.WARNING], battery_ages.warning, COLOR_WARNING),
                    (AGE_BAND_LABELS_PT[ObsolescenceTier.CRITICAL], battery_ages.critical, COLOR_DANGER),
                ]
            ),
            autonomy_risk=self._autonomy_rollup(sites, cabinets),
            obsolescence=self._obsolescence_rollup(sites, cabinets),
            technician_ranking=ranking,
            average_per_technician=average_per_technician,
            lead_acid_total=len(lead_acid),
            lead_acid_by_uf=_region_counts(b.uf for b in lead_acid),
            lithium_total=len(lithium),
            lithium_by_uf=_region_counts(b.uf for b in lithium),
            replacement=ReplacementStats(
                total=len(to_replace),
                by_uf=_region_counts(b.uf for b in to_replace),
            ),
        )

        self._fill_daily_visits(stats, records)
        self._fill_climatization(stats, cabinets)

        stats.overview = OverviewStats(
            total_sites=total_sites,
            sites_ok=sites_ok,
            sites_nok=sites_nok,
            percent_ok=percent_ok,
            total_batteries=len(batteries),
            batteries_ok=batteries_ok,
            batteries_critical=obsolescence_histogram.critical,
            total_acs=len(acs),
            acs_ok=acs_ok,
            acs_nok=acs_nok,
            sites_with_gmg=sites_with_gmg,
            housekeeping_ok_count=housekeeping_ok,
            last_update=self._last_update(records),
        )
        return stats

    @staticmethod
    def _battery_states(batteries: list[BatteryInfo]) -> BatteryStateHistogram:
        histogram = BatteryStateHistogram()
        for battery in batteries:
            if battery.is_ok:
                histogram.good += 1
                continue
            lowered = battery.state.lower()
            if STATE_BULGING in lowered:
                histogram.bulging += 1
            if STATE_LEAKING in lowered:
                histogram.leaking += 1
            if STATE_CRACKED in lowered:
                histogram.cracked += 1
            if STATE_NO_CHARGE in lowered:
                histogram.no_charge += 1
        return histogram

    @staticmethod
    def _uf_distribution(sites: list[SiteInfo]) -> list[RegionDistribution]:
        buckets: Dict[str, RegionDistribution] = {}
        for site in sites:
            bucket = buckets.setdefault(site.uf, RegionDistribution(name=site.uf, count=0, ok=0, nok=0))
            bucket.count += 1
            if site.has_problems:
                bucket.nok += 1
            else:
                bucket.ok += 1
        return sorted(buckets.values(), key=lambda b: b.count, reverse=True)

    def _monthly_visits(self, records: list[InspectionRecord]) -> list[MonthlyCount]:
        months = Counter((r.created_at.year, r.created_at.month) for r in records if r.created_at is not None)
        ordered = sorted(months.items())[-self.monthly_window_months:] if self.monthly_window_months > 0 else []
        return [
            MonthlyCount(month=f"{MONTH_ABBREVIATIONS_PT[month - 1]}/{year % 100:02d}", count=count)
            for (year, month), count in ordered
        ]

    def _fill_daily_visits(self, stats: PanelStats, records: list[InspectionRecord]) -> None:
        """Daily series over the window ending on the latest visit, sorted by real date."""
        dated = [r for r in records if r.created_at is not None]
        if not dated or self.daily_window_days <= 0:
            return

        latest = max(r.created_at.date() for r in dated)
        window_start = latest - timedelta(days=self.daily_window_days - 1)
        in_window = [r for r in dated if window_start <= r.created_at.date() <= latest]

        def label(day: date) -> str:
            return day.strftime("%d/%m")

        per_day = Counter(r.created_at.date() for r in in_window)
        stats.daily_visits = [DailyCount(day=label(day), count=count) for day, count in sorted(per_day.items())]

        names: Dict[str, str] = {}
        per_technician: Counter = Counter()
        for r in in_window:
            names.setdefault(r.technician_key, r.technician_name or UNKNOWN)
            per_technician[(r.created_at.date(), r.technician_key)] += 1
        stats.daily_visits_by_technician = [
            DailyTechnicianCount(day=label(day), technician=names[key], technician_id=key, count=count)
            for (day, key), count in sorted(per_technician.items(), key=lambda item: item[0][0])
        ]

        per_region = Counter((r.created_at.date(), r.state_uf or UNKNOWN) for r in in_window)
        stats.daily_visits_by_uf = [
            DailyRegionCount(day=label(day), uf=uf, count=count)
            for (day, uf), count in sorted(per_region.items(), key=lambda item: item[0][0])
        ]

    @staticmethod
    def _technician_ranking(records: list[InspectionRecord]) -> Tuple[list[TechnicianRanking], float]:
        """Visits per technician id, most active first; ties keep first-seen order."""
        names: Dict[str, str] = {}
        visits: Counter = Counter()
        regions: Dict[str, Counter] = {}

        for record in records:
            key = record.technician_key
            names.setdefault(key, record.technician_name or UNKNOWN)
            visits[key] += 1
            regions.setdefault(key, Counter())[record.state_uf or UNKNOWN] += 1

        ranking = [
            TechnicianRanking(
                id=key,
                name=names[key],
                count=count,
                # max() keeps the first-encountered region on ties
                main_uf=max(regions[key], key=regions[key].__getitem__),
            )
            for key, count in visits.items()
        ]
        ranking.sort(key=lambda t: t.count, reverse=True)

        average = len(records) / len(visits) if visits else 0.0
        return ranking, average

    @staticmethod
    def _autonomy_rollup(sites: list[SiteInfo], cabinets: list[CabinetInfo]) -> AutonomyRiskStats:
        per_cabinet = Counter(c.autonomy_tier for c in cabinets)
        per_site = Counter(s.autonomy_tier for s in sites)
        return AutonomyRiskStats(
            gabinetes_ok=per_cabinet[AutonomyTier.OK],
            gabinetes_medio_risco=per_cabinet[AutonomyTier.MEDIO_RISCO],
            gabinetes_alto_risco=per_cabinet[AutonomyTier.ALTO_RISCO],
            gabinetes_critico=per_cabinet[AutonomyTier.CRITICO],
            gabinetes_sem_banco=per_cabinet[None],
            sites_ok=per_site[AutonomyTier.OK],
            sites_medio_risco=per_site[AutonomyTier.MEDIO_RISCO],
            sites_alto_risco=per_site[AutonomyTier.ALTO_RISCO],
            sites_critico=per_site[AutonomyTier.CRITICO],
            sites_sem_banco=per_site[None],
        )

    @staticmethod
    def _obsolescence_rollup(sites: list[SiteInfo], cabinets: list[CabinetInfo]) -> ObsolescenceRollupStats:
        per_cabinet = Counter(c.obsolescence_tier for c in cabinets)
        per_site = Counter(s.obsolescence_tier for s in sites)
        return ObsolescenceRollupStats(
            gabinetes_ok=per_cabinet[RollupObsolescenceTier.OK],
            gabinetes_medio_risco=per_cabinet[RollupObsolescenceTier.MEDIO_RISCO],
            gabinetes_alto_risco=per_cabinet[RollupObsolescenceTier.ALTO_RISCO],
            gabinetes_sem_banco=per_cabinet[RollupObsolescenceTier.SEM_BANCO],
            sites_ok=per_site[RollupObsolescenceTier.OK],
            sites_medio_risco=per_site[RollupObsolescenceTier.MEDIO_RISCO],
            sites_alto_risco=per_site[RollupObsolescenceTier.ALTO_RISCO],
            sites_sem_banco=per_site[RollupObsolescenceTier.SEM_BANCO],
        )

    @staticmethod
    def _fill_climatization(stats: PanelStats, cabinets: list[CabinetInfo]) -> None:
        for cabinet in cabinets:
            kind = (cabinet.climatization_type or "").upper()
            if kind:
                if ClimatizationType.AIR_CONDITIONER.value in kind:
                    stats.ac_cabinets += 1
                elif ClimatizationType.FAN.value in kind:
                    stats.fan_cabinets += 1
                else:
                    stats.na_cabinets += 1

            fan = _normalize_status(cabinet.fan_status)
            if fan == EquipmentStatus.OK.value:
                stats.fan_ok += 1
            elif fan == EquipmentStatus.NOK.value:
                stats.fan_nok += 1

            plc = _normalize_status(cabinet.plc_status)
            if plc == EquipmentStatus.OK.value:
                stats.plc_ok += 1
            elif plc == EquipmentStatus.NOK.value:
                stats.plc_nok += 1

        stats.climatization_total = stats.ac_cabinets + stats.fan_cabinets + stats.na_cabinets
        stats.climatization_status = _slices(
            [
                ("Ar Condicionado", stats.ac_cabinets, COLOR_PRIMARY),
                ("Ventilador", stats.fan_cabinets, COLOR_PURPLE),
                ("N/A", stats.na_cabinets, COLOR_MUTED),
            ]
        )

    @staticmethod
    def _last_update(records: list[InspectionRecord]) -> str | None:
        stamps = [r.created_at for r in records if r.created_at is not None]
        if not stamps:
            return None
        return max(stamps).isoformat()


def aggregate(
    records: Sequence[InspectionRecord],
    filters: DashboardFilters | None = None,
    reference_year: int = REFERENCE_YEAR,
    load_current_a: float = ASSUMED_LOAD_CURRENT_A,
) -> AggregationResult:
    """Convenience wrapper: one pass with a throwaway ``StatsAggregator``."""
    return StatsAggregator(reference_year=reference_year, load_current_a=load_current_a).aggregate(records, filters)
