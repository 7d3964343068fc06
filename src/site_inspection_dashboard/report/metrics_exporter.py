"""Export dashboard statistics to JSON and drill-down rows to CSV."""

import csv
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

from ..config.constants import OBSOLESCENCE_TEXT_PT
from ..io.json_handler import save_json
from ..models.derived import ACInfo, AutonomyTier, BatteryInfo, CabinetInfo, RollupObsolescenceTier, SiteInfo
from ..models.result import AggregationResult
from ..processing.drilldown import ACS, BATTERIES, CABINETS, SITES, DrillDown
from ..processing.risk import requires_replacement
from ..utils.exceptions import ExportError
from ..utils.logger import get_logger

logger = get_logger(__name__)

NA = "N/A"

AUTONOMY_TEXT_PT = {
    AutonomyTier.OK: "OK",
    AutonomyTier.MEDIO_RISCO: "Médio",
    AutonomyTier.ALTO_RISCO: "Alto",
    AutonomyTier.CRITICO: "Crítico",
}

ROLLUP_TEXT_PT = {
    RollupObsolescenceTier.OK: "OK",
    RollupObsolescenceTier.MEDIO_RISCO: "Médio Risco",
    RollupObsolescenceTier.ALTO_RISCO: "Alto Risco",
    RollupObsolescenceTier.SEM_BANCO: "Sem Banco",
}


SITE_COLUMNS = [
    "Código do Site",
    "UF",
    "Técnico",
    "Data",
    "Hora",
    "Total Gabinetes",
    "Status",
    "Possui GMG",
    "Problemas de Bateria",
    "Problemas de AC",
    "Problemas Climatização",
    "Zeladoria OK",
]

BATTERY_COLUMNS = [
    "Código do Site",
    "UF",
    "Gabinete",
    "Banco",
    "Fabricante",
    "Tipo",
    "Capacidade (Ah)",
    "Data Fabricação",
    "Idade (anos)",
    "Estado",
    "Obsolescência",
    "Autonomia",
    "Troca",
]

AC_COLUMNS = ["Código do Site", "UF", "Gabinete", "AC #", "Modelo", "Status"]

CABINET_COLUMNS = [
    "Código do Site",
    "UF",
    "Gabinete",
    "Baterias",
    "Capacidade Total (Ah)",
    "Autonomia (h)",
    "Risco Autonomia",
    "Obsolescência",
    "Possui GMG",
    "Alarme",
]


def _yes_no(flag: bool) -> str:
    return "Sim" if flag else "Não"


def _or_na(value: Any) -> Any:
    return NA if value is None or value == "" else value


def site_row(site: SiteInfo) -> Dict[str, Any]:
    values = [
        site.site_code,
        site.uf,
        site.technician,
        _or_na(site.date),
        _or_na(site.time),
        site.total_cabinets,
        "NOK" if site.has_problems else "OK",
        _yes_no(site.gmg_exists),
        site.battery_issues,
        site.ac_issues,
        site.climatization_issues,
        _yes_no(site.housekeeping_ok),
    ]
    return dict(zip(SITE_COLUMNS, values))


def battery_row(battery: BatteryInfo) -> Dict[str, Any]:
    values = [
        battery.site_code,
        battery.uf,
        f"G{battery.cabinet}",
        battery.bank,
        battery.manufacturer,
        battery.chemistry,
        _or_na(battery.capacity),
        _or_na(battery.manufacture_date),
        battery.age_years if battery.age_years > 0 else NA,
        battery.state,
        OBSOLESCENCE_TEXT_PT[battery.obsolescence_tier],
        AUTONOMY_TEXT_PT.get(battery.autonomy_tier, NA),
        _yes_no(requires_replacement(battery)),
    ]
    return dict(zip(BATTERY_COLUMNS, values))


def ac_row(ac: ACInfo) -> Dict[str, Any]:
    values = [ac.site_code, ac.uf, ac.cabinet, ac.unit, ac.model, ac.status]
    return dict(zip(AC_COLUMNS, values))


def _autonomy_text(cabinet: CabinetInfo) -> str:
    if cabinet.autonomy_tier is not None:
        return AUTONOMY_TEXT_PT[cabinet.autonomy_tier]
    # Banks present but no capacity informed
    return NA if cabinet.has_batteries else ROLLUP_TEXT_PT[RollupObsolescenceTier.SEM_BANCO]


def cabinet_row(cabinet: CabinetInfo) -> Dict[str, Any]:
    values = [
        cabinet.site_code,
        cabinet.uf,
        f"G{cabinet.cabinet}",
        cabinet.total_batteries,
        f"{cabinet.total_capacity_ah:.0f}",
        f"{cabinet.autonomy_hours:.1f}",
        _autonomy_text(cabinet),
        ROLLUP_TEXT_PT[cabinet.obsolescence_tier],
        _yes_no(cabinet.gmg_exists),
        _or_na(cabinet.alarm_status),
    ]
    return dict(zip(CABINET_COLUMNS, values))


ROW_FORMATS: Dict[str, Tuple[list[str], Callable[[Any], Dict[str, Any]]]] = {
    SITES: (SITE_COLUMNS, site_row),
    BATTERIES: (BATTERY_COLUMNS, battery_row),
    ACS: (AC_COLUMNS, ac_row),
    CABINETS: (CABINET_COLUMNS, cabinet_row),
}


def drilldown_rows(drilldown: DrillDown) -> list[Dict[str, Any]]:
    """Rows of a drill-down formatted for spreadsheets (Portuguese headers, N/A for missing)."""
    _, formatter = ROW_FORMATS[drilldown.kind]
    return [formatter(row) for row in drilldown.rows]


def export_stats_json(
    result: AggregationResult,
    output_path: Path,
    include_details: bool = True,
) -> Path:
    """
    Export panel statistics to JSON file.

    Args:
        result: Aggregation pass to export
        output_path: Path to save JSON file
        include_details: If True, include the sites with problems

    Returns:
        Path to saved file

    Raises:
        ExportError: If the file cannot be written
    """
    logger.info(f"Exporting statistics to JSON: {output_path}")

    data: Dict[str, Any] = {
        "export_date": datetime.now(timezone.utc).isoformat(),
        "summary": result.stats.model_dump(mode="json"),
    }

    if include_details:
        data["sites_with_problems"] = [
            {
                "site_code": site.site_code,
                "uf": site.uf,
                "battery_issues": site.battery_issues,
                "ac_issues": site.ac_issues,
                "autonomy_tier": site.autonomy_tier.value if site.autonomy_tier else None,
                "obsolescence_tier": site.obsolescence_tier.value,
            }
            for site in result.sites
            if site.has_problems
        ]

    save_json(data, output_path)
    return output_path


def export_drilldown_csv(drilldown: DrillDown, output_path: Path) -> Path:
    """
    Export drill-down rows to CSV file.

    Args:
        drilldown: Projected rows
        output_path: Path to save CSV file

    Returns:
        Path to saved file

    Raises:
        ExportError: If the file cannot be written
    """
    logger.info(f"Exporting drill-down '{drilldown.title}' ({len(drilldown.rows)} rows) to CSV: {output_path}")

    fieldnames, _ = ROW_FORMATS[drilldown.kind]
    rows = drilldown_rows(drilldown)

    try:
        with open(output_path, "w", newline="", encoding="utf-8") as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)
    except OSError as e:
        raise ExportError(f"Failed to write drill-down to {output_path}: {e}") from e

    logger.info(f"Exported drill-down CSV: {output_path.stat().st_size / 1_000:.1f} KB")
    return output_path
