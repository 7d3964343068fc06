"""Convert flat report rows (``gab{g}_bat{b}_*`` columns) into nested inspection records."""

from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from ..config.constants import MAX_AC_UNITS, MAX_BATTERY_BANKS, MAX_CABINETS, REGION_CODES
from ..models.inspection import ACUnit, BatteryBank, Cabinet, InspectionRecord
from ..utils.exceptions import InvalidInputError
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _text(value: Any) -> str | None:
    """Strip strings; empty values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _is_yes(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return (_text(value) or "").upper() in ("SIM", "S", "YES", "TRUE")


def _split_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split(",")
    return [item for item in (_text(i) for i in items) if item]


def _battery_bank(row: Mapping[str, Any], cabinet: int, bank: int) -> BatteryBank | None:
    prefix = f"gab{cabinet}_bat{bank}"
    fields = {
        "chemistry": _text(row.get(f"{prefix}_tipo")),
        "manufacturer": _text(row.get(f"{prefix}_fabricante")),
        "capacity": _text(row.get(f"{prefix}_capacidade")),
        "manufacture_date": _text(row.get(f"{prefix}_data_fabricacao")),
        "state": _text(row.get(f"{prefix}_estado")),
    }
    if not any(fields.values()):
        return None
    return BatteryBank(index=bank, **fields)


def _ac_unit(row: Mapping[str, Any], cabinet: int, unit: int) -> ACUnit | None:
    prefix = f"gab{cabinet}_ac{unit}"
    model = _text(row.get(f"{prefix}_modelo"))
    status = _text(row.get(f"{prefix}_status"))
    if model is None and status is None:
        return None
    return ACUnit(index=unit, model=model, status=status)


def _cabinet(row: Mapping[str, Any], index: int) -> Cabinet:
    prefix = f"gab{index}"
    banks = [_battery_bank(row, index, b) for b in range(1, MAX_BATTERY_BANKS + 1)]
    units = [_ac_unit(row, index, a) for a in range(1, MAX_AC_UNITS + 1)]
    return Cabinet(
        index=index,
        climatization_type=_text(row.get(f"{prefix}_climatizacao_tipo")),
        fan_status=_text(row.get(f"{prefix}_ventiladores_status")),
        plc_status=_text(row.get(f"{prefix}_plc_status")),
        alarm_status=_text(row.get(f"{prefix}_alarme_status")),
        transport_technologies=_split_list(row.get(f"{prefix}_tecnologias_transporte")),
        battery_banks=[bank for bank in banks if bank is not None],
        ac_units=[unit for unit in units if unit is not None],
    )


def _region(row: Mapping[str, Any]) -> str | None:
    """Upper-cased region code; codes outside the served regions are kept but logged."""
    uf = _text(row.get("state_uf"))
    if uf is None:
        return None
    uf = uf.upper()
    if uf not in REGION_CODES:
        logger.warning(f"Site {row.get('site_code')}: unexpected region {uf!r}")
    return uf


def normalize_row(row: Mapping[str, Any]) -> InspectionRecord:
    """
    Build an InspectionRecord from one flat report row.

    Only cabinets ``1..total_cabinets`` are read; columns of undeclared
    cabinets are ignored even when they hold stale data.

    Args:
        row: Flat row as returned by the reports table

    Returns:
        Normalized record

    Raises:
        InvalidInputError: If the row is not a mapping or fails validation
    """
    if not isinstance(row, Mapping):
        raise InvalidInputError(f"Expected a mapping, got {type(row).__name__}")

    declared = _to_int(row.get("total_cabinets"))
    total_cabinets = min(max(declared, 0), MAX_CABINETS)
    if total_cabinets != declared:
        logger.debug(f"Site {row.get('site_code')}: total_cabinets {declared} clamped to {total_cabinets}")

    try:
        return InspectionRecord(
            id=_text(row.get("id")) or "",
            site_code=_text(row.get("site_code")) or "",
            state_uf=_region(row),
            technician_id=_text(row.get("technician_id")) or _text(row.get("user_id")),
            technician_name=_text(row.get("technician_name")),
            created_at=_text(row.get("created_at")),
            created_date=_text(row.get("created_date")),
            created_time=_text(row.get("created_time")),
            total_cabinets=total_cabinets,
            cabinets=[_cabinet(row, g) for g in range(1, total_cabinets + 1)],
            gmg_exists=_is_yes(row.get("gmg_existe")),
            housekeeping_status=_text(row.get("torre_housekeeping")),
            grounding_status=_text(row.get("torre_aterramento")),
            fiber_protection=_text(row.get("torre_protecao_fibra")),
        )
    except ValidationError as e:
        raise InvalidInputError(f"Invalid report row {row.get('id')!r}: {e}") from e


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> list[InspectionRecord]:
    """Normalize every row, skipping (and logging) the ones that cannot be read."""
    records: list[InspectionRecord] = []
    skipped = 0
    for row in rows:
        try:
            records.append(normalize_row(row))
        except InvalidInputError as e:
            skipped += 1
            logger.warning(f"Skipping report row: {e}")

    logger.info(f"Normalized {len(records)} report rows ({skipped} skipped)")
    return records
