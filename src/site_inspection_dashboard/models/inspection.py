"""Data models for a single site inspection visit."""

from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field, field_validator

from ..utils.dates import parse_timestamp


class ClimatizationType(str, Enum):
    """Cooling equipment fitted to a cabinet."""

    AIR_CONDITIONER = "AR CONDICIONADO"
    FAN = "FAN"
    NOT_APPLICABLE = "NA"


class EquipmentStatus(str, Enum):
    """Operating status reported for ACs, fans and PLCs."""

    OK = "OK"
    NOK = "NOK"
    NA = "NA"


class BatteryBank(BaseModel):
    """One battery bank inside a cabinet, as captured in the field."""

    index: int = Field(ge=1, le=6, description="Bank number inside the cabinet (1-indexed)")
    chemistry: str | None = Field(default=None, description="Battery type, e.g. LÍTIO, MONOBLOCO 2V")
    manufacturer: str | None = None
    capacity: str | None = Field(default=None, description="Capacity in Ah as typed, e.g. '200'")
    manufacture_date: str | None = Field(default=None, description="YYYY-MM-DD, MM/YYYY or YYYY")
    state: str | None = Field(default=None, description="Physical state, e.g. OK, ESTUFADA")

    @property
    def is_populated(self) -> bool:
        """A bank counts only when it has a real chemistry and a manufacturer."""
        return bool(self.chemistry) and self.chemistry != "NA" and bool(self.manufacturer)


class ACUnit(BaseModel):
    """One air-conditioning unit inside a cabinet."""

    index: int = Field(ge=1, le=4, description="Unit number inside the cabinet (1-indexed)")
    model: str | None = None
    status: str | None = None

    @property
    def is_populated(self) -> bool:
        return bool(self.model) and self.model != "NA"


class Cabinet(BaseModel):
    """Equipment cabinet (gabinete) with its batteries and cooling."""

    index: int = Field(ge=1, le=7, description="Cabinet number at the site (1-indexed)")
    climatization_type: str | None = None
    fan_status: str | None = None
    plc_status: str | None = None
    alarm_status: str | None = None
    transport_technologies: list[str] = Field(default_factory=list)
    battery_banks: list[BatteryBank] = Field(default_factory=list)
    ac_units: list[ACUnit] = Field(default_factory=list)

    def populated_banks(self) -> list[BatteryBank]:
        return [bank for bank in self.battery_banks if bank.is_populated]

    def populated_ac_units(self) -> list[ACUnit]:
        return [unit for unit in self.ac_units if unit.is_populated]


class InspectionRecord(BaseModel):
    """
    One physical site visit.

    ``cabinets`` holds only the declared cabinets; slots beyond
    ``total_cabinets`` are dropped when the flat row is normalized.
    """

    id: str = ""
    site_code: str = ""
    state_uf: str | None = Field(default=None, description="Region code, e.g. PA")
    technician_id: str | None = None
    technician_name: str | None = None
    created_at: datetime | None = None
    created_date: str | None = Field(default=None, description="Display date as stored")
    created_time: str | None = Field(default=None, description="Display time as stored")
    total_cabinets: int = Field(default=0, ge=0, le=7)
    cabinets: list[Cabinet] = Field(default_factory=list)

    gmg_exists: bool = Field(default=False, description="Backup generator on site")
    housekeeping_status: str | None = None
    grounding_status: str | None = None
    fiber_protection: str | None = None

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, value):
        """Lenient parsing; aware timestamps are converted to naive UTC."""
        parsed = parse_timestamp(value)
        if parsed is not None and parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    def declared_cabinets(self) -> list[Cabinet]:
        """Cabinets within ``1..total_cabinets``, in index order."""
        return sorted(
            (cab for cab in self.cabinets if cab.index <= self.total_cabinets),
            key=lambda cab: cab.index,
        )

    @property
    def technician_key(self) -> str:
        """Stable identifier for per-technician grouping."""
        return self.technician_id or self.technician_name or "N/A"

    @property
    def housekeeping_ok(self) -> bool:
        return self.housekeeping_status == EquipmentStatus.OK.value

    @property
    def grounding_ok(self) -> bool:
        return self.grounding_status == EquipmentStatus.OK.value
