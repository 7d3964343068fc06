"""Row-level entities derived from inspection records on every aggregation pass."""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class ObsolescenceTier(str, Enum):
    """Age-based risk of a single battery bank."""

    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


class AutonomyTier(str, Enum):
    """Backup runtime risk of a cabinet (or of a site, worst cabinet wins)."""

    OK = "ok"
    MEDIO_RISCO = "medio"
    ALTO_RISCO = "alto"
    CRITICO = "critico"


class RollupObsolescenceTier(str, Enum):
    """Obsolescence badge of a cabinet or site, from the unified age bands."""

    OK = "ok"
    MEDIO_RISCO = "medio"
    ALTO_RISCO = "alto"
    SEM_BANCO = "sem_banco"


class ChemistryClass(str, Enum):
    """Coarse battery chemistry used for thresholds and per-type counts."""

    CHUMBO = "chumbo"
    LITIO = "litio"
    OUTRO = "outro"


class BatteryInfo(BaseModel):
    """One populated battery bank with its computed age and risk tiers."""

    model_config = ConfigDict(frozen=True)

    site_code: str
    uf: str
    cabinet: int = Field(ge=1, le=7)
    bank: int = Field(ge=1, le=6)
    chemistry: str
    chemistry_class: ChemistryClass
    manufacturer: str
    capacity: str | None = None
    manufacture_date: str | None = None
    state: str = Field(default="OK", description="Physical state, OK when not informed")
    age_years: int = Field(ge=0)
    obsolescence_tier: ObsolescenceTier = Field(description="Chemistry-aware tier")
    age_band: ObsolescenceTier = Field(description="Unified 5/8-year badge")
    autonomy_tier: AutonomyTier | None = Field(default=None, description="Tier of the cabinet")

    @property
    def is_ok(self) -> bool:
        return self.state == "OK"


class ACInfo(BaseModel):
    """One populated air-conditioning unit."""

    model_config = ConfigDict(frozen=True)

    site_code: str
    uf: str
    cabinet: int = Field(ge=1, le=7)
    unit: int = Field(ge=1, le=4)
    model: str
    status: str = Field(description="OK, NOK or NA")


class CabinetInfo(BaseModel):
    """Per-cabinet autonomy and obsolescence classification."""

    model_config = ConfigDict(frozen=True)

    site_code: str
    uf: str
    cabinet: int = Field(ge=1, le=7)
    gmg_exists: bool
    total_batteries: int = Field(ge=0)
    total_capacity_ah: float = Field(ge=0)
    autonomy_hours: float = Field(ge=0)
    autonomy_tier: AutonomyTier | None = Field(
        default=None, description="None when no bank of the cabinet has an informed capacity"
    )
    obsolescence_tier: RollupObsolescenceTier
    chemistry_classes: list[ChemistryClass] = Field(default_factory=list)
    climatization_type: str | None = None
    fan_status: str | None = None
    plc_status: str | None = None
    alarm_status: str | None = None

    @property
    def has_batteries(self) -> bool:
        return self.total_batteries > 0


class SiteInfo(BaseModel):
    """Per-visit summary row used by the sites drill-down."""

    model_config = ConfigDict(frozen=True)

    id: str
    site_code: str
    uf: str
    technician: str
    technician_id: str
    date: str | None = None
    time: str | None = None
    total_cabinets: int = Field(ge=0, le=7)
    has_problems: bool
    gmg_exists: bool
    battery_issues: int = Field(default=0, ge=0)
    ac_issues: int = Field(default=0, ge=0)
    climatization_issues: int = Field(default=0, ge=0)
    housekeeping_ok: bool
    grounding_ok: bool
    autonomy_tier: AutonomyTier | None = Field(
        default=None, description="Worst cabinet tier, None when the site has no battery bank"
    )
    obsolescence_tier: RollupObsolescenceTier = RollupObsolescenceTier.SEM_BANCO
