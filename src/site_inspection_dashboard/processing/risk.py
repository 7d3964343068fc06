"""Battery obsolescence and autonomy risk classification."""

import re
import unicodedata
from typing import Iterable

from ..config.constants import (
    ASSUMED_LOAD_CURRENT_A,
    AUTONOMY_THRESHOLDS_NO_GMG,
    AUTONOMY_THRESHOLDS_WITH_GMG,
    LEAD_ACID_KEYWORDS,
    LEAD_ACID_THRESHOLDS,
    LITHIUM_KEYWORDS,
    LITHIUM_THRESHOLDS,
    REPLACEMENT_STATES,
    UNIFIED_AGE_THRESHOLDS,
)
from ..models.derived import (
    AutonomyTier,
    BatteryInfo,
    ChemistryClass,
    ObsolescenceTier,
    RollupObsolescenceTier,
)

_CAPACITY_NUMBER = re.compile(r"\d+(?:[.,]\d+)?")

# Higher is worse. Explicit tables instead of enum declaration order.
AUTONOMY_SEVERITY = {
    AutonomyTier.OK: 0,
    AutonomyTier.MEDIO_RISCO: 1,
    AutonomyTier.ALTO_RISCO: 2,
    AutonomyTier.CRITICO: 3,
}

OBSOLESCENCE_SEVERITY = {
    ObsolescenceTier.OK: 0,
    ObsolescenceTier.WARNING: 1,
    ObsolescenceTier.CRITICAL: 2,
}

ROLLUP_OBSOLESCENCE_SEVERITY = {
    RollupObsolescenceTier.OK: 0,
    RollupObsolescenceTier.MEDIO_RISCO: 1,
    RollupObsolescenceTier.ALTO_RISCO: 2,
}

_BAND_TO_ROLLUP = {
    ObsolescenceTier.OK: RollupObsolescenceTier.OK,
    ObsolescenceTier.WARNING: RollupObsolescenceTier.MEDIO_RISCO,
    ObsolescenceTier.CRITICAL: RollupObsolescenceTier.ALTO_RISCO,
}


def _normalize(text: str) -> str:
    """Upper-case and strip accents (LÍTIO -> LITIO)."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).upper()


def classify_chemistry(chemistry: str | None) -> ChemistryClass:
    """
    Map the free-text battery type to a chemistry class.

    Args:
        chemistry: Battery type as captured, e.g. "LÍTIO", "MONOBLOCO 2V"

    Returns:
        LITIO, CHUMBO, or OUTRO when no keyword matches
    """
    if not chemistry:
        return ChemistryClass.OUTRO

    normalized = _normalize(chemistry)
    if any(keyword in normalized for keyword in LITHIUM_KEYWORDS):
        return ChemistryClass.LITIO
    if any(keyword in normalized for keyword in LEAD_ACID_KEYWORDS):
        return ChemistryClass.CHUMBO
    return ChemistryClass.OUTRO


def _tier_from_thresholds(age: int, thresholds: tuple[int, int]) -> ObsolescenceTier:
    warning_from, critical_from = thresholds
    if age >= critical_from:
        return ObsolescenceTier.CRITICAL
    if age >= warning_from:
        return ObsolescenceTier.WARNING
    return ObsolescenceTier.OK


def obsolescence_tier(age: int, chemistry_class: ChemistryClass) -> ObsolescenceTier:
    """
    Chemistry-aware obsolescence tier of one battery bank.

    Lithium uses 5/10 years; everything else is treated as lead-acid (2/3 years).
    """
    if chemistry_class == ChemistryClass.LITIO:
        return _tier_from_thresholds(age, LITHIUM_THRESHOLDS)
    return _tier_from_thresholds(age, LEAD_ACID_THRESHOLDS)


def unified_age_band(age: int) -> ObsolescenceTier:
    """Chemistry-independent badge used by the age chart and the rollups (5/8 years)."""
    return _tier_from_thresholds(age, UNIFIED_AGE_THRESHOLDS)


def parse_capacity_ah(raw: str | int | float | None) -> float | None:
    """
    Extract the capacity in Ah from a free-text field.

    "200", "200Ah" and "200,5 Ah" are accepted; empty, "NA" or any other
    text without a number gives None.
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return max(float(raw), 0.0)

    match = _CAPACITY_NUMBER.search(str(raw))
    if not match:
        return None
    return float(match.group(0).replace(",", "."))


def autonomy_hours(total_capacity_ah: float, load_current_a: float = ASSUMED_LOAD_CURRENT_A) -> float:
    """Hours of backup for a cabinet at a constant load current."""
    if load_current_a <= 0:
        return 0.0
    return total_capacity_ah / load_current_a


def autonomy_tier(hours: float, gmg_exists: bool) -> AutonomyTier:
    """
    Classify backup runtime.

    Without a generator: >=6h ok, >=4h medio, >=2h alto, else critico.
    With a generator the medio tier does not exist: >=4h ok, >=2h alto, else critico.
    """
    thresholds = AUTONOMY_THRESHOLDS_WITH_GMG if gmg_exists else AUTONOMY_THRESHOLDS_NO_GMG
    for minimum_hours, tier in thresholds:
        if hours >= minimum_hours:
            return tier
    return AutonomyTier.CRITICO


def rollup_obsolescence(band: ObsolescenceTier) -> RollupObsolescenceTier:
    """Translate a unified age band into the cabinet/site badge vocabulary."""
    return _BAND_TO_ROLLUP[band]


def worst_autonomy(tiers: Iterable[AutonomyTier | None]) -> AutonomyTier | None:
    """Worst tier among cabinets; None when no cabinet has a tier."""
    present = [tier for tier in tiers if tier is not None]
    if not present:
        return None
    return max(present, key=AUTONOMY_SEVERITY.__getitem__)


def worst_obsolescence(tiers: Iterable[ObsolescenceTier]) -> ObsolescenceTier | None:
    """Worst ok/warning/critical tier; None for an empty input."""
    present = list(tiers)
    if not present:
        return None
    return max(present, key=OBSOLESCENCE_SEVERITY.__getitem__)


def worst_rollup_obsolescence(tiers: Iterable[RollupObsolescenceTier]) -> RollupObsolescenceTier:
    """Worst badge among cabinets; SEM_BANCO when no cabinet has a battery bank."""
    present = [tier for tier in tiers if tier != RollupObsolescenceTier.SEM_BANCO]
    if not present:
        return RollupObsolescenceTier.SEM_BANCO
    return max(present, key=ROLLUP_OBSOLESCENCE_SEVERITY.__getitem__)


def has_replacement_state(state: str | None) -> bool:
    """True for bulging, leaking or not-holding-charge batteries."""
    if not state:
        return False
    lowered = state.lower()
    return any(keyword in lowered for keyword in REPLACEMENT_STATES)


def requires_replacement(battery: BatteryInfo) -> bool:
    """
    Replacement rule for one battery bank.

    Evaluated on demand from the physical state and the chemistry-aware tier;
    neither input is stored as a replacement flag.
    """
    return has_replacement_state(battery.state) or battery.obsolescence_tier == ObsolescenceTier.CRITICAL
