"""Resolve drill-down selectors into the exact rows behind a KPI."""

from typing import Any, Callable, Dict, NamedTuple, Union

from pydantic import BaseModel, Field

from ..config.constants import OBSOLESCENCE_TEXT_PT
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
from ..models.result import AggregationResult
from ..utils.exceptions import UnknownSelectorError
from ..utils.logger import get_logger
from .risk import requires_replacement

logger = get_logger(__name__)

SITES = "sites"
BATTERIES = "batteries"
ACS = "acs"
CABINETS = "cabinets"

Row = Union[SiteInfo, BatteryInfo, ACInfo, CabinetInfo]


class DrillDown(BaseModel):
    """Rows selected by one drill-down selector."""

    kind: str = Field(description="sites, batteries, acs or cabinets")
    title: str
    selector: str
    region: str | None = None
    rows: list[Row] = Field(default_factory=list)


class _Selector(NamedTuple):
    kind: str
    title: str
    predicate: Callable[[Any], bool]
    needs_region: bool = False


def _everything(row: Any) -> bool:
    return True


def _slug(value: str) -> str:
    """Selector suffix for an enum value (sem_banco -> sem-banco)."""
    return value.replace("_", "-")


def _build_selectors() -> Dict[str, _Selector]:
    selectors: Dict[str, _Selector] = {
        # Sites
        "sites-all": _Selector(SITES, "Todos os Sites", _everything),
        "sites-ok": _Selector(SITES, "Sites OK", lambda s: not s.has_problems),
        "sites-nok": _Selector(SITES, "Sites com Problemas", lambda s: s.has_problems),
        "sites-gmg": _Selector(SITES, "Sites com GMG", lambda s: s.gmg_exists),
        "sites-sem-gmg": _Selector(SITES, "Sites sem GMG", lambda s: not s.gmg_exists),
        "zeladoria-ok": _Selector(SITES, "Zeladoria OK", lambda s: s.housekeeping_ok),
        "zeladoria-nok": _Selector(SITES, "Zeladoria com Pendências", lambda s: not s.housekeeping_ok),
        "aterramento-nok": _Selector(SITES, "Aterramento com Pendências", lambda s: not s.grounding_ok),
        "uf": _Selector(SITES, "Sites da UF {region}", _everything, needs_region=True),
        # Batteries
        "baterias-all": _Selector(BATTERIES, "Todas as Baterias", _everything),
        "baterias-ok": _Selector(BATTERIES, "Baterias OK", lambda b: b.is_ok),
        "baterias-nok": _Selector(BATTERIES, "Baterias com Defeito", lambda b: not b.is_ok),
        "obsolete-warning": _Selector(
            BATTERIES, "Baterias 5-8 anos", lambda b: b.age_band == ObsolescenceTier.WARNING
        ),
        "obsolete-critical": _Selector(
            BATTERIES, "Baterias +8 anos", lambda b: b.age_band == ObsolescenceTier.CRITICAL
        ),
        "chumbo-all": _Selector(
            BATTERIES, "Baterias de Chumbo", lambda b: b.chemistry_class == ChemistryClass.CHUMBO
        ),
        "chumbo-uf": _Selector(
            BATTERIES,
            "Baterias de Chumbo - {region}",
            lambda b: b.chemistry_class == ChemistryClass.CHUMBO,
            needs_region=True,
        ),
        "litio-all": _Selector(
            BATTERIES, "Baterias de Lítio", lambda b: b.chemistry_class == ChemistryClass.LITIO
        ),
        "litio-uf": _Selector(
            BATTERIES,
            "Baterias de Lítio - {region}",
            lambda b: b.chemistry_class == ChemistryClass.LITIO,
            needs_region=True,
        ),
        # Replacement is re-evaluated here, never read from a stored flag
        "troca-all": _Selector(BATTERIES, "Baterias para Troca", requires_replacement),
        "troca-uf": _Selector(BATTERIES, "Baterias para Troca - {region}", requires_replacement, needs_region=True),
        # ACs
        "acs-all": _Selector(ACS, "Todos os ACs", _everything),
        "acs-ok": _Selector(ACS, "ACs OK", lambda a: a.status == "OK"),
        "acs-nok": _Selector(ACS, "ACs com Defeito", lambda a: a.status == "NOK"),
        # Cabinet climatization
        "fan-nok": _Selector(CABINETS, "Ventiladores com Defeito", lambda c: (c.fan_status or "").upper() == "NOK"),
        "plc-nok": _Selector(CABINETS, "PLCs com Defeito", lambda c: (c.plc_status or "").upper() == "NOK"),
    }

    for tier in ObsolescenceTier:
        selectors[f"obsolescencia-{tier.value}"] = _Selector(
            BATTERIES,
            f"Obsolescência por Tipo - {OBSOLESCENCE_TEXT_PT[tier]}",
            lambda b, tier=tier: b.obsolescence_tier == tier,
        )

    autonomy_labels = {
        AutonomyTier.OK: "OK",
        AutonomyTier.MEDIO_RISCO: "Médio Risco",
        AutonomyTier.ALTO_RISCO: "Alto Risco",
        AutonomyTier.CRITICO: "Crítico",
        None: "Sem Banco",
    }
    for tier, label in autonomy_labels.items():
        suffix = _slug(tier.value if tier is not None else RollupObsolescenceTier.SEM_BANCO.value)
        selectors[f"autonomy-{suffix}"] = _Selector(
            CABINETS, f"Autonomia por Gabinete - {label}", lambda c, tier=tier: c.autonomy_tier == tier
        )
        selectors[f"autonomy-site-{suffix}"] = _Selector(
            SITES, f"Autonomia por Site - {label}", lambda s, tier=tier: s.autonomy_tier == tier
        )

    rollup_labels = {
        RollupObsolescenceTier.OK: "OK",
        RollupObsolescenceTier.MEDIO_RISCO: "Médio Risco",
        RollupObsolescenceTier.ALTO_RISCO: "Alto Risco",
        RollupObsolescenceTier.SEM_BANCO: "Sem Banco",
    }
    for tier, label in rollup_labels.items():
        selectors[f"obsolescencia-gab-{_slug(tier.value)}"] = _Selector(
            CABINETS, f"Obsolescência por Gabinete - {label}", lambda c, tier=tier: c.obsolescence_tier == tier
        )
        selectors[f"obsolescencia-site-{_slug(tier.value)}"] = _Selector(
            SITES, f"Obsolescência por Site - {label}", lambda s, tier=tier: s.obsolescence_tier == tier
        )

    return selectors


SELECTORS = _build_selectors()


def available_selectors() -> list[str]:
    """Every selector name the projector understands."""
    return sorted(SELECTORS)


class DrillDownProjector:
    """Projects the row lists of one aggregation pass through drill-down selectors."""

    def __init__(self, result: AggregationResult):
        self.result = result

    def _source(self, kind: str) -> list:
        return {
            SITES: self.result.sites,
            BATTERIES: self.result.batteries,
            ACS: self.result.acs,
            CABINETS: self.result.cabinets,
        }[kind]

    def project(self, selector: str, region_scope: str | None = None) -> DrillDown:
        """
        Rows for a selector.

        Args:
            selector: Selector name, optionally with an embedded region
                (``"chumbo-uf:PA"``)
            region_scope: Region for ``-uf`` selectors; narrows any other selector

        Returns:
            DrillDown with the matching rows, in aggregation order

        Raises:
            UnknownSelectorError: Selector outside the vocabulary, or a
                region selector without a region
        """
        name, _, embedded_region = selector.partition(":")
        entry = SELECTORS.get(name)
        if entry is None:
            raise UnknownSelectorError(f"Unknown drill-down selector: {selector!r}")

        region = embedded_region or region_scope
        if entry.needs_region and not region:
            raise UnknownSelectorError(f"Selector {name!r} requires a region")

        rows = [row for row in self._source(entry.kind) if entry.predicate(row)]
        if embedded_region:
            rows = [row for row in rows if row.uf == embedded_region]
        if region_scope:
            rows = [row for row in rows if row.uf == region_scope]

        logger.debug(f"Drill-down {selector!r} -> {len(rows)} {entry.kind}")
        return DrillDown(
            kind=entry.kind,
            title=entry.title.format(region=region or ""),
            selector=selector,
            region=region,
            rows=rows,
        )


def project(result: AggregationResult, selector: str, region_scope: str | None = None) -> DrillDown:
    """Shortcut for ``DrillDownProjector(result).project(...)``."""
    return DrillDownProjector(result).project(selector, region_scope)
