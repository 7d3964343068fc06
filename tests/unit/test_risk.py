import pytest

from site_inspection_dashboard.models.derived import (
    AutonomyTier,
    BatteryInfo,
    ChemistryClass,
    ObsolescenceTier,
    RollupObsolescenceTier,
)
from site_inspection_dashboard.processing.risk import (
    autonomy_hours,
    autonomy_tier,
    classify_chemistry,
    obsolescence_tier,
    parse_capacity_ah,
    requires_replacement,
    unified_age_band,
    worst_autonomy,
    worst_obsolescence,
    worst_rollup_obsolescence,
)


@pytest.mark.parametrize(
    "chemistry, expected",
    [
        ("LÍTIO", ChemistryClass.LITIO),
        ("litio 48V", ChemistryClass.LITIO),
        ("MONOBLOCO 2V", ChemistryClass.CHUMBO),
        ("POLÍMERO 100A", ChemistryClass.CHUMBO),
        ("NÍQUEL", ChemistryClass.OUTRO),
        (None, ChemistryClass.OUTRO),
    ],
)
def test_classify_chemistry(chemistry, expected):
    assert classify_chemistry(chemistry) == expected


@pytest.mark.parametrize(
    "age, expected",
    [(1, ObsolescenceTier.OK), (2, ObsolescenceTier.WARNING), (3, ObsolescenceTier.CRITICAL)],
)
def test_lead_acid_obsolescence(age, expected):
    assert obsolescence_tier(age, ChemistryClass.CHUMBO) == expected


@pytest.mark.parametrize(
    "age, expected",
    [(4, ObsolescenceTier.OK), (5, ObsolescenceTier.WARNING), (9, ObsolescenceTier.WARNING), (10, ObsolescenceTier.CRITICAL)],
)
def test_lithium_obsolescence(age, expected):
    assert obsolescence_tier(age, ChemistryClass.LITIO) == expected


def test_unknown_chemistry_uses_lead_acid_rules():
    assert obsolescence_tier(3, ChemistryClass.OUTRO) == ObsolescenceTier.CRITICAL


def test_unified_age_band_ignores_chemistry():
    assert unified_age_band(4) == ObsolescenceTier.OK
    assert unified_age_band(5) == ObsolescenceTier.WARNING
    assert unified_age_band(7) == ObsolescenceTier.WARNING
    assert unified_age_band(8) == ObsolescenceTier.CRITICAL


@pytest.mark.parametrize(
    "hours, expected",
    [
        (6.5, AutonomyTier.OK),
        (6.0, AutonomyTier.OK),
        (5.0, AutonomyTier.MEDIO_RISCO),
        (3.0, AutonomyTier.ALTO_RISCO),
        (1.0, AutonomyTier.CRITICO),
    ],
)
def test_autonomy_without_generator(hours, expected):
    assert autonomy_tier(hours, gmg_exists=False) == expected


@pytest.mark.parametrize(
    "hours, expected",
    [(5.0, AutonomyTier.OK), (4.0, AutonomyTier.OK), (3.0, AutonomyTier.ALTO_RISCO), (1.0, AutonomyTier.CRITICO)],
)
def test_autonomy_with_generator_never_medio(hours, expected):
    assert autonomy_tier(hours, gmg_exists=True) == expected


def test_autonomy_hours_uses_load_current():
    assert autonomy_hours(300.0) == pytest.approx(10.0)
    assert autonomy_hours(300.0, load_current_a=60.0) == pytest.approx(5.0)
    assert autonomy_hours(300.0, load_current_a=0) == 0.0


def test_parse_capacity_ah():
    assert parse_capacity_ah("200") == 200.0
    assert parse_capacity_ah("200Ah") == 200.0
    assert parse_capacity_ah("170,5 Ah") == pytest.approx(170.5)
    assert parse_capacity_ah(100) == 100.0
    assert parse_capacity_ah("NA") is None
    assert parse_capacity_ah("") is None
    assert parse_capacity_ah(None) is None
    assert parse_capacity_ah("0") == 0.0


def test_worst_tier_wins():
    tiers = [ObsolescenceTier.OK, ObsolescenceTier.WARNING, ObsolescenceTier.CRITICAL]
    assert worst_obsolescence(tiers) == ObsolescenceTier.CRITICAL
    assert worst_obsolescence([]) is None

    assert worst_autonomy([AutonomyTier.OK, AutonomyTier.ALTO_RISCO, AutonomyTier.MEDIO_RISCO]) == AutonomyTier.ALTO_RISCO
    assert worst_autonomy([None, AutonomyTier.MEDIO_RISCO]) == AutonomyTier.MEDIO_RISCO
    assert worst_autonomy([None, None]) is None


def test_worst_rollup_ignores_cabinets_without_batteries():
    assert (
        worst_rollup_obsolescence([RollupObsolescenceTier.SEM_BANCO, RollupObsolescenceTier.MEDIO_RISCO])
        == RollupObsolescenceTier.MEDIO_RISCO
    )
    assert worst_rollup_obsolescence([RollupObsolescenceTier.SEM_BANCO]) == RollupObsolescenceTier.SEM_BANCO
    assert worst_rollup_obsolescence([]) == RollupObsolescenceTier.SEM_BANCO


def _battery(state="OK", tier=ObsolescenceTier.OK):
    return BatteryInfo(
        site_code="PA001",
        uf="PA",
        cabinet=1,
        bank=1,
        chemistry="MONOBLOCO 2V",
        chemistry_class=ChemistryClass.CHUMBO,
        manufacturer="MOURA",
        state=state,
        age_years=1,
        obsolescence_tier=tier,
        age_band=ObsolescenceTier.OK,
    )


@pytest.mark.parametrize(
    "state, tier, expected",
    [
        ("OK", ObsolescenceTier.OK, False),
        ("ESTUFADA", ObsolescenceTier.OK, True),
        ("Vazando", ObsolescenceTier.OK, True),
        ("NÃO SEGURA CARGA", ObsolescenceTier.OK, True),
        ("TRINCADA", ObsolescenceTier.OK, False),
        ("OK", ObsolescenceTier.WARNING, False),
        ("OK", ObsolescenceTier.CRITICAL, True),
    ],
)
def test_requires_replacement(state, tier, expected):
    assert requires_replacement(_battery(state, tier)) is expected
