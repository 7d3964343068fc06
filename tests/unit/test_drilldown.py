import pytest

from site_inspection_dashboard.models import DashboardFilters, StatusFilter
from site_inspection_dashboard.processing.aggregator import aggregate
from site_inspection_dashboard.processing.drilldown import (
    BATTERIES,
    CABINETS,
    SITES,
    DrillDownProjector,
    available_selectors,
    project,
)
from site_inspection_dashboard.utils.exceptions import UnknownSelectorError


@pytest.fixture
def fleet(make_record, make_cabinet, make_bank, make_ac):
    return [
        make_record(
            uf="PA",
            cabinets=[
                make_cabinet(
                    banks=[
                        make_bank(index=1, chemistry="MONOBLOCO 2V", manufacture_date="2018"),
                        make_bank(index=2, chemistry="LÍTIO", manufacture_date="2024"),
                    ],
                    acs=[make_ac(status="NOK")],
                )
            ],
        ),
        make_record(
            uf="AM",
            gmg=True,
            cabinets=[
                make_cabinet(index=1, banks=[make_bank(chemistry="VRLA", state="NÃO SEGURA CARGA")]),
                make_cabinet(index=2, banks=[]),
            ],
        ),
        make_record(uf="PA", cabinets=[make_cabinet(banks=[make_bank(chemistry="POLÍMERO")])]),
    ]


def test_selector_vocabulary():
    selectors = available_selectors()

    for name in (
        "sites-all",
        "sites-nok",
        "uf",
        "baterias-nok",
        "obsolete-critical",
        "chumbo-uf",
        "litio-all",
        "troca-uf",
        "acs-nok",
        "autonomy-critico",
        "autonomy-sem-banco",
        "autonomy-site-medio",
        "obsolescencia-critical",
        "obsolescencia-gab-alto",
        "obsolescencia-site-sem-banco",
    ):
        assert name in selectors


def test_unknown_selector_raises(fleet):
    result = aggregate(fleet)

    with pytest.raises(UnknownSelectorError):
        project(result, "no-such-selector")


def test_region_selector_requires_region(fleet):
    result = aggregate(fleet)

    with pytest.raises(UnknownSelectorError):
        project(result, "chumbo-uf")


def test_embedded_region_matches_region_scope(fleet):
    result = aggregate(fleet)

    embedded = project(result, "chumbo-uf:PA")
    scoped = project(result, "chumbo-uf", region_scope="PA")

    assert embedded.kind == BATTERIES
    assert embedded.rows == scoped.rows
    assert [(b.site_code, b.bank) for b in embedded.rows] == [
        (fleet[0].site_code, 1),
        (fleet[2].site_code, 1),
    ]
    assert embedded.title == "Baterias de Chumbo - PA"
    assert embedded.region == "PA"


def test_counts_match_headline_stats(fleet):
    result = aggregate(fleet)
    projector = DrillDownProjector(result)
    stats = result.stats

    assert len(projector.project("sites-all").rows) == stats.total_sites
    assert len(projector.project("sites-nok").rows) == stats.sites_nok
    assert len(projector.project("baterias-all").rows) == stats.total_batteries
    assert len(projector.project("chumbo-all").rows) == stats.lead_acid_total
    assert len(projector.project("litio-all").rows) == stats.lithium_total
    assert len(projector.project("troca-all").rows) == stats.replacement.total
    assert len(projector.project("acs-nok").rows) == stats.acs_nok
    assert len(projector.project("autonomy-sem-banco").rows) == stats.autonomy_risk.gabinetes_sem_banco
    assert len(projector.project("obsolescencia-critical").rows) == stats.obsolescence_histogram.critical


def test_replacement_is_recomputed(fleet):
    result = aggregate(fleet, reference_year=2026)

    rows = project(result, "troca-all").rows

    # 2018 lead-acid is critical by age, the VRLA bank no longer holds charge
    assert [(b.uf, b.chemistry) for b in rows] == [("PA", "MONOBLOCO 2V"), ("AM", "VRLA")]
    assert [b.uf for b in project(result, "troca-uf:AM").rows] == ["AM"]


def test_uf_selector_and_region_scope(fleet):
    result = aggregate(fleet)

    pa_sites = project(result, "uf:PA")
    assert pa_sites.kind == SITES
    assert pa_sites.title == "Sites da UF PA"
    assert len(pa_sites.rows) == 2

    scoped = project(result, "baterias-all", region_scope="AM")
    assert [b.uf for b in scoped.rows] == ["AM"]


def test_cabinet_selectors(fleet):
    result = aggregate(fleet)

    empty = project(result, "autonomy-sem-banco")
    assert empty.kind == CABINETS
    assert [(c.uf, c.cabinet) for c in empty.rows] == [("AM", 2)]

    gab_sem_banco = project(result, "obsolescencia-gab-sem-banco")
    assert [(c.uf, c.cabinet) for c in gab_sem_banco.rows] == [("AM", 2)]


def test_empty_projection_is_valid(fleet):
    result = aggregate(fleet)

    drilldown = project(result, "fan-nok")

    assert drilldown.rows == []
    assert drilldown.title == "Ventiladores com Defeito"


def test_projection_follows_status_filter(fleet):
    result = aggregate(fleet, DashboardFilters(status=StatusFilter.OK))

    assert all(not site.has_problems for site in project(result, "sites-all").rows)
    assert all(battery.is_ok for battery in project(result, "baterias-all").rows)


def test_titles_are_portuguese(fleet):
    result = aggregate(fleet)

    assert project(result, "obsolescencia-critical").title == "Obsolescência por Tipo - Alto Risco"
    assert project(result, "obsolescencia-warning").title == "Obsolescência por Tipo - Médio Risco"
    assert project(result, "autonomy-site-sem-banco").title == "Autonomia por Site - Sem Banco"


def test_selector_names_are_hyphenated():
    assert all("_" not in name for name in available_selectors())
