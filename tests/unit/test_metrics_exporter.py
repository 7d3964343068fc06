import csv
import json

import pytest

from site_inspection_dashboard.processing.aggregator import aggregate
from site_inspection_dashboard.processing.drilldown import project
from site_inspection_dashboard.report.metrics_exporter import (
    BATTERY_COLUMNS,
    CABINET_COLUMNS,
    SITE_COLUMNS,
    drilldown_rows,
    export_drilldown_csv,
    export_stats_json,
)
from site_inspection_dashboard.utils.exceptions import ExportError


@pytest.fixture
def result(make_record, make_cabinet, make_bank):
    return aggregate(
        [
            make_record(
                uf="PA",
                cabinets=[
                    make_cabinet(
                        index=2,
                        banks=[
                            make_bank(index=1, manufacture_date=None),
                            make_bank(index=2, manufacture_date="2018", state="ESTUFADA"),
                        ],
                    )
                ],
            ),
            make_record(uf="AM", cabinets=[make_cabinet(banks=[])]),
        ],
        reference_year=2026,
    )


def test_battery_rows_use_spreadsheet_conventions(result):
    rows = drilldown_rows(project(result, "baterias-all"))

    assert list(rows[0]) == BATTERY_COLUMNS
    assert rows[0]["Gabinete"] == "G2"
    assert rows[0]["Idade (anos)"] == "N/A"
    assert rows[0]["Data Fabricação"] == "N/A"
    assert rows[0]["Troca"] == "Não"
    assert rows[1]["Idade (anos)"] == 8
    assert rows[1]["Obsolescência"] == "Alto Risco"
    assert rows[1]["Troca"] == "Sim"


def test_cabinet_rows_label_missing_banks(result):
    rows = drilldown_rows(project(result, "autonomy-sem-banco"))

    assert list(rows[0]) == CABINET_COLUMNS
    assert rows[0]["Risco Autonomia"] == "Sem Banco"
    assert rows[0]["Obsolescência"] == "Sem Banco"


def test_export_drilldown_csv(result, tmp_path):
    path = export_drilldown_csv(project(result, "sites-all"), tmp_path / "sites.csv")

    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = list(reader)

    assert reader.fieldnames == SITE_COLUMNS
    assert [row["UF"] for row in rows] == ["PA", "AM"]
    assert [row["Status"] for row in rows] == ["NOK", "OK"]


def test_export_empty_drilldown_writes_header(result, tmp_path):
    path = export_drilldown_csv(project(result, "acs-all"), tmp_path / "acs.csv")

    assert path.read_text(encoding="utf-8").strip() == "Código do Site,UF,Gabinete,AC #,Modelo,Status"


def test_export_stats_json(result, tmp_path):
    path = export_stats_json(result, tmp_path / "stats.json")

    data = json.loads(path.read_text(encoding="utf-8"))

    assert data["summary"]["total_sites"] == 2
    assert data["summary"]["replacement"]["total"] == 1
    assert [site["uf"] for site in data["sites_with_problems"]] == ["PA"]


def test_export_stats_json_without_details(result, tmp_path):
    path = export_stats_json(result, tmp_path / "stats.json", include_details=False)

    assert "sites_with_problems" not in json.loads(path.read_text(encoding="utf-8"))


def test_export_errors_are_wrapped(result, tmp_path):
    with pytest.raises(ExportError):
        export_drilldown_csv(project(result, "sites-all"), tmp_path)
    with pytest.raises(ExportError):
        export_stats_json(result, tmp_path)


def test_cabinet_row_without_capacity(make_record, make_cabinet, make_bank):
    result = aggregate(
        [make_record(cabinets=[make_cabinet(banks=[make_bank(capacity=None)], alarm_status="OK")])]
    )

    row = drilldown_rows(project(result, "autonomy-sem-banco"))[0]

    assert row["Baterias"] == 1
    assert row["Risco Autonomia"] == "N/A"
    assert row["Alarme"] == "OK"


def test_export_stats_json_writes_chart_labels(result, tmp_path):
    path = export_stats_json(result, tmp_path / "stats.json")

    data = json.loads(path.read_text(encoding="utf-8"))

    assert "export_date" in data
    assert [s["name"] for s in data["summary"]["battery_age_chart"]] == ["<5 anos", ">8 anos"]
