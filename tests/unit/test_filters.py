from datetime import date, datetime

from site_inspection_dashboard.models import DashboardFilters, DateRange, StatusFilter
from site_inspection_dashboard.processing.aggregator import aggregate
from site_inspection_dashboard.processing.filters import apply_filters, apply_status_filter


def test_no_filters_keeps_everything(make_record):
    records = [make_record(), make_record(uf="AM")]
    assert apply_filters(records, DashboardFilters()) == records


def test_technician_substring_is_case_insensitive(make_record):
    records = [
        make_record(technician_name="Carlos Andrade"),
        make_record(technician_name="ANDRÉ Costa"),
        make_record(technician_name=None),
    ]

    kept = apply_filters(records, DashboardFilters(technician="andr"))

    assert kept == records[:2]


def test_region_is_exact(make_record):
    records = [make_record(uf="PA"), make_record(uf="AM"), make_record(uf=None)]

    assert apply_filters(records, DashboardFilters(state_uf="AM")) == [records[1]]
    assert apply_filters(records, DashboardFilters(state_uf="all")) == records


def test_date_range_is_inclusive_by_calendar_day(make_record):
    records = [
        make_record(created_at=datetime(2025, 10, 31, 23, 59)),
        make_record(created_at=datetime(2025, 11, 1, 0, 0)),
        make_record(created_at=datetime(2025, 11, 30, 23, 59)),
        make_record(created_at=datetime(2025, 12, 1, 0, 0)),
    ]
    filters = DashboardFilters(date_range=DateRange(start=date(2025, 11, 1), end=date(2025, 11, 30)))

    assert apply_filters(records, filters) == records[1:3]


def test_open_ended_date_range(make_record):
    records = [make_record(created_at=datetime(2025, 1, 5)), make_record(created_at=datetime(2025, 6, 5))]

    assert apply_filters(records, DashboardFilters(date_range=DateRange(start=date(2025, 3, 1)))) == [records[1]]
    assert apply_filters(records, DashboardFilters(date_range=DateRange(end=date(2025, 3, 1)))) == [records[0]]


def test_date_bound_drops_records_without_timestamp(make_record):
    records = [make_record(created_at=None), make_record(created_at=datetime(2025, 11, 3))]

    assert apply_filters(records, DashboardFilters()) == records
    kept = apply_filters(records, DashboardFilters(date_range=DateRange(start=date(2025, 1, 1))))
    assert kept == [records[1]]


def test_site_type_matches_declared_cabinets(make_record, make_cabinet):
    dwdm = make_record(cabinets=[make_cabinet(transport_technologies=["DWDM", "GPON"])])
    gpon = make_record(cabinets=[make_cabinet(transport_technologies=["GPON"])])
    hidden = make_record(
        cabinets=[make_cabinet(index=1), make_cabinet(index=2, transport_technologies=["DWDM"])],
        total_cabinets=1,
    )

    assert apply_filters([dwdm, gpon, hidden], DashboardFilters(site_type="dwdm")) == [dwdm]


def test_filters_combine(make_record):
    records = [
        make_record(uf="PA", technician_name="Ana"),
        make_record(uf="AM", technician_name="Ana"),
        make_record(uf="PA", technician_name="Bruno"),
    ]

    kept = apply_filters(records, DashboardFilters(state_uf="PA", technician="ana"))

    assert kept == [records[0]]


def test_status_filter_uses_each_row_predicate(make_record, make_cabinet, make_bank, make_ac):
    record = make_record(
        cabinets=[
            make_cabinet(
                banks=[make_bank(index=1), make_bank(index=2, state="VAZANDO")],
                acs=[make_ac(index=1, status="OK"), make_ac(index=2, status="NOK"), make_ac(index=3, status=None)],
            )
        ]
    )
    result = aggregate([record])

    sites, batteries, acs = apply_status_filter(result.sites, result.batteries, result.acs, StatusFilter.NOK)
    assert len(sites) == 1
    assert [b.bank for b in batteries] == [2]
    assert [a.unit for a in acs] == [2]

    sites, batteries, acs = apply_status_filter(result.sites, result.batteries, result.acs, StatusFilter.OK)
    assert sites == []
    assert [b.bank for b in batteries] == [1]
    assert [a.unit for a in acs] == [1]

    sites, batteries, acs = apply_status_filter(result.sites, result.batteries, result.acs, StatusFilter.ALL)
    assert len(acs) == 3
