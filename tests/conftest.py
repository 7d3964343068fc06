from datetime import datetime

import pytest

from site_inspection_dashboard.models import ACUnit, BatteryBank, Cabinet, InspectionRecord


@pytest.fixture
def make_bank():
    def _make(
        index=1,
        chemistry="MONOBLOCO 2V",
        manufacturer="MOURA",
        capacity="200",
        manufacture_date="2025",
        state="OK",
    ):
        return BatteryBank(
            index=index,
            chemistry=chemistry,
            manufacturer=manufacturer,
            capacity=capacity,
            manufacture_date=manufacture_date,
            state=state,
        )

    return _make


@pytest.fixture
def make_cabinet(make_bank):
    def _make(index=1, banks=None, acs=None, **fields):
        if banks is None:
            banks = [make_bank()]
        return Cabinet(index=index, battery_banks=banks, ac_units=acs or [], **fields)

    return _make


@pytest.fixture
def make_ac():
    def _make(index=1, model="SPLIT 24 KBTU", status="OK"):
        return ACUnit(index=index, model=model, status=status)

    return _make


@pytest.fixture
def make_record(make_cabinet):
    counter = {"n": 0}

    def _make(
        site_code=None,
        uf="PA",
        cabinets=None,
        total_cabinets=None,
        technician_id="tec-1",
        technician_name="Ana Souza",
        created_at=datetime(2025, 11, 3, 9, 30),
        gmg=False,
        housekeeping="OK",
        grounding="OK",
    ):
        counter["n"] += 1
        if cabinets is None:
            cabinets = [make_cabinet()]
        if total_cabinets is None:
            total_cabinets = max((c.index for c in cabinets), default=0)
        return InspectionRecord(
            id=f"rep-{counter['n']}",
            site_code=site_code or f"SITE{counter['n']:03d}",
            state_uf=uf,
            technician_id=technician_id,
            technician_name=technician_name,
            created_at=created_at,
            total_cabinets=total_cabinets,
            cabinets=cabinets,
            gmg_exists=gmg,
            housekeeping_status=housekeeping,
            grounding_status=grounding,
        )

    return _make
