"""Dashboard filter state supplied by the caller."""

from datetime import date
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

ALL = "all"


class StatusFilter(str, Enum):
    """Post-aggregation narrowing of the drill-down row lists."""

    ALL = "all"
    OK = "ok"
    NOK = "nok"


class DateRange(BaseModel):
    """Inclusive calendar-day bounds on the visit date; either may be open."""

    model_config = ConfigDict(frozen=True)

    start: date | None = None
    end: date | None = None


class DashboardFilters(BaseModel):
    """
    Filters applied before and after aggregation.

    ``technician``, ``state_uf``, ``date_range`` and ``site_type`` restrict the
    records that are aggregated. ``status`` only narrows the row lists
    returned for drill-down; headline counts ignore it.
    """

    model_config = ConfigDict(frozen=True)

    date_range: DateRange = Field(default_factory=DateRange)
    technician: str = Field(default="", description="Case-insensitive substring of the technician name")
    state_uf: str = Field(default=ALL, description="Exact region code or 'all'")
    status: StatusFilter = StatusFilter.ALL
    site_type: str = Field(default=ALL, description="Transport technology, e.g. DWDM, or 'all'")
