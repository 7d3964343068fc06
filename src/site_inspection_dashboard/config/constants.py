"""Constants and configuration values."""

from ..models.derived import AutonomyTier, ObsolescenceTier

# Regions served by the field teams
REGION_CODES = ("PA", "AM", "MA", "RR", "AP")

# Slot cardinalities of the flat inspection row
MAX_CABINETS = 7
MAX_BATTERY_BANKS = 6
MAX_AC_UNITS = 4

# Battery ages are whole years counted up to this year, not to today
REFERENCE_YEAR = 2026

# Load assumed for every cabinet when converting Ah into hours
ASSUMED_LOAD_CURRENT_A = 30.0

# Obsolescence thresholds in years: (warning from, critical from)
LEAD_ACID_THRESHOLDS = (2, 3)
LITHIUM_THRESHOLDS = (5, 10)
UNIFIED_AGE_THRESHOLDS = (5, 8)

# Autonomy thresholds in hours, checked top-down
AUTONOMY_THRESHOLDS_NO_GMG = (
    (6.0, AutonomyTier.OK),
    (4.0, AutonomyTier.MEDIO_RISCO),
    (2.0, AutonomyTier.ALTO_RISCO),
)
AUTONOMY_THRESHOLDS_WITH_GMG = (
    (4.0, AutonomyTier.OK),
    (2.0, AutonomyTier.ALTO_RISCO),
)

# Substrings of the free-text battery state (matched case-insensitively)
STATE_BULGING = "estufada"
STATE_LEAKING = "vazando"
STATE_CRACKED = "trincada"
STATE_NO_CHARGE = "carga"
REPLACEMENT_STATES = (STATE_BULGING, STATE_LEAKING, STATE_NO_CHARGE)

# Chemistry keywords (matched on the accent-stripped, upper-cased type)
LITHIUM_KEYWORDS = ("LITIO", "LITHIUM")
LEAD_ACID_KEYWORDS = ("CHUMBO", "POLIMERO", "MONOBLOCO", "VRLA", "ESTACIONARIA")

# Time-series windows
MONTHLY_WINDOW_MONTHS = 6
DAILY_WINDOW_DAYS = 14

MONTH_ABBREVIATIONS_PT = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)

# Chart colours
COLOR_SUCCESS = "#22c55e"
COLOR_WARNING = "#f59e0b"
COLOR_DANGER = "#ef4444"
COLOR_INFO = "#3b82f6"
COLOR_PURPLE = "#8b5cf6"
COLOR_PRIMARY = "#0066a8"
COLOR_MUTED = "#9ca3af"

AGE_BAND_LABELS_PT = {
    ObsolescenceTier.OK: "<5 anos",
    ObsolescenceTier.WARNING: "5-8 anos",
    ObsolescenceTier.CRITICAL: ">8 anos",
}

OBSOLESCENCE_TEXT_PT = {
    ObsolescenceTier.OK: "OK",
    ObsolescenceTier.WARNING: "Médio Risco",
    ObsolescenceTier.CRITICAL: "Alto Risco",
}
