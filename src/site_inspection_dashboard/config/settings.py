"""Application settings loaded from environment variables."""

from datetime import date
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import ASSUMED_LOAD_CURRENT_A, DAILY_WINDOW_DAYS, MONTHLY_WINDOW_MONTHS, REFERENCE_YEAR


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.

    All settings can be overridden via environment variables prefixed with SITEINSP_
    For example: SITEINSP_FILTER_STATE_UF=PA
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SITEINSP_",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Classification =====
    reference_year: int = REFERENCE_YEAR
    assumed_load_current_a: float = ASSUMED_LOAD_CURRENT_A
    daily_window_days: int = DAILY_WINDOW_DAYS
    monthly_window_months: int = MONTHLY_WINDOW_MONTHS

    # ===== Default filters =====
    filter_technician: str = ""
    filter_state_uf: str = "all"
    filter_date_from: date | None = None
    filter_date_to: date | None = None
    filter_status: str = "all"
    filter_site_type: str = "all"

    # ===== Input / output =====
    input_path: Path = Path("reports.json")
    output_dir: Path = Path("/tmp/site_inspection_dashboard")
    drilldown_exports: list[str] = ["sites-nok", "troca-all", "autonomy-critico"]

    # ===== Logging =====
    log_level: str = "INFO"
    log_json: bool = True

    def __init__(self, **kwargs):  # type: ignore
        super().__init__(**kwargs)
        # Ensure output directory exists
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
