import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Pipeline hygiene windows (days)
    stale_after_days: int = 14  # active app with no action date is stale after this
    runtime_stale_days: int = 7  # open app anchor age for runtime stale count
    followup_due_days: int = 2
    recent_window_days: int = 30

    # Scoring defaults
    default_quality_score: float = 70.0  # used when no match/ATS scores exist
    default_risk_tolerance: int = 55
    forecast_horizons: list[int] = [4, 8, 12]

    # Feature execution side effects
    reminder_limit: int = 3

    # Rate limiting
    rate_limit_enabled: bool = True
    read_rate_limit: str = "60/minute"
    execute_rate_limit: str = "24/minute"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
