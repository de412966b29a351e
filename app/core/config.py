from functools import lru_cache
import json

from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins(value: str) -> list[str]:
    if not value:
        return []

    parsed: list[str]
    raw = value.strip()
    if raw.startswith("["):
        try:
            items = json.loads(raw)
            parsed = [str(item).strip() for item in items if str(item).strip()]
        except (TypeError, ValueError):
            parsed = []
    else:
        parsed = [origin.strip() for origin in raw.split(",") if origin.strip()]

    # Preserve order and remove duplicates.
    return list(dict.fromkeys(parsed))


def parse_csv_list(value: str) -> tuple[str, ...]:
    items = [item.strip() for item in str(value or "").split(",") if item.strip()]
    return tuple(dict.fromkeys(items))


def parse_int_list(value: str) -> tuple[int, ...]:
    out = []
    for item in parse_csv_list(value):
        try:
            out.append(int(item))
        except ValueError:
            continue
    return tuple(out)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "ToggleCover"
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Security (tokens are issued by the auth service; we only verify them)
    secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Database
    database_url: str
    db_pool_size: int = 5
    db_max_overflow: int = 5
    db_pool_timeout: int = 15
    db_pool_recycle: int = 1200
    db_pool_pre_ping: bool = True

    # Coverage ledger
    timezone: str = "Asia/Kolkata"
    currency: str = "INR"
    coverage_toggle_max_attempts: int = 5
    policy_term_days: int = 365

    # Premium engine
    weather_threshold_temperature: float = 35
    weather_risk_max_multiplier: float = 1.5
    cold_threshold_temperature: float = 10
    high_risk_zones: str = "Mumbai,Chennai,Delhi,Bangalore"
    monsoon_cities: str = "Mumbai,Chennai,Kolkata"
    monsoon_months: str = "6,7,8,9"
    high_risk_gig_platforms: str = "ZEPTO,INSTAMART"
    night_gig_platforms: str = "SWIGGY,ZOMATO"

    # Rate limiting
    rate_limit_enabled: bool = True

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"
    auto_create_tables: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
