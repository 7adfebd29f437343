from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List, Literal


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key
    supabase_service_role_key: Optional[str] = None  # Required for elevated SQL execution and admin auth calls

    # App
    app_name: str = "ju-seatfinder"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "*"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    sql_rate_limit: str = "20/minute"
    login_rate_limit: str = "10/minute"

    # SQL gateway: "denylist" blocks known-dangerous statements only,
    # "allowlist" additionally restricts to read-only statements and log clearing
    sql_gateway_mode: Literal["denylist", "allowlist"] = "denylist"

    # Table browser
    table_page_size: int = 50
    table_fetch_limit: int = 500
    sql_default_limit: int = 100
    sql_max_limit: int = 1000

    # Probes
    keep_alive_interval_seconds: int = 0  # 0 disables the background ping loop
    ssl_check_timeout: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
