"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    buyer_repository: str = "in_memory"  # in_memory or postgres
    database_url: str = ""  # Required when buyer_repository=postgres
    admin_user_id: str = "1"  # Account allowed to modify any buyer
    session_secret: str = ""  # When set, X-User-Signature must be a valid HMAC of X-User-Id
    rate_limit_enabled: bool = True
    rate_limiter: str = "in_memory"  # in_memory or redis
    redis_url: str = "redis://localhost:6379/0"
    rate_limit_requests: int = 10
    rate_limit_duration_seconds: int = 60
    import_max_rows: int = 200
    list_max_limit: int = 100
    require_tags_on_create: bool = False
    seed_demo_data: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
