from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Listings"
    app_version: str = "1.0.0"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Database
    database_url: str = ""  # Loaded from environment, validated in model_validator
    database_echo: bool = False

    # Security
    secret_key: str = ""  # Loaded from environment, validated in model_validator
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS - comma-separated list of allowed origins
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Redis Cache
    redis_enabled: bool = False  # Principal lookups fall back to the database
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None

    # Cache TTL (Time-To-Live) in seconds
    cache_ttl_principals: int = 60

    # Timeouts in seconds
    gateway_timeout_seconds: float = 10.0  # Per store call inside a gateway
    audit_write_timeout_seconds: float = 5.0
    request_timeout_seconds: float = 30.0

    # Activity log pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Rate limiting (slowapi syntax)
    rate_limit_enabled: bool = True
    login_rate_limit: str = "10/minute"

    @model_validator(mode="after")
    def validate_required_config(self) -> "Settings":
        """Validate required configuration and numeric bounds"""
        if not self.database_url:
            raise ValueError("DATABASE_URL is required. Set in environment or .env file.")
        if not self.secret_key:
            raise ValueError("SECRET_KEY is required. Generate with: openssl rand -hex 32")

        for name in (
            "gateway_timeout_seconds",
            "audit_write_timeout_seconds",
            "request_timeout_seconds",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be greater than 0")

        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError(
                "default_page_size must be between 1 and max_page_size "
                f"(got {self.default_page_size}, max {self.max_page_size})"
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="allow", case_sensitive=False
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
