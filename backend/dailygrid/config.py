"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - cell_scan_limit bounds every per-cell player scan (latency vs. precision knob)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - cell_scan_limit defaults to 500: a cell reporting 0 inside the window is treated as
      impossible even if a match exists further down the table; raising it trades
      latency for fewer false "impossible" verdicts
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://grid:grid@db:5432/dailygrid"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Validation
    cell_scan_limit: int = 500
    solution_scan_limit: int = 1000

    # Generation
    max_generation_attempts: int = 20
    generation_seed_step: int = 7919
    generation_timeout_seconds: float = 25.0
    suggestion_seed_step: int = 10_000

    # Cache
    cache_ttl_hours: int = 24

    # Admin surface: empty list disables the key check (local development)
    admin_api_keys: list[str] = []

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
