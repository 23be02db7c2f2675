"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets come from environment variables or .env (never hardcoded beyond local defaults)
    - get_settings() is cached (lru_cache) — single instance per process
    - database_url always carries an async driver (postgresql+asyncpg, sqlite+aiosqlite)

Design Decisions:
    - database_url wins when set; otherwise it is assembled from DB_HOST/DB_PORT/
      DB_USER/DB_PASSWORD/DB_NAME, the variables the gateway deployment provides
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Database
    database_url: str | None = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "formapp"
    db_password: str = "formapp"
    db_name: str = "formapp"

    database_pool_size: int = 5
    database_max_overflow: int = 5
    database_connect_timeout: int = 60

    # API
    app_version: str = "1.0.0"
    api_prefix: str = "/api"
    api_gateway_base_path: str = ""
    static_dir: str = "public"

    # CORS (server variant; the gateway handler always answers with "*")
    cors_origins: list[str] = ["*"]
    cors_methods: str = "GET,POST,PUT,DELETE,OPTIONS"
    cors_credentials: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Observability
    enable_request_logging: bool = False
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str | None) -> str | None:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v or None

    @model_validator(mode="after")
    def assemble_database_url(self) -> "Settings":
        if not self.database_url:
            self.database_url = URL.create(
                "postgresql+asyncpg",
                username=self.db_user,
                password=self.db_password,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            ).render_as_string(hide_password=False)
        return self

    @property
    def cors_method_list(self) -> list[str]:
        return [m.strip().upper() for m in self.cors_methods.split(",") if m.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
