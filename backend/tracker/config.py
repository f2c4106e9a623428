"""Task tracker configuration — database, HTTP, logging settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///data/tracker.db"
    sqlite_busy_timeout_ms: int = 5000  # wait on writer lock before failing

    # CORS (comma-separated origins)
    cors_origins: str = "http://localhost:3000"

    # Server (used by `python -m tracker.cli serve`)
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def get_cors_origins() -> list[str]:
    """Split the comma-separated CORS setting into a clean list."""
    return [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
