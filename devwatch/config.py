from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    devwatch_db_url: str = "sqlite+aiosqlite:///data/devwatch.db"

    # Logging
    devwatch_log_level: str = "info"

    # Availability accounting
    devwatch_availability_policy: str = "decreasing"  # "increasing" or "decreasing"
    devwatch_availability_precision: int = 3

    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
