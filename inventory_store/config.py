from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"

    # Store
    store_backend: Literal["memory", "csv"] = "memory"
    data_dir: str = "inventory_data"

    # UI settings
    default_page_rows: int = 200

    # Seed data settings
    seed_item_count: int = 25
    seed_value: int = 42

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)
