"""Configuration and environment loading for the AHSAS portal functions."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    supabase_url: str
    supabase_service_role_key: str

    # Admin bootstrap
    setup_key: str
    admin_member_id: str = "540"
    admin_password: str
    admin_default_name: str = "System Administrator"

    # Identity search bounds
    identity_page_size: int = Field(default=200, gt=0)
    identity_max_pages: int = Field(default=20, gt=0)

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_allow_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
