from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
)


class DatabaseConfig(BaseSettings):
    """Configuration for the record store database."""

    model_config = SettingsConfigDict(env_prefix="CLUSTERBOOT_DATABASE_")

    url: str = Field(
        default="sqlite+aiosqlite:///clusterboot.db",
        description="SQLAlchemy async database URL (e.g., sqlite+aiosqlite:///clusterboot.db)",
    )
