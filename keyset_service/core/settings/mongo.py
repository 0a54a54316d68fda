"""MongoDB connection settings for the Motor query executor.

Environment variables use MONGO_ prefix.
Example: MONGO_URI=mongodb://localhost:27017, MONGO_DATABASE=app
"""

from __future__ import annotations

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MongoSettings(BaseSettings):
    """MongoDB client settings.

    The URI is kept as a secret because it usually embeds credentials.
    """

    uri: SecretStr = Field(
        default=SecretStr("mongodb://localhost:27017"),
        description="MongoDB connection string",
    )
    database: str = Field(
        default="app",
        min_length=1,
        description="Database holding the paginated collections",
    )
    server_selection_timeout_ms: int = Field(
        default=5000,
        ge=100,
        le=120_000,
        description="Server selection timeout in milliseconds",
    )
    tz_aware: bool = Field(
        default=False,
        description="Return timezone-aware datetimes from the driver",
    )

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @computed_field
    @property
    def client_kwargs(self) -> dict[str, object]:
        """Keyword arguments for ``AsyncIOMotorClient``."""
        return {
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "tz_aware": self.tz_aware,
        }
