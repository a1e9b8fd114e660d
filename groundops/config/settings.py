from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "groundops"
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )
    override_url: Optional[str] = Field(
        default=None,
        validation_alias="DB_URL",
        description="Full SQLAlchemy URL; takes precedence over the discrete fields.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.override_url:
            return self.override_url
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class CrisisConfig(BaseSettings):
    """Fuel-supply crisis (manual bowser) configuration."""

    bowser_count: int = Field(default=4, ge=1)
    manual_pump_speed: int = Field(
        default=500,
        gt=0,
        description="Manual bowser pump rate in liters per minute.",
    )
    international_slots: list[int] = [1, 2, 3]
    domestic_slot: int = 4
    international_penalty_rate: int = Field(default=15000, ge=0)
    international_gates: list[str] = ["G5", "G6", "G7", "G8"]

    model_config = SettingsConfigDict(
        env_prefix="CRISIS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Ground Operations TAT Service"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    seed_on_startup: bool = True

    # Turnaround defaults
    domestic_penalty_rate: int = Field(default=5400, ge=0)
    simulation_trials: int = Field(default=1000, ge=1, le=100_000)

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Fuel crisis
    crisis: CrisisConfig = Field(default_factory=CrisisConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
