"""Application configuration with validation."""
from typing import Optional, Literal
from functools import lru_cache
from pydantic import Field, model_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Scoring engine settings, read from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Candidate Evaluation Scoring Engine"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Scoring
    # Tag written into every breakdown so stored rows can be traced to the
    # preset family / penalty table that produced them.
    SCORING_VERSION: str = "v1"
    # Reference year that closes open-ended roles. Never read from the clock.
    AS_OF_YEAR: int = Field(default=2026, ge=1950, le=2100)

    # Batch recompute
    RECOMPUTE_WORKERS: int = Field(default=8, ge=1, le=64)

    # Audit thresholds
    AUDIT_INTEGRITY_TOLERANCE: float = Field(default=0.5, ge=0, le=5)
    AUDIT_COMPOSITE_TOLERANCE: float = Field(default=0.15, ge=0, le=5)
    AUDIT_SPREAD_THRESHOLD: int = Field(default=70, ge=10, le=100)
    AUDIT_ZSCORE_THRESHOLD: float = Field(default=2.5, ge=1.0, le=6.0)
    AUDIT_MIN_GROUP_SIZE: int = Field(default=5, ge=3, le=1000)

    # Snowflake
    SNOWFLAKE_ACCOUNT: Optional[str] = None
    SNOWFLAKE_USER: Optional[str] = None
    SNOWFLAKE_PASSWORD: Optional[SecretStr] = None
    SNOWFLAKE_DATABASE: Optional[str] = None
    SNOWFLAKE_SCHEMA: Optional[str] = None
    SNOWFLAKE_WAREHOUSE: Optional[str] = None
    SNOWFLAKE_ROLE: Optional[str] = None

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Production runs always write to Snowflake, so its settings are required."""
        if self.APP_ENV == "production":
            missing = [
                name for name in (
                    "SNOWFLAKE_ACCOUNT", "SNOWFLAKE_USER", "SNOWFLAKE_PASSWORD",
                    "SNOWFLAKE_DATABASE", "SNOWFLAKE_SCHEMA", "SNOWFLAKE_WAREHOUSE",
                )
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(f"Missing Snowflake settings in production: {', '.join(missing)}")
        return self

    @property
    def snowflake_configured(self) -> bool:
        return self.SNOWFLAKE_ACCOUNT is not None and self.SNOWFLAKE_USER is not None


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
