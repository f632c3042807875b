"""
Configuration settings for the rota validation engine
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import AgeBand, RatioRules


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Nursery Rota Engine"
    app_version: str = "1.0.0"
    debug: bool = False

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: Path = Path("logs")
    log_to_file: bool = True

    # Database Settings
    database_url: Optional[str] = None
    db_min_pool_size: int = Field(default=1, ge=1)
    db_max_pool_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=30.0, gt=0)
    shifts_table: str = "shifts"
    members_table: str = "members"

    # Staff-to-Child Ratios by Age Band (1 staff per N children)
    under_two_ratio: int = 3
    two_year_old_ratio: int = 5
    three_plus_ratio: int = 8

    @field_validator("under_two_ratio", "two_year_old_ratio", "three_plus_ratio")
    @classmethod
    def validate_ratio(cls, v):
        if v <= 0:
            raise ValueError("Ratios must be positive")
        return v

    @field_validator("shifts_table", "members_table")
    @classmethod
    def validate_table_name(cls, v):
        # Interpolated into SQL: plain or schema-qualified identifiers only
        if not all(part.isidentifier() for part in v.split(".")):
            raise ValueError(f"Invalid table name: {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v!r}")
        return level

    def ratio_rules(self) -> RatioRules:
        """Build the default ratio rules from the configured ratios"""
        return RatioRules(
            ratios={
                AgeBand.UNDER_TWO: self.under_two_ratio,
                AgeBand.TWO_YEAR_OLD: self.two_year_old_ratio,
                AgeBand.THREE_PLUS: self.three_plus_ratio,
            }
        )


# Global settings instance
settings = Settings()
