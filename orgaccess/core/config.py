"""
Application Configuration
Environment variables and settings management
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Core settings with environment variable support"""

    # Application
    ENVIRONMENT: str = Field(default="development", description="Application environment")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Pagination
    DEFAULT_PAGE_LIMIT: int = Field(default=20, ge=1, description="Page size used when a caller omits one")
    MAX_PAGE_LIMIT: int = Field(default=100, ge=1, description="Upper bound accepted for a page size")

    # Department hierarchy
    ENFORCE_ACYCLIC_HIERARCHY: bool = Field(
        default=True,
        description="Reject parent assignments that would make a department its own ancestor",
    )
    MAX_HIERARCHY_DEPTH: int = Field(
        default=64,
        ge=1,
        description="Maximum number of ancestors walked while checking for cycles",
    )

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value"""
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    model_config = {
        "env_file": ".env",
        "env_prefix": "ORGACCESS_",
        "case_sensitive": True,
        "extra": "ignore",
    }


# Create settings instance
settings = Settings()
