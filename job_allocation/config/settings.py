"""
Application settings using Pydantic BaseSettings.
"""

from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Compliance Job Allocation Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: Union[str, List[str]] = "*"

    # Compliance REST API (jobs / technicians persistence)
    COMPLIANCE_API_BASE_URL: str = "http://localhost:5000/api"
    COMPLIANCE_API_TOKEN: Optional[str] = None
    COMPLIANCE_API_TIMEOUT: float = 30.0

    # Development
    USE_IN_MEMORY_GATEWAY: bool = False
    ENABLE_SWAGGER: bool = True

    # Allocation
    DEFAULT_MAX_JOBS: int = 5
    REPORT_CONTENT_TYPE: str = "application/pdf"
    REFRESH_BOARD_AFTER_ASSIGN: bool = True

    # Monitoring
    ENABLE_METRICS: bool = True

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return ["*"]

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ["development", "staging", "production", "test"]:
            raise ValueError(
                "Environment must be one of: development, staging, production, test"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("DEFAULT_MAX_JOBS")
    @classmethod
    def validate_default_max_jobs(cls, v: int) -> int:
        if v < 1:
            raise ValueError("DEFAULT_MAX_JOBS must be at least 1")
        return v

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}


# Global settings instance
settings = Settings()
