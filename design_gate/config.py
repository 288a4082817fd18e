from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from design_gate.core.constants import (
    HEALTHY_CONNECTION_LIMIT,
    HEALTHY_HEAP_LIMIT_MB,
    MAX_BATCH_SIZE,
    METRICS_HISTORY_SIZE,
    MONITORING_INTERVAL_SECONDS,
)


class Settings(BaseSettings):
    # Application
    app_name: str = Field(default="Design Gate", description="Application name")
    env: str = Field(
        default="development", description="Environment (development/production)"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Logging
    logging_enabled: bool = Field(
        default=False, description="Also write logs to a rotating file"
    )
    log_dir: str = Field(default="./logs", description="Directory for log files")
    max_log_size_mb: int = Field(
        default=10, description="Maximum size of each log file in MB"
    )
    log_backup_count: int = Field(
        default=3, description="Number of backup log files to keep"
    )

    # Health monitoring
    metrics_history_size: int = Field(
        default=METRICS_HISTORY_SIZE, description="Snapshots kept in memory"
    )
    healthy_heap_limit_mb: float = Field(
        default=HEALTHY_HEAP_LIMIT_MB,
        description="Heap usage at or above this is unhealthy",
    )
    healthy_connection_limit: int = Field(
        default=HEALTHY_CONNECTION_LIMIT,
        description="Active connections at or above this is unhealthy",
    )
    monitoring_interval: float = Field(
        default=MONITORING_INTERVAL_SECONDS,
        description="Seconds between periodic metric samples",
    )

    # Batch processing
    max_batch_size: int = Field(
        default=MAX_BATCH_SIZE, description="Maximum files per batch analysis"
    )
    enforce_admission: bool = Field(
        default=False,
        description="Refuse batch analysis while the service is unhealthy",
    )
    supported_mime_types: Union[str, List[str]] = Field(
        default="application/pdf,image/svg+xml,image/png,image/jpeg,image/jpg,application/postscript",
        description="Mimetypes accepted without a warning",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="DESIGN_GATE_",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v):
        allowed = ["development", "production", "testing"]
        if v not in allowed:
            raise ValueError(f"env must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("metrics_history_size", "max_batch_size")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("monitoring_interval")
    @classmethod
    def validate_interval(cls, v):
        if v <= 0:
            raise ValueError("monitoring_interval must be positive")
        return v

    @field_validator("supported_mime_types", mode="before")
    @classmethod
    def parse_comma_separated_list(cls, v):
        """Parse comma-separated string into list."""
        if isinstance(v, str):
            if not v:
                return []
            return [item.strip().lower() for item in v.split(",") if item.strip()]
        return v

    @property
    def json_logs(self) -> bool:
        return self.env == "production"


settings = Settings()
