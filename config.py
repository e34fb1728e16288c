"""Configuration management for the request metrics demo server"""
from pathlib import Path
from typing import List, Literal, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Configuration class with Pydantic validation and environment-based settings"""

    # Server settings
    metrics_host: str = Field(default="0.0.0.0", description="HTTP server host")
    metrics_port: int = Field(default=3000, ge=1, le=65535, description="HTTP server port")

    # Service settings
    service_name: str = Field(default="request-metrics-demo", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    # Metrics settings
    collect_default_metrics: bool = Field(default=True, description="Register process and runtime metrics")
    eventloop_monitoring_precision: float = Field(default=0.01, gt=0, description="Event loop lag sampling interval in seconds")
    expose_created_series: bool = Field(default=False, description="Emit _created samples for counters")
    disabled_collectors_str: str = Field(
        default="",
        description="Default-bundle collectors to skip (comma-separated, e.g. gc,eventloop)"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")
    enable_request_logging: bool = Field(default=True, description="Enable HTTP request logging")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        """Accept log levels in any case"""
        if isinstance(v, str):
            return v.upper()
        return v

    @validator('log_file')
    def ensure_parent_directories(cls, v):
        """Ensure parent directories exist for file paths"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def disabled_collectors(self) -> List[str]:
        """Get disabled collectors as a list"""
        return [item.strip() for item in self.disabled_collectors_str.split(',') if item.strip()]

    def is_collector_enabled(self, collector_name: str) -> bool:
        """Check if a specific default collector is enabled"""
        return collector_name not in self.disabled_collectors

    @property
    def bind_address(self) -> str:
        return f"{self.metrics_host}:{self.metrics_port}"
