"""
Configuration management for the chunk store.

Provides typed configuration classes with environment variable
injection and validation.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Any

from chunkstore.utils.errors import ConfigurationError


def _env_int(name: str, default: str) -> int:
    """Read an integer environment variable."""
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}",
            config_key=name,
            config_value=raw,
        ) from None


@dataclass
class ObservabilityConfig:
    """Observability configuration."""
    log_level: str = field(default_factory=lambda: os.getenv("CHUNKSTORE_LOG_LEVEL", "info"))
    log_format: str = field(default_factory=lambda: os.getenv("CHUNKSTORE_LOG_FORMAT", "json"))
    
    def __post_init__(self):
        if self.log_level.lower() not in ["debug", "info", "warning", "error", "critical"]:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}",
                config_key="log_level",
                config_value=self.log_level,
            )
        
        if self.log_format not in ["json", "console"]:
            raise ConfigurationError(
                f"Invalid log format: {self.log_format}",
                config_key="log_format",
                config_value=self.log_format,
            )


@dataclass
class StorageConfig:
    """Storage pipeline configuration."""
    page_size: int = field(default_factory=lambda: _env_int("CHUNKSTORE_PAGE_SIZE", "200"))
    batch_size: int = field(default_factory=lambda: _env_int("CHUNKSTORE_BATCH_SIZE", "100"))
    
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)
    
    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.page_size <= 0:
            raise ConfigurationError(
                f"page_size must be positive, got {self.page_size}",
                config_key="page_size",
                config_value=self.page_size,
            )
        
        if self.batch_size <= 0:
            raise ConfigurationError(
                f"batch_size must be positive, got {self.batch_size}",
                config_key="batch_size",
                config_value=self.batch_size,
            )
    
    @classmethod
    def from_env(cls) -> "StorageConfig":
        """Create configuration from environment variables."""
        return cls()
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "page_size": self.page_size,
            "batch_size": self.batch_size,
            "observability": {
                "log_level": self.observability.log_level,
                "log_format": self.observability.log_format,
            },
        }
