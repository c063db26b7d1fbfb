"""
Configuration management for the FASTA Organism Filter.

This module provides configuration classes and utilities for managing
output formatting, progress reporting, and logging settings.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
import json


@dataclass
class FilterConfig:
    """FASTA processing and output formatting settings."""
    residues_per_line: int = 60
    max_description_length: int = 7500
    progress_interval_seconds: float = 10.0
    default_output_suffix: str = "_Filtered"


@dataclass
class LoggingConfig:
    """Logging system configuration."""
    level: str = "INFO"
    format: str = "text"  # "text" or "json"
    log_file: Optional[str] = None
    max_file_size_mb: int = 100
    backup_count: int = 5


@dataclass
class SystemConfig:
    """Main system configuration combining all subsystem configs."""
    filter: FilterConfig = field(default_factory=FilterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "SystemConfig":
        """Create configuration from environment variables."""
        config = cls()

        # Filter configuration from environment
        if os.getenv("FASTA_FILTER_RESIDUES_PER_LINE"):
            config.filter.residues_per_line = int(os.getenv("FASTA_FILTER_RESIDUES_PER_LINE"))
        if os.getenv("FASTA_FILTER_MAX_DESCRIPTION_LENGTH"):
            config.filter.max_description_length = int(os.getenv("FASTA_FILTER_MAX_DESCRIPTION_LENGTH"))
        if os.getenv("FASTA_FILTER_PROGRESS_INTERVAL"):
            config.filter.progress_interval_seconds = float(os.getenv("FASTA_FILTER_PROGRESS_INTERVAL"))

        # Logging configuration from environment
        if os.getenv("LOG_LEVEL"):
            config.logging.level = os.getenv("LOG_LEVEL")
        if os.getenv("LOG_FILE"):
            config.logging.log_file = os.getenv("LOG_FILE")
        if os.getenv("LOG_FORMAT"):
            config.logging.format = os.getenv("LOG_FORMAT")

        return config

    @classmethod
    def from_file(cls, config_path: str) -> "SystemConfig":
        """Load configuration from JSON file."""
        with open(config_path, 'r') as f:
            config_data = json.load(f)

        config = cls()

        if "filter" in config_data:
            for key, value in config_data["filter"].items():
                if hasattr(config.filter, key):
                    setattr(config.filter, key, value)

        if "logging" in config_data:
            for key, value in config_data["logging"].items():
                if hasattr(config.logging, key):
                    setattr(config.logging, key, value)

        return config


# Global configuration instance
_config: Optional[SystemConfig] = None


def get_config() -> SystemConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = SystemConfig.from_env()
    return _config


def set_config(config: Optional[SystemConfig]) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def load_config_from_file(config_path: str) -> SystemConfig:
    """Load and set configuration from file."""
    config = SystemConfig.from_file(config_path)
    set_config(config)
    return config
