"""Application settings loader from YAML configuration."""
import os
import yaml
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass

from spendflow.utils.exceptions import ConfigError

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from settings.yaml."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int

    # Import
    import_max_file_size_mb: int
    csv_encodings: List[str]
    pdf_min_text_length: int

    # LLM
    llm_model_name: str
    llm_temperature: float
    llm_timeout_seconds: float
    llm_max_transactions: int
    llm_description_max_length: int

    # Retry
    retry_max_retries: int
    retry_initial_delay_seconds: float
    retry_backoff_factor: float

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            override = os.getenv("SPENDFLOW_SETTINGS")
            config_path = Path(override) if override else DEFAULT_SETTINGS_PATH

        if not config_path.exists():
            raise ConfigError(f"Settings file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        try:
            return cls(
                app_name=config["app"]["name"],
                app_version=str(config["app"]["version"]),
                log_level=config["logging"]["level"],
                log_max_file_size_mb=config["logging"]["max_file_size_mb"],
                log_backup_count=config["logging"]["backup_count"],
                import_max_file_size_mb=config["import"]["max_file_size_mb"],
                csv_encodings=list(config["import"]["csv_encodings"]),
                pdf_min_text_length=config["import"]["pdf_min_text_length"],
                llm_model_name=config["llm"]["model_name"],
                llm_temperature=float(config["llm"]["temperature"]),
                llm_timeout_seconds=float(config["llm"]["timeout_seconds"]),
                llm_max_transactions=config["llm"]["max_transactions"],
                llm_description_max_length=config["llm"]["description_max_length"],
                retry_max_retries=config["retry"]["max_retries"],
                retry_initial_delay_seconds=float(config["retry"]["initial_delay_seconds"]),
                retry_backoff_factor=float(config["retry"]["backoff_factor"])
            )
        except (KeyError, TypeError) as e:
            raise ConfigError(f"Invalid settings file {config_path}: missing {e}")


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
