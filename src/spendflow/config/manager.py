"""User configuration manager (API key and overrides)."""
import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from spendflow.utils.exceptions import ConfigError

ENV_API_KEY = "GEMINI_API_KEY"
ENV_LOG_LEVEL = "SPENDFLOW_LOG_LEVEL"
ENV_MODEL = "SPENDFLOW_MODEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """User configuration."""
    gemini_api_key: str = ""
    log_level: str = "INFO"
    # Overrides llm.model_name from settings.yaml when set
    model_name: Optional[str] = None


class ConfigManager:
    """Loads user configuration from a JSON file with environment overrides."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / ".spendflow"
        self.config_file = self.config_dir / "config.json"

    def load_config(self) -> Optional[Config]:
        """
        Load configuration.

        Returns:
            Config, or None when neither a config file nor environment
            variables provide anything
        """
        config = None

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config = Config(**json.load(f))
            except (OSError, ValueError, TypeError) as e:
                raise ConfigError(f"Failed to load configuration: {e}")

        env_key = os.getenv(ENV_API_KEY)
        env_level = os.getenv(ENV_LOG_LEVEL)
        env_model = os.getenv(ENV_MODEL)

        if config is None and not (env_key or env_level or env_model):
            return None

        config = config or Config()
        if env_key:
            config.gemini_api_key = env_key
        if env_level:
            config.log_level = env_level.upper()
        if env_model:
            config.model_name = env_model

        return config

    def save_config(self, config: Config) -> None:
        """Save configuration to the config file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def validate_config(self, config: Config) -> tuple[bool, str]:
        """Validate configuration values for remote analysis."""
        if not config.gemini_api_key:
            return False, f"Gemini API key is required ({ENV_API_KEY})"

        if config.log_level.upper() not in LOG_LEVELS:
            return False, f"Unknown log level: {config.log_level}"

        return True, "Configuration is valid"
