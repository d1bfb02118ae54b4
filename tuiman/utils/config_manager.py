"""Configuration manager for persistent settings stored as JSON."""

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import (
    ConfigurationError,
    FileSystemError,
    InvalidConfigError,
    TuimanError,
)
from .logging import get_logger, log_call

logger = get_logger(__name__)


class _Section(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="ignore")


class UIConfig(_Section):
    """Initial pane ratios. Runtime resizes are not written back."""

    split_ratio: float = Field(default=0.66, ge=0.20, le=0.80)
    response_ratio: float = Field(default=0.28, ge=0.15, le=0.70)


class HTTPConfig(_Section):
    """Pydantic model for transport settings."""

    timeout: float = Field(default=30.0, gt=0)  # in seconds
    follow_redirects: bool = True
    verify_tls: bool = True


class EditorConfig(_Section):
    """External editor command; empty falls back to $VISUAL, $EDITOR, vi."""

    command: str = ""


class HistoryConfig(_Section):
    list_limit: int = Field(default=500, ge=1)


class SecretsConfig(_Section):
    """Pydantic model for secret store settings."""

    backend: Literal["auto", "keyring", "encrypted_file"] = "auto"
    service_name: str = "tuiman"


class LoggingConfig(_Section):
    """Pydantic model for logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    max_file_size: int = 5_242_880  # 5 MB
    backup_count: int = 3


class AppConfig(_Section):
    """Pydantic model for overall application configuration."""

    version: str = "1"
    ui: UIConfig = Field(default_factory=UIConfig)
    http: HTTPConfig = Field(default_factory=HTTPConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    secrets: SecretsConfig = Field(default_factory=SecretsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages persistent application configuration."""

    def __init__(self, config_path: Path):
        self.path = config_path
        self.config = self._load_or_create_config()
        logger.info(f"Configuration loaded from {self.path}")

    def _load_or_create_config(self) -> AppConfig:
        """Load configuration from file or create default if not present."""

        if not self.path.exists():
            logger.info("No config file found, creating default configuration.")
            config = AppConfig()
            self._save_config(config)
            return config

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = AppConfig.model_validate(data)
            logger.debug("Configuration successfully loaded and validated.")
            return config

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse config file: {e}")
            raise InvalidConfigError(
                f"Configuration file is not valid JSON: {str(e)}"
            ) from e
        except PydanticValidationError as e:
            logger.error(f"Failed to validate config file: {e}")
            raise InvalidConfigError(
                f"Configuration data does not match expected schema: {str(e)}"
            ) from e
        except OSError as e:
            raise FileSystemError(f"Failed to read configuration file: {str(e)}") from e

    def _save_config(self, config: AppConfig | None = None) -> None:
        """Save the current configuration to file."""

        config = config or self.config

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)
            logger.debug("Configuration successfully saved.")
        except OSError as e:
            raise FileSystemError(f"Failed to write configuration file: {str(e)}") from e

    @log_call
    def set_config(self, key_path: str, value: Any, persist: bool = True) -> None:
        """Set a configuration value using dot-separated key path."""

        keys = key_path.split(".")
        obj: Any = self.config

        for key in keys[:-1]:
            if not isinstance(obj, BaseModel) or key not in type(obj).model_fields:
                raise InvalidConfigError(
                    f"Configuration path '{key_path}' is invalid: '{key}' not found"
                )
            obj = getattr(obj, key)

        if not isinstance(obj, BaseModel) or keys[-1] not in type(obj).model_fields:
            raise InvalidConfigError(
                f"Configuration key '{keys[-1]}' does not exist in path '{key_path}'"
            )

        try:
            setattr(obj, keys[-1], value)
        except PydanticValidationError as e:
            raise InvalidConfigError(
                f"Invalid value for '{key_path}': {str(e)}"
            ) from e

        if persist:
            self._save_config()

        logger.info(f"Config key '{key_path}' updated.")

    @log_call
    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""

        try:
            logger.warning("Resetting configuration to default values.")
            self.config = AppConfig()
            self._save_config()
        except TuimanError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to reset configuration to defaults: {str(e)}"
            ) from e
