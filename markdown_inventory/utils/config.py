"""
Configuration management for Markdown File Inventory.

Two layers:
- Settings: runtime knobs loaded from environment variables and .env files
  via pydantic-settings.
- Inventory config: the per-project task list read from
  ``<root>/.markdown-file-inventory.yaml``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from markdown_inventory.models.schemas import InventoryConfig
from markdown_inventory.utils.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Logging
    log_level: str = "INFO"

    # Inventory Configuration
    config_filename: str = ".markdown-file-inventory.yaml"
    default_format: str = "- [%s](%s) %s\n"
    date_format: str = "%Y-%m-%d"

    # Watch Configuration
    watch_recursive: bool = False
    watch_queue_size: int = 1000
    watch_poll_interval: float = 1.0  # seconds

    model_config = SettingsConfigDict(
        env_prefix="MARKDOWN_INVENTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_config_path(self, root_folder: Path) -> Path:
        """Location of the inventory config inside ``root_folder``."""
        return Path(root_folder) / self.config_filename


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_inventory_config(root_folder: Path, settings: Optional[Settings] = None) -> InventoryConfig:
    """
    Read and validate the task list for ``root_folder``.

    Args:
        root_folder: Directory holding the config file
        settings: Settings override (defaults to cached settings)

    Returns:
        Parsed inventory configuration

    Raises:
        ConfigError: If the file is missing, unreadable, not valid YAML or
            does not describe a task list
    """
    settings = settings or get_settings()
    config_path = settings.get_config_path(root_folder)

    try:
        raw = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error reading config file {config_path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML config {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Error parsing YAML config {config_path}: expected a mapping at top level")

    try:
        config = InventoryConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e

    logger.debug(f"Loaded {len(config.tasks)} tasks from {config_path}")
    return config
