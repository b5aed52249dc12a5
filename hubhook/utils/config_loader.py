"""Receiver configuration loader."""

from pathlib import Path  # noqa: TC003
from typing import Any

import yaml

from hubhook.models.config import ReceiverConfig
from hubhook.utils.logging import get_logger

logger = get_logger("utils.config_loader")


class ConfigLoaderError(Exception):
    """Error raised when configuration loading fails."""

    pass


# Config file names in order of precedence
CONFIG_FILE_NAMES = [
    ".hubhook.yml",
    ".hubhook.yaml",
]


def load_receiver_config(config_dir: Path) -> ReceiverConfig:
    """Load receiver configuration from a directory.

    Looks for ``.hubhook.yml`` then ``.hubhook.yaml``. Without a config
    file, the configuration comes from the environment alone.

    Args:
        config_dir: Directory holding the config file.

    Returns:
        ReceiverConfig instance.

    Raises:
        ConfigLoaderError: If config file exists but is invalid.
    """
    config_file = _find_config_file(config_dir)

    if config_file is None:
        logger.debug("No config file found, using environment", extra={"path": str(config_dir)})
        return ReceiverConfig.from_env()

    try:
        raw_config = _load_yaml_file(config_file)
    except (yaml.YAMLError, OSError) as e:
        raise ConfigLoaderError(f"Failed to read config file {config_file}: {e}") from e

    if not raw_config:
        logger.debug("Config file is empty, using environment", extra={"file": str(config_file)})
        return ReceiverConfig.from_env()

    if not isinstance(raw_config, dict):
        raise ConfigLoaderError(f"Config file {config_file} must contain a mapping")

    try:
        config = ReceiverConfig.from_file_config(raw_config)
    except ValueError as e:
        raise ConfigLoaderError(f"Invalid configuration in {config_file}: {e}") from e

    logger.info(
        "Loaded configuration",
        extra={
            "file": str(config_file),
            "verification_enabled": config.verification_enabled,
        },
    )
    return config


def _find_config_file(config_dir: Path) -> Path | None:
    for filename in CONFIG_FILE_NAMES:
        config_path = config_dir / filename
        if config_path.is_file():
            return config_path

    return None


def _load_yaml_file(filepath: Path) -> Any:
    content = filepath.read_text(encoding="utf-8")

    if not content.strip():
        return None

    return yaml.safe_load(content)
