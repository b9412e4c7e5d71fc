"""Configuration file support for dna-trait-loader."""

import logging
import tomllib
from pathlib import Path
from typing import Any

from .loader import LoadConfig

logger = logging.getLogger(__name__)

CONFIG_TABLE = "dna_trait_loader"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

POSITIVE_INT_FIELDS = ("max_errors", "progress_interval")
BOOL_FIELDS = ("illustrative_examples", "normalize_alleles")

VALID_FIELDS = {
    "max_errors",
    "progress_interval",
    "illustrative_examples",
    "normalize_alleles",
    "knowledge_base_path",
    "log_level",
    "invalid_line_ratio",
}


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


def validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigValidationError: If any configuration value is invalid.
    """
    for name in POSITIVE_INT_FIELDS:
        if name not in config_dict:
            continue
        value = config_dict[name]
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigValidationError(
                f"{name} must be an integer, got {type(value).__name__}"
            )
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")

    for name in BOOL_FIELDS:
        if name in config_dict and not isinstance(config_dict[name], bool):
            raise ConfigValidationError(
                f"{name} must be a boolean, got {type(config_dict[name]).__name__}"
            )

    if "knowledge_base_path" in config_dict:
        kb_path = config_dict["knowledge_base_path"]
        if not isinstance(kb_path, str | Path):
            raise ConfigValidationError(
                f"knowledge_base_path must be a string, got {type(kb_path).__name__}"
            )

    if "invalid_line_ratio" in config_dict:
        ratio = config_dict["invalid_line_ratio"]
        if not isinstance(ratio, int | float) or isinstance(ratio, bool):
            raise ConfigValidationError(
                f"invalid_line_ratio must be a number, got {type(ratio).__name__}"
            )
        if not 0 <= ratio <= 1:
            raise ConfigValidationError(
                f"invalid_line_ratio must be between 0 and 1, got {ratio}"
            )

    if "log_level" in config_dict:
        log_level = config_dict["log_level"]
        if not isinstance(log_level, str):
            raise ConfigValidationError(
                f"log_level must be a string, got {type(log_level).__name__}"
            )
        if log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of {VALID_LOG_LEVELS}, got '{log_level}'"
            )


def load_config(config_path: Path, overrides: dict[str, Any] | None = None) -> LoadConfig:
    """Load configuration from a TOML file.

    Settings are read from the ``[dna_trait_loader]`` table; unknown keys
    are ignored with a warning.

    Args:
        config_path: Path to the TOML configuration file.
        overrides: Optional dict of values to override loaded config.

    Returns:
        LoadConfig instance with loaded values.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigValidationError: If the file is not valid TOML or a value is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {config_path}: {e}") from e

    config_dict = dict(toml_data.get(CONFIG_TABLE, {}))

    if overrides:
        config_dict.update(overrides)

    validate_config(config_dict)

    unknown = sorted(set(config_dict) - VALID_FIELDS)
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

    filtered_config = {k: v for k, v in config_dict.items() if k in VALID_FIELDS}

    if filtered_config.get("knowledge_base_path") is not None:
        kb_path = Path(filtered_config["knowledge_base_path"])
        if not kb_path.is_absolute():
            kb_path = config_path.parent / kb_path
        filtered_config["knowledge_base_path"] = kb_path

    if "log_level" in filtered_config:
        filtered_config["log_level"] = filtered_config["log_level"].upper()

    return LoadConfig(**filtered_config)
