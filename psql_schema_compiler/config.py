import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .exceptions import ConfigInvalidError


logger = logging.getLogger(__name__)


# --- Pydantic Model for Configuration Schema ---


class CompilerConfig(BaseModel):
    """Pydantic schema for the compiler configuration."""

    model_config = ConfigDict(extra="ignore")

    schema_name: str = Field(
        "",
        description="PostgreSQL schema every generated table belongs to.",
    )
    use_big_serial: bool = Field(
        False,
        description="Use BIGSERIAL/BIGINT instead of SERIAL/INTEGER for auto-increment keys.",
    )

    @field_validator("schema_name", mode="before")
    @classmethod
    def strip_schema_name(cls, v: Any) -> Any:
        """Trim surrounding whitespace from the schema name."""
        if isinstance(v, str):
            return v.strip()
        return v

    def ensure_valid(self) -> None:
        """
        Check the configuration is usable for compilation.

        Raises:
            ConfigInvalidError: The schema name is empty
        """
        if not self.schema_name or not self.schema_name.strip():
            raise ConfigInvalidError("schema cannot be empty")


# --- Validation Function (Internal) ---
def _validate_and_parse_config(
    config_dict: Dict[str, Any], config_file: Optional[str] = None
) -> CompilerConfig:
    """
    Validates a raw configuration dictionary against the Pydantic schema.
    Logs every validation problem and raises ConfigInvalidError on failure.
    """
    try:
        validated_config = CompilerConfig.model_validate(config_dict)
        logger.debug("Configuration dictionary parsed and validated successfully.")
        return validated_config
    except ValidationError as e:
        problems = []
        for error in e.errors():
            loc_parts = [str(loc_item) for loc_item in error.get("loc", ())]
            loc_str = " -> ".join(loc_parts) if loc_parts else "Top Level"
            msg = error.get("msg", "Unknown error")
            logger.error(f"Configuration error at '{loc_str}': {msg}")
            problems.append(f"{loc_str}: {msg}")
        raise ConfigInvalidError(
            "Configuration validation failed: " + "; ".join(problems),
            config_file=config_file,
        ) from e


# --- Main Configuration Loading Function ---


def load_config(
    config_path: Optional[str], cli_args: Optional[argparse.Namespace] = None
) -> CompilerConfig:
    """
    Loads configuration from YAML file, merges with CLI arguments,
    validates the result, and returns a validated Pydantic model instance.

    Raises:
        ConfigInvalidError: The file cannot be parsed or the merged values
            fail validation
    """
    raw_config: Dict[str, Any] = {}

    # 1. Load from YAML file if path is provided
    if config_path:
        config_file = Path(config_path)
        if not config_file.is_file():
            raise ConfigInvalidError(
                f"Config file not found at {config_path}", config_file=config_path
            )
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigInvalidError(
                f"Error parsing YAML file {config_path}: {e}", config_file=config_path
            ) from e
        if yaml_config and isinstance(yaml_config, dict):
            raw_config.update(yaml_config)
            logger.debug(f"Loaded configuration from {config_path}")
        elif yaml_config:
            logger.warning(
                f"Content in config file {config_path} is not a dictionary. Ignoring file content."
            )

    # 2. Override with CLI arguments (only those explicitly provided)
    if cli_args is not None:
        overridden_keys = set()
        for key, value in vars(cli_args).items():
            if value is not None and key in CompilerConfig.model_fields:
                raw_config[key] = value
                overridden_keys.add(key)
        if overridden_keys:
            logger.debug(f"Overridden config keys from CLI arguments: {overridden_keys}")

    # 3. Validate the combined configuration dictionary using Pydantic
    validated_config = _validate_and_parse_config(raw_config, config_file=config_path)
    validated_config.ensure_valid()

    logger.info("Configuration loaded and validated successfully.")
    return validated_config
