"""
Validator settings and loading.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class LoggingSettings(BaseModel):
    """Logging output configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class ValidatorSettings(BaseModel):
    """Policy knobs for the validation engine.

    Attributes:
        default_input_connection_limit: Connections an input port accepts when
            its definition sets no max_connections
        report_execution_cycles: Emit an EXECUTION_CYCLE warning for every cycle
            among execution edges, even when the chain is complete
        global_variable_toggle: Block parameter that switches on global-variable use
        global_variable_selection: Block parameter naming the selected global
        logging: Logging output configuration (used by the CLI)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    default_input_connection_limit: int = Field(default=1, gt=0)
    report_execution_cycles: bool = False
    global_variable_toggle: str = Field(default="useGlobalVariable", min_length=1)
    global_variable_selection: str = Field(default="selectedGlobalVariable", min_length=1)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path) -> ValidatorSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (FLOWGUARD_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: FLOWGUARD_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated ValidatorSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="FLOWGUARD",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return ValidatorSettings(**raw_config)


def _lower_keys(value: object) -> object:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
