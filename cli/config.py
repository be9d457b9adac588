"""Configuration file handling for the schemac CLI.

Config lives in ``~/.schemac.yaml`` (or ``$SCHEMAC_CONFIG``) and holds named
connections, referenced on the command line as ``@name``, plus output and
compile defaults.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

CONFIG_ENV_VAR = "SCHEMAC_CONFIG"
DEFAULT_CONFIG_NAME = ".schemac.yaml"

# ============================================================================
# Config Models
# ============================================================================


class OutputDefaults(BaseModel):
    """Defaults for rendering compiled schemas"""

    format: str = Field(default="json", description="Output format: json or yaml")
    pretty: bool = Field(default=False, description="Pretty-print JSON output")


class CompileDefaults(BaseModel):
    """Defaults for compilation"""

    schema_name: str | None = Field(default=None, alias="schema", description="Database schema to read")
    dialect_options: dict[str, Any] = Field(default_factory=dict, description="Options passed to the dialect visitor")

    model_config = {"populate_by_name": True}


class Defaults(BaseModel):
    output: OutputDefaults = Field(default_factory=OutputDefaults)
    compile: CompileDefaults = Field(default_factory=CompileDefaults)


class Config(BaseModel):
    """Contents of the config file"""

    version: str = Field(default="1.0", description="Config file version")
    connections: dict[str, str] = Field(default_factory=dict, description="Named connection strings")
    defaults: Defaults = Field(default_factory=Defaults)


# ============================================================================
# Loading and Saving
# ============================================================================


def get_config_path() -> Path:
    """Return the config file path, honouring $SCHEMAC_CONFIG"""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.home() / DEFAULT_CONFIG_NAME


def load_config() -> Config:
    """Load the config file, returning defaults if it does not exist.

    Raises:
        ValueError: If the file is not valid YAML or fails validation
    """
    config_path = get_config_path()
    if not config_path.exists():
        return Config()

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file {config_path}: expected a mapping at the top level")

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e


def save_config(config: Config) -> Path:
    """Write the config file and return its path"""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(by_alias=True)
    config_path.write_text(
        yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False), encoding="utf-8"
    )
    return config_path


def init_config(force: bool = False) -> Path:
    """Create a config file with default values.

    Raises:
        FileExistsError: If the file exists and force is False
    """
    config_path = get_config_path()
    if config_path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {config_path}")
    return save_config(Config())


# ============================================================================
# Accessors
# ============================================================================


def get_connection(name: str, config: Config | None = None) -> str:
    """Look up a named connection.

    Raises:
        KeyError: If the connection is not defined
    """
    config = config or load_config()
    if name not in config.connections:
        raise KeyError(f"Connection '{name}' not found in config")
    return config.connections[name]


def resolve_connection(connection: str, config: Config | None = None) -> str:
    """Resolve '@name' references; other strings are returned unchanged"""
    if connection.startswith("@"):
        return get_connection(connection[1:], config)
    return connection


def get_output_defaults(config: Config | None = None) -> OutputDefaults:
    config = config or load_config()
    return config.defaults.output


def get_compile_defaults(config: Config | None = None) -> CompileDefaults:
    config = config or load_config()
    return config.defaults.compile


def validate_config(config: Config) -> list[str]:
    """Return a list of problems with the config (empty if valid)"""
    errors = []

    if config.defaults.output.format not in ("json", "yaml"):
        errors.append("'defaults.output.format' must be 'json' or 'yaml'")

    for name, connection_string in config.connections.items():
        if not connection_string:
            errors.append(f"Connection '{name}' has an empty connection string")
        elif "://" not in connection_string:
            errors.append(f"Connection '{name}' is not a URL (expected e.g. postgresql://host/db)")

    return errors
