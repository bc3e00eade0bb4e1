"""
Centralized configuration for the policy generator.

Resolution order for every setting:
1. Command-line argument
2. Environment variable (POLICYGEN_*)
3. YAML settings file (POLICYGEN_CONFIG or --config)
4. Built-in default

The ANKA required-module list is deliberately absent: it is a frozen
constant in policygen.contracts.required, not a setting.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

# ============================================================
# Defaults
# ============================================================

DEFAULT_SOURCE: str = "ontology/stdlib_surface.v1_0.ontology.json"
"""Surface document, relative to the working directory."""

DEFAULT_DESTINATION: str = "spec/v1_0/anka_policy_allowed_stdlib.v1.json"
"""Policy document, relative to the working directory."""

# ============================================================
# Environment
# ============================================================

ENV_CONFIG = "POLICYGEN_CONFIG"
ENV_SOURCE = "POLICYGEN_SOURCE"
ENV_DESTINATION = "POLICYGEN_DESTINATION"
ENV_VARIANT = "POLICYGEN_VARIANT"
ENV_LOG_LEVEL = "POLICYGEN_LOG_LEVEL"
ENV_LOG_FORMAT = "POLICYGEN_LOG_FORMAT"

_ENV_FIELDS = {
    ENV_SOURCE: "source",
    ENV_DESTINATION: "destination",
    ENV_VARIANT: "variant",
    ENV_LOG_LEVEL: "log_level",
    ENV_LOG_FORMAT: "log_format",
}


class SettingsError(Exception):
    """Raised when the settings file or environment is invalid."""

    pass


class ToolSettings(BaseModel):
    """Resolved generator settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str = DEFAULT_SOURCE
    destination: str = DEFAULT_DESTINATION
    variant: Literal["permissive", "strict"] = "permissive"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["auto", "human", "json"] = "auto"


def load_settings_file(path: str | Path) -> dict[str, Any]:
    """Load a YAML settings file. An empty file yields no overrides."""
    config_file = Path(path)
    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SettingsError(f"cannot read settings file {config_file}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"settings file is not valid YAML: {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"settings file must contain a mapping: {config_file}")
    return data


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ToolSettings:
    """
    Resolve settings from the YAML file and environment.

    Args:
        config_path: Settings file. Falls back to $POLICYGEN_CONFIG; none = no file.
        environ: Environment mapping (defaults to os.environ)
    """
    env = os.environ if environ is None else environ

    values: dict[str, Any] = {}
    path = config_path or env.get(ENV_CONFIG)
    if path:
        values.update(load_settings_file(path))

    for var, field in _ENV_FIELDS.items():
        if env.get(var):
            values[field] = env[var]

    if isinstance(values.get("log_level"), str):
        values["log_level"] = values["log_level"].upper()

    try:
        return ToolSettings.model_validate(values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise SettingsError(f"invalid settings: {problems}") from e
