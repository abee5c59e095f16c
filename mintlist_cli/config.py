"""
CLI Configuration

Configuration management for the mintlist CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


# Environment variable prefix
ENV_PREFIX = "MINTLIST_"

DEFAULT_CONFIG_FILE = "mintlist.json"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    output_dir: str = "merkle"
    default_output_format: str = "human"  # "human" or "json"

    # Eligibility checks (fallbacks when --source / --root are omitted)
    proofs_source: str | None = None
    expected_root: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_ENV_FIELDS = {
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
    "OUTPUT_DIR": "output_dir",
    "OUTPUT_FORMAT": "default_output_format",
    "PROOFS_URL": "proofs_source",
    "EXPECTED_ROOT": "expected_root",
}


def apply_env_overrides(config: CLIConfig) -> CLIConfig:
    """Override config fields from MINTLIST_* environment variables that are set."""
    for suffix, attr in _ENV_FIELDS.items():
        value = os.getenv(f"{ENV_PREFIX}{suffix}")
        if value:
            setattr(config, attr, value)
    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")

    config = CLIConfig()
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.output_dir = data.get("output_dir", config.output_dir)
    config.default_output_format = data.get("default_output_format", config.default_output_format)
    config.proofs_source = data.get("proofs_source", config.proofs_source)
    config.expected_root = data.get("expected_root", config.expected_root)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. Without an explicit path,
    ./mintlist.json, ./.mintlist.json and ~/.config/mintlist/config.json
    are tried in that order.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / DEFAULT_CONFIG_FILE,
            Path.cwd() / f".{DEFAULT_CONFIG_FILE}",
            Path.home() / ".config" / "mintlist" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    return apply_env_overrides(config)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "output_dir": "merkle",
  "default_output_format": "human",
  "proofs_source": null,
  "expected_root": null
}
"""
