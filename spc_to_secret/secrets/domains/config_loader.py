"""Configuration loader for spc-to-secret."""
import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional
import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("aws", "gcp")

DEFAULT_CONFIG: Dict[str, Any] = {
    "backend": "aws",
    "aws": {},
    "gcp": {},
}


def default_config_path() -> Path:
    """XDG default location: ~/.config/spc-to-secret/config.yml"""
    return Path.home() / ".config" / "spc-to-secret" / "config.yml"


def _get_config_path(explicit_path: Optional[str] = None) -> Optional[str]:
    """
    Get config file path.

    Priority order:
    1. Explicit path (the --config flag)
    2. Default location: ~/.config/spc-to-secret/config.yml

    Returns:
        Absolute path to config file, or None when no config file exists

    Raises:
        ConfigError: If an explicit path was given but doesn't exist
    """
    if explicit_path:
        config_path = Path(explicit_path).expanduser()
        if not config_path.is_file():
            raise ConfigError(f"Configuration file not found at: {config_path}")
        logger.info(f"Using config from --config: {config_path}")
        return str(config_path)

    default_config = default_config_path()
    if default_config.is_file():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    logger.debug(f"No config file at {default_config}, using defaults")
    return None


def _require_section(config: Dict[str, Any], section: str, config_path: str) -> Dict[str, Any]:
    value = config.get(section)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(
            f"'{section}' section in config at {config_path} must be a mapping\n"
            f"Required format:\n"
            f"{section}:\n"
            f"  key: value"
        )
    return value


def _apply_overrides(config: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    """Apply command-line values over the loaded configuration."""
    if not overrides:
        return
    if overrides.get("backend"):
        config["backend"] = overrides["backend"]
    for section in ("aws", "gcp"):
        for key, value in (overrides.get(section) or {}).items():
            if value:
                config[section][key] = value


def _validate_gcp_project(config: Dict[str, Any], source: str) -> None:
    if config["backend"] != "gcp":
        return
    if os.getenv("GCP_PROJECT") or config["gcp"].get("project_id"):
        return
    raise ConfigError(
        f"Missing 'gcp.project_id' for the gcp backend ({source})\n"
        f"Set GCP_PROJECT, pass --project-id, or use this format:\n"
        f"gcp:\n"
        f"  project_id: your-project-id"
    )


def load_config(
    explicit_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Load and validate configuration from YAML file.

    Args:
        explicit_path: Config file path given on the command line
        overrides: Command-line values ({"backend": ..., "aws": {...}, "gcp": {...}})
            applied before validation

    Returns:
        Dict containing configuration with keys:
        - backend: "aws" or "gcp"
        - aws: dict with optional region and profile
        - gcp: dict with optional project_id and service_account_path

    Raises:
        ConfigError: If config file is invalid, service account file doesn't exist,
            or the gcp backend has no project ID
    """
    config_path = _get_config_path(explicit_path)
    if config_path is None:
        config = {key: dict(value) if isinstance(value, dict) else value
                  for key, value in DEFAULT_CONFIG.items()}
        _apply_overrides(config, overrides)
        _validate_gcp_project(config, "no config file")
        return config

    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}") from e

    if not raw:
        raise ConfigError(f"Config file at {config_path} is empty")

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping")

    config = {
        "backend": raw.get("backend", DEFAULT_CONFIG["backend"]),
        "aws": _require_section(raw, "aws", config_path),
        "gcp": _require_section(raw, "gcp", config_path),
    }
    _apply_overrides(config, overrides)

    backend = config["backend"]
    if backend not in SUPPORTED_BACKENDS:
        raise ConfigError(
            f"Unsupported backend: {backend}\n"
            f"Supported backends: {', '.join(SUPPORTED_BACKENDS)}"
        )

    service_account_path = config["gcp"].get("service_account_path")
    if service_account_path:
        if not os.path.exists(service_account_path):
            raise ConfigError(
                f"Service account file not found at: {service_account_path}\n"
                f"Please ensure the file exists or update the path in {config_path}"
            )
        if not os.path.isfile(service_account_path):
            raise ConfigError(
                f"Service account path is not a file: {service_account_path}"
            )

    _validate_gcp_project(config, config_path)

    logger.info(f"Configuration loaded successfully from {config_path}")
    logger.debug(f"Using backend: {backend}")

    return config
