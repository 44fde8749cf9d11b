"""YAML configuration parser for dylint-drivers.

Configuration is layered: built-in defaults, then an optional YAML file,
then environment variables. The YAML file is named by the `config_path`
argument or the DYLINT_DRIVER_CONFIG environment variable.

Example file::

    version: 1
    driver_path: /var/cache/dylint_drivers
    build_mode: local
    local_driver_path: ../dylint/driver
    lock_timeout: 600
    quiet: true
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from dylint_drivers.core.directory import get_driver_path_override
from dylint_drivers.core.exceptions import ConfigurationError
from dylint_drivers.driver.descriptor import BuildMode, BuildModeKind

CONFIG_PATH_ENV = "DYLINT_DRIVER_CONFIG"

_KNOWN_KEYS = {
    "version",
    "driver_path",
    "build_mode",
    "local_driver_path",
    "lock_timeout",
    "quiet",
    "cargo",
    "rustup",
}


@dataclass
class DriverCacheConfig:
    """Complete driver cache configuration."""

    driver_path: Optional[Path] = None  # None: ~/.dylint_drivers
    build_mode_kind: BuildModeKind = BuildModeKind.RELEASE
    local_driver_path: Optional[Path] = None
    lock_timeout: float = -1  # wait forever
    quiet: bool = False
    cargo: str = "cargo"
    rustup: str = "rustup"

    def build_mode(self) -> BuildMode:
        """Return the dependency source selected by this configuration."""
        if self.build_mode_kind is BuildModeKind.LOCAL:
            return BuildMode.local(self.local_driver_path)
        return BuildMode.release()


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DriverCacheConfig:
    """
    Load the driver cache configuration.

    Args:
        config_path: Optional YAML file; falls back to DYLINT_DRIVER_CONFIG
        environ: Environment mapping to read (default: os.environ)

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    if environ is None:
        environ = os.environ

    if config_path is None and environ.get(CONFIG_PATH_ENV):
        config_path = Path(environ[CONFIG_PATH_ENV])

    config = DriverCacheConfig()
    if config_path is not None:
        config = _parse_and_validate(_read_yaml(Path(config_path)), Path(config_path))

    override = get_driver_path_override(environ)
    if override is not None:
        config.driver_path = override

    return config


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read {config_path}: {e}") from e

    if data is None:
        raise ConfigurationError(f"Configuration file is empty: {config_path}")
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping: {config_path}"
        )
    return data


def _parse_and_validate(data: Dict[str, Any], config_path: Path) -> DriverCacheConfig:
    """Parse and validate configuration data."""
    if "version" not in data:
        raise ConfigurationError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigurationError(f"Unsupported version: {data['version']} (expected 1)")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    # Relative paths in the file are relative to the file itself
    base_dir = config_path.parent
    config = DriverCacheConfig()

    if data.get("driver_path") is not None:
        config.driver_path = _path(data["driver_path"], "driver_path", base_dir)

    build_mode = data.get("build_mode", "release")
    try:
        config.build_mode_kind = BuildModeKind(build_mode)
    except ValueError:
        raise ConfigurationError(
            f"Invalid build_mode: {build_mode!r} (expected 'release' or 'local')"
        )

    if data.get("local_driver_path") is not None:
        config.local_driver_path = _path(
            data["local_driver_path"], "local_driver_path", base_dir
        )

    if config.build_mode_kind is BuildModeKind.LOCAL:
        if config.local_driver_path is None:
            raise ConfigurationError("build_mode 'local' requires local_driver_path")
    elif config.local_driver_path is not None:
        raise ConfigurationError("local_driver_path is only valid with build_mode 'local'")

    if "lock_timeout" in data:
        timeout = data["lock_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigurationError(f"lock_timeout must be a number, got {timeout!r}")
        config.lock_timeout = float(timeout)

    if "quiet" in data:
        if not isinstance(data["quiet"], bool):
            raise ConfigurationError(f"quiet must be a boolean, got {data['quiet']!r}")
        config.quiet = data["quiet"]

    for key in ("cargo", "rustup"):
        if key in data:
            if not isinstance(data[key], str) or not data[key]:
                raise ConfigurationError(f"{key} must be a non-empty string")
            setattr(config, key, data[key])

    return config


def _path(value: Any, key: str, base_dir: Path) -> Path:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{key} must be a non-empty string")
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


__all__ = ["CONFIG_PATH_ENV", "DriverCacheConfig", "load_config"]
