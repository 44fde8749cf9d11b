"""
Drivers directory resolution for dylint-drivers.

This module decides where compiled drivers are cached. The location is either
supplied through the DYLINT_DRIVER_PATH environment variable or owned by this
package under the user's home directory.

Directory Structure:
    Drivers Cache (~/.dylint_drivers/ or %USERPROFILE%\\.dylint_drivers\\):
        - README.txt                     : Explains what the directory is for
        - <toolchain>/dylint-driver[.exe] : One compiled driver per toolchain
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dylint_drivers.core.exceptions import CacheIOError, ConfigurationError

logger = logging.getLogger(__name__)

DRIVER_PATH_ENV = "DYLINT_DRIVER_PATH"
DRIVERS_DIR_NAME = ".dylint_drivers"

README_TXT = """
This directory contains Rust compiler drivers used by Dylint
(https://github.com/trailofbits/dylint).

Deleting this directory will cause Dylint to rebuild the drivers
the next time it needs them, but will have no ill effects.
"""


def get_driver_path_override(
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """
    Read the drivers directory override from the environment.

    Args:
        environ: Environment mapping to read (default: os.environ)

    Returns:
        Path named by DYLINT_DRIVER_PATH, or None if the variable is unset.
    """
    if environ is None:
        environ = os.environ
    value = environ.get(DRIVER_PATH_ENV)
    if value is None:
        return None
    return Path(value)


def get_default_drivers_dir() -> Path:
    """
    Get the default drivers directory path.

    Returns:
        Path: ~/.dylint_drivers

    Raises:
        ConfigurationError: If the home directory cannot be determined.

    Example:
        >>> get_default_drivers_dir()
        PosixPath('/home/user/.dylint_drivers')  # on Linux
    """
    try:
        home = Path.home()
    except (KeyError, RuntimeError) as e:
        raise ConfigurationError(f"Could not find HOME directory: {e}") from e
    return home / DRIVERS_DIR_NAME


def resolve_drivers_dir(override: Optional[Path] = None) -> Path:
    """
    Resolve the root directory of the drivers cache.

    An override must name an existing directory; nothing is created for it.
    Without an override the default directory is created on first use and
    a README.txt is written into it.

    Args:
        override: Directory supplied by the user (usually DYLINT_DRIVER_PATH)

    Returns:
        Path: The drivers directory. It exists and is a directory.

    Raises:
        ConfigurationError: If the override is not an existing directory.
        CacheIOError: If the default directory or its README cannot be created.

    Example:
        >>> resolve_drivers_dir()
        PosixPath('/home/user/.dylint_drivers')
        >>> resolve_drivers_dir(get_driver_path_override())
    """
    if override is not None:
        override = Path(override)
        if not override.is_dir():
            raise ConfigurationError(
                f"{DRIVER_PATH_ENV} does not name an existing directory: {override}"
            )
        logger.debug(f"Using drivers directory from override: {override}")
        return override

    drivers_dir = get_default_drivers_dir()
    if drivers_dir.is_dir():
        return drivers_dir

    try:
        drivers_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheIOError(
            f"Failed to create drivers directory at {drivers_dir}: {e}"
        ) from e

    readme_txt = drivers_dir / "README.txt"
    try:
        readme_txt.write_text(README_TXT, encoding="utf-8")
    except OSError as e:
        raise CacheIOError(f"Failed to write {readme_txt}: {e}") from e

    logger.debug(f"Created drivers directory at {drivers_dir}")
    return drivers_dir


__all__ = [
    "DRIVER_PATH_ENV",
    "DRIVERS_DIR_NAME",
    "README_TXT",
    "get_driver_path_override",
    "get_default_drivers_dir",
    "resolve_drivers_dir",
]
