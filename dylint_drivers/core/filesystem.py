"""
Cross-platform file system utilities for dylint-drivers.

This module provides the file operations the driver cache relies on:
- Scoped temporary build workspaces with guaranteed cleanup
- Guarded deletion of directory trees
- Atomic replacement of cached driver binaries
"""

import os
import shutil
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from dylint_drivers.core.exceptions import CacheIOError

# Platform detection
IS_WINDOWS = os.name == "nt"

EXE_SUFFIX = ".exe" if IS_WINDOWS else ""


class FilesystemError(CacheIOError):
    """Raised when a filesystem operation on the cache or a workspace fails."""


# ============================================================================
# Path Utilities
# ============================================================================


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_copy(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Copy a file into place atomically using temp file + rename.

    The temp file is created next to the destination so the final rename
    stays on one filesystem. Readers of the destination see either the old
    file or the complete new one. File mode bits are preserved.

    Args:
        source: File to copy
        destination: Path to replace

    Raises:
        OSError: If the source is missing or the copy or rename fails.

    Example:
        >>> atomic_copy('target/debug/dylint_driver-nightly', 'cache/nightly/dylint-driver')
    """
    source = Path(source)
    destination = Path(destination)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
    )
    os.close(temp_fd)
    temp_path = Path(temp_path_str)

    try:
        shutil.copy2(source, temp_path)
        temp_path.replace(destination)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def _clear_readonly(func, path, exc_info):
    # Windows cannot unlink read-only files
    if os.access(path, os.W_OK):
        raise exc_info[1]
    os.chmod(path, stat.S_IWRITE)
    func(path)


def remove_tree(
    path: Union[str, Path], within: Optional[Union[str, Path]] = None
) -> None:
    """
    Delete a directory tree, refusing anything outside `within`.

    A missing path is not an error.

    Raises:
        ValueError: If `path` does not resolve to somewhere under `within`
        FilesystemError: If `path` is not a directory or cannot be deleted
    """
    path = Path(path).resolve()
    if within is not None and not path.is_relative_to(Path(within).resolve()):
        raise ValueError(f"Refusing to delete '{path}': outside '{within}'")

    if not path.exists():
        return
    if not path.is_dir():
        raise FilesystemError(f"Not a directory: {path}")

    try:
        shutil.rmtree(path, onerror=_clear_readonly if IS_WINDOWS else None)
    except OSError as e:
        raise FilesystemError(f"Could not delete '{path}': {e}") from e


# ============================================================================
# Temporary Directory Management
# ============================================================================


@contextmanager
def temporary_directory(prefix: str = "dylint_") -> Iterator[Path]:
    """
    Context manager for a temporary directory with guaranteed cleanup.

    The directory is removed whether the body returns normally or raises.

    Args:
        prefix: Prefix for temp directory name

    Yields:
        Path to temporary directory

    Example:
        >>> with temporary_directory(prefix="dylint_driver_") as package:
        ...     (package / 'Cargo.toml').write_text('...')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            remove_tree(temp_dir, within=tempfile.gettempdir())


__all__ = [
    "IS_WINDOWS",
    "EXE_SUFFIX",
    "FilesystemError",
    "ensure_directory",
    "atomic_copy",
    "remove_tree",
    "temporary_directory",
]
