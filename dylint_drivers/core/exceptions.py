"""
Centralized exception hierarchy for dylint-drivers.

Every error raised by the driver cache derives from DylintDriverError so
callers can catch the whole family at once.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class DylintDriverError(Exception):
    """Base exception for all dylint-drivers errors."""

    pass


# ============================================================================
# Configuration and Cache Exceptions
# ============================================================================


class ConfigurationError(DylintDriverError):
    """Raised when the driver cache configuration is invalid or missing."""

    pass


class CacheIOError(DylintDriverError):
    """Raised when a cache directory or file cannot be created, written or copied."""

    pass


class CacheLockTimeout(DylintDriverError):
    """Raised when the per-toolchain build lock cannot be acquired in time."""

    pass


# ============================================================================
# Subprocess Exceptions
# ============================================================================


class CommandError(DylintDriverError):
    """Raised when an external command fails or its output cannot be understood."""

    pass


class CommandLaunchError(CommandError):
    """Raised when an external command cannot be started at all."""

    def __init__(self, program: str, reason: str):
        self.program = program
        self.reason = reason
        super().__init__(f"Could not run '{program}': {reason}")


class BuildError(CommandError):
    """Raised when the driver build exits with a non-zero status."""

    def __init__(self, toolchain: str, returncode: int):
        self.toolchain = toolchain
        self.returncode = returncode
        super().__init__(
            f"Driver build for toolchain '{toolchain}' failed with exit code {returncode}"
        )


# ============================================================================
# Version and Toolchain Exceptions
# ============================================================================


class DriverVersionError(DylintDriverError):
    """Raised when the running package's own version cannot be parsed."""

    pass


class ToolchainNotFoundError(DylintDriverError):
    """Raised when a toolchain is not installed or cannot be located."""

    def __init__(self, toolchain: str, detail: str = ""):
        self.toolchain = toolchain
        self.detail = detail
        msg = f"Could not locate toolchain: {toolchain}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
