"""
Pytest configuration and shared fixtures for dylint-drivers tests.
"""

import tempfile
from pathlib import Path

import pytest

from dylint_drivers import __version__
from dylint_drivers.config.parser import CONFIG_PATH_ENV
from dylint_drivers.core.directory import DRIVER_PATH_ENV
from dylint_drivers.core.locking import LockManager
from dylint_drivers.driver.builder import DriverBuilder
from dylint_drivers.driver.cache import DriverCacheManager
from dylint_drivers.driver.staleness import StalenessChecker
from dylint_drivers.toolchain.cargo import Cargo
from dylint_drivers.toolchain.rustup import Rustup

from tests.mocks import TOOLCHAIN, FakeRustEnvironment


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that build real drivers with cargo",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's own driver configuration out of tests."""
    for name in (
        DRIVER_PATH_ENV,
        CONFIG_PATH_ENV,
        "RUSTUP_TOOLCHAIN",
        "RUSTFLAGS",
        "CARGO_TARGET_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def system_temp(tmp_path: Path, monkeypatch) -> Path:
    """Redirect tempfile to a private directory so leaked workspaces are visible."""
    temp_root = tmp_path / "system-temp"
    temp_root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_root))
    return temp_root


@pytest.fixture
def fake_rust(tmp_path: Path) -> FakeRustEnvironment:
    """A scripted rustup/cargo installation that builds current drivers."""
    toolchain_root = tmp_path / "rustup" / "toolchains" / TOOLCHAIN
    return FakeRustEnvironment(toolchain_root, driver_version=__version__)


@pytest.fixture
def drivers_dir(tmp_path: Path) -> Path:
    path = tmp_path / "drivers"
    path.mkdir()
    return path


@pytest.fixture
def manager(
    drivers_dir: Path, fake_rust: FakeRustEnvironment, system_temp: Path
) -> DriverCacheManager:
    """DriverCacheManager wired to the fake Rust installation."""
    runner = fake_rust.runner
    rustup = Rustup(runner)
    return DriverCacheManager(
        drivers_dir,
        builder=DriverBuilder(
            __version__, runner=runner, rustup=rustup, cargo=Cargo(runner)
        ),
        checker=StalenessChecker(__version__, runner=runner, rustup=rustup),
        lock_manager=LockManager(timeout=5),
    )
