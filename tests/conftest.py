"""
Pytest configuration and fixtures for simrun.
Only external deps (xcrun simctl) are faked per policy.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from simrun.core.config import Config
from simrun.core.logging import clear_request_context
from simrun.devices.device import BOOTED, SHUTDOWN, Device
from testing_utilities import FakeBridge, make_app_bundle


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture(autouse=True)
def _reset_log_context() -> Generator[None, None, None]:
    yield
    clear_request_context()


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    cfg = Config()
    cfg.simulators.core_simulator_logs_dir = temp_dir / "logs"
    cfg.bridge.xcrun = "/usr/bin/xcrun"
    return cfg


@pytest.fixture
def booted_device() -> Device:
    return Device(
        udid="5E1A3E2C-0B7F-4C1D-9A1E-1F2D3C4B5A69",
        name="iPhone 15",
        version="17.5",
        state=BOOTED,
        runtime="com.apple.CoreSimulator.SimRuntime.iOS-17-5",
    )


@pytest.fixture
def shutdown_device() -> Device:
    return Device(
        udid="9B8C7D6E-5F4A-3B2C-1D0E-FA9B8C7D6E5F",
        name="iPad Air (5th generation)",
        version="17.5",
        state=SHUTDOWN,
        runtime="com.apple.CoreSimulator.SimRuntime.iOS-17-5",
    )


@pytest.fixture
def legacy_device() -> Device:
    return Device(
        udid="0D1E2F3A-4B5C-6D7E-8F9A-0B1C2D3E4F5A",
        name="iPhone 5",
        version="10.3",
        state=SHUTDOWN,
    )


@pytest.fixture
def app_bundle(temp_dir: Path) -> Path:
    return make_app_bundle(
        temp_dir / "build",
        extra_files={"Base.lproj/Main.storyboardc": b"storyboard", "icon.png": b"\x89PNG"},
    )


@pytest.fixture
def installed_copy(app_bundle: Path, temp_dir: Path) -> Path:
    """An installed copy identical to ``app_bundle``."""
    target = temp_dir / "container" / app_bundle.name
    shutil.copytree(app_bundle, target)
    return target


@pytest.fixture
def bridge_factory() -> Callable[..., FakeBridge]:
    """Factory that returns the same FakeBridge and remembers what it was bound to."""
    bridge = FakeBridge()

    def factory(device: Device, app_path: Path, config: Config) -> FakeBridge:
        bridge.device = device
        bridge.app_path = app_path
        return bridge

    factory.bridge = bridge  # type: ignore[attr-defined]
    return factory
