"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides isolated settings, an output directory per test and fake tools.
"""

from pathlib import Path
from typing import Generator

import pytest

from dmg_background.config import settings as settings_module
from dmg_background.config.settings import Settings
from dmg_background.core.rendering.png_generator import BackgroundGenerator
from dmg_background.models.schemas import BackgroundSpec

from tests.utils.mocks import FakeToolbox


class TestSettings(Settings):
    """Test-specific settings."""

    __test__ = False

    environment: str = "testing"
    log_level: str = "DEBUG"


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Directory the generator writes into."""
    path = tmp_path / "dmg"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(output_dir: Path) -> TestSettings:
    """Test settings fixture, ignoring any local .env file."""
    return TestSettings(_env_file=None, output_dir=output_dir)


@pytest.fixture(autouse=True)
def override_settings(
    test_settings: TestSettings, monkeypatch: pytest.MonkeyPatch
) -> Generator[TestSettings, None, None]:
    """Override application settings for testing."""
    monkeypatch.setattr(settings_module, "settings", test_settings)
    yield test_settings


@pytest.fixture
def compact_spec() -> BackgroundSpec:
    """The canonical 540x380 background."""
    return BackgroundSpec(width=540, height=380, title="Swipey")


@pytest.fixture
def wide_spec() -> BackgroundSpec:
    """The 600x400 background variant."""
    return BackgroundSpec(width=600, height=400, title="Swipey")


@pytest.fixture
def make_generator(test_settings: TestSettings):
    """Build a generator wired to a fake toolbox."""

    def factory(toolbox: FakeToolbox, **overrides) -> BackgroundGenerator:
        settings = test_settings.model_copy(update=overrides) if overrides else test_settings
        return BackgroundGenerator(settings=settings, locator=toolbox.locate, runner=toolbox.run)

    return factory


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on file paths."""
    for item in items:
        # Add markers based on file path
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
