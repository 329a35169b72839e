# tests/conftest.py
import logging
from unittest.mock import MagicMock

import pytest

from provisioner.config_models import AppSettings
from provisioner.models import AggregateReport, PackageDescriptor


@pytest.fixture
def app_settings(tmp_path):
    """Settings with downloads redirected into the test's temp directory."""
    return AppSettings(
        download_dir=tmp_path / "downloads",
        download_timeout=5,
        install_timeout=10,
        catalog=[
            PackageDescriptor(identifier="Vendor.A", display_name="A"),
            PackageDescriptor(identifier="Vendor.B", display_name="B"),
        ],
        ide_packages=[
            PackageDescriptor(identifier="Vendor.Ide1", display_name="Ide1"),
        ],
        archive_tool={
            "display_name": "Tool",
            "version": "1.0",
            "url_template": "https://example.com/tool-{version}.zip",
            "install_dir": str(tmp_path / "tools" / "tool"),
        },
    )


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def report():
    return AggregateReport()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces the root handlers; put the originals back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
