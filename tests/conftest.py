# file: tests/conftest.py

import pytest
from unittest.mock import MagicMock, patch

from lazy_services.factory_registry import ServiceFactoryRegistry
from sample_services import OrderModelService, RecordingService, ReportService

@pytest.fixture
def factories():
    """A private factory registry, so tests never touch the module default."""
    registry = ServiceFactoryRegistry()
    registry.register("recording", RecordingService)
    registry.register("reports", ReportService)
    registry.register("order_model", OrderModelService)
    return registry

@pytest.fixture
def temp_config_dir(tmp_path):
    """Creates a temporary directory for config files."""
    return tmp_path

# --- Global Mock for psutil.Process ---
# MemoryLogFilter reads process memory; keep the numbers fixed in tests.
class MockProcess:
    def memory_info(self):
        return MagicMock(rss=100 * 1024 * 1024) # Default 100MB RSS

mock_psutil_process = MockProcess()

@pytest.fixture(scope="session", autouse=True)
def mock_psutil_process_globally():
    """Globally patches psutil.Process for all tests."""
    with patch('psutil.Process', return_value=mock_psutil_process):
        yield
