"""
Test Configuration

Architecture:
- Unit tests (test/**/unit/): in-memory fakes and AsyncMock store collaborators
- HTTP tests: FastAPI TestClient with the container's providers overridden
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are built at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('POSTGRES_DB', 'ticketing_test_db')
    os.environ.setdefault('VALIDATOR_ID', 'test_gate')
    os.environ.setdefault('OPERATING_TIMEZONE', 'America/Sao_Paulo')
    os.environ.setdefault('CACHE_DIR', str(Path(__file__).parent / 'test_validator_state'))


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402

from src.platform.config.di import cleanup  # noqa: E402


@pytest.fixture(autouse=True)
def reset_container_singletons() -> Generator[None, None, None]:
    """Each test starts from fresh process-wide singletons."""
    yield
    cleanup()
