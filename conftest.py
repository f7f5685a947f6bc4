"""Pytest configuration and shared fixtures."""

import pytest

# Load env vars
from dotenv import load_dotenv
load_dotenv()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test (launches a real browser)")
    config.addinivalue_line("markers", "online: mark test as online test (hits external websites)")


# =============================================================================
# SAFETY: Keep tests away from the real venue CSVs, logs, and Slack
# =============================================================================

@pytest.fixture(scope="function", autouse=True)
def isolated_data(tmp_path, monkeypatch):
    """Point every store path and the run log dir at a per-test temp directory."""
    monkeypatch.setenv("VENUES_CSV_PATH", str(tmp_path / "data" / "venues_master.csv"))
    monkeypatch.setenv("DISCOVERED_VENUES_CSV_PATH", str(tmp_path / "data" / "discovered_venues.csv"))
    monkeypatch.setenv("VENUE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("SLACK_WEBHOOK_URL", raising=False)
    yield tmp_path
