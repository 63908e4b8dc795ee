"""
Pytest fixtures for Healthy Habits tests.
"""
import sys
import time
import pytest
import httpx
from pathlib import Path
from datetime import datetime, timezone
from dotenv import load_dotenv

# Ensure src/ and scripts/ are on sys.path so tests can import the packages and the CLI.
ROOT = Path(__file__).resolve().parent.parent
for path in (ROOT / "src", ROOT / "scripts"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Load environment variables
load_dotenv()

from habit_submission import get_settings  # noqa: E402

TEST_WEBHOOK_URL = "http://webhook.test/data/"


# ============================================================================
# Settings
# ============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop HABITS_* overrides from the environment and the settings cache."""
    for name in ("HABITS_WEBHOOK_URL", "HABITS_REQUEST_TIMEOUT", "HABITS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Webhook transport
# ============================================================================


class RecordingWebhook:
    """
    Stand-in webhook for httpx.MockTransport.

    Records every request and answers with ``status_code``, or raises
    ``error`` instead of answering when set.
    """

    def __init__(self, status_code: int = 200, error: Exception = None):
        self.status_code = status_code
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def webhook():
    """Webhook answering 200 to everything."""
    return RecordingWebhook()


@pytest.fixture
def fixed_time():
    """08:30 UTC on a fixed day."""
    return datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def local_timezone(monkeypatch):
    """
    Factory fixture pinning the process's local time zone.

    Returns a function that accepts an IANA zone name; the original zone is
    restored after the test.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() is not available on this platform")

    def _pin(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _pin

    monkeypatch.undo()
    time.tzset()
