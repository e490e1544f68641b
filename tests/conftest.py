import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from adexchange_seller import AdExchangeSellerService  # noqa: E402
from adexchange_seller.config import get_settings  # noqa: E402

BASE_URL = "https://adx.test/adexchangeseller/v1/"


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    config.addinivalue_line("markers", "unit: mark test as a unit test")


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set a predictable environment for Settings and clear its cache."""
    monkeypatch.setenv("ADX_SELLER_BASE_URL", BASE_URL)
    monkeypatch.setenv("ADX_SELLER_ACCESS_TOKEN", "env-token")
    monkeypatch.setenv("ADX_SELLER_SCOPE", "readonly")
    monkeypatch.delenv("ADX_SELLER_USER_AGENT", raising=False)
    monkeypatch.delenv("ADX_SELLER_TIMEOUT", raising=False)
    monkeypatch.delenv("ADX_SELLER_DOWNLOAD_DIR", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_service():
    """Build a service whose HTTP traffic is answered by ``handler``."""

    def _make(handler, **kwargs):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        if not kwargs.keys() & {"auth", "token", "token_provider"}:
            kwargs["token"] = "test-token"
        kwargs.setdefault("base_url", BASE_URL)
        return AdExchangeSellerService(client=client, **kwargs)

    return _make


@pytest.fixture
def recorded():
    """List collecting the requests seen by a mock handler."""
    return []
