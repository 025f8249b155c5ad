"""Root pytest configuration for apihub-groups tests."""
import pytest

from apihub_groups.client import ApihubClient
from apihub_groups.models import GroupRef
from apihub_groups.settings import Settings

from .fakes import FakeApihub


# Set up test environment variables
@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Automatically set up test environment variables."""
    monkeypatch.setenv("APIHUB_URL", "http://apihub.test")
    monkeypatch.setenv("APIHUB_TOKEN", "test-token")
    monkeypatch.setenv("APIHUB_EXPORT_POLL_INTERVAL", "0")
    monkeypatch.delenv("APIHUB_API_TYPE", raising=False)
    monkeypatch.delenv("APIHUB_EXPORT_POLL_ATTEMPTS", raising=False)


@pytest.fixture
def settings():
    """Standard test settings."""
    return Settings(base_url="http://apihub.test", token="test-token", export_poll_interval_s=0)


@pytest.fixture
def fake_apihub():
    """Empty fake APIHUB; tests fill in operations, groups and export script."""
    return FakeApihub()


@pytest.fixture
def client(settings, fake_apihub):
    """Real client wired to the fake APIHUB."""
    with ApihubClient(settings, transport=fake_apihub.transport) as c:
        yield c


@pytest.fixture
def group():
    return GroupRef(package_id="pkg", version="1.0", name="public-api")
