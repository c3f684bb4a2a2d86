import os
from typing import Optional

import pytest

# In-memory database shared across sessions; must be set before the app is imported
os.environ["SqlConnectionString"] = "sqlite://"
os.environ.pop("KeyVaultUrl", None)
os.environ.setdefault("AUTO_INIT_DB", "false")

from src.api.db import engine  # noqa: E402
from src.api.main import app  # noqa: E402
from src.api.models import Base  # noqa: E402
from src.api.secret_store import SecretProvider, get_secret_provider  # noqa: E402

API_KEY = "test-api-key"


class FakeSecretProvider(SecretProvider):
    """Counts lookups so tests can check the key is fetched on every request."""

    def __init__(self, value: Optional[str] = API_KEY) -> None:
        self.value = value
        self.calls = 0

    def get_secret(self, name: str) -> Optional[str]:
        self.calls += 1
        assert name == "ApiKey"
        return self.value


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(autouse=True)
def secret_provider():
    provider = FakeSecretProvider()
    app.dependency_overrides[get_secret_provider] = lambda: provider
    yield provider
    app.dependency_overrides.pop(get_secret_provider, None)
