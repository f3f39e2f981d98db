import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to sys.path
# This ensures that 'skillhub' and 'tests.common' are importable during tests
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from skillhub.client import SkillHubClient  # noqa: E402
from skillhub.navigation import RedirectNavigator  # noqa: E402
from skillhub.session import MemorySessionStore  # noqa: E402
from tests.common.skillhub_backend import FakeSkillHubBackend  # noqa: E402

BASE_URL = "http://skillhub.test"


@pytest.fixture
def backend():
    return FakeSkillHubBackend()


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def navigator():
    return RedirectNavigator()


@pytest_asyncio.fixture
async def client(backend, store, navigator):
    api = SkillHubClient(
        BASE_URL,
        store=store,
        navigator=navigator,
        transport=backend.transport(),
    )
    try:
        yield api
    finally:
        await api.aclose()
