import pytest

from skillhub.models import HealthStatus


@pytest.mark.asyncio
async def test_health(client, backend):
    health = await client.system.health()
    assert isinstance(health, HealthStatus)
    assert health.status == "ok"
    assert health.version == "0.1.0"
    assert backend.requests[-1].url.path == "/health"


@pytest.mark.asyncio
async def test_stats_envelope(client):
    await client.auth.login("a@b.com", "x")
    envelope = await client.system.stats()
    assert envelope.success is True
    assert envelope.data is not None
    assert envelope.data.total_skills == 3
    assert envelope.data.total_users == 1
    assert envelope.message is None
