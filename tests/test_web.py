from __future__ import annotations

import pytest

from drawguard.config.settings import AppSettings
from drawguard.loader.redis import init_redis
from drawguard.loader.web import create_web_app
from drawguard.main_app import create_app
from drawguard.presentation.app_keys import LIMITERS_KEY
from drawguard.services.limiters import build_limiters


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(GENERAL_RATE_LIMIT_MAX=2)


@pytest.fixture
async def client(aiohttp_client, settings):
    app = create_web_app(settings, build_limiters(settings))
    return await aiohttp_client(app)


async def test_health_is_not_rate_limited(client):
    for _ in range(5):
        resp = await client.get("/health")
        assert resp.status == 200
        assert await resp.text() == "ok"
        assert "X-RateLimit-Limit" not in resp.headers


async def test_lists_policies(client):
    resp = await client.get("/api/ratelimit/policies")

    assert resp.status == 200
    body = await resp.json()
    assert body["policies"] == [
        {"name": "auth", "windowMs": 900_000, "maxRequests": 5},
        {"name": "upload", "windowMs": 60_000, "maxRequests": 3},
        {"name": "general", "windowMs": 60_000, "maxRequests": 2},
        {"name": "like", "windowMs": 60_000, "maxRequests": 30},
    ]
    assert resp.headers["X-RateLimit-Limit"] == "2"
    assert resp.headers["X-RateLimit-Remaining"] == "1"


async def test_stats_report_tracked_clients(client):
    resp = await client.get("/api/ratelimit/stats", headers={"X-Real-IP": "10.1.1.1"})

    body = await resp.json()
    by_policy = {item["policy"]: item for item in body["limiters"]}
    assert by_policy["general"] == {"policy": "general", "backend": "memory", "trackedClients": 1}
    assert by_policy["auth"]["trackedClients"] == 0


async def test_general_policy_is_shared_across_routes(client):
    headers = {"X-Real-IP": "10.1.1.2"}
    assert (await client.get("/api/ratelimit/policies", headers=headers)).status == 200
    assert (await client.get("/api/ratelimit/stats", headers=headers)).status == 200

    resp = await client.get("/api/ratelimit/policies", headers=headers)

    assert resp.status == 429
    assert int(resp.headers["Retry-After"]) in (59, 60)


async def test_limiters_start_with_app_and_stop_on_cleanup(aiohttp_client, settings):
    registry = build_limiters(settings)
    app = create_web_app(settings, registry)

    client = await aiohttp_client(app)
    general = app[LIMITERS_KEY].get("general")
    assert general._sweeper is not None

    await client.close()
    assert general._sweeper is None


async def test_cleanup_closes_redis(aiohttp_client, settings, fake_redis):
    app = create_web_app(settings, build_limiters(settings), fake_redis)

    client = await aiohttp_client(app)
    await client.close()

    assert fake_redis.closed is True


async def test_init_redis_skipped_for_memory_backend():
    assert await init_redis(AppSettings()) is None


async def test_init_redis_without_dsn():
    assert await init_redis(AppSettings(RATE_LIMIT_BACKEND="redis")) is None


async def test_create_app_from_environment(monkeypatch):
    monkeypatch.setenv("LIKE_RATE_LIMIT_MAX", "4")

    app = await create_app()

    assert len(app[LIMITERS_KEY]) == 4
    assert app[LIMITERS_KEY].get("like").policy.max_requests == 4
