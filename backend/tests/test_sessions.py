"""Tests for the Redis-backed session store."""
import asyncio

import fakeredis
import fakeredis.aioredis

from app.utils.sessions import SessionStore


def with_store(settings, scenario):
    async def run():
        client = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
        try:
            return await scenario(SessionStore(client, settings), client)
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_sign_round_trips_session_id(settings):
    async def scenario(store, client):
        session_id = store.new_session_id()
        assert store.unsign(store.sign(session_id)) == session_id

    with_store(settings, scenario)


def test_tampered_cookie_is_rejected(settings):
    async def scenario(store, client):
        cookie = store.sign(store.new_session_id())
        assert store.unsign(cookie[:-2] + "xx") is None
        assert store.unsign("not-a-cookie") is None
        assert store.unsign(None) is None

    with_store(settings, scenario)


def test_cookie_signed_with_other_secret_is_rejected(settings):
    other = settings.model_copy(update={"session_secret": "another-secret"})

    async def scenario(store, client):
        forged = SessionStore(client, other).sign("attacker-chosen-id")
        assert store.unsign(forged) is None

    with_store(settings, scenario)


def test_save_load_destroy(settings):
    async def scenario(store, client):
        session_id = store.new_session_id()
        await store.save(session_id, {"identity_id": "li-1", "access_token": "tok"})

        assert await store.load(session_id) == {"identity_id": "li-1", "access_token": "tok"}
        ttl = await client.ttl(f"web_session:{session_id}")
        assert 0 < ttl <= settings.session_ttl_seconds

        await store.destroy(session_id)
        assert await store.load(session_id) == {}

    with_store(settings, scenario)


def test_unknown_session_loads_empty(settings):
    async def scenario(store, client):
        assert await store.load("missing") == {}
        assert await store.load(None) == {}
        await store.destroy(None)

    with_store(settings, scenario)


def test_session_ids_are_unique(settings):
    async def scenario(store, client):
        ids = {store.new_session_id() for _ in range(50)}
        assert len(ids) == 50

    with_store(settings, scenario)
