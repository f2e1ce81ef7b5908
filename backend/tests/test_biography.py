"""Tests for the biography composer."""
import asyncio

import httpx

from app.config import Settings
from app.services.biography import (
    BiographyComposer,
    FALLBACK_TEMPLATES,
    TextGenerationClient,
    fallback_biography,
    is_acceptable,
)
from app.services.linkedin import Profile

PROFILE = Profile(id="li-1", name="Grace Hopper", email="grace@example.com")

GOOD_BIO = (
    "Grace Hopper is a computer scientist who loves building compilers and teaching others. "
    "She welcomes new connections and collaborations."
)


async def no_sleep(seconds):
    pass


def make_client(settings: Settings, handler) -> TextGenerationClient:
    configured = settings.model_copy(update={"huggingface_api_key": "hf_test"})
    return TextGenerationClient(configured, transport=httpx.MockTransport(handler))


def test_acceptance_predicate():
    assert is_acceptable(GOOD_BIO, "Grace Hopper")
    assert not is_acceptable(GOOD_BIO, "Ada Lovelace")
    assert not is_acceptable("Grace Hopper. About Me: " + GOOD_BIO, "Grace Hopper")
    assert not is_acceptable("Grace Hopper is great.", "Grace Hopper")
    assert not is_acceptable(GOOD_BIO.rstrip("."), "Grace Hopper")


def test_fallback_is_deterministic():
    first = fallback_biography("Grace Hopper")
    assert first == fallback_biography("Grace Hopper")
    assert first in [t.format(name="Grace Hopper") for t in FALLBACK_TEMPLATES]


def test_compose_uses_accepted_candidate(settings):
    def handler(request):
        return httpx.Response(200, json=[{"generated_text": f'  "{GOOD_BIO}"  '}])

    composer = BiographyComposer(make_client(settings, handler), sleep=no_sleep)
    assert asyncio.run(composer.compose(PROFILE)) == GOOD_BIO


def test_compose_retries_rejected_candidates(settings):
    responses = iter(["Name: Grace Hopper", "too short", GOOD_BIO])
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=[{"generated_text": next(responses)}])

    composer = BiographyComposer(make_client(settings, handler), sleep=no_sleep)
    assert asyncio.run(composer.compose(PROFILE)) == GOOD_BIO
    assert len(calls) == 3


def test_compose_falls_back_when_remote_always_fails(settings):
    calls = []
    sleeps = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, json={"error": "loading"})

    async def record_sleep(seconds):
        sleeps.append(seconds)

    composer = BiographyComposer(make_client(settings, handler), max_attempts=3, sleep=record_sleep)
    bio = asyncio.run(composer.compose(PROFILE))

    assert bio
    assert "Grace Hopper" in bio
    assert bio.endswith((".", "!", "?"))
    assert len(calls) == 3
    assert len(sleeps) == 2


def test_compose_without_api_key_skips_remote(settings):
    def handler(request):
        raise AssertionError("remote should not be called")

    client = TextGenerationClient(settings, transport=httpx.MockTransport(handler))
    bio = asyncio.run(BiographyComposer(client).compose(PROFILE))
    assert bio == fallback_biography("Grace Hopper")
