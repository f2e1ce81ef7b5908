"""Service providers injected into the API routes."""
from functools import lru_cache

import redis.asyncio as redis
from fastapi import Depends

from app.auth.session import get_redis
from app.config import Settings, get_settings
from app.services.biography import BiographyComposer, TextGenerationClient
from app.services.content import ContentGenerator
from app.services.generation import WebsiteGenerationService
from app.services.linkedin import LinkedInClient
from app.services.thumbnail import ThumbnailRenderer


def get_linkedin_client(settings: Settings = Depends(get_settings)) -> LinkedInClient:
    return LinkedInClient(settings)


def get_content_generator(settings: Settings = Depends(get_settings)) -> ContentGenerator:
    return ContentGenerator(BiographyComposer(TextGenerationClient(settings)))


@lru_cache
def _shared_renderer() -> ThumbnailRenderer:
    # One renderer per process so its semaphore caps every request
    return ThumbnailRenderer(get_settings())


def get_thumbnail_renderer() -> ThumbnailRenderer:
    return _shared_renderer()


def get_generation_service(
    settings: Settings = Depends(get_settings),
    provider: LinkedInClient = Depends(get_linkedin_client),
    content: ContentGenerator = Depends(get_content_generator),
    renderer: ThumbnailRenderer = Depends(get_thumbnail_renderer),
    redis_client: redis.Redis = Depends(get_redis),
) -> WebsiteGenerationService:
    return WebsiteGenerationService(settings, provider, content, renderer, redis_client)
