"""Generate-website orchestration.

Steps run in order and any failure aborts the request:

    ProfileFetched -> NameReserved -> HtmlRendered -> ThumbnailCaptured -> Stored -> UserLinked

Nothing is written until Stored. UserLinked is best-effort: when appending
the id to the user's list fails, the website is kept, a repair job is queued
and the result carries a warning.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable, List, Optional

import redis.asyncio as redis

from app.config import Settings
from app.services.content import ContentGenerator
from app.services.linkedin import LinkedInClient
from app.services.thumbnail import ThumbnailRenderer
from app.services.websites import WebsiteStore
from app.utils.exceptions import DuplicateNameError, GenerationInProgressError
from app.utils.generation_lock import acquire_generation_lock, release_generation_lock
from app.utils.logger import logger
from app.utils.naming import validate_name
from app.utils.repair_queue import queue_user_link_repair

USER_LINK_FAILED = "user_link_failed"


@dataclass
class GenerationResult:
    """Outcome of a successful generation."""
    website_id: str
    website_name: str
    warnings: List[str] = field(default_factory=list)


class WebsiteGenerationService:
    """Runs one generate-website request for an authenticated identity."""

    def __init__(
        self,
        settings: Settings,
        provider: LinkedInClient,
        content: ContentGenerator,
        renderer: ThumbnailRenderer,
        redis_client: redis.Redis,
        queue_repair: Callable[[str], Awaitable[bool]] = queue_user_link_repair,
    ):
        self.settings = settings
        self.provider = provider
        self.content = content
        self.renderer = renderer
        self.redis = redis_client
        self.queue_repair = queue_repair

    async def generate(
        self,
        store: WebsiteStore,
        identity_id: str,
        access_token: str,
        requested_name: Optional[str] = None,
        today: Optional[date] = None,
    ) -> GenerationResult:
        """
        Generate, render and store a website for an identity.

        Raises:
            GenerationInProgressError: If another generation holds the lock
            UpstreamError / InvalidProfileError: If the profile cannot be fetched
            InvalidInputError / DuplicateNameError: If the requested name is unusable
            RenderFailedError: If the thumbnail cannot be captured
        """
        lock_token = await acquire_generation_lock(
            self.redis, identity_id, ttl_seconds=self.settings.generation_lock_ttl_seconds
        )
        if lock_token is None:
            raise GenerationInProgressError()

        try:
            return await self._run(store, identity_id, access_token, requested_name, today)
        finally:
            await release_generation_lock(self.redis, identity_id, lock_token)

    async def _run(
        self,
        store: WebsiteStore,
        identity_id: str,
        access_token: str,
        requested_name: Optional[str],
        today: Optional[date],
    ) -> GenerationResult:
        profile = await self.provider.fetch_profile(access_token)
        logger.info(f"[GENERATE] Profile fetched for {identity_id}")

        if requested_name is not None:
            name = validate_name(requested_name)
            if store.name_taken(identity_id, name):
                raise DuplicateNameError()
        else:
            name = store.default_name(identity_id, today)
        logger.info(f"[GENERATE] Reserved name {name!r}")

        html = await self.content.render(profile, today=today)
        thumbnail = await self.renderer.capture_data_uri(html)
        logger.info(f"[GENERATE] Rendered website and thumbnail for {identity_id}")

        website = store.create(identity_id, name, html, thumbnail)
        website_id, website_name = website.id, website.name

        warnings: List[str] = []
        try:
            store.link_to_user(identity_id, website_id)
        except Exception as e:
            store.db.rollback()
            logger.warning(
                f"[GENERATE] Website {website_id} stored but not linked to user {identity_id}: {e}"
            )
            warnings.append(USER_LINK_FAILED)
            if not await self.queue_repair(identity_id):
                logger.error(f"[GENERATE] Could not queue link repair for {identity_id}")

        return GenerationResult(website_id=website_id, website_name=website_name, warnings=warnings)
