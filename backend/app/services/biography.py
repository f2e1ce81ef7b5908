"""Biography paragraph generation via the Hugging Face Inference API."""
import asyncio
import hashlib
from typing import List, Optional

import httpx

from app.config import Settings
from app.services.linkedin import Profile
from app.utils.exceptions import UpstreamError
from app.utils.logger import logger
from app.utils.retry import RetryPolicy, exponential_backoff

INFERENCE_URL = "https://api-inference.huggingface.co/models/{model}"

ABOUT_ME_PROMPT = """Generate a professional and engaging 'About Me' section for a portfolio website.
Name: {name}
Email: {email}
Context: This is for a professional portfolio website.

Write a brief, professional paragraph about this person that:
- Introduces them by name
- Maintains a professional tone
- Emphasizes their approachability
- Encourages professional connections
- Is between 50-100 words

About Me:"""

PROMPT_FRAGMENTS = ("About Me:", "Name:", "Email:", "Context:", "Write a brief", "portfolio website.")

MIN_BIO_LENGTH = 80
MAX_BIO_LENGTH = 800
MAX_ATTEMPTS = 3

FALLBACK_TEMPLATES = [
    "Hello! I'm {name}, and I'm passionate about creating impactful solutions and bringing value "
    "to organizations. Feel free to connect with me to discuss potential opportunities or collaborations.",
    "I'm {name}, a professional who enjoys solving meaningful problems and working with people who "
    "care about their craft. I'm always happy to meet new colleagues, so please reach out and say hello.",
    "Welcome! My name is {name}. I believe good work comes from curiosity, clear communication and "
    "steady collaboration. If you'd like to work together or just exchange ideas, I'd love to hear from you.",
]


class TextGenerationClient:
    """Thin client for a hosted text-generation model."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport
        self.api_key = settings.huggingface_api_key
        self.url = INFERENCE_URL.format(model=settings.text_generation_model)
        self.timeout = settings.text_generation_timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def generate(self, prompt: str, max_new_tokens: int = 200, temperature: float = 0.7) -> str:
        """
        Run one completion.

        Raises:
            UpstreamError: If the request fails or the response is malformed
        """
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": max_new_tokens,
                "temperature": temperature,
                "return_full_text": False,
            },
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=payload, headers=headers)
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"Text generation failed: {e}") from e

        if isinstance(result, list) and result and "generated_text" in result[0]:
            return result[0]["generated_text"]
        raise UpstreamError(f"Unexpected text generation response: {result}")


def clean_candidate(text: str) -> str:
    """Trim whitespace and surrounding quotes from a model completion."""
    return (text or "").strip().strip("\"'").strip()


def is_acceptable(candidate: str, name: str) -> bool:
    """Check a cleaned completion before showing it on a website."""
    if name not in candidate:
        return False
    if any(fragment in candidate for fragment in PROMPT_FRAGMENTS):
        return False
    if not MIN_BIO_LENGTH <= len(candidate) <= MAX_BIO_LENGTH:
        return False
    return candidate.endswith((".", "!", "?"))


def fallback_biography(name: str, templates: Optional[List[str]] = None) -> str:
    """Pick a canned paragraph deterministically from the name."""
    templates = templates or FALLBACK_TEMPLATES
    index = int(hashlib.sha256(name.encode("utf-8")).hexdigest(), 16) % len(templates)
    return templates[index].format(name=name)


class BiographyComposer:
    """Produces the About Me paragraph. Never raises."""

    def __init__(self, client: TextGenerationClient, max_attempts: int = MAX_ATTEMPTS, backoff=None, sleep=None):
        self.client = client
        self.max_attempts = max_attempts
        self.backoff = backoff or exponential_backoff(base=0.5, factor=2.0)
        self.sleep = sleep or asyncio.sleep

    async def compose(self, profile: Profile) -> str:
        name = profile.name or "Professional"

        if not self.client.configured:
            logger.debug("[BIO] Text generation not configured, using fallback")
            return fallback_biography(name)

        prompt = ABOUT_ME_PROMPT.format(name=name, email=profile.email or "Available on request")

        async def attempt() -> str:
            return clean_candidate(await self.client.generate(prompt))

        policy = RetryPolicy(
            max_attempts=self.max_attempts,
            backoff=self.backoff,
            accept=lambda candidate: is_acceptable(candidate, name),
            sleep=self.sleep,
            name="biography",
        )

        try:
            outcome = await policy.run(attempt)
        except Exception as e:
            logger.error(f"[BIO] Retry policy failed unexpectedly: {e}", exc_info=True)
            return fallback_biography(name)

        if outcome.accepted:
            logger.info(f"[BIO] Accepted generated biography after {outcome.attempts} attempt(s)")
            return outcome.value

        logger.warning(f"[BIO] No acceptable biography after {outcome.attempts} attempts, using fallback")
        return fallback_biography(name)
