"""Application configuration using Pydantic settings."""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: str = "development"

    # Sessions
    session_secret: str
    session_cookie_name: str = "linkfolio.sid"
    session_ttl_seconds: int = 86400  # 1 day
    token_salt: str = "linkfolio-token"

    # Frontend (CORS and post-auth redirects)
    frontend_url: str = "http://localhost:8000/app"
    public_base_url: str = "http://localhost:8000"

    # Redis (sessions, generation lock, ARQ worker)
    redis_url: str = "redis://127.0.0.1:6379"

    # LinkedIn OAuth
    linkedin_client_id: Optional[str] = None
    linkedin_client_secret: Optional[str] = None
    linkedin_redirect_uri: str = "http://localhost:8000/auth/linkedin/callback"
    linkedin_scope: str = "openid profile email"
    provider_timeout_seconds: float = 10.0

    # Text generation (Hugging Face Inference API)
    huggingface_api_key: Optional[str] = None
    text_generation_model: str = "gpt2-medium"
    text_generation_timeout_seconds: float = 20.0

    # Thumbnail rendering
    thumbnail_width: int = 1200
    thumbnail_height: int = 630
    render_timeout_ms: int = 15000
    max_concurrent_renders: int = 2

    generation_lock_ttl_seconds: int = 120

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> List[str]:
        """Origins allowed to call the API with credentials."""
        # The SPA may be served from a sub-path; CORS only cares about the origin.
        origin = self.frontend_url.split("://", 1)
        if len(origin) == 2:
            return [f"{origin[0]}://{origin[1].split('/', 1)[0]}"]
        return [self.frontend_url]

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def cookie_samesite(self) -> str:
        return "none" if self.is_production else "lax"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first use."""
    return Settings()
