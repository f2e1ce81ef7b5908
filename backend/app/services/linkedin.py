"""LinkedIn OAuth 2.0 / OpenID Connect client."""
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlencode

import httpx

from app.config import Settings
from app.utils.exceptions import InvalidProfileError, StateMismatchError, UpstreamError
from app.utils.hashing import generate_state
from app.utils.logger import logger

AUTHORIZATION_URL = "https://www.linkedin.com/oauth/v2/authorization"
ACCESS_TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
USERINFO_URL = "https://api.linkedin.com/v2/userinfo"

DEFAULT_TOKEN_LIFETIME_SECONDS = 3600


@dataclass
class TokenGrant:
    """Access token returned by the code exchange."""
    access_token: str
    expires_in: int = DEFAULT_TOKEN_LIFETIME_SECONDS


@dataclass
class Profile:
    """Normalized LinkedIn profile."""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    picture: Optional[str] = None

    def snapshot(self) -> dict:
        """Cached copy stored in the session."""
        return {"name": self.name, "email": self.email, "picture": self.picture}


class LinkedInClient:
    """Talks to LinkedIn's OAuth and userinfo endpoints."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport
        self.client_id = settings.linkedin_client_id
        self.client_secret = settings.linkedin_client_secret
        self.redirect_uri = settings.linkedin_redirect_uri
        self.scope = settings.linkedin_scope
        self.timeout = settings.provider_timeout_seconds

    def begin_auth(self) -> Tuple[str, str]:
        """
        Build the authorization redirect.

        Returns:
            Tuple of (authorization URL, state nonce to keep in the session)
        """
        if not self.client_id:
            raise UpstreamError("LinkedIn client id is not configured")

        state = generate_state()
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "state": state,
            "scope": self.scope,
        }
        return f"{AUTHORIZATION_URL}?{urlencode(params)}", state

    async def exchange_code(self, code: str, state: Optional[str], expected_state: Optional[str]) -> TokenGrant:
        """
        Exchange an authorization code for an access token.

        Args:
            code: Authorization code from the callback
            state: State returned by LinkedIn
            expected_state: State issued for this session

        Returns:
            TokenGrant with the access token and its lifetime

        Raises:
            StateMismatchError: If the states differ or none was issued
            UpstreamError: If LinkedIn rejects the exchange
        """
        if not expected_state or state != expected_state:
            raise StateMismatchError()

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    ACCESS_TOKEN_URL,
                    data=data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.HTTPError as e:
            logger.error(f"[AUTH] Token exchange request failed: {e}")
            raise UpstreamError(f"LinkedIn token exchange failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"[AUTH] Token exchange failed: {response.status_code} - {response.text}")
            raise UpstreamError(f"LinkedIn token exchange failed: {response.status_code}")

        payload = response.json()
        access_token = payload.get("access_token")
        if not access_token:
            raise UpstreamError("LinkedIn token response did not include an access token")

        return TokenGrant(
            access_token=access_token,
            expires_in=int(payload.get("expires_in") or DEFAULT_TOKEN_LIFETIME_SECONDS),
        )

    async def fetch_profile(self, access_token: str) -> Profile:
        """
        Fetch and normalize the member's profile.

        Raises:
            InvalidProfileError: If LinkedIn returns no subject identifier
            UpstreamError: If the request fails
        """
        headers = {
            "Authorization": f"Bearer {access_token}",
            "cache-control": "no-cache",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(USERINFO_URL, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"[AUTH] Profile request failed: {e}")
            raise UpstreamError(f"LinkedIn profile request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"[AUTH] Profile request failed: {response.status_code} - {response.text}")
            raise UpstreamError(f"LinkedIn profile request failed: {response.status_code}")

        return normalize_profile(response.json())


def normalize_profile(data: dict) -> Profile:
    """Map an OIDC userinfo payload onto Profile."""
    subject = data.get("sub") or data.get("id")
    if not subject:
        raise InvalidProfileError("LinkedIn profile did not include a subject identifier")

    name = data.get("name")
    if not name:
        parts = [data.get("given_name"), data.get("family_name")]
        name = " ".join(p for p in parts if p) or None

    return Profile(
        id=str(subject),
        name=name,
        email=data.get("email"),
        picture=data.get("picture"),
    )
