"""Google OAuth 2.0 authorization-code flow."""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from mareye.config import get_settings

logger = logging.getLogger(__name__)

AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"  # noqa: S105
USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
SCOPES = ("openid", "email", "profile")


class GoogleOAuthError(Exception):
    """Google rejected the code or the profile request."""


class GoogleOAuthClient:
    """Build the consent URL and turn a callback code into a profile."""

    def __init__(self, timeout: float = 15.0) -> None:
        settings = get_settings()
        self.client_id = settings.google_client_id
        self.client_secret = settings.google_client_secret
        self.redirect_uri = settings.google_redirect_uri
        self.timeout = timeout

    def authorization_url(self, state: str | None = None) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "offline",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return f"{AUTHORIZATION_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> dict[str, Any]:
        """Trade an authorization code for tokens."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
        if response.is_error:
            raise GoogleOAuthError(f"Failed to exchange code: {response.status_code}")
        return response.json()

    async def fetch_profile(self, access_token: str) -> dict[str, Any]:
        """Fetch the OpenID userinfo profile (sub, email, names, picture)."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"}
            )
        if response.is_error:
            raise GoogleOAuthError(f"Failed to fetch Google profile: {response.status_code}")
        return response.json()

    async def profile_from_code(self, code: str) -> dict[str, Any]:
        tokens = await self.exchange_code(code)
        access_token = tokens.get("access_token")
        if not access_token:
            raise GoogleOAuthError("Google did not return an access token")
        return await self.fetch_profile(access_token)
