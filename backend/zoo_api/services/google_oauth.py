"""
Google OAuth 2.0 client for staff sign-in.

Wraps the three Google endpoints the sign-in flow needs:
- Consent screen: https://accounts.google.com/o/oauth2/v2/auth
- Token exchange: https://oauth2.googleapis.com/token
- Profile: https://openidconnect.googleapis.com/v1/userinfo
"""
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import httpx

from zoo_api.config import get_settings

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"

SCOPES = ("openid", "email", "profile")


class GoogleOAuthError(Exception):
    """Google rejected the exchange or returned an unusable profile."""


@dataclass
class GoogleProfile:
    google_id: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class GoogleOAuthClient:
    """
    Async client for the Google OAuth authorization-code flow.
    """

    def __init__(self):
        """Initialize Google OAuth client."""
        self.settings = get_settings()
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=15.0)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def authorization_url(self, state: str) -> str:
        """URL of the consent screen the browser is redirected to."""
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> str:
        """
        Trade an authorization code for an access token.

        Raises:
            GoogleOAuthError: If Google does not return an access token
            httpx.HTTPError: On transport or HTTP status errors
        """
        client = await self._get_client()
        response = await client.post(
            TOKEN_URL,
            data={
                "code": code,
                "client_id": self.settings.google_client_id,
                "client_secret": self.settings.google_client_secret,
                "redirect_uri": self.settings.google_redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        response.raise_for_status()

        access_token = response.json().get("access_token")
        if not access_token:
            raise GoogleOAuthError("Token response did not include an access token")
        return access_token

    async def fetch_profile(self, access_token: str) -> GoogleProfile:
        """
        Fetch the signed-in user's profile.

        Raises:
            GoogleOAuthError: If the profile lacks an id or a verified email
            httpx.HTTPError: On transport or HTTP status errors
        """
        client = await self._get_client()
        response = await client.get(
            USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        response.raise_for_status()

        data = response.json()
        if not data.get("sub") or not data.get("email"):
            raise GoogleOAuthError("Profile is missing id or email")
        if data.get("email_verified") is False:
            raise GoogleOAuthError("Google email address is not verified")

        return GoogleProfile(
            google_id=data["sub"],
            email=data["email"].lower(),
            name=data.get("name"),
            picture=data.get("picture"),
        )


# Singleton instance
_google_oauth_client: Optional[GoogleOAuthClient] = None


async def get_google_oauth_client() -> GoogleOAuthClient:
    """Get shared GoogleOAuthClient instance."""
    global _google_oauth_client
    if _google_oauth_client is None:
        _google_oauth_client = GoogleOAuthClient()
    return _google_oauth_client


async def close_google_oauth_client() -> None:
    global _google_oauth_client
    if _google_oauth_client is not None:
        await _google_oauth_client.close()
        _google_oauth_client = None
