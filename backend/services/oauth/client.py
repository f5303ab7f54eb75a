"""HTTP calls to OAuth providers: code exchange and profile lookup."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from config import OAUTH_HTTP_TIMEOUT_SECONDS, get_oauth_credentials
from services.errors import OAuthError

logger = logging.getLogger(__name__)


@dataclass
class TokenSet:
    access_token: str
    refresh_token: Optional[str] = None
    id_token: Optional[str] = None
    expires_in: Optional[int] = None


class OAuthTokenExchange:
    """Exchanges an authorization code for tokens with a single POST"""

    def __init__(self, timeout: float = OAUTH_HTTP_TIMEOUT_SECONDS):
        self.timeout = timeout

    async def exchange(self, provider: str, token_endpoint: str, code: str, redirect_uri: str,
                       code_verifier: Optional[str] = None) -> TokenSet:
        client_id, client_secret = get_oauth_credentials(provider)
        if not client_id or not client_secret:
            raise OAuthError(f"{provider.upper()} credentials are not configured")

        data = {
            "client_id": client_id,
            "client_secret": client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        }
        if code_verifier:
            data["code_verifier"] = code_verifier

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    token_endpoint,
                    data=data,
                    headers={"Accept": "application/json"},
                )
        except httpx.RequestError as e:
            raise OAuthError(f"Token exchange request failed: {e}") from e

        if response.status_code >= 400:
            raise OAuthError(f"Token exchange failed: {response.status_code} {response.text}")

        payload = response.json()
        # GitHub reports some failures with a 200 and an error body
        if payload.get("error") or not payload.get("access_token"):
            raise OAuthError(f"Token exchange failed: {payload.get('error_description') or payload.get('error')}")

        return TokenSet(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            id_token=payload.get("id_token"),
            expires_in=payload.get("expires_in"),
        )


class OAuthUserInfoFetcher:
    def __init__(self, timeout: float = OAUTH_HTTP_TIMEOUT_SECONDS):
        self.timeout = timeout

    async def fetch(self, endpoint: str, access_token: str) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    endpoint,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/json",
                    },
                )
        except httpx.RequestError as e:
            raise OAuthError(f"Failed to fetch user info from {endpoint}: {e}") from e

        if response.status_code >= 400:
            raise OAuthError(f"Failed to fetch user info from {endpoint}: {response.status_code}")
        return response.json()
