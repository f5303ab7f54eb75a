"""Per-provider OAuth strategies: authorization URL, code exchange, profile normalization."""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from jose import jwt, JWTError

from config import APP_BASE_URL, get_oauth_credentials
from services.errors import OAuthError
from services.oauth.client import OAuthTokenExchange, OAuthUserInfoFetcher, TokenSet
from services.oauth.pkce import generate_state, generate_code_verifier, generate_code_challenge

logger = logging.getLogger(__name__)


def provider_account_id(provider: str, value) -> str:
    """The provider's stable user id as a string; a profile without one is rejected"""
    if value is None or value == "":
        raise OAuthError(f"{provider} profile has no user id")
    return str(value)


@dataclass
class OAuthUserInfo:
    id: str
    email: Optional[str]
    name: Optional[str] = None


@dataclass
class OAuthAuthorizationUrl:
    url: str
    state: str
    code_verifier: str


class OAuthStrategy:
    name: str = ""
    authorization_endpoint: str = ""
    token_endpoint: str = ""
    scopes: str = ""
    extra_authorization_params: tuple = ()

    def __init__(self, token_exchange: OAuthTokenExchange, user_info_fetcher: OAuthUserInfoFetcher = None,
                 base_url: str = APP_BASE_URL):
        self.token_exchange = token_exchange
        self.user_info_fetcher = user_info_fetcher
        self.base_url = base_url.rstrip("/")

    @property
    def redirect_uri(self) -> str:
        return f"{self.base_url}/api/auth/oauth/{self.name}/callback"

    def get_authorization_url(self) -> OAuthAuthorizationUrl:
        client_id, _ = get_oauth_credentials(self.name)
        if not client_id:
            raise RuntimeError(f"{self.name.upper()}_CLIENT_ID is not configured")

        state = generate_state()
        code_verifier = generate_code_verifier()
        params = {
            "client_id": client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scopes,
            "state": state,
            "code_challenge": generate_code_challenge(code_verifier),
            "code_challenge_method": "S256",
            **dict(self.extra_authorization_params),
        }
        return OAuthAuthorizationUrl(
            url=f"{self.authorization_endpoint}?{urlencode(params)}",
            state=state,
            code_verifier=code_verifier,
        )

    async def exchange_code(self, code: str, code_verifier: Optional[str] = None) -> TokenSet:
        return await self.token_exchange.exchange(
            self.name, self.token_endpoint, code, self.redirect_uri, code_verifier
        )

    async def get_user_info(self, tokens: TokenSet) -> OAuthUserInfo:
        raise NotImplementedError

    async def authenticate(self, code: str, code_verifier: Optional[str] = None) -> tuple[TokenSet, OAuthUserInfo]:
        """Exchange the code and return the tokens with the normalized profile"""
        tokens = await self.exchange_code(code, code_verifier)
        user_info = await self.get_user_info(tokens)
        return tokens, user_info


class GoogleOAuthStrategy(OAuthStrategy):
    name = "google"
    authorization_endpoint = "https://accounts.google.com/o/oauth2/v2/auth"
    token_endpoint = "https://oauth2.googleapis.com/token"
    userinfo_endpoint = "https://www.googleapis.com/oauth2/v2/userinfo"
    scopes = "openid email profile"

    async def get_user_info(self, tokens: TokenSet) -> OAuthUserInfo:
        profile = await self.user_info_fetcher.fetch(self.userinfo_endpoint, tokens.access_token)
        return OAuthUserInfo(
            id=provider_account_id(self.name, profile.get("id") or profile.get("sub")),
            email=profile.get("email"),
            name=profile.get("name"),
        )


class GitHubOAuthStrategy(OAuthStrategy):
    name = "github"
    authorization_endpoint = "https://github.com/login/oauth/authorize"
    token_endpoint = "https://github.com/login/oauth/access_token"
    user_endpoint = "https://api.github.com/user"
    emails_endpoint = "https://api.github.com/user/emails"
    scopes = "user:email"

    async def get_user_info(self, tokens: TokenSet) -> OAuthUserInfo:
        profile = await self.user_info_fetcher.fetch(self.user_endpoint, tokens.access_token)
        login = profile.get("login")

        email = None
        try:
            emails = await self.user_info_fetcher.fetch(self.emails_endpoint, tokens.access_token)
            email = self.primary_verified_email(emails)
        except OAuthError as e:
            logger.warning("GitHub emails lookup failed, using fallback: %s", e)

        # Private emails: GitHub documents no address, use a stable synthetic one
        email = email or profile.get("email") or (f"{login}@github.local" if login else None)

        return OAuthUserInfo(
            id=provider_account_id(self.name, profile.get("id")),
            email=email,
            name=profile.get("name") or login,
        )

    @staticmethod
    def primary_verified_email(emails) -> Optional[str]:
        if not isinstance(emails, list):
            return None
        for entry in emails:
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")
        return None


class AppleOAuthStrategy(OAuthStrategy):
    name = "apple"
    authorization_endpoint = "https://appleid.apple.com/auth/authorize"
    token_endpoint = "https://appleid.apple.com/auth/token"
    scopes = "name email"
    # Apple posts the callback as a form when name/email scopes are requested
    extra_authorization_params = (("response_mode", "form_post"),)

    async def get_user_info(self, tokens: TokenSet) -> OAuthUserInfo:
        if not tokens.id_token:
            raise OAuthError("ID token is required for Apple OAuth")

        # Apple has no userinfo endpoint; the profile lives in the ID token
        try:
            claims = jwt.get_unverified_claims(tokens.id_token)
        except JWTError as e:
            raise OAuthError(f"Invalid Apple ID token: {e}") from e

        name = claims.get("name")
        if isinstance(name, dict):
            name = " ".join(p for p in (name.get("firstName"), name.get("lastName")) if p) or None

        return OAuthUserInfo(
            id=provider_account_id(self.name, claims.get("sub")),
            email=claims.get("email"),
            name=name,
        )
