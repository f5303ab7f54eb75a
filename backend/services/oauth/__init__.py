"""OAuth login for Google, GitHub and Apple."""

from services.oauth.factory import OAuthStrategyFactory, PROVIDERS
from services.oauth.strategies import OAuthUserInfo, OAuthAuthorizationUrl
from services.oauth.client import TokenSet
from services.oauth.user_service import OAuthUserService

__all__ = [
    "OAuthStrategyFactory",
    "PROVIDERS",
    "OAuthUserInfo",
    "OAuthAuthorizationUrl",
    "TokenSet",
    "OAuthUserService",
]
