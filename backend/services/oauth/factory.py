from services.oauth.client import OAuthTokenExchange, OAuthUserInfoFetcher
from services.oauth.strategies import (OAuthStrategy, GoogleOAuthStrategy, GitHubOAuthStrategy,
                                       AppleOAuthStrategy)

PROVIDERS = ("google", "github", "apple")


class OAuthStrategyFactory:
    """Builds the strategy for one of the supported providers"""

    def __init__(self, token_exchange: OAuthTokenExchange = None, user_info_fetcher: OAuthUserInfoFetcher = None):
        self.token_exchange = token_exchange or OAuthTokenExchange()
        self.user_info_fetcher = user_info_fetcher or OAuthUserInfoFetcher()

    @staticmethod
    def is_supported(provider: str) -> bool:
        return provider in PROVIDERS

    def create(self, provider: str) -> OAuthStrategy:
        if provider == "google":
            return GoogleOAuthStrategy(self.token_exchange, self.user_info_fetcher)
        if provider == "github":
            return GitHubOAuthStrategy(self.token_exchange, self.user_info_fetcher)
        if provider == "apple":
            return AppleOAuthStrategy(self.token_exchange)
        raise ValueError(f"Unsupported OAuth provider: {provider}")
