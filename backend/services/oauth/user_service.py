import logging
from datetime import timedelta

from config import DEFAULT_PLAN, DEFAULT_AI_CALLS_LIMIT
from models import User, utcnow
from services.auth import AuthService
from services.errors import MissingEmailError
from services.oauth.client import TokenSet
from services.oauth.strategies import OAuthUserInfo
from services.repositories import UserRepository, AccountRepository

logger = logging.getLogger(__name__)


class OAuthUserService:
    """Finds or creates the local user behind an OAuth identity and signs them in"""

    def __init__(self, users: UserRepository, accounts: AccountRepository, auth_service: AuthService):
        self.users = users
        self.accounts = accounts
        self.auth_service = auth_service

    def find_or_create_user(self, provider: str, user_info: OAuthUserInfo, tokens: TokenSet) -> tuple[User, str]:
        if not user_info.email:
            raise MissingEmailError("Email is required but not provided by OAuth provider")

        expires_at = utcnow() + timedelta(seconds=int(tokens.expires_in)) if tokens.expires_in else None

        account = self.accounts.find_by_provider_account(provider, user_info.id)
        if account:
            self.accounts.update_tokens(account, tokens.access_token, tokens.refresh_token, expires_at)
            user = account.user
        else:
            user = self.users.find_by_email(user_info.email)
            if not user:
                user = self.users.create(
                    email=user_info.email,
                    password_hash=None,
                    name=user_info.name,
                    plan=DEFAULT_PLAN,
                    ai_calls_limit=DEFAULT_AI_CALLS_LIMIT,
                )
                logger.info("Created user %s from %s login", user.id, provider)

            self.accounts.create(
                user_id=user.id,
                provider=provider,
                provider_account_id=user_info.id,
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                expires_at=expires_at,
            )
            logger.info("Linked %s account to user %s", provider, user.id)

        return user, self.auth_service.create_session_token(user.id)
