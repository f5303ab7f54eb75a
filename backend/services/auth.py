import re
import secrets
import logging
from typing import Optional
from datetime import datetime, timedelta

import bcrypt
from fastapi import Request

from config import (AUTH_COOKIE_NAME, SESSION_DURATION_HOURS, PASSWORD_MIN_LENGTH,
                    DEFAULT_PLAN, DEFAULT_AI_CALLS_LIMIT)
from models import User, utcnow
from services.errors import AuthenticationError, ValidationError
from services.repositories import UserRepository, SessionRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
OAUTH_ACCOUNT = "This account was created with OAuth. Please sign in with your OAuth provider."
USER_EXISTS = "User with this email already exists"

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=10)).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


class SessionTokenGenerator:
    """Opaque session tokens and their expiry"""

    def __init__(self, duration_hours: int = SESSION_DURATION_HOURS):
        self.duration_hours = duration_hours

    def generate(self) -> str:
        return secrets.token_hex(32)

    def expiration_date(self, now: datetime = None) -> datetime:
        return (now or utcnow()) + timedelta(hours=self.duration_hours)


class AuthService:
    def __init__(self, users: UserRepository, sessions: SessionRepository,
                 token_generator: SessionTokenGenerator = None):
        self.users = users
        self.sessions = sessions
        self.token_generator = token_generator or SessionTokenGenerator()

    def login(self, email: str, password: str) -> tuple[User, str]:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.users.find_by_email(email)
        if not user:
            raise AuthenticationError(INVALID_CREDENTIALS)

        # OAuth users don't have passwords
        if not user.password_hash:
            raise AuthenticationError(OAUTH_ACCOUNT)

        if not verify_password(password, user.password_hash):
            raise AuthenticationError(INVALID_CREDENTIALS)

        return user, self.create_session_token(user.id)

    def signup(self, email: str, password: str, name: Optional[str] = None) -> tuple[User, str]:
        if not email or not password:
            raise ValidationError("Email and password are required")
        if not EMAIL_PATTERN.match(email.strip()):
            raise ValidationError("Invalid email address")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

        if self.users.find_by_email(email):
            raise ValidationError(USER_EXISTS)

        user = self.users.create(
            email=email,
            password_hash=hash_password(password),
            name=name,
            plan=DEFAULT_PLAN,
            ai_calls_limit=DEFAULT_AI_CALLS_LIMIT,
        )
        logger.info("Created user %s", user.id)
        return user, self.create_session_token(user.id)

    def logout(self, token: str):
        if token:
            self.sessions.delete_by_token(token)

    def validate_session(self, token: Optional[str]) -> Optional[User]:
        """Return the session's user, or None. Expired sessions are deleted here."""
        if not token:
            return None

        session = self.sessions.find_by_token(token)
        if not session:
            return None

        if session.is_expired():
            self.sessions.delete_by_token(token)
            return None

        return session.user

    def refresh_session(self, user_id: str) -> str:
        self.sessions.delete_by_user_id(user_id)
        return self.create_session_token(user_id)

    def create_session_token(self, user_id: str) -> str:
        token = self.token_generator.generate()
        self.sessions.create(
            user_id=user_id,
            token=token,
            expires_at=self.token_generator.expiration_date(),
        )
        return token


def get_token_from_request(request: Request) -> Optional[str]:
    """Session token from the auth cookie or an Authorization: Bearer header"""
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if token:
        return token

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None

    return None


def to_user_dto(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "plan": user.plan,
        "aiCallsUsed": user.ai_calls_used,
        "aiCallsLimit": user.ai_calls_limit,
    }
