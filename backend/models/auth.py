import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # NULL for accounts created through OAuth
    password_hash = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    plan = Column(String(20), default="FREE", nullable=False)
    ai_calls_used = Column(Integer, default=0, nullable=False)
    # NULL means unlimited
    ai_calls_limit = Column(Integer, default=5, nullable=True)

    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan")
    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan")
    analyses = relationship("Analysis", back_populates="user")

    @property
    def has_quota(self) -> bool:
        return self.ai_calls_limit is None or self.ai_calls_used < self.ai_calls_limit


class AuthSession(Base):
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime, default=utcnow)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(255), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="sessions")

    def is_expired(self, now: datetime = None) -> bool:
        return self.expires_at < (now or utcnow())


class Account(Base):
    """Link between a local user and an OAuth provider identity"""
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("provider", "provider_account_id", name="uq_account_provider_identity"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    provider = Column(String(20), nullable=False)
    provider_account_id = Column(String(255), nullable=False)
    access_token = Column(Text, nullable=True)
    refresh_token = Column(Text, nullable=True)
    expires_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="accounts")
