import json
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from models import User, AuthSession, Account, Analysis, ShareLink, ContactRequest, utcnow


def normalize_email(email: str) -> str:
    return email.lower().strip()


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def create(self, email: str, password_hash: Optional[str] = None, name: Optional[str] = None,
               plan: str = "FREE", ai_calls_limit: Optional[int] = 5) -> User:
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            name=name or None,
            plan=plan,
            ai_calls_used=0,
            ai_calls_limit=ai_calls_limit,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User, **fields) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def increment_usage(self, user: User) -> User:
        # Single UPDATE so concurrent requests don't lose increments
        self.db.query(User).filter(User.id == user.id).update(
            {User.ai_calls_used: User.ai_calls_used + 1}, synchronize_session=False
        )
        self.db.commit()
        self.db.refresh(user)
        return user


class SessionRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, token: str, expires_at: datetime) -> AuthSession:
        session = AuthSession(user_id=user_id, token=token, expires_at=expires_at)
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def find_by_token(self, token: str) -> Optional[AuthSession]:
        return self.db.query(AuthSession).filter(AuthSession.token == token).first()

    def delete_by_token(self, token: str) -> int:
        count = self.db.query(AuthSession).filter(AuthSession.token == token).delete()
        self.db.commit()
        return count

    def delete_by_user_id(self, user_id: str) -> int:
        count = self.db.query(AuthSession).filter(AuthSession.user_id == user_id).delete()
        self.db.commit()
        return count

    def delete_expired(self) -> int:
        count = self.db.query(AuthSession).filter(AuthSession.expires_at < utcnow()).delete()
        self.db.commit()
        return count


class AccountRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_provider_account(self, provider: str, provider_account_id: str) -> Optional[Account]:
        return self.db.query(Account).filter(
            Account.provider == provider,
            Account.provider_account_id == provider_account_id,
        ).first()

    def create(self, user_id: str, provider: str, provider_account_id: str,
               access_token: str, refresh_token: Optional[str] = None,
               expires_at: Optional[datetime] = None) -> Account:
        account = Account(
            user_id=user_id,
            provider=provider,
            provider_account_id=provider_account_id,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)
        return account

    def update_tokens(self, account: Account, access_token: str, refresh_token: Optional[str] = None,
                      expires_at: Optional[datetime] = None) -> Account:
        account.access_token = access_token
        account.refresh_token = refresh_token
        account.expires_at = expires_at
        self.db.commit()
        self.db.refresh(account)
        return account


class AnalysisRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, document_name: str, document_text: str, requirements: dict) -> Analysis:
        analysis = Analysis(
            user_id=user_id,
            document_name=document_name,
            document_text=document_text,
            requirements=json.dumps(requirements),
        )
        self.db.add(analysis)
        self.db.commit()
        self.db.refresh(analysis)
        return analysis

    def find_by_id(self, analysis_id: str) -> Optional[Analysis]:
        return self.db.query(Analysis).filter(Analysis.id == analysis_id).first()

    def list_for_user(self, user_id: str) -> list[Analysis]:
        return self.db.query(Analysis).filter(
            Analysis.user_id == user_id
        ).order_by(Analysis.created_at.desc()).all()

    def delete(self, analysis: Analysis):
        self.db.delete(analysis)
        self.db.commit()


class ShareLinkRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_analysis_id(self, analysis_id: str) -> Optional[ShareLink]:
        return self.db.query(ShareLink).filter(ShareLink.analysis_id == analysis_id).first()

    def find_by_token(self, token: str) -> Optional[ShareLink]:
        return self.db.query(ShareLink).filter(ShareLink.token == token).first()

    def create(self, analysis_id: str, token: str, is_public: bool = False) -> ShareLink:
        link = ShareLink(analysis_id=analysis_id, token=token, is_public=is_public)
        self.db.add(link)
        self.db.commit()
        self.db.refresh(link)
        return link

    def set_public(self, link: ShareLink, is_public: bool) -> ShareLink:
        link.is_public = is_public
        self.db.commit()
        self.db.refresh(link)
        return link

    def delete(self, link: ShareLink):
        self.db.delete(link)
        self.db.commit()


class ContactRequestRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields) -> ContactRequest:
        entry = ContactRequest(**fields)
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry
