"""FastAPI dependencies that wire services to the request's database session."""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from models import User
from services.analysis import AnalysisService
from services.auth import AuthService, get_token_from_request
from services.errors import AuthenticationError
from services.oauth import OAuthStrategyFactory, OAuthUserService
from services.repositories import (UserRepository, SessionRepository, AccountRepository,
                                   AnalysisRepository, ShareLinkRepository)
from services.sharing import ShareService

_oauth_factory = OAuthStrategyFactory()


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(UserRepository(db), SessionRepository(db))


def get_analysis_service(db: Session = Depends(get_db)) -> AnalysisService:
    return AnalysisService(UserRepository(db), AnalysisRepository(db))


def get_share_service(db: Session = Depends(get_db),
                      analyses: AnalysisService = Depends(get_analysis_service)) -> ShareService:
    return ShareService(analyses, ShareLinkRepository(db))


def get_oauth_factory() -> OAuthStrategyFactory:
    return _oauth_factory


def get_oauth_user_service(db: Session = Depends(get_db),
                           auth_service: AuthService = Depends(get_auth_service)) -> OAuthUserService:
    return OAuthUserService(UserRepository(db), AccountRepository(db), auth_service)


def get_optional_user(request: Request, auth_service: AuthService = Depends(get_auth_service)) -> Optional[User]:
    return auth_service.validate_session(get_token_from_request(request))


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if not user:
        raise AuthenticationError("Unauthorized")
    return user
