import secrets
import logging
from typing import Optional

from models import User, ShareLink, utcnow
from services.analysis import AnalysisService
from services.errors import ForbiddenError, NotFoundError
from services.repositories import ShareLinkRepository

logger = logging.getLogger(__name__)


def generate_share_token() -> str:
    return secrets.token_hex(32)


class ShareService:
    """Share links for analyses; one link per analysis"""

    def __init__(self, analyses: AnalysisService, links: ShareLinkRepository):
        self.analyses = analyses
        self.links = links

    def create_or_get(self, user: User, analysis_id: str) -> ShareLink:
        self.analyses.get_owned(user, analysis_id)

        existing = self.links.find_by_analysis_id(analysis_id)
        if existing:
            return existing

        link = self.links.create(analysis_id, generate_share_token(), is_public=False)
        logger.info("Created share link %s for analysis %s", link.id, analysis_id)
        return link

    def get(self, user: User, analysis_id: str) -> Optional[ShareLink]:
        self.analyses.get_owned(user, analysis_id)
        return self.links.find_by_analysis_id(analysis_id)

    def set_public(self, user: User, analysis_id: str, is_public: bool) -> ShareLink:
        self.analyses.get_owned(user, analysis_id)
        link = self.links.find_by_analysis_id(analysis_id)
        if not link:
            raise NotFoundError("Share link not found")
        return self.links.set_public(link, is_public)

    def delete(self, user: User, analysis_id: str):
        self.analyses.get_owned(user, analysis_id)
        link = self.links.find_by_analysis_id(analysis_id)
        if link:
            self.links.delete(link)

    def resolve(self, token: str) -> ShareLink:
        """Look up a link by token for anonymous viewing"""
        link = self.links.find_by_token(token)
        if not link:
            raise NotFoundError("Share link not found")
        if link.expires_at and link.expires_at < utcnow():
            raise ForbiddenError("Share link has expired")
        return link


def to_share_dto(link: Optional[ShareLink]) -> dict:
    if not link:
        return {"shareToken": None, "isPublic": False}
    return {"shareToken": link.token, "isPublic": link.is_public}
