import json
import logging
from typing import Optional

from models import User, Analysis
from services import llm
from services.errors import ForbiddenError, NotFoundError, QuotaExceededError, ValidationError
from services.repositories import UserRepository, AnalysisRepository

logger = logging.getLogger(__name__)


def load_requirements(analysis: Analysis) -> dict:
    return json.loads(analysis.requirements)


class AnalysisService:
    def __init__(self, users: UserRepository, analyses: AnalysisRepository):
        self.users = users
        self.analyses = analyses

    def ensure_quota(self, user: User):
        if not user.has_quota:
            raise QuotaExceededError(
                f"You've reached your monthly limit of {user.ai_calls_limit} analyses. Please upgrade your plan."
            )

    def analyze_document(self, user: User, document_name: str, text: str, client=None) -> tuple[Analysis, dict]:
        """Run the LLM over a document's text, store the result and count the call"""
        self.ensure_quota(user)
        if not text or not text.strip():
            raise ValidationError("Document text is empty")

        requirements = llm.analyze_brd(text, document_name, client=client)
        analysis = self.save_analysis(user, document_name, text, requirements)
        return analysis, requirements

    def save_external(self, user: User, document_name: str, document_text: str, requirements: dict) -> Analysis:
        """Store a result produced elsewhere, normalized like an LLM answer"""
        if not document_name or not document_text or not requirements:
            raise ValidationError("Missing required fields")
        self.ensure_quota(user)
        return self.save_analysis(user, document_name, document_text,
                                  llm.normalize_requirements(requirements, document_name))

    def save_analysis(self, user: User, document_name: str, document_text: str, requirements: dict) -> Analysis:
        if not document_name or not document_text or not requirements:
            raise ValidationError("Missing required fields")

        analysis = self.analyses.create(user.id, document_name, document_text, requirements)
        self.users.increment_usage(user)
        logger.info("Saved analysis %s for user %s (%s/%s calls used)", analysis.id, user.id,
                    user.ai_calls_used, user.ai_calls_limit)
        return analysis

    def list_for_user(self, user: User) -> list[Analysis]:
        return self.analyses.list_for_user(user.id)

    def get_owned(self, user: User, analysis_id: str) -> Analysis:
        analysis = self.analyses.find_by_id(analysis_id)
        if not analysis:
            raise NotFoundError("Analysis not found")
        if analysis.user_id != user.id:
            raise ForbiddenError("Forbidden")
        return analysis

    def get_many_owned(self, user: User, analysis_ids: list[str]) -> list[Analysis]:
        return [self.get_owned(user, analysis_id) for analysis_id in analysis_ids]

    def delete(self, user: User, analysis_id: str):
        analysis = self.get_owned(user, analysis_id)
        self.analyses.delete(analysis)
        logger.info("Deleted analysis %s", analysis_id)


def summarize(analysis: Analysis, include_text: bool = False, requirements: Optional[dict] = None) -> dict:
    data = {
        "id": analysis.id,
        "documentName": analysis.document_name,
        "createdAt": analysis.created_at.isoformat() if analysis.created_at else None,
        "updatedAt": analysis.updated_at.isoformat() if analysis.updated_at else None,
    }
    if include_text:
        data["documentText"] = analysis.document_text
    if requirements is not None:
        data["requirements"] = requirements
    return data
