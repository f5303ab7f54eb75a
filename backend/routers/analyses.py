import re
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from config import MAX_UPLOAD_BYTES
from models import User
from schemas.analysis import TextAnalysisInput, SaveAnalysisInput, CompareInput
from services.analysis import AnalysisService, load_requirements, summarize
from services.dependencies import get_analysis_service, get_current_user
from services.errors import ValidationError
from services.parser import extract_text
from services.reports import (EXPORT_FORMATS, build_estimate, build_statistics, compare_analyses,
                              render_export)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyses"])

MIN_COMPARE = 2
MAX_COMPARE = 5


def export_basename(document_name: str) -> str:
    stem = document_name.rsplit(".", 1)[0] if "." in document_name else document_name
    slug = re.sub(r"[^A-Za-z0-9_-]+", "_", stem).strip("_")
    return slug or "requirements"


async def run_analysis(service: AnalysisService, user: User, document_name: str, text: str) -> dict:
    # The LLM client is blocking; keep it off the event loop
    analysis, requirements = await run_in_threadpool(service.analyze_document, user, document_name, text)
    data = summarize(analysis, requirements=requirements)
    data.pop("updatedAt", None)
    return {"analysis": data}


@router.post("/analyze")
async def analyze_file(file: UploadFile = File(...), document_name: Optional[str] = Form(None),
                       user: User = Depends(get_current_user),
                       service: AnalysisService = Depends(get_analysis_service)):
    """Extract text from an uploaded BRD and analyze it"""
    service.ensure_quota(user)

    # Never buffer more than one byte past the limit
    content = await file.read(MAX_UPLOAD_BYTES + 1)
    text = extract_text(file.filename, file.content_type, content)
    name = (document_name or file.filename or "Untitled document").strip()

    logger.info("Analyzing upload %s (%d bytes, %d chars) for user %s", name, len(content), len(text), user.id)
    return await run_analysis(service, user, name, text)


@router.post("/analyze/text")
async def analyze_text(input: TextAnalysisInput, user: User = Depends(get_current_user),
                       service: AnalysisService = Depends(get_analysis_service)):
    """Analyze BRD text pasted directly"""
    service.ensure_quota(user)
    if not input.text or not input.text.strip():
        raise ValidationError("Document text is required")

    name = (input.documentName or "Untitled document").strip()
    return await run_analysis(service, user, name, input.text.strip())


@router.get("/analyses")
async def list_analyses(user: User = Depends(get_current_user),
                        service: AnalysisService = Depends(get_analysis_service)):
    return {"analyses": [summarize(a) for a in service.list_for_user(user)]}


@router.post("/analyses")
async def save_analysis(input: SaveAnalysisInput, user: User = Depends(get_current_user),
                        service: AnalysisService = Depends(get_analysis_service)):
    """Store a result that was produced elsewhere"""
    analysis = service.save_external(user, input.documentName, input.documentText, input.requirements)
    data = summarize(analysis)
    data.pop("updatedAt", None)
    return {"analysis": data}


@router.post("/analyses/compare")
async def compare(input: CompareInput, user: User = Depends(get_current_user),
                  service: AnalysisService = Depends(get_analysis_service)):
    """Side-by-side counts for two to five of the caller's analyses"""
    ids = list(dict.fromkeys(input.ids))
    if not MIN_COMPARE <= len(ids) <= MAX_COMPARE:
        raise ValidationError(f"Select between {MIN_COMPARE} and {MAX_COMPARE} analyses to compare")

    analyses = service.get_many_owned(user, ids)
    return compare_analyses([(a.id, a.document_name, load_requirements(a)) for a in analyses])


@router.get("/analyses/{analysis_id}")
async def get_analysis(analysis_id: str, user: User = Depends(get_current_user),
                       service: AnalysisService = Depends(get_analysis_service)):
    analysis = service.get_owned(user, analysis_id)
    return {"analysis": summarize(analysis, include_text=True, requirements=load_requirements(analysis))}


@router.delete("/analyses/{analysis_id}")
async def delete_analysis(analysis_id: str, user: User = Depends(get_current_user),
                          service: AnalysisService = Depends(get_analysis_service)):
    service.delete(user, analysis_id)
    return {"success": True}


@router.get("/analyses/{analysis_id}/export")
async def export_analysis(analysis_id: str, format: str = "json", user: User = Depends(get_current_user),
                          service: AnalysisService = Depends(get_analysis_service)):
    """Download the requirements as json, csv (jira/trello/asana), markdown or pdf"""
    fmt = format.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValidationError(f"Unsupported export format. Use one of: {', '.join(EXPORT_FORMATS)}")

    analysis = service.get_owned(user, analysis_id)
    content, media_type, filename = render_export(
        load_requirements(analysis), fmt, export_basename(analysis.document_name)
    )
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/analyses/{analysis_id}/statistics")
async def analysis_statistics(analysis_id: str, user: User = Depends(get_current_user),
                              service: AnalysisService = Depends(get_analysis_service)):
    analysis = service.get_owned(user, analysis_id)
    return build_statistics(load_requirements(analysis))


@router.get("/analyses/{analysis_id}/estimate")
async def analysis_estimate(analysis_id: str, hourly_rate: float = Query(50, gt=0),
                            user: User = Depends(get_current_user),
                            service: AnalysisService = Depends(get_analysis_service)):
    analysis = service.get_owned(user, analysis_id)
    return build_estimate(load_requirements(analysis), hourly_rate)
