from fastapi import APIRouter, Depends

from models import User
from schemas.analysis import ShareUpdateInput, ShareResponse
from services.analysis import load_requirements
from services.dependencies import get_current_user, get_share_service
from services.sharing import ShareService, to_share_dto

router = APIRouter(prefix="/api", tags=["shares"])


@router.post("/analyses/{analysis_id}/share", response_model=ShareResponse)
async def create_share_link(analysis_id: str, user: User = Depends(get_current_user),
                            shares: ShareService = Depends(get_share_service)):
    """Create a share link for an analysis, or return the existing one"""
    return to_share_dto(shares.create_or_get(user, analysis_id))


@router.get("/analyses/{analysis_id}/share", response_model=ShareResponse)
async def get_share_link(analysis_id: str, user: User = Depends(get_current_user),
                         shares: ShareService = Depends(get_share_service)):
    return to_share_dto(shares.get(user, analysis_id))


@router.patch("/analyses/{analysis_id}/share", response_model=ShareResponse)
async def update_share_link(analysis_id: str, input: ShareUpdateInput, user: User = Depends(get_current_user),
                            shares: ShareService = Depends(get_share_service)):
    return to_share_dto(shares.set_public(user, analysis_id, bool(input.isPublic)))


@router.delete("/analyses/{analysis_id}/share")
async def delete_share_link(analysis_id: str, user: User = Depends(get_current_user),
                            shares: ShareService = Depends(get_share_service)):
    shares.delete(user, analysis_id)
    return {"success": True}


@router.get("/shared/{token}")
async def view_shared_analysis(token: str, shares: ShareService = Depends(get_share_service)):
    """Read-only view of a shared analysis; no login needed"""
    link = shares.resolve(token)
    analysis = link.analysis
    return {
        "analysis": {
            "id": analysis.id,
            "documentName": analysis.document_name,
            "requirements": load_requirements(analysis),
            "createdAt": analysis.created_at.isoformat() if analysis.created_at else None,
            "isPublic": link.is_public,
        }
    }
