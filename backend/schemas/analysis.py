from pydantic import BaseModel
from typing import Optional


class TextAnalysisInput(BaseModel):
    text: str
    documentName: Optional[str] = "Untitled document"


class SaveAnalysisInput(BaseModel):
    documentName: Optional[str] = None
    documentText: Optional[str] = None
    requirements: Optional[dict] = None


class CompareInput(BaseModel):
    ids: list[str] = []


class ShareUpdateInput(BaseModel):
    isPublic: Optional[bool] = False


class ShareResponse(BaseModel):
    shareToken: Optional[str] = None
    isPublic: bool = False
