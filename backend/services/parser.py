"""Raw text extraction from uploaded BRD files (.txt, .pdf, .docx)."""

import io
import logging

import docx
import PyPDF2
from PyPDF2.errors import PdfReadError

from config import MAX_UPLOAD_BYTES
from services.errors import ValidationError

logger = logging.getLogger(__name__)

PDF_TYPES = ("application/pdf",)
DOCX_TYPES = ("application/vnd.openxmlformats-officedocument.wordprocessingml.document",)
DOC_TYPES = ("application/msword",)


def extract_text_from_pdf(content: bytes) -> str:
    try:
        reader = PyPDF2.PdfReader(io.BytesIO(content))
        pages = [page.extract_text() or "" for page in reader.pages]
    except PdfReadError as e:
        logger.warning("PDF extraction failed: %s", e)
        raise ValidationError(f"Failed to parse PDF: {e}. Please try converting to .txt file.") from e
    return "\n\n".join(p.strip() for p in pages if p.strip())


def extract_text_from_docx(content: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(content))
    except Exception as e:  # python-docx surfaces zip/xml errors of several kinds
        logger.warning("DOCX extraction failed: %s", e)
        raise ValidationError(f"Failed to parse document: {e}") from e
    return "\n".join(p.text for p in document.paragraphs)


def extract_text(filename: str, content_type: str, content: bytes) -> str:
    """Extract plain text from an uploaded file, picking the parser by type or extension"""
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValidationError(f"File is too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)}MB.")

    name = (filename or "").lower()
    content_type = (content_type or "").split(";")[0].strip().lower()

    if content_type == "text/plain" or name.endswith(".txt"):
        text = content.decode("utf-8", errors="replace")
    elif content_type in PDF_TYPES or name.endswith(".pdf"):
        text = extract_text_from_pdf(content)
    elif content_type in DOCX_TYPES or name.endswith(".docx"):
        text = extract_text_from_docx(content)
    elif content_type in DOC_TYPES or name.endswith(".doc"):
        raise ValidationError(
            "Legacy Word document (.doc) format is not supported. Please convert to .txt or .docx first."
        )
    else:
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError(
                f"Unsupported file type: {content_type or 'unknown'}. Please use a .txt, .pdf, or .docx file."
            )

    text = text.strip()
    if not text:
        raise ValidationError("No text could be extracted from the document")
    return text
