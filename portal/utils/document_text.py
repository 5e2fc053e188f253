"""Plain-text extraction from uploaded manuscripts (PDF and DOCX)."""

import asyncio
import io

import docx
import pypdf

from portal.utils.logger import get_logger

log = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALLOWED_MIME_TYPES: tuple[str, ...] = (PDF_MIME_TYPE, DOCX_MIME_TYPE)


class DocumentTextError(Exception):
    """Raised when a stored file cannot be turned into text."""


def _pdf_text(data: bytes) -> str:
    reader = pypdf.PdfReader(io.BytesIO(data))
    pages = [page.extract_text() or "" for page in reader.pages]
    # pypdf sometimes returns NUL from malformed font tables
    return "\n".join(pages).replace("\x00", "")


def _docx_text(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_text_sync(data: bytes, mime_type: str) -> str:
    if mime_type == PDF_MIME_TYPE:
        extractor = _pdf_text
    elif mime_type == DOCX_MIME_TYPE:
        extractor = _docx_text
    else:
        raise DocumentTextError(f"Unsupported document type: {mime_type}")

    try:
        text = extractor(data)
    except Exception as e:
        log.warning("document text extraction failed", mime_type=mime_type, error=str(e))
        raise DocumentTextError(f"Could not read document: {e}") from e

    return text.strip()


async def extract_text(data: bytes, mime_type: str) -> str:
    """Extract text off the event loop."""
    return await asyncio.to_thread(extract_text_sync, data, mime_type)
