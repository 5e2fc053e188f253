"""Tests for manuscript text extraction."""

import io

import docx
import pypdf
import pytest

from portal.utils.document_text import (
    DOCX_MIME_TYPE,
    PDF_MIME_TYPE,
    DocumentTextError,
    extract_text,
    extract_text_sync,
)


@pytest.fixture
def docx_bytes():
    document = docx.Document()
    document.add_paragraph("Introduction")
    document.add_paragraph("We study crop yield.")
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def blank_pdf_bytes():
    writer = pypdf.PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestExtractText:
    """Tests for extract_text_sync / extract_text."""

    def test_docx_paragraphs_joined(self, docx_bytes):
        assert extract_text_sync(docx_bytes, DOCX_MIME_TYPE) == "Introduction\nWe study crop yield."

    def test_blank_pdf_yields_empty_text(self, blank_pdf_bytes):
        assert extract_text_sync(blank_pdf_bytes, PDF_MIME_TYPE) == ""

    def test_corrupt_pdf_raises(self):
        with pytest.raises(DocumentTextError):
            extract_text_sync(b"not a pdf", PDF_MIME_TYPE)

    def test_unsupported_type_raises(self):
        with pytest.raises(DocumentTextError):
            extract_text_sync(b"GIF89a", "image/gif")

    @pytest.mark.asyncio
    async def test_async_wrapper(self, docx_bytes):
        assert "crop yield" in await extract_text(docx_bytes, DOCX_MIME_TYPE)
