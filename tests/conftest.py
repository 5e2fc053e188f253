"""Shared pytest fixtures."""

# Clear settings cache before any imports to prevent stale values with coverage
from portal.config import get_settings

get_settings.cache_clear()

import pytest
import uuid
from unittest.mock import AsyncMock, Mock
from datetime import datetime, timedelta, timezone

from portal.lifecycle import PaperStatus


NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed clock value shared by lifecycle and service tests."""
    return NOW


@pytest.fixture
def mock_llm_client():
    """Create a mock LLM client."""
    client = AsyncMock()
    client.provider_name = "mock"
    client.model = "mock-model"
    return client


# Database mocking fixtures


@pytest.fixture
def mock_async_session():
    """Create a mock AsyncSession for repository tests."""
    session = AsyncMock()

    # Mock result object for execute
    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.scalar_one = Mock(return_value=0)
    mock_result.scalars = Mock(return_value=Mock(all=Mock(return_value=[])))
    mock_result.all = Mock(return_value=[])

    session.execute = AsyncMock(return_value=mock_result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = Mock()

    return session


@pytest.fixture
def make_paper():
    """Factory fixture for Paper-like mock objects."""

    def _make(
        status=PaperStatus.SUBMITTED,
        user_id="owner-uid",
        payment_due_date=None,
        paid_at=None,
        **overrides,
    ):
        paper = Mock()
        paper.id = overrides.pop("id", uuid.uuid4())
        paper.user_id = user_id
        paper.title = "Graph Neural Networks for Crop Yield"
        paper.abstract = "We predict crop yield from satellite imagery."
        paper.authors = ["Ada Lovelace", "Alan Turing"]
        paper.keywords = ["gnn", "agriculture"]
        paper.file_name = "paper.pdf"
        paper.file_mime_type = "application/pdf"
        paper.file_size = 1024
        paper.file_data = b"%PDF-1.4 test"
        paper.status = PaperStatus(status).value
        paper.payment_option = "payNow"
        paper.upload_date = NOW - timedelta(days=1)
        paper.submission_date = NOW - timedelta(days=1)
        paper.payment_due_date = payment_due_date
        paper.paid_at = paid_at
        paper.plagiarism_score = None
        paper.plagiarism_sections = None
        paper.acceptance_probability = None
        paper.acceptance_reasoning = None
        paper.admin_feedback = None
        paper.created_at = NOW - timedelta(days=1)
        paper.updated_at = NOW - timedelta(days=1)
        for key, value in overrides.items():
            setattr(paper, key, value)
        return paper

    return _make
