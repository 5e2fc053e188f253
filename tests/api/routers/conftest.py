"""Shared pytest fixtures for router integration tests."""

import pytest
from contextlib import ExitStack
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock, patch

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from portal.config import Settings
from portal.services.auth_service import AuthenticatedUser


# Mock database before starting the app to avoid connection issues
@pytest.fixture(autouse=True)
def mock_database_init():
    """Keep the lifespan from touching a real database."""
    from portal.database import Database

    with ExitStack() as stack:
        stack.enter_context(patch.object(Database, "connect"))
        stack.enter_context(patch.object(Database, "create_all", new_callable=AsyncMock))
        stack.enter_context(patch.object(Database, "dispose", new_callable=AsyncMock))
        yield


@pytest.fixture
def mock_db_session():
    """Create a mock AsyncSession for router tests."""
    session = AsyncMock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def mock_paper_repo(make_paper):
    """Create a mock PaperRepository that echoes writes back onto paper objects."""
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_with_file = AsyncMock(return_value=None)
    repo.list_papers = AsyncMock(return_value=([], 0))
    repo.count = AsyncMock(return_value=0)
    repo.count_by_status = AsyncMock(return_value={})
    repo.count_payment_overdue = AsyncMock(return_value=0)
    repo.count_flagged = AsyncMock(return_value=0)

    async def _create(**fields):
        return make_paper(**fields)

    async def _update(paper, **fields):
        for key, value in fields.items():
            setattr(paper, key, value)
        return paper

    repo.create = AsyncMock(side_effect=_create)
    repo.update = AsyncMock(side_effect=_update)
    return repo


@pytest.fixture
def mock_user_repo():
    """Create a mock UserRepository."""
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_email = AsyncMock(return_value=None)
    repo.is_username_taken = AsyncMock(return_value=False)
    repo.is_phone_taken = AsyncMock(return_value=False)
    repo.list_all = AsyncMock(return_value=[])

    async def _create(user_id, **fields):
        return make_profile(id=user_id, **fields)

    async def _update(user, **fields):
        for key, value in fields.items():
            setattr(user, key, value)
        return user

    repo.create = AsyncMock(side_effect=_create)
    repo.update = AsyncMock(side_effect=_update)
    return repo


@pytest.fixture
def mock_payment_client():
    """Create a mock payment client with an instant charge."""
    from portal.clients.payment_client import PaymentReceipt

    client = AsyncMock()
    client.fee = 50.0
    client.charge = AsyncMock(
        return_value=PaymentReceipt(
            reference="sim_test",
            amount=50.0,
            paid_at=datetime.now(timezone.utc),
        )
    )
    return client


@pytest.fixture
def mock_advisory_service():
    """Create a mock AdvisoryService."""
    return AsyncMock()


@pytest.fixture
def test_settings():
    """Settings used by the app under test."""
    return Settings(
        firebase_project_id="paper-portal-test",
        openai_api_key="test-openai-key",
        max_upload_bytes=1024,
        payment_simulation_seconds=0,
    )


def make_profile(**fields):
    """Build a user profile object with every response field set."""
    now = datetime.now(timezone.utc)
    profile = dict(
        id="owner-uid",
        email="ada@example.com",
        display_name="Ada Lovelace",
        username="ada_l",
        photo_url=None,
        phone_number=None,
        institution=None,
        researcher_id=None,
        role="Author",
        is_admin=False,
        created_at=now,
        updated_at=now,
    )
    profile.update(fields)
    return SimpleNamespace(**profile)


@pytest.fixture
def profile_factory():
    """Factory fixture for user profile objects."""
    return make_profile


@pytest.fixture
def owner_user():
    return AuthenticatedUser(uid="owner-uid", email="ada@example.com")


@pytest.fixture
def stranger_user():
    return AuthenticatedUser(uid="stranger-uid")


@pytest.fixture
def admin_user():
    return AuthenticatedUser(uid="admin-uid", admin=True)


def _create_test_client(
    mock_db_session,
    mock_paper_repo,
    mock_user_repo,
    mock_payment_client,
    mock_advisory_service,
    test_settings,
    *,
    user=None,
):
    """Build a TestClient with all infra dependencies overridden.

    When user is provided, token verification is bypassed and requests run as
    that user. When omitted, auth dependencies run normally so tests can assert
    401 behaviour.
    """
    from portal.main import app
    from portal.config import get_settings
    from portal.database import get_db
    from portal.dependencies import (
        get_current_user,
        get_paper_repository,
        get_paper_service_dep,
        get_user_repository,
    )
    from portal.factories.service_factories import get_advisory_service
    from portal.services.paper_service import PaperService

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db_session

    def override_paper_service():
        return PaperService(
            paper_repo=mock_paper_repo,
            payment_client=mock_payment_client,
            advisory_service=mock_advisory_service,
            max_upload_bytes=test_settings.max_upload_bytes,
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_paper_repository] = lambda: mock_paper_repo
    app.dependency_overrides[get_user_repository] = lambda: mock_user_repo
    app.dependency_overrides[get_paper_service_dep] = override_paper_service
    app.dependency_overrides[get_advisory_service] = lambda: mock_advisory_service
    app.dependency_overrides[get_settings] = lambda: test_settings

    if user is not None:
        app.dependency_overrides[get_current_user] = lambda: user

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def infra(
    mock_db_session,
    mock_paper_repo,
    mock_user_repo,
    mock_payment_client,
    mock_advisory_service,
    test_settings,
):
    return (
        mock_db_session,
        mock_paper_repo,
        mock_user_repo,
        mock_payment_client,
        mock_advisory_service,
        test_settings,
    )


@pytest.fixture
def client(infra, owner_user):
    """TestClient authenticated as the paper owner."""
    yield from _create_test_client(*infra, user=owner_user)


@pytest.fixture
def stranger_client(infra, stranger_user):
    """TestClient authenticated as an unrelated, non-admin user."""
    yield from _create_test_client(*infra, user=stranger_user)


@pytest.fixture
def admin_client(infra, admin_user):
    """TestClient authenticated as an admin."""
    yield from _create_test_client(*infra, user=admin_user)


@pytest.fixture
def unauthenticated_client(infra):
    """Create TestClient WITHOUT auth override to test 401 responses."""
    yield from _create_test_client(*infra)
