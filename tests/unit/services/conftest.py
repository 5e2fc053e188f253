"""Shared pytest fixtures for service tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

from portal.services.auth_service import AuthenticatedUser


@pytest.fixture
def valid_jwt_payload():
    """Claims of a Firebase ID token for project `paper-portal-test`."""
    now = int(datetime.now(timezone.utc).timestamp())
    return {
        "sub": "firebase-uid-123",
        "iss": "https://securetoken.google.com/paper-portal-test",
        "aud": "paper-portal-test",
        "iat": now,
        "exp": now + 3600,
        "email": "ada@example.com",
    }


@pytest.fixture
def mock_jwks_client():
    """Patch PyJWKClient so no network call is made."""
    signing_key = MagicMock()
    signing_key.key = "mock-key"

    with patch("portal.services.auth_service.PyJWKClient") as mock_jwks_class:
        instance = MagicMock()
        instance.get_signing_key_from_jwt.return_value = signing_key
        mock_jwks_class.return_value = instance
        yield instance


@pytest.fixture
def mock_paper_repository():
    """Create a mock PaperRepository."""
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_with_file = AsyncMock(return_value=None)
    repo.list_papers = AsyncMock(return_value=([], 0))
    repo.count_by_status = AsyncMock(return_value={})
    repo.count_payment_overdue = AsyncMock(return_value=0)
    repo.count_flagged = AsyncMock(return_value=0)

    async def _create(**fields):
        paper = MagicMock()
        for key, value in fields.items():
            setattr(paper, key, value)
        return paper

    async def _update(paper, **fields):
        for key, value in fields.items():
            setattr(paper, key, value)
        return paper

    repo.create = AsyncMock(side_effect=_create)
    repo.update = AsyncMock(side_effect=_update)
    return repo


@pytest.fixture
def mock_payment_client():
    """Create a mock SimulatedPaymentClient."""
    from portal.clients.payment_client import PaymentReceipt

    client = AsyncMock()
    client.fee = 50.0
    client.charge = AsyncMock(
        return_value=PaymentReceipt(
            reference="sim_test",
            amount=50.0,
            paid_at=datetime(2026, 3, 2, 12, 0, 1, tzinfo=timezone.utc),
        )
    )
    return client


@pytest.fixture
def mock_advisory_service():
    """Create a mock AdvisoryService."""
    return AsyncMock()


@pytest.fixture
def owner():
    return AuthenticatedUser(uid="owner-uid")


@pytest.fixture
def stranger():
    return AuthenticatedUser(uid="stranger-uid")


@pytest.fixture
def admin():
    return AuthenticatedUser(uid="admin-uid", admin=True)
