"""Tests for client and service factory functions."""

from datetime import timedelta
from unittest.mock import Mock, patch

import pytest

from portal.config import Settings
from portal.factories import client_factories, service_factories


@pytest.fixture(autouse=True)
def clear_factory_caches():
    """Factories are lru_cached singletons; isolate each test."""
    caches = [
        client_factories.get_llm_client,
        client_factories.get_payment_client,
        client_factories.get_auth_service,
        service_factories.get_advisory_service,
    ]
    for factory in caches:
        factory.cache_clear()
    yield
    for factory in caches:
        factory.cache_clear()


@pytest.fixture
def settings():
    return Settings(
        default_llm_model="openai/gpt-4o",
        openai_api_key="sk-test",
        llm_call_timeout_seconds=12,
        submission_fee=75.0,
        payment_simulation_seconds=0.5,
        firebase_project_id="paper-portal-test",
        payment_window_hours=3,
        max_upload_bytes=2048,
    )


class TestClientFactories:
    """Tests for client factories."""

    def test_llm_client_uses_settings(self, settings):
        with patch("portal.factories.client_factories.get_settings", return_value=settings):
            client = client_factories.get_llm_client()

        assert client.model == "openai/gpt-4o"
        assert client.default_timeout == 12.0

    def test_payment_client_uses_fee_and_delay(self, settings):
        with patch("portal.factories.client_factories.get_settings", return_value=settings):
            client = client_factories.get_payment_client()

        assert client.fee == 75.0
        assert client.delay_seconds == 0.5

    def test_auth_service_is_singleton(self, settings):
        with patch("portal.factories.client_factories.get_settings", return_value=settings):
            first = client_factories.get_auth_service()
            second = client_factories.get_auth_service()

        assert first is second


class TestServiceFactories:
    """Tests for service factories."""

    def test_paper_service_is_built_per_session(self, settings):
        session = Mock()

        with patch("portal.factories.client_factories.get_settings", return_value=settings), patch(
            "portal.factories.service_factories.get_settings", return_value=settings
        ):
            service = service_factories.get_paper_service(session)

        assert service.paper_repo.session is session
        assert service.max_upload_bytes == 2048
        assert service.payment_window == timedelta(hours=3)
        assert service.payment_client.fee == 75.0
