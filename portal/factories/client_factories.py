"""Factory functions for external API clients."""

from functools import lru_cache

from portal.config import get_settings
from portal.clients.base_llm_client import BaseLLMClient
from portal.clients.litellm_client import LiteLLMClient
from portal.clients.payment_client import SimulatedPaymentClient
from portal.services.auth_service import AuthService


@lru_cache(maxsize=1)
def get_llm_client() -> BaseLLMClient:
    """
    Create singleton LLM client for the configured model.

    Returns:
        BaseLLMClient instance
    """
    settings = get_settings()
    return LiteLLMClient(
        model=settings.default_llm_model,
        timeout=float(settings.llm_call_timeout_seconds),
        api_key=settings.openai_api_key or None,
    )


@lru_cache(maxsize=1)
def get_payment_client() -> SimulatedPaymentClient:
    """
    Create singleton payment client.

    Returns:
        SimulatedPaymentClient instance
    """
    settings = get_settings()
    return SimulatedPaymentClient(
        fee=settings.submission_fee,
        delay_seconds=settings.payment_simulation_seconds,
    )


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    settings = get_settings()
    return AuthService(project_id=settings.firebase_project_id)
