"""External API clients."""

from portal.clients.base_llm_client import BaseLLMClient
from portal.clients.litellm_client import LiteLLMClient
from portal.clients.payment_client import PaymentReceipt, SimulatedPaymentClient

__all__ = [
    "BaseLLMClient",
    "LiteLLMClient",
    "PaymentReceipt",
    "SimulatedPaymentClient",
]
