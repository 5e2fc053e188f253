"""Simulated payment gateway for submission fees.

No real processor is integrated: a charge waits a fixed delay and succeeds.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from portal.utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class PaymentReceipt:
    """Result of a completed charge."""

    reference: str
    amount: float
    paid_at: datetime


class SimulatedPaymentClient:
    """Fixed-delay mock of a card charge."""

    def __init__(self, fee: float = 50.00, delay_seconds: float = 2.0):
        self.fee = fee
        self.delay_seconds = delay_seconds

    async def charge(self, paper_id: str, payer_uid: str) -> PaymentReceipt:
        """Charge the submission fee for a paper."""
        log.info("simulated payment started", paper_id=paper_id, payer=payer_uid, amount=self.fee)
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        receipt = PaymentReceipt(
            reference=f"sim_{uuid.uuid4().hex[:16]}",
            amount=self.fee,
            paid_at=datetime.now(timezone.utc),
        )
        log.info("simulated payment succeeded", paper_id=paper_id, reference=receipt.reference)
        return receipt
