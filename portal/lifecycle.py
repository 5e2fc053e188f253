"""Paper status lifecycle.

Single source of truth for paper statuses, initial state on upload, allowed
transitions and the read-time `Payment Overdue` projection. Everything here is
pure: callers pass in the clock and persist the returned field changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any

from portal.exceptions import InvalidTransitionError, ValidationError

PAYMENT_WINDOW = timedelta(hours=2)


class PaperStatus(StrEnum):
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    UNDER_REVIEW = "Under Review"
    ACTION_REQUIRED = "Action Required"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    PAYMENT_PENDING = "Payment Pending"
    PUBLISHED = "Published"


class DisplayStatus(StrEnum):
    """Stored statuses plus the derived `Payment Overdue`."""

    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    UNDER_REVIEW = "Under Review"
    ACTION_REQUIRED = "Action Required"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    PAYMENT_PENDING = "Payment Pending"
    PAYMENT_OVERDUE = "Payment Overdue"
    PUBLISHED = "Published"


class PaymentOption(StrEnum):
    PAY_NOW = "payNow"
    PAY_LATER = "payLater"


class Actor(StrEnum):
    OWNER = "owner"
    ADMIN = "admin"


TERMINAL_STATUSES: frozenset[PaperStatus] = frozenset(
    {PaperStatus.ACCEPTED, PaperStatus.REJECTED, PaperStatus.PUBLISHED}
)

_REVIEW_OUTCOMES = (
    PaperStatus.ACTION_REQUIRED,
    PaperStatus.ACCEPTED,
    PaperStatus.REJECTED,
    PaperStatus.PUBLISHED,
)

# Moves an admin may make. Owners only ever confirm payment.
ADMIN_TRANSITIONS: dict[PaperStatus, frozenset[PaperStatus]] = {
    PaperStatus.DRAFT: frozenset({PaperStatus.SUBMITTED, PaperStatus.PAYMENT_PENDING}),
    PaperStatus.SUBMITTED: frozenset({PaperStatus.UNDER_REVIEW, *_REVIEW_OUTCOMES}),
    PaperStatus.UNDER_REVIEW: frozenset(_REVIEW_OUTCOMES),
    PaperStatus.ACTION_REQUIRED: frozenset(
        {
            PaperStatus.SUBMITTED,
            PaperStatus.UNDER_REVIEW,
            PaperStatus.ACCEPTED,
            PaperStatus.REJECTED,
            PaperStatus.PUBLISHED,
        }
    ),
    PaperStatus.PAYMENT_PENDING: frozenset(
        {PaperStatus.SUBMITTED, PaperStatus.ACCEPTED, PaperStatus.REJECTED}
    ),
    PaperStatus.ACCEPTED: frozenset(),
    PaperStatus.REJECTED: frozenset(),
    PaperStatus.PUBLISHED: frozenset(),
}


@dataclass(frozen=True, slots=True)
class InitialState:
    status: PaperStatus
    submission_date: datetime | None
    payment_due_date: datetime | None
    paid_at: datetime | None

    def as_fields(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "submission_date": self.submission_date,
            "payment_due_date": self.payment_due_date,
            "paid_at": self.paid_at,
        }


@dataclass(frozen=True, slots=True)
class Transition:
    """Field changes produced by a planned status move."""

    source: PaperStatus
    target: PaperStatus
    changes: dict[str, Any] = field(default_factory=dict)

    @property
    def is_payment_confirmation(self) -> bool:
        return self.source == PaperStatus.PAYMENT_PENDING and self.target == PaperStatus.SUBMITTED


def parse_status(value: str) -> PaperStatus:
    """Parse a stored status. `Payment Overdue` is display-only and rejected."""
    try:
        return PaperStatus(value)
    except ValueError:
        raise ValidationError(
            f"Unknown paper status '{value}'",
            details={"allowed": [s.value for s in PaperStatus]},
        )


def parse_payment_option(value: str) -> PaymentOption:
    try:
        return PaymentOption(value)
    except ValueError:
        raise ValidationError(
            f"Unknown payment option '{value}'",
            details={"allowed": [o.value for o in PaymentOption]},
        )


def initial_state(
    payment_option: PaymentOption,
    now: datetime,
    payment_window: timedelta = PAYMENT_WINDOW,
) -> InitialState:
    """State of a freshly uploaded paper."""
    if payment_option == PaymentOption.PAY_LATER:
        return InitialState(
            status=PaperStatus.PAYMENT_PENDING,
            submission_date=None,
            payment_due_date=now + payment_window,
            paid_at=None,
        )
    return InitialState(
        status=PaperStatus.SUBMITTED,
        submission_date=now,
        payment_due_date=None,
        paid_at=now,
    )


def is_payment_overdue(
    status: str | PaperStatus, payment_due_date: datetime | None, now: datetime
) -> bool:
    return (
        status == PaperStatus.PAYMENT_PENDING
        and payment_due_date is not None
        and now > payment_due_date
    )


def display_status(
    status: str | PaperStatus, payment_due_date: datetime | None, now: datetime
) -> DisplayStatus:
    """Status as shown to readers. Never written back to storage."""
    if is_payment_overdue(status, payment_due_date, now):
        return DisplayStatus.PAYMENT_OVERDUE
    return DisplayStatus(str(status))


def allowed_targets(current: PaperStatus, actor: Actor) -> frozenset[PaperStatus]:
    if actor == Actor.ADMIN:
        return ADMIN_TRANSITIONS.get(current, frozenset())
    if current == PaperStatus.PAYMENT_PENDING:
        return frozenset({PaperStatus.SUBMITTED})
    return frozenset()


def plan_transition(
    current: PaperStatus,
    target: PaperStatus,
    actor: Actor,
    now: datetime,
    payment_due_date: datetime | None = None,
    paid_at: datetime | None = None,
    payment_window: timedelta = PAYMENT_WINDOW,
) -> Transition:
    """Validate a status move and compute the fields it changes.

    Raises:
        InvalidTransitionError: target not reachable from current for this actor,
            or an owner confirming payment after the deadline.
    """
    if target not in allowed_targets(current, actor):
        if current in TERMINAL_STATUSES:
            reason = f"'{current}' is a final status"
        else:
            reason = f"not allowed for {actor}"
        raise InvalidTransitionError(current.value, target.value, reason)

    changes: dict[str, Any] = {"status": target.value}

    if current == PaperStatus.PAYMENT_PENDING and target == PaperStatus.SUBMITTED:
        if actor == Actor.OWNER and is_payment_overdue(current, payment_due_date, now):
            raise InvalidTransitionError(
                current.value, target.value, "the payment deadline has passed"
            )
        changes["paid_at"] = paid_at or now
        changes["submission_date"] = now
        changes["payment_due_date"] = None
    elif current == PaperStatus.DRAFT and target == PaperStatus.SUBMITTED:
        changes["submission_date"] = now
    elif target == PaperStatus.PAYMENT_PENDING and payment_due_date is None:
        changes["payment_due_date"] = now + payment_window

    return Transition(source=current, target=target, changes=changes)
