"""Access rules for papers.

Every paper route asks `authorize()` before touching the store, so the
owner/admin/published rules live in one place and can be tested without HTTP.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from portal.exceptions import ForbiddenError
from portal.lifecycle import PaperStatus


class Action(StrEnum):
    READ = "read"
    DOWNLOAD = "download"
    CONFIRM_PAYMENT = "confirm_payment"
    UPDATE_STATUS = "update_status"
    UPDATE_FEEDBACK = "update_feedback"
    UPDATE_ADVISORY = "update_advisory"
    RUN_ASSESSMENT = "run_assessment"


class Decision(StrEnum):
    ALLOW = "allow"
    DENY = "deny"


READ_ACTIONS: frozenset[Action] = frozenset({Action.READ, Action.DOWNLOAD})


def authorize(
    caller_uid: str,
    caller_is_admin: bool,
    owner_uid: str,
    resource_status: str,
    action: Action,
) -> Decision:
    """Decide whether a caller may perform an action on a paper."""
    if caller_is_admin:
        return Decision.ALLOW

    if caller_uid == owner_uid:
        if action in READ_ACTIONS:
            return Decision.ALLOW
        if action == Action.CONFIRM_PAYMENT and resource_status == PaperStatus.PAYMENT_PENDING:
            return Decision.ALLOW
        return Decision.DENY

    if action in READ_ACTIONS and resource_status == PaperStatus.PUBLISHED:
        return Decision.ALLOW

    return Decision.DENY


_DENIAL_MESSAGES: dict[Action, str] = {
    Action.READ: "You do not have permission to view this paper",
    Action.DOWNLOAD: "You do not have permission to download this file",
    Action.CONFIRM_PAYMENT: "Payment can only be confirmed for your own paper while payment is pending",
}


def ensure_allowed(
    caller_uid: str,
    caller_is_admin: bool,
    owner_uid: str,
    resource_status: str,
    action: Action,
) -> None:
    """Raise ForbiddenError unless `authorize()` allows the action."""
    if authorize(caller_uid, caller_is_admin, owner_uid, resource_status, action) == Decision.DENY:
        raise ForbiddenError(
            _DENIAL_MESSAGES.get(
                action, "Only administrators can change a paper after submission"
            )
        )


@dataclass(frozen=True, slots=True)
class ListScope:
    """Owner filter applied to a paper listing. `owner_id=None` means any owner."""

    owner_id: str | None
    status: str | None


def resolve_list_scope(
    caller_uid: str,
    caller_is_admin: bool,
    requested_user_id: str | None,
    requested_status: str | None,
) -> ListScope:
    """Work out which papers a caller may list.

    Admins list everything, optionally narrowed to one owner. Other callers list
    their own papers; papers of other owners are visible only when the listing
    is restricted to published papers.
    """
    if caller_is_admin:
        return ListScope(owner_id=requested_user_id, status=requested_status)

    published_only = requested_status == PaperStatus.PUBLISHED

    if requested_user_id is None:
        return ListScope(owner_id=None if published_only else caller_uid, status=requested_status)

    if requested_user_id == caller_uid or published_only:
        return ListScope(owner_id=requested_user_id, status=requested_status)

    raise ForbiddenError("You can only view your own papers")
