"""Paper submission and review workflow.

Every operation runs the same way: load the paper, ask `portal.access` whether
the caller may act, let `portal.lifecycle` validate any status move, then write
through the repository. Nothing is written when a check fails.
"""

import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from portal.access import Action, ensure_allowed, resolve_list_scope
from portal.clients.payment_client import PaymentReceipt, SimulatedPaymentClient
from portal.exceptions import (
    AdvisoryServiceError,
    FileTooLargeError,
    ForbiddenError,
    ResourceNotFoundError,
    UnsupportedFileTypeError,
    ValidationError,
)
from portal.lifecycle import (
    PAYMENT_WINDOW,
    Actor,
    PaperStatus,
    initial_state,
    parse_payment_option,
    parse_status,
    plan_transition,
)
from portal.models.paper import Paper
from portal.repositories.paper_repository import PaperRepository
from portal.schemas.papers import PaperUpdateRequest
from portal.services.advisory_service import AdvisoryService
from portal.services.auth_service import AuthenticatedUser
from portal.utils.document_text import ALLOWED_MIME_TYPES, DocumentTextError, extract_text
from portal.utils.logger import get_logger

log = get_logger(__name__)

ADVISORY_FIELDS = (
    "plagiarism_score",
    "plagiarism_sections",
    "acceptance_probability",
    "acceptance_reasoning",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PaperUpload:
    """Raw multipart fields of a new submission."""

    title: Optional[str]
    abstract: Optional[str]
    authors: Optional[str]
    keywords: Optional[str]
    payment_option: Optional[str]
    file_name: Optional[str]
    file_mime_type: Optional[str]
    file_data: Optional[bytes]


@dataclass
class PaperFile:
    file_name: str
    file_mime_type: str
    file_data: bytes


def parse_name_list(raw: str, field: str) -> list[str]:
    """Parse a JSON array of strings, or a comma-separated string."""
    raw = raw.strip()
    if raw.startswith("["):
        try:
            values = json.loads(raw)
        except json.JSONDecodeError:
            raise ValidationError(f"'{field}' must be a JSON array of strings")
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise ValidationError(f"'{field}' must be a JSON array of strings")
    else:
        values = raw.split(",")
    return [v.strip() for v in values if v.strip()]


def check_file(mime_type: Optional[str], size: int, max_bytes: int) -> None:
    """Reject disallowed types and oversized files."""
    if mime_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedFileTypeError(mime_type or "unknown", list(ALLOWED_MIME_TYPES))
    if size > max_bytes:
        raise FileTooLargeError(size=size, limit=max_bytes)


def check_paid_at(
    paid_at: Optional[datetime], upload_date: Optional[datetime], now: datetime
) -> Optional[datetime]:
    """Reject a payment time before upload or in the future. Naive values are UTC."""
    if paid_at is None:
        return None
    if paid_at.tzinfo is None:
        paid_at = paid_at.replace(tzinfo=timezone.utc)
    if paid_at > now or (upload_date is not None and paid_at < upload_date):
        raise ValidationError(
            "paid_at must fall between the upload date and now",
            details={"paid_at": paid_at.isoformat()},
        )
    return paid_at


class PaperService:
    """Paper operations on behalf of an authenticated caller."""

    def __init__(
        self,
        paper_repo: PaperRepository,
        payment_client: Optional[SimulatedPaymentClient] = None,
        advisory_service: Optional[AdvisoryService] = None,
        max_upload_bytes: int = 10 * 1024 * 1024,
        payment_window: timedelta = PAYMENT_WINDOW,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.paper_repo = paper_repo
        self.payment_client = payment_client
        self.advisory_service = advisory_service
        self.max_upload_bytes = max_upload_bytes
        self.payment_window = payment_window
        self.clock = clock

    async def _load(self, paper_id: str, with_file: bool = False) -> Paper:
        try:
            key = uuid.UUID(str(paper_id))
        except ValueError:
            raise ResourceNotFoundError("Paper", str(paper_id))

        if with_file:
            paper = await self.paper_repo.get_with_file(key)
        else:
            paper = await self.paper_repo.get_by_id(key)
        if paper is None:
            raise ResourceNotFoundError("Paper", str(paper_id))
        return paper

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    async def create_paper(self, caller: AuthenticatedUser, upload: PaperUpload) -> Paper:
        """
        Validate an upload and store it with its initial lifecycle state.

        Raises:
            ValidationError: Missing or malformed fields
            UnsupportedFileTypeError: File is not PDF or DOCX
            FileTooLargeError: File exceeds the upload limit
        """
        if not upload.file_data or not upload.file_name:
            raise ValidationError("Paper file is required")

        required = {
            "title": upload.title,
            "abstract": upload.abstract,
            "authors": upload.authors,
            "keywords": upload.keywords,
            "payment_option": upload.payment_option,
        }
        missing = [name for name, value in required.items() if not (value and value.strip())]
        if missing:
            raise ValidationError(
                f"Missing required paper details: {', '.join(missing)}",
                details={"missing": missing},
            )

        check_file(upload.file_mime_type, len(upload.file_data), self.max_upload_bytes)

        authors = parse_name_list(upload.authors or "", "authors")
        if not authors:
            raise ValidationError("At least one author is required")
        keywords = parse_name_list(upload.keywords or "", "keywords")
        payment_option = parse_payment_option((upload.payment_option or "").strip())

        now = self.clock()
        state = initial_state(payment_option, now, self.payment_window)

        paper = await self.paper_repo.create(
            user_id=caller.uid,
            title=(upload.title or "").strip(),
            abstract=(upload.abstract or "").strip(),
            authors=authors,
            keywords=keywords,
            file_name=upload.file_name,
            file_mime_type=upload.file_mime_type,
            file_size=len(upload.file_data),
            file_data=upload.file_data,
            payment_option=payment_option.value,
            upload_date=now,
            **state.as_fields(),
        )
        log.info(
            "paper submitted",
            paper_id=str(paper.id),
            user_id=caller.uid,
            status=state.status,
            payment_option=payment_option,
        )
        return paper

    async def get_paper(self, caller: AuthenticatedUser, paper_id: str) -> Paper:
        paper = await self._load(paper_id)
        ensure_allowed(caller.uid, caller.admin, paper.user_id, paper.status, Action.READ)
        return paper

    async def list_papers(
        self,
        caller: AuthenticatedUser,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        author_name: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[Paper], int]:
        """List papers visible to the caller."""
        if status is not None:
            status = parse_status(status).value
        scope = resolve_list_scope(caller.uid, caller.admin, user_id, status)
        return await self.paper_repo.list_papers(
            owner_id=scope.owner_id,
            status=scope.status,
            author_name=author_name,
            offset=offset,
            limit=limit,
        )

    async def get_file(self, caller: AuthenticatedUser, paper_id: str) -> PaperFile:
        paper = await self._load(paper_id, with_file=True)
        ensure_allowed(caller.uid, caller.admin, paper.user_id, paper.status, Action.DOWNLOAD)
        if not paper.file_data or not paper.file_name or not paper.file_mime_type:
            raise ResourceNotFoundError("Paper file", str(paper_id))
        return PaperFile(
            file_name=paper.file_name,
            file_mime_type=paper.file_mime_type,
            file_data=paper.file_data,
        )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def update_paper(
        self, caller: AuthenticatedUser, paper_id: str, request: PaperUpdateRequest
    ) -> Paper:
        """
        Apply a status and/or advisory update.

        Admins may change status along the admin transitions, feedback and
        advisory fields. Owners may only confirm payment (status `Submitted`
        while `Payment Pending`).

        Raises:
            ValidationError: Empty update, unknown status, or a paid_at that is
                outside upload..now or sent without a payment confirmation
            ForbiddenError: Caller may not make this change
            InvalidTransitionError: Status move not allowed from the current status
        """
        provided = request.model_fields_set
        if not provided:
            raise ValidationError("No update data provided")

        paper = await self._load(paper_id)
        now = self.clock()
        current = parse_status(paper.status)

        if not caller.admin:
            is_payment_confirmation = request.status == PaperStatus.SUBMITTED and provided <= {
                "status",
                "paid_at",
            }
            action = Action.CONFIRM_PAYMENT if is_payment_confirmation else Action.UPDATE_STATUS
            ensure_allowed(caller.uid, caller.admin, paper.user_id, paper.status, action)
            paid_at = check_paid_at(request.paid_at, paper.upload_date, now)

            transition = plan_transition(
                current,
                PaperStatus.SUBMITTED,
                Actor.OWNER,
                now,
                payment_due_date=paper.payment_due_date,
                paid_at=paid_at,
                payment_window=self.payment_window,
            )
            updated = await self.paper_repo.update(paper, **transition.changes)
            log.info("payment confirmed", paper_id=str(paper.id), by="owner", user_id=caller.uid)
            return updated

        target = parse_status(request.status) if request.status is not None else None
        changes: dict[str, Any] = {}
        confirms_payment = (
            current == PaperStatus.PAYMENT_PENDING and target == PaperStatus.SUBMITTED
        )
        if request.paid_at is not None and not confirms_payment:
            raise ValidationError(
                "paid_at can only be set when confirming payment of a Payment Pending paper",
                details={"current_status": current.value},
            )

        if target is not None and target != current:
            ensure_allowed(caller.uid, caller.admin, paper.user_id, paper.status, Action.UPDATE_STATUS)
            transition = plan_transition(
                current,
                target,
                Actor.ADMIN,
                now,
                payment_due_date=paper.payment_due_date,
                paid_at=check_paid_at(request.paid_at, paper.upload_date, now),
                payment_window=self.payment_window,
            )
            changes.update(transition.changes)

        if "admin_feedback" in provided:
            ensure_allowed(caller.uid, caller.admin, paper.user_id, paper.status, Action.UPDATE_FEEDBACK)
            changes["admin_feedback"] = request.admin_feedback

        advisory = {name: getattr(request, name) for name in ADVISORY_FIELDS if name in provided}
        if advisory:
            ensure_allowed(caller.uid, caller.admin, paper.user_id, paper.status, Action.UPDATE_ADVISORY)
            changes.update(advisory)

        if not changes:
            return paper

        updated = await self.paper_repo.update(paper, **changes)
        log.info(
            "paper updated by admin",
            paper_id=str(paper.id),
            admin=caller.uid,
            from_status=current,
            to_status=updated.status,
            fields=sorted(changes),
        )
        return updated

    async def pay_submission_fee(
        self, caller: AuthenticatedUser, paper_id: str
    ) -> tuple[Paper, PaymentReceipt]:
        """Charge the (simulated) fee and move the paper to `Submitted`."""
        if self.payment_client is None:
            raise RuntimeError("PaperService was built without a payment client")

        paper = await self._load(paper_id)
        ensure_allowed(caller.uid, caller.admin, paper.user_id, paper.status, Action.CONFIRM_PAYMENT)

        actor = Actor.ADMIN if caller.admin else Actor.OWNER
        current = parse_status(paper.status)
        now = self.clock()
        # Validate before charging so an invalid move never takes money
        plan_transition(
            current,
            PaperStatus.SUBMITTED,
            actor,
            now,
            payment_due_date=paper.payment_due_date,
            payment_window=self.payment_window,
        )

        receipt = await self.payment_client.charge(str(paper.id), caller.uid)

        transition = plan_transition(
            current,
            PaperStatus.SUBMITTED,
            actor,
            now,
            payment_due_date=paper.payment_due_date,
            paid_at=receipt.paid_at,
            payment_window=self.payment_window,
        )
        updated = await self.paper_repo.update(paper, **transition.changes)
        log.info(
            "payment confirmed",
            paper_id=str(paper.id),
            by=actor,
            user_id=caller.uid,
            reference=receipt.reference,
        )
        return updated, receipt

    async def run_assessment(self, caller: AuthenticatedUser, paper_id: str) -> Paper:
        """
        Run the advisory checks on a stored paper and save the scores.

        Raises:
            AdvisoryServiceError: The document could not be read or the AI call
                failed; the paper is left untouched
        """
        if self.advisory_service is None:
            raise RuntimeError("PaperService was built without an advisory service")

        paper = await self._load(paper_id, with_file=True)
        ensure_allowed(caller.uid, caller.admin, paper.user_id, paper.status, Action.RUN_ASSESSMENT)

        try:
            text = await extract_text(paper.file_data, paper.file_mime_type)
        except DocumentTextError as e:
            raise AdvisoryServiceError(kind="unreadable_document", message=str(e))

        outcome = await self.advisory_service.assess(text)
        if not outcome.ok or outcome.report is None:
            kind = outcome.error.value if outcome.error else "unknown"
            log.warning("assessment not stored", paper_id=str(paper.id), kind=kind)
            raise AdvisoryServiceError(kind=kind, message=outcome.message or "AI analysis failed")

        report = outcome.report
        return await self.paper_repo.update(
            paper,
            plagiarism_score=report.plagiarism_score,
            plagiarism_sections=report.highlighted_sections,
            acceptance_probability=report.acceptance_probability,
            acceptance_reasoning=report.reasoning,
        )

    async def dashboard_counts(self, caller: AuthenticatedUser, plagiarism_threshold: float) -> dict:
        """Counts for the admin dashboard."""
        if not caller.admin:
            raise ForbiddenError("Administrator access required")

        now = self.clock()
        by_status = await self.paper_repo.count_by_status()
        overdue = await self.paper_repo.count_payment_overdue(now)
        flagged = await self.paper_repo.count_flagged(plagiarism_threshold)

        return {
            "total_submissions": sum(by_status.values()),
            "pending_review": by_status.get(PaperStatus.SUBMITTED.value, 0)
            + by_status.get(PaperStatus.UNDER_REVIEW.value, 0),
            "issues_found": flagged,
            "payment_pending": by_status.get(PaperStatus.PAYMENT_PENDING.value, 0) - overdue,
            "payment_overdue": overdue,
            "by_status": by_status,
        }
