"""Papers router: submission, review workflow, payment and download."""

from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, File, Form, Query, Response, UploadFile, status

from portal.dependencies import AdminUser, CurrentUser, DbSession, PaperServiceDep
from portal.exceptions import FileTooLargeError
from portal.schemas.papers import (
    PaperListResponse,
    PaperResponse,
    PaperUpdateRequest,
    PaymentResponse,
)
from portal.services.paper_service import PaperUpload, check_file
from portal.utils.logger import get_logger

router = APIRouter(prefix="/papers", tags=["Papers"])
log = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.post("", response_model=PaperResponse, status_code=status.HTTP_201_CREATED)
async def submit_paper(
    current_user: CurrentUser,
    service: PaperServiceDep,
    db: DbSession,
    paper_file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    abstract: Optional[str] = Form(None),
    authors: Optional[str] = Form(None, description="JSON array of author names"),
    keywords: Optional[str] = Form(None, description="JSON array of keywords"),
    payment_option: Optional[str] = Form(None, description="payNow or payLater"),
) -> PaperResponse:
    """Upload a PDF/DOCX manuscript with its details."""
    # Reject by type before reading the body; read one byte past the limit to detect oversize
    check_file(paper_file.content_type, 0, service.max_upload_bytes)
    data = await paper_file.read(service.max_upload_bytes + 1)
    if len(data) > service.max_upload_bytes:
        size = paper_file.size if paper_file.size is not None else len(data)
        raise FileTooLargeError(size=size, limit=service.max_upload_bytes)

    paper = await service.create_paper(
        current_user,
        PaperUpload(
            title=title,
            abstract=abstract,
            authors=authors,
            keywords=keywords,
            payment_option=payment_option,
            file_name=paper_file.filename,
            file_mime_type=paper_file.content_type,
            file_data=data,
        ),
    )
    await db.commit()
    return PaperResponse.from_paper(paper, _now())


@router.get("", response_model=PaperListResponse)
async def list_papers(
    current_user: CurrentUser,
    service: PaperServiceDep,
    user_id: Optional[str] = None,
    status: Optional[str] = None,
    author_name: Optional[str] = Query(None, description="Case-insensitive author substring"),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> PaperListResponse:
    """List papers visible to the caller, newest upload first."""
    papers, total = await service.list_papers(
        current_user,
        user_id=user_id,
        status=status,
        author_name=author_name,
        offset=offset,
        limit=limit,
    )
    now = _now()
    return PaperListResponse(
        total=total,
        offset=offset,
        limit=limit,
        papers=[PaperResponse.from_paper(p, now) for p in papers],
    )


@router.get("/{paper_id}", response_model=PaperResponse)
async def get_paper(
    paper_id: str,
    current_user: CurrentUser,
    service: PaperServiceDep,
) -> PaperResponse:
    """Get one paper. Owners and admins always; others only once published."""
    paper = await service.get_paper(current_user, paper_id)
    return PaperResponse.from_paper(paper, _now())


@router.put("/{paper_id}", response_model=PaperResponse)
async def update_paper(
    paper_id: str,
    request: PaperUpdateRequest,
    current_user: CurrentUser,
    service: PaperServiceDep,
    db: DbSession,
) -> PaperResponse:
    """Change status, feedback or advisory fields."""
    paper = await service.update_paper(current_user, paper_id, request)
    await db.commit()
    return PaperResponse.from_paper(paper, _now())


@router.post("/{paper_id}/payment", response_model=PaymentResponse)
async def pay_submission_fee(
    paper_id: str,
    current_user: CurrentUser,
    service: PaperServiceDep,
    db: DbSession,
) -> PaymentResponse:
    """Pay the submission fee of a `Payment Pending` paper (simulated)."""
    paper, receipt = await service.pay_submission_fee(current_user, paper_id)
    await db.commit()
    return PaymentResponse(
        reference=receipt.reference,
        amount=receipt.amount,
        paper=PaperResponse.from_paper(paper, _now()),
    )


@router.post("/{paper_id}/assessment", response_model=PaperResponse)
async def run_assessment(
    paper_id: str,
    admin: AdminUser,
    service: PaperServiceDep,
    db: DbSession,
) -> PaperResponse:
    """Run the advisory AI checks on the stored manuscript and save the scores."""
    paper = await service.run_assessment(admin, paper_id)
    await db.commit()
    return PaperResponse.from_paper(paper, _now())


@router.get("/{paper_id}/download")
async def download_paper(
    paper_id: str,
    current_user: CurrentUser,
    service: PaperServiceDep,
) -> Response:
    """Stream the stored manuscript back with its original name and type."""
    paper_file = await service.get_file(current_user, paper_id)
    disposition = f"attachment; filename*=UTF-8''{quote(paper_file.file_name)}"
    return Response(
        content=paper_file.file_data,
        media_type=paper_file.file_mime_type,
        headers={"Content-Disposition": disposition},
    )
