"""Repository for Paper model operations."""

from datetime import datetime
from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from portal.lifecycle import PaperStatus
from portal.models.paper import Paper
from portal.utils.logger import get_logger

log = get_logger(__name__)

# Set once on create, never through update()
IMMUTABLE_FIELDS = frozenset(
    {"id", "user_id", "upload_date", "file_data", "file_name", "file_mime_type", "file_size"}
)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PaperRepository:
    """Repository for paper CRUD operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **fields: Any) -> Paper:
        """
        Create a paper row including its file payload.

        Caller is responsible for committing the transaction.
        """
        paper = Paper(**fields)
        self.session.add(paper)
        await self.session.flush()
        await self.session.refresh(paper)
        log.info("paper created", paper_id=str(paper.id), user_id=paper.user_id, status=paper.status)
        return paper

    async def get_by_id(self, paper_id: UUID | str) -> Optional[Paper]:
        """Get paper by UUID without loading the file payload."""
        log.debug("query paper by id", paper_id=str(paper_id))
        result = await self.session.execute(select(Paper).where(Paper.id == paper_id))
        paper = result.scalar_one_or_none()
        log.debug("query result", found=paper is not None)
        return paper

    async def get_with_file(self, paper_id: UUID | str) -> Optional[Paper]:
        """Get paper by UUID with the file payload loaded."""
        log.debug("query paper with file", paper_id=str(paper_id))
        result = await self.session.execute(
            select(Paper).options(undefer(Paper.file_data)).where(Paper.id == paper_id)
        )
        return result.scalar_one_or_none()

    async def list_papers(
        self,
        owner_id: Optional[str] = None,
        status: Optional[str] = None,
        author_name: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Paper], int]:
        """
        Get a filtered page of papers, newest upload first.

        Args:
            owner_id: Only papers owned by this uid
            status: Only papers with this stored status
            author_name: Case-insensitive substring of any author name
            offset: Number of papers to skip
            limit: Maximum papers to return

        Returns:
            Tuple of (list of Papers, total count)
        """
        conditions = []
        if owner_id is not None:
            conditions.append(Paper.user_id == owner_id)
        if status is not None:
            conditions.append(Paper.status == status)
        if author_name:
            author = func.jsonb_array_elements_text(Paper.authors).table_valued("value").alias("author")
            pattern = f"%{_escape_like(author_name)}%"
            conditions.append(
                select(author.c.value).where(author.c.value.ilike(pattern, escape="\\")).exists()
            )

        count_query = select(func.count(Paper.id)).where(*conditions)
        list_query = (
            select(Paper)
            .where(*conditions)
            .order_by(desc(Paper.upload_date))
            .offset(offset)
            .limit(limit)
        )

        count_result = await self.session.execute(count_query)
        total = count_result.scalar_one() or 0

        result = await self.session.execute(list_query)
        papers = list(result.scalars().all())

        log.debug(
            "papers listed",
            owner_id=owner_id,
            status=status,
            author_name=author_name,
            total=total,
            returned=len(papers),
        )
        return papers, total

    async def update(self, paper: Paper, **fields: Any) -> Paper:
        """
        Apply a partial update to a paper.

        Caller is responsible for committing the transaction.

        Raises:
            ValueError: If an immutable field (owner, upload date, file) is included
        """
        blocked = IMMUTABLE_FIELDS.intersection(fields)
        if blocked:
            raise ValueError(f"Immutable paper fields cannot be updated: {sorted(blocked)}")
        if not fields:
            return paper

        await self.session.execute(update(Paper).where(Paper.id == paper.id).values(**fields))
        await self.session.flush()
        await self.session.refresh(paper)
        log.info("paper updated", paper_id=str(paper.id), fields=sorted(fields))
        return paper

    async def count(self) -> int:
        """Count all papers."""
        result = await self.session.execute(select(func.count(Paper.id)))
        return result.scalar_one() or 0

    async def count_by_status(self) -> dict[str, int]:
        """Count papers per stored status."""
        result = await self.session.execute(
            select(Paper.status, func.count(Paper.id)).group_by(Paper.status)
        )
        return {status: count for status, count in result.all()}

    async def count_payment_overdue(self, now: datetime) -> int:
        """Count papers still pending payment past their due date."""
        result = await self.session.execute(
            select(func.count(Paper.id)).where(
                Paper.status == PaperStatus.PAYMENT_PENDING.value,
                Paper.payment_due_date.isnot(None),
                Paper.payment_due_date < now,
            )
        )
        return result.scalar_one() or 0

    async def count_flagged(self, plagiarism_threshold: float) -> int:
        """Count papers needing attention: action required or a high plagiarism score."""
        result = await self.session.execute(
            select(func.count(Paper.id)).where(
                or_(
                    Paper.status == PaperStatus.ACTION_REQUIRED.value,
                    Paper.plagiarism_score > plagiarism_threshold,
                )
            )
        )
        return result.scalar_one() or 0
