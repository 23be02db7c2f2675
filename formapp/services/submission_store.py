"""Submission Store — the four operations on the submissions table.

Invariants:
    - Each operation issues exactly one statement (no read-modify-write)
    - create validates before touching the session; a rejected payload writes nothing
    - get/delete raise SubmissionNotFoundError instead of returning None / succeeding silently
    - list is ordered by submitted_at descending (most recent first), unbounded
    - Callers own the session; errors from it are mapped by DatabaseSessionManager
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from formapp.core.errors import SubmissionNotFoundError
from formapp.core.validate_submission import validate_submission
from formapp.models.submission import Submission
from formapp.schemas.submission import SubmissionCreate, SubmissionResponse

logger = logging.getLogger(__name__)


async def list_submissions(db: AsyncSession) -> list[SubmissionResponse]:
    result = await db.execute(
        select(Submission).order_by(Submission.submitted_at.desc()),
    )
    return [
        SubmissionResponse.model_validate(row)
        for row in result.scalars().all()
    ]


async def get_submission(
    db: AsyncSession, submission_id: str,
) -> SubmissionResponse:
    result = await db.execute(
        select(Submission).where(Submission.id == submission_id),
    )
    submission = result.scalar_one_or_none()
    if submission is None:
        raise SubmissionNotFoundError(submission_id)
    return SubmissionResponse.model_validate(submission)


async def create_submission(
    db: AsyncSession, payload: Any,
) -> SubmissionResponse:
    """Validate, normalize and insert one submission.

    The returned record is built from the in-memory row (no re-read), so
    submittedAt keeps the timezone it was stamped with.
    """
    data = SubmissionCreate.model_validate(validate_submission(payload))
    submission = Submission(
        id=str(uuid.uuid4()),
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone=data.phone,
        interests=data.interests,
        subscription=data.subscription,
        frequency=data.frequency,
        comments=data.comments,
        terms_accepted=data.terms_accepted,
        submitted_at=datetime.now(timezone.utc),
    )
    db.add(submission)
    await db.commit()
    logger.info(
        f"Submission {submission.id} created",
        extra={"submission_id": submission.id},
    )
    return SubmissionResponse.model_validate(submission)


async def delete_submission(db: AsyncSession, submission_id: str) -> None:
    result = await db.execute(
        delete(Submission).where(Submission.id == submission_id),
    )
    if result.rowcount == 0:
        await db.rollback()
        raise SubmissionNotFoundError(submission_id)
    await db.commit()
    logger.info(
        f"Submission {submission_id} deleted",
        extra={"submission_id": submission_id},
    )
