"""Submission Routes — list, fetch, create and delete over the submissions resource.

Invariants:
    - Each request opens one session from the lifespan-owned manager and issues one statement
    - POST takes the raw JSON object; validation errors surface as FormAppError (400)
    - Unknown ids raise SubmissionNotFoundError (404) from the store
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from formapp.infrastructure.database import DatabaseSessionManager, get_db_manager
from formapp.schemas.submission import DeleteConfirmation, SubmissionResponse
from formapp.services import submission_store

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.get("", response_model=list[SubmissionResponse])
async def list_submissions(
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
):
    """All submissions, most recent first."""
    async with db_manager.session() as db:
        return await submission_store.list_submissions(db)


@router.post(
    "", response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_submission(
    payload: Any = Body(...),
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
):
    async with db_manager.session() as db:
        return await submission_store.create_submission(db, payload)


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: str,
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
):
    async with db_manager.session() as db:
        return await submission_store.get_submission(db, submission_id)


@router.delete("/{submission_id}", response_model=DeleteConfirmation)
async def delete_submission(
    submission_id: str,
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
):
    async with db_manager.session() as db:
        await submission_store.delete_submission(db, submission_id)
    return DeleteConfirmation()
