from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from .auth import get_current_user, User
from ..db import get_db
from ..errors import NotFoundError
from ..models import Submission
from ..schemas import GetResultsResponse, QuestionOut, ScoreOut, SubmissionOut


router = APIRouter(prefix="/api/results", tags=["results"])


@router.get("/{submission_id}", response_model=GetResultsResponse)
async def get_result(submission_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	# Someone else's submission is indistinguishable from a missing one
	stmt = (
		select(Submission)
		.options(joinedload(Submission.question), joinedload(Submission.score))
		.where(Submission.id == submission_id, Submission.user_id == user.username)
	)
	submission = db.execute(stmt).scalars().first()
	if submission is None:
		raise NotFoundError("Result not found")
	return GetResultsResponse(
		submission=SubmissionOut.model_validate(submission),
		question=QuestionOut.model_validate(submission.question),
		score=ScoreOut.model_validate(submission.score) if submission.score else None,
	)
