from __future__ import annotations
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from .auth import get_current_user, User
from ..db import get_db
from ..errors import NotFoundError, UpstreamError
from ..models import Profile, Submission
from ..schemas import ProfileOut, ProfileResponse, SubmissionSummary, UpdateProfileRequest


router = APIRouter(prefix="/api/profile", tags=["profile"])

logger = logging.getLogger(__name__)

RECENT_SUBMISSIONS = 10


def _recent_submissions(db: Session, username: str) -> list[SubmissionSummary]:
	stmt = (
		select(Submission)
		.options(joinedload(Submission.question), joinedload(Submission.score))
		.where(Submission.user_id == username)
		.order_by(Submission.submitted_at.desc())
		.limit(RECENT_SUBMISSIONS)
	)
	return [
		SubmissionSummary(
			id=s.id,
			submitted_at=s.submitted_at,
			word_count=s.word_count,
			test_type=s.question.test_type,
			task_type=s.question.task_type,
			overall_band=s.score.overall_band if s.score else None,
		)
		for s in db.execute(stmt).unique().scalars()
	]


def average_band(submissions: list[SubmissionSummary]) -> float | None:
	bands = [s.overall_band for s in submissions if s.overall_band is not None]
	if not bands:
		return None
	return sum(bands) / len(bands)


def _load_profile(db: Session, username: str) -> Profile:
	profile = db.get(Profile, username)
	if profile is None:
		raise NotFoundError("Profile not found")
	return profile


@router.get("", response_model=ProfileResponse)
async def get_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	profile = _load_profile(db, user.username)
	submissions = _recent_submissions(db, user.username)
	return ProfileResponse(
		profile=ProfileOut.model_validate(profile),
		submissions=submissions,
		average_band=average_band(submissions),
		total_words=sum(s.word_count for s in submissions),
	)


@router.patch("", response_model=ProfileOut)
async def update_profile(
	req: UpdateProfileRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	profile = _load_profile(db, user.username)
	# Empty or missing name clears it
	profile.full_name = (req.full_name or "").strip() or None
	try:
		db.commit()
		db.refresh(profile)
	except SQLAlchemyError:
		db.rollback()
		logger.exception("Failed to update profile %s", user.username)
		raise UpstreamError("Failed to update profile")
	return ProfileOut.model_validate(profile)
