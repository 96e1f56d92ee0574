from __future__ import annotations
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .auth import get_current_user, User
from ..db import get_db
from ..errors import NotFoundError, UpstreamError
from ..models import Question, Score, Submission
from ..schemas import ScoreOut, SubmitTestRequest, SubmitTestResponse
from ..scoring import overall_band
from ..services import Pipeline, get_pipeline


router = APIRouter(prefix="/api/submissions", tags=["submissions"])

logger = logging.getLogger(__name__)


@router.post("", response_model=SubmitTestResponse)
async def submit_answer(
	req: SubmitTestRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	pipeline: Pipeline = Depends(get_pipeline),
):
	question_id = str(req.question_id)
	question = db.get(Question, question_id)
	if question is None:
		raise NotFoundError("Question not found")

	submission = Submission(
		user_id=user.username,
		question_id=question_id,
		content=req.content,
		word_count=req.word_count,
		time_taken=req.time_taken,
	)
	try:
		db.add(submission)
		db.commit()
		db.refresh(submission)
	except SQLAlchemyError:
		db.rollback()
		logger.exception("Failed to save submission for question %s", question_id)
		raise UpstreamError("Failed to save submission")

	# From here on the submission stays persisted even if scoring fails
	try:
		scores = await pipeline.scoring.score(question, req.content, req.word_count)
	except Exception:
		logger.exception("Scoring failed for submission %s", submission.id)
		raise UpstreamError()

	score = Score(
		submission_id=submission.id,
		task_achievement=scores.task_achievement,
		coherence_cohesion=scores.coherence_cohesion,
		lexical_resource=scores.lexical_resource,
		grammatical_range=scores.grammatical_range,
		overall_band=overall_band(
			scores.task_achievement,
			scores.coherence_cohesion,
			scores.lexical_resource,
			scores.grammatical_range,
		),
		feedback=scores.feedback,
	)
	try:
		db.add(score)
		db.commit()
		db.refresh(score)
	except SQLAlchemyError:
		db.rollback()
		logger.exception("Failed to save score for submission %s", submission.id)
		raise UpstreamError("Failed to save scores")
	logger.info("Scored submission %s: band %.1f", submission.id, score.overall_band)
	return SubmitTestResponse(submission_id=submission.id, score=ScoreOut.model_validate(score))
