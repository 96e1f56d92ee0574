from __future__ import annotations
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .auth import get_current_user, User
from ..db import get_db
from ..errors import UpstreamError
from ..models import Question
from ..schemas import GenerateQuestionRequest, GenerateQuestionResponse, QuestionOut, task_requirements
from ..services import Pipeline, get_pipeline


router = APIRouter(prefix="/api/questions", tags=["questions"])

logger = logging.getLogger(__name__)


@router.post("", response_model=GenerateQuestionResponse)
async def generate_question(
	req: GenerateQuestionRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	pipeline: Pipeline = Depends(get_pipeline),
):
	try:
		generated = await pipeline.questions.generate(req.test_type, req.task_type)
	except Exception:
		logger.exception("Question generation failed (%s/%s) for %s", req.test_type, req.task_type, user.username)
		raise UpstreamError()

	word_count, time_limit = task_requirements(req.task_type)
	question = Question(
		test_type=req.test_type,
		task_type=req.task_type,
		prompt=generated.prompt,
		instructions=generated.instructions,
		word_count=word_count,
		time_limit=time_limit,
	)
	try:
		db.add(question)
		db.commit()
		db.refresh(question)
	except SQLAlchemyError:
		db.rollback()
		logger.exception("Failed to save %s/%s question", req.test_type, req.task_type)
		raise UpstreamError("Failed to save question")
	return GenerateQuestionResponse(question=QuestionOut.model_validate(question))
