from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt


TestType = Literal["academic", "general"]
TaskType = Literal["task1", "task2"]

# (minimum word count, time limit in minutes), fixed by task category
TASK_REQUIREMENTS: Dict[str, Tuple[int, int]] = {
	"task1": (150, 20),
	"task2": (250, 40),
}


def task_requirements(task_type: str) -> Tuple[int, int]:
	return TASK_REQUIREMENTS[task_type]


class ParsedQuestion(BaseModel):
	prompt: str
	instructions: str


class ParsedScores(BaseModel):
	task_achievement: float
	coherence_cohesion: float
	lexical_resource: float
	grammatical_range: float
	feedback: str


# ---- Requests ----

class GenerateQuestionRequest(BaseModel):
	test_type: TestType
	task_type: TaskType


class SubmitTestRequest(BaseModel):
	question_id: UUID
	content: str = Field(min_length=1)
	# Strict: JSON strings, booleans and floats are rejected
	word_count: StrictInt = Field(gt=0)
	# Seconds
	time_taken: StrictInt = Field(gt=0)


class UpdateProfileRequest(BaseModel):
	full_name: Optional[str] = None


# ---- Responses ----

class QuestionOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	test_type: TestType
	task_type: TaskType
	prompt: str
	instructions: str
	word_count: int
	time_limit: int
	created_at: datetime


class SubmissionOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	content: str
	word_count: int
	time_taken: int
	submitted_at: datetime


class ScoreOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	submission_id: str
	task_achievement: float
	coherence_cohesion: float
	lexical_resource: float
	grammatical_range: float
	overall_band: float
	feedback: str
	created_at: datetime


class GenerateQuestionResponse(BaseModel):
	question: QuestionOut


class SubmitTestResponse(BaseModel):
	submission_id: str
	score: ScoreOut


class GetResultsResponse(BaseModel):
	submission: SubmissionOut
	question: QuestionOut
	score: Optional[ScoreOut] = None


class ProfileOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	email: Optional[str] = None
	full_name: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class SubmissionSummary(BaseModel):
	id: str
	submitted_at: datetime
	word_count: int
	test_type: TestType
	task_type: TaskType
	overall_band: Optional[float] = None


class ProfileResponse(BaseModel):
	profile: ProfileOut
	submissions: List[SubmissionSummary]
	average_band: Optional[float] = None
	# Across the listed submissions only
	total_words: int = 0
