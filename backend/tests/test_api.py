"""FastAPI endpoint tests using httpx.AsyncClient."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ieltsmaster.db import get_db
from ieltsmaster.main import app
from ieltsmaster.models import Question, Score, Submission
from ieltsmaster.schemas import ParsedQuestion, ParsedScores

ESSAY = "Some people think that classes should be optional. " * 20


async def _create_question(client, headers, test_type="academic", task_type="task2") -> dict:
	resp = await client.post("/api/questions", json={"test_type": test_type, "task_type": task_type}, headers=headers)
	assert resp.status_code == 200, resp.text
	return resp.json()["question"]


async def _submit(client, headers, question_id, overrides=None):
	body = {"question_id": question_id, "content": ESSAY, "word_count": 180, "time_taken": 1500}
	body.update(overrides or {})
	return await client.post("/api/submissions", json=body, headers=headers)


def _count(session_factory, model) -> int:
	with session_factory() as db:
		return db.execute(select(func.count()).select_from(model)).scalar_one()


class _FailingScoring:
	async def score(self, question, content, word_count) -> ParsedScores:
		raise RuntimeError("completion service unavailable")


class _FailingQuestions:
	async def generate(self, test_type, task_type) -> ParsedQuestion:
		raise RuntimeError("completion service unavailable")


def _fail_commits_of(engine, model) -> None:
	"""Route requests to a store whose commit fails while a new ``model`` row is pending."""

	class _Session(Session):
		def commit(self):
			if any(isinstance(obj, model) for obj in self.new):
				raise SQLAlchemyError("disk I/O error")
			super().commit()

	factory = sessionmaker(class_=_Session, bind=engine, autoflush=False, future=True)

	def override_get_db():
		db = factory()
		try:
			yield db
		finally:
			db.close()

	# The client fixture clears overrides on teardown
	app.dependency_overrides[get_db] = override_get_db


# ── Health ──────────────────────────────────────────────────


async def test_health(client):
	resp = await client.get("/health")
	assert resp.status_code == 200
	assert resp.json() == {"status": "ok", "mock_ai": True}


# ── Question generation ─────────────────────────────────────


async def test_generate_question_requires_auth(client, session_factory):
	resp = await client.post("/api/questions", json={"test_type": "academic", "task_type": "task1"})
	assert resp.status_code == 401
	assert resp.json()["detail"] == "Unauthorized"
	assert _count(session_factory, Question) == 0


async def test_generate_question_rejects_invalid_token(client):
	resp = await client.post(
		"/api/questions",
		json={"test_type": "academic", "task_type": "task1"},
		headers={"Authorization": "Bearer not-a-jwt"},
	)
	assert resp.status_code == 401


@pytest.mark.parametrize("test_type", ["academic", "general"])
@pytest.mark.parametrize("task_type,word_count,time_limit", [("task1", 150, 20), ("task2", 250, 40)])
async def test_generate_question_requirements(client, auth_headers, session_factory, test_type, task_type, word_count, time_limit):
	question = await _create_question(client, auth_headers, test_type, task_type)
	assert question["test_type"] == test_type
	assert question["task_type"] == task_type
	assert question["word_count"] == word_count
	assert question["time_limit"] == time_limit
	assert question["prompt"]
	assert question["instructions"]
	with session_factory() as db:
		row = db.get(Question, question["id"])
		assert row is not None
		assert (row.word_count, row.time_limit) == (word_count, time_limit)


async def test_generate_question_requirements_ignore_source(client, auth_headers, pipeline):
	class _Source:
		async def generate(self, test_type, task_type):
			return ParsedQuestion(prompt="Write 10 words in 5 minutes.", instructions="Anything.")

	pipeline.questions = _Source()
	question = await _create_question(client, auth_headers, "general", "task1")
	assert question["prompt"] == "Write 10 words in 5 minutes."
	assert (question["word_count"], question["time_limit"]) == (150, 20)


@pytest.mark.parametrize(
	"body",
	[
		{"test_type": "ielts", "task_type": "task1"},
		{"test_type": "academic", "task_type": "task3"},
		{"test_type": "academic"},
		{},
	],
)
async def test_generate_question_invalid_body(client, auth_headers, body):
	resp = await client.post("/api/questions", json=body, headers=auth_headers)
	assert resp.status_code == 400
	data = resp.json()
	assert data["detail"] == "Invalid request data"
	assert data["errors"]
	assert all({"loc", "msg", "type"} <= set(e) for e in data["errors"])


async def test_generate_question_upstream_failure(client, auth_headers, pipeline, session_factory):
	pipeline.questions = _FailingQuestions()
	resp = await client.post("/api/questions", json={"test_type": "academic", "task_type": "task1"}, headers=auth_headers)
	assert resp.status_code == 500
	assert resp.json() == {"detail": "Internal server error"}
	assert _count(session_factory, Question) == 0


# ── Submission and scoring ──────────────────────────────────


async def test_submit_requires_auth(client, auth_headers, session_factory):
	question = await _create_question(client, auth_headers)
	resp = await _submit(client, {}, question["id"])
	assert resp.status_code == 401
	assert _count(session_factory, Submission) == 0
	assert _count(session_factory, Score) == 0


async def test_submit_unknown_question(client, auth_headers, session_factory):
	resp = await _submit(client, auth_headers, str(uuid.uuid4()))
	assert resp.status_code == 404
	assert resp.json()["detail"] == "Question not found"
	assert _count(session_factory, Submission) == 0


@pytest.mark.parametrize(
	"overrides",
	[
		{"question_id": "not-a-uuid"},
		{"content": ""},
		{"word_count": 0},
		{"word_count": 12.5},
		{"time_taken": -3},
		{"word_count": "180"},
		{"time_taken": "1500"},
		{"word_count": True},
		{"time_taken": None},
	],
)
async def test_submit_invalid_body(client, auth_headers, session_factory, overrides):
	question = await _create_question(client, auth_headers)
	resp = await _submit(client, auth_headers, question["id"], overrides)
	assert resp.status_code == 400
	assert resp.json()["errors"]
	assert _count(session_factory, Submission) == 0


async def test_submit_scores_submission(client, auth_headers, session_factory):
	question = await _create_question(client, auth_headers)
	resp = await _submit(client, auth_headers, question["id"])
	assert resp.status_code == 200, resp.text
	data = resp.json()
	score = data["score"]
	assert score["submission_id"] == data["submission_id"]
	subscores = [score[k] for k in ("task_achievement", "coherence_cohesion", "lexical_resource", "grammatical_range")]
	for value in subscores:
		assert 4 <= value <= 9
		assert value * 2 == int(value * 2)
	assert score["overall_band"] * 2 == int(score["overall_band"] * 2)
	assert abs(score["overall_band"] - sum(subscores) / 4) <= 0.25
	assert "180 words" in score["feedback"]
	with session_factory() as db:
		submission = db.get(Submission, data["submission_id"])
		assert submission.user_id == "alice"
		assert submission.time_taken == 1500
	assert _count(session_factory, Score) == 1


async def test_submit_uses_aggregated_band(client, auth_headers, pipeline):
	class _Scoring:
		async def score(self, question, content, word_count):
			return ParsedScores(
				task_achievement=6.5,
				coherence_cohesion=7,
				lexical_resource=5.5,
				grammatical_range=6,
				feedback="good job",
			)

	pipeline.scoring = _Scoring()
	question = await _create_question(client, auth_headers)
	resp = await _submit(client, auth_headers, question["id"])
	assert resp.status_code == 200
	assert resp.json()["score"]["overall_band"] == 6.5
	assert resp.json()["score"]["feedback"] == "good job"


async def test_scoring_failure_keeps_submission(client, auth_headers, pipeline, session_factory):
	question = await _create_question(client, auth_headers)
	pipeline.scoring = _FailingScoring()
	resp = await _submit(client, auth_headers, question["id"])
	assert resp.status_code == 500
	assert resp.json() == {"detail": "Internal server error"}
	# Not rolled back
	assert _count(session_factory, Submission) == 1
	assert _count(session_factory, Score) == 0


async def test_question_store_failure(client, auth_headers, engine, session_factory):
	_fail_commits_of(engine, Question)
	resp = await client.post("/api/questions", json={"test_type": "general", "task_type": "task1"}, headers=auth_headers)
	assert resp.status_code == 500
	assert resp.json() == {"detail": "Failed to save question"}
	assert _count(session_factory, Question) == 0


async def test_submission_store_failure(client, auth_headers, engine, session_factory):
	question = await _create_question(client, auth_headers)
	_fail_commits_of(engine, Submission)
	resp = await _submit(client, auth_headers, question["id"])
	assert resp.status_code == 500
	assert resp.json() == {"detail": "Failed to save submission"}
	assert _count(session_factory, Submission) == 0


async def test_score_store_failure_keeps_submission(client, auth_headers, engine, session_factory):
	question = await _create_question(client, auth_headers)
	_fail_commits_of(engine, Score)
	resp = await _submit(client, auth_headers, question["id"])
	assert resp.status_code == 500
	assert resp.json() == {"detail": "Failed to save scores"}
	assert _count(session_factory, Submission) == 1
	assert _count(session_factory, Score) == 0


# ── Results ─────────────────────────────────────────────────


async def test_fetch_result(client, auth_headers):
	question = await _create_question(client, auth_headers, "general", "task1")
	submitted = (await _submit(client, auth_headers, question["id"])).json()
	resp = await client.get(f"/api/results/{submitted['submission_id']}", headers=auth_headers)
	assert resp.status_code == 200
	data = resp.json()
	assert data["submission"]["id"] == submitted["submission_id"]
	assert data["submission"]["content"] == ESSAY
	assert data["submission"]["word_count"] == 180
	assert data["question"]["id"] == question["id"]
	assert data["score"] == submitted["score"]


async def test_fetch_result_owner_only(client, auth_headers, make_user, bearer):
	question = await _create_question(client, auth_headers)
	submitted = (await _submit(client, auth_headers, question["id"])).json()
	make_user("bob")
	resp = await client.get(f"/api/results/{submitted['submission_id']}", headers=bearer("bob"))
	assert resp.status_code == 404
	assert resp.json()["detail"] == "Result not found"


async def test_fetch_result_missing(client, auth_headers):
	resp = await client.get(f"/api/results/{uuid.uuid4()}", headers=auth_headers)
	assert resp.status_code == 404


async def test_fetch_result_requires_auth(client):
	resp = await client.get(f"/api/results/{uuid.uuid4()}")
	assert resp.status_code == 401
