"""Question sources and scoring services.

Two interchangeable pairs exist: the AI pair calls the completion service,
the mock pair serves canned data. :func:`build_pipeline` picks one pair once
at startup from ``USE_MOCK_AI``; handlers only see the interfaces.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from fastapi import Request

from .completion_client import CompletionClient
from .mock_data import mock_question, mock_scores
from .parsing import parse_question_response, parse_scores
from .prompts import (
	QUESTION_SYSTEM_PROMPT,
	SCORING_SYSTEM_PROMPT,
	build_question_prompt,
	build_scoring_prompt,
)
from .schemas import ParsedQuestion, ParsedScores
from .scoring import clamp_band, round_to_half
from .settings import Settings

logger = logging.getLogger(__name__)


class QuestionSource(Protocol):
	async def generate(self, test_type: str, task_type: str) -> ParsedQuestion: ...


class ScoringService(Protocol):
	async def score(self, question: Any, content: str, word_count: int) -> ParsedScores: ...


ClientFactory = Callable[[], CompletionClient]


class MockQuestionSource:
	async def generate(self, test_type: str, task_type: str) -> ParsedQuestion:
		return mock_question(test_type, task_type)


class MockScoringService:
	async def score(self, question: Any, content: str, word_count: int) -> ParsedScores:
		return mock_scores(content, word_count)


class AIQuestionSource:
	def __init__(self, client_factory: ClientFactory, *, temperature: float = 0.8) -> None:
		self._client_factory = client_factory
		self.temperature = temperature

	async def generate(self, test_type: str, task_type: str) -> ParsedQuestion:
		client = self._client_factory()
		try:
			text = await client.complete(
				QUESTION_SYSTEM_PROMPT,
				build_question_prompt(test_type, task_type),
				temperature=self.temperature,
			)
		finally:
			await client.aclose()
		return parse_question_response(text, test_type, task_type)


class AIScoringService:
	def __init__(self, client_factory: ClientFactory, *, temperature: float = 0.3) -> None:
		self._client_factory = client_factory
		self.temperature = temperature

	async def score(self, question: Any, content: str, word_count: int) -> ParsedScores:
		client = self._client_factory()
		try:
			text = await client.complete(
				SCORING_SYSTEM_PROMPT,
				build_scoring_prompt(question, content),
				temperature=self.temperature,
			)
		finally:
			await client.aclose()
		parsed = parse_scores(text)
		return _normalize(parsed)


def _normalize(scores: ParsedScores) -> ParsedScores:
	# Model output is free text: keep sub-scores on the 0-9 half-band scale
	updates = {
		field: round_to_half(clamp_band(getattr(scores, field)))
		for field in ("task_achievement", "coherence_cohesion", "lexical_resource", "grammatical_range")
	}
	return scores.model_copy(update=updates)


@dataclass
class Pipeline:
	questions: QuestionSource
	scoring: ScoringService
	mock: bool = False


def build_pipeline(config: Settings) -> Pipeline:
	if config.use_mock_ai:
		logger.info("USE_MOCK_AI is set; serving mock questions and scores")
		return Pipeline(questions=MockQuestionSource(), scoring=MockScoringService(), mock=True)
	if not config.openai_api_key:
		logger.error("OPENAI_API_KEY is not configured; question and scoring calls will fail")

	def client_factory() -> CompletionClient:
		return CompletionClient(
			config.openai_api_key,
			base_url=config.openai_base_url,
			model=config.openai_model,
			timeout=config.openai_timeout,
		)

	return Pipeline(
		questions=AIQuestionSource(client_factory, temperature=config.question_temperature),
		scoring=AIScoringService(client_factory, temperature=config.scoring_temperature),
	)


def get_pipeline(request: Request) -> Pipeline:
	return request.app.state.pipeline
