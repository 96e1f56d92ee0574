"""Canned questions and randomized scores for development mode (USE_MOCK_AI)."""

from __future__ import annotations
import random
from typing import Dict, Optional, Tuple

from .schemas import ParsedQuestion, ParsedScores
from .scoring import clamp_band, round_to_half


MOCK_QUESTIONS: Dict[Tuple[str, str], ParsedQuestion] = {
	("academic", "task1"): ParsedQuestion(
		prompt=(
			"The bar chart shows the percentage of adults in different age groups who used the "
			"internet in the UK between 2000 and 2020. Summarise the information by selecting and "
			"reporting the main features, and make comparisons where relevant."
		),
		instructions="Write at least 150 words.",
	),
	("academic", "task2"): ParsedQuestion(
		prompt=(
			"Some people believe that university students should be required to attend classes. "
			"Others believe that going to classes should be optional for students. Discuss both "
			"these views and give your own opinion."
		),
		instructions=(
			"Give reasons for your answer and include any relevant examples from your own "
			"knowledge or experience. Write at least 250 words."
		),
	),
	("general", "task1"): ParsedQuestion(
		prompt=(
			"You recently bought a product online, but when it arrived, it was damaged. "
			"Write a letter to the company. In your letter:\n"
			"- Explain what the product was\n"
			"- Describe the damage\n"
			"- Say what you want the company to do about it"
		),
		instructions=(
			"Write at least 150 words. You do NOT need to write any addresses. "
			"Begin your letter as follows: Dear Sir or Madam,"
		),
	),
	("general", "task2"): ParsedQuestion(
		prompt=(
			"In many countries, people are now living longer than ever before. Some people say an "
			"ageing population creates problems for governments. Other people think there are "
			"benefits if society has more elderly people. To what extent do the advantages of "
			"having an ageing population outweigh the disadvantages?"
		),
		instructions=(
			"Give reasons for your answer and include any relevant examples from your own "
			"knowledge or experience. Write at least 250 words."
		),
	),
}

MOCK_SCORE_MIN = 4.0
MOCK_SCORE_MAX = 9.0

# Offset added on top of the shared per-call variance
_CRITERION_BIAS = {
	"task_achievement": 0.0,
	"coherence_cohesion": 0.5,
	"lexical_resource": -0.5,
	"grammatical_range": 0.0,
}

_MOCK_FEEDBACK = (
	"MOCK FEEDBACK (Development Mode):\n\n"
	"Task Achievement: Your response addresses the task with {word_count} words. "
	"Good attempt at covering the main points.\n\n"
	"Coherence and Cohesion: The organization of ideas is generally clear. "
	"Consider using more linking words to improve flow.\n\n"
	"Lexical Resource: You demonstrate a reasonable range of vocabulary. "
	"Try to use more varied and precise word choices.\n\n"
	"Grammatical Range and Accuracy: Your grammar is generally accurate with some complexity. "
	"Focus on using a wider range of structures.\n\n"
	"Overall: This is mock feedback for development/testing. Enable real AI scoring by "
	"setting USE_MOCK_AI=false and adding an OpenAI API key."
)


def mock_question(test_type: str, task_type: str) -> ParsedQuestion:
	return MOCK_QUESTIONS[(test_type, task_type)].model_copy()


def mock_scores(content: str, word_count: int, *, rng: Optional[random.Random] = None) -> ParsedScores:
	rng = rng or random
	base = 6.5 if word_count >= 150 else 5.0
	# uniform in [-0.5, 1.0)
	variance = rng.random() * 1.5 - 0.5
	values = {
		field: round_to_half(clamp_band(base + variance + bias, MOCK_SCORE_MIN, MOCK_SCORE_MAX))
		for field, bias in _CRITERION_BIAS.items()
	}
	return ParsedScores(**values, feedback=_MOCK_FEEDBACK.format(word_count=word_count))
