"""Tolerant parsers for completion text.

The completion service returns free text with no enforced schema, so these
functions never raise: any field that cannot be located is replaced by a
default and the caller always gets a fully populated value.
"""

from __future__ import annotations
import re
from typing import Dict, Tuple

from .schemas import ParsedQuestion, ParsedScores


DEFAULT_INSTRUCTIONS: Dict[Tuple[str, str], str] = {
	("academic", "task1"): (
		"Summarise the information by selecting and reporting the main features, "
		"and make comparisons where relevant. Write at least 150 words."
	),
	("academic", "task2"): (
		"Give reasons for your answer and include any relevant examples from your own "
		"knowledge or experience. Write at least 250 words."
	),
	("general", "task1"): (
		"Write at least 150 words. You do NOT need to write any addresses. "
		"Begin your letter as follows: Dear..."
	),
	("general", "task2"): (
		"Give reasons for your answer and include any relevant examples from your own "
		"knowledge or experience. Write at least 250 words."
	),
}

DEFAULT_SUBSCORE = 5.0
DEFAULT_FEEDBACK = "No detailed feedback available."

# Markers are case-sensitive for questions
_PROMPT_RE = re.compile(r"PROMPT:\s*(.+?)(?=INSTRUCTIONS:|\Z)", re.DOTALL)
_INSTRUCTIONS_RE = re.compile(r"INSTRUCTIONS:\s*(.+)\Z", re.DOTALL)

_SCORE_FIELDS = {
	"task_achievement": "TASK_ACHIEVEMENT",
	"coherence_cohesion": "COHERENCE_COHESION",
	"lexical_resource": "LEXICAL_RESOURCE",
	"grammatical_range": "GRAMMATICAL_RANGE",
}
_SCORE_RES = {
	field: re.compile(rf"{marker}:\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
	for field, marker in _SCORE_FIELDS.items()
}
_FEEDBACK_RE = re.compile(r"FEEDBACK:\s*(.+)\Z", re.IGNORECASE | re.DOTALL)


def parse_question_response(text: str, test_type: str, task_type: str) -> ParsedQuestion:
	prompt_match = _PROMPT_RE.search(text)
	instructions_match = _INSTRUCTIONS_RE.search(text)
	prompt = prompt_match.group(1).strip() if prompt_match else text
	if instructions_match:
		instructions = instructions_match.group(1).strip()
	else:
		instructions = DEFAULT_INSTRUCTIONS[(test_type, task_type)]
	return ParsedQuestion(prompt=prompt, instructions=instructions)


def _find_score(field: str, text: str) -> float:
	match = _SCORE_RES[field].search(text)
	if not match:
		return DEFAULT_SUBSCORE
	return float(match.group(1))


def parse_scores(text: str) -> ParsedScores:
	feedback_match = _FEEDBACK_RE.search(text)
	feedback = feedback_match.group(1).strip() if feedback_match else ""
	return ParsedScores(
		**{field: _find_score(field, text) for field in _SCORE_FIELDS},
		feedback=feedback or DEFAULT_FEEDBACK,
	)
