"""Tests for prompt building -- pure functions returning instruction text."""

from types import SimpleNamespace

import pytest

from ieltsmaster.prompts import build_question_prompt, build_scoring_prompt

CATEGORIES = [
	("academic", "task1"),
	("academic", "task2"),
	("general", "task1"),
	("general", "task2"),
]


@pytest.mark.parametrize("test_type,task_type", CATEGORIES)
def test_question_prompt_requests_tagged_format(test_type, task_type):
	prompt = build_question_prompt(test_type, task_type)
	assert prompt
	assert "PROMPT:" in prompt
	assert "INSTRUCTIONS:" in prompt


def test_question_prompts_are_distinct_and_deterministic():
	prompts = [build_question_prompt(*c) for c in CATEGORIES]
	assert len(set(prompts)) == 4
	assert prompts == [build_question_prompt(*c) for c in CATEGORIES]


def test_question_prompt_matches_category():
	assert "Academic Writing Task 1" in build_question_prompt("academic", "task1")
	assert "graph, table, chart, or diagram" in build_question_prompt("academic", "task1")
	assert "letter" in build_question_prompt("general", "task1")
	assert "General Training Writing Task 2" in build_question_prompt("general", "task2")


def test_scoring_prompt_embeds_question_and_answer():
	question = SimpleNamespace(
		test_type="academic",
		task_type="task2",
		prompt="Should university classes be optional?",
		instructions="Write at least 250 words.",
	)
	content = "In my opinion attendance matters.\n\nSecond paragraph here."
	prompt = build_scoring_prompt(question, content)
	assert "QUESTION (academic - task2):" in prompt
	assert question.prompt in prompt
	assert question.instructions in prompt
	assert content in prompt
	for marker in (
		"TASK_ACHIEVEMENT:",
		"COHERENCE_COHESION:",
		"LEXICAL_RESOURCE:",
		"GRAMMATICAL_RANGE:",
		"FEEDBACK:",
	):
		assert marker in prompt
