"""Instruction texts sent to the completion service.

Both builders are pure: the same inputs always give the same string. The
tagged answer formats requested here are what :mod:`ieltsmaster.parsing`
looks for.
"""

from __future__ import annotations
from typing import Any, Dict, Tuple


QUESTION_SYSTEM_PROMPT = (
	"You are an IELTS examiner creating authentic IELTS writing questions. "
	"Generate realistic, varied questions that match official IELTS standards."
)

SCORING_SYSTEM_PROMPT = (
	"You are an experienced IELTS examiner. Evaluate the writing based on the four IELTS criteria:\n"
	"1. Task Achievement/Response (0-9)\n"
	"2. Coherence and Cohesion (0-9)\n"
	"3. Lexical Resource (0-9)\n"
	"4. Grammatical Range and Accuracy (0-9)\n\n"
	"Provide scores and detailed feedback. Be fair but thorough in your assessment."
)


def _question_template(task: str, provide: str, prompt_hint: str, instructions_hint: str) -> str:
	return (
		f"{task}\n\n"
		"Provide:\n"
		f"{provide}\n\n"
		"Format your response as:\n"
		f"PROMPT: [{prompt_hint}]\n"
		f"INSTRUCTIONS: [{instructions_hint}]"
	)


_QUESTION_PROMPTS: Dict[Tuple[str, str], str] = {
	("academic", "task1"): _question_template(
		"Generate an IELTS Academic Writing Task 1 question. "
		"This should describe visual information (a graph, table, chart, or diagram).",
		"1. A clear description of what visual data the candidate should describe\n"
		"2. Instructions that match official IELTS format",
		"description of the visual",
		"the official-style instructions",
	),
	("academic", "task2"): _question_template(
		"Generate an IELTS Academic Writing Task 2 essay question on a relevant contemporary topic.",
		"1. A clear essay question that presents a point of view, argument, or problem\n"
		"2. Instructions that match official IELTS format",
		"the essay question",
		"the official-style instructions",
	),
	("general", "task1"): _question_template(
		"Generate an IELTS General Training Writing Task 1 letter question.",
		"1. A scenario requiring the candidate to write a letter (formal, semi-formal, or informal)\n"
		"2. Instructions that match official IELTS format including bullet points of what to include",
		"the letter scenario",
		"the official-style instructions with bullet points",
	),
	("general", "task2"): _question_template(
		"Generate an IELTS General Training Writing Task 2 essay question on a topic of general interest.",
		"1. A clear essay question\n"
		"2. Instructions that match official IELTS format",
		"the essay question",
		"the official-style instructions",
	),
}


def build_question_prompt(test_type: str, task_type: str) -> str:
	return _QUESTION_PROMPTS[(test_type, task_type)]


def build_scoring_prompt(question: Any, content: str) -> str:
	"""Build the scoring request for one candidate response.

	``question`` is anything exposing ``test_type``, ``task_type``, ``prompt``
	and ``instructions`` (an ORM row or a plain object).
	"""
	return (
		f"QUESTION ({question.test_type} - {question.task_type}):\n"
		f"{question.prompt}\n\n"
		"INSTRUCTIONS:\n"
		f"{question.instructions}\n\n"
		"CANDIDATE'S RESPONSE:\n"
		f"{content}\n\n"
		"Please evaluate this IELTS writing response and provide:\n\n"
		"1. Task Achievement/Response (0-9): [score]\n"
		"   - How well does it address the task?\n"
		"   - Are all parts covered?\n"
		"   - Is the position clear?\n\n"
		"2. Coherence and Cohesion (0-9): [score]\n"
		"   - How well organized is it?\n"
		"   - Are ideas logically sequenced?\n"
		"   - Are cohesive devices used effectively?\n\n"
		"3. Lexical Resource (0-9): [score]\n"
		"   - Range of vocabulary?\n"
		"   - Accuracy of word choice?\n"
		"   - Appropriate register?\n\n"
		"4. Grammatical Range and Accuracy (0-9): [score]\n"
		"   - Variety of structures?\n"
		"   - Accuracy of grammar?\n"
		"   - Punctuation?\n\n"
		"Provide specific, constructive feedback on how to improve in each area.\n\n"
		"Format your response as:\n"
		"TASK_ACHIEVEMENT: [score]\n"
		"COHERENCE_COHESION: [score]\n"
		"LEXICAL_RESOURCE: [score]\n"
		"GRAMMATICAL_RANGE: [score]\n"
		"FEEDBACK: [detailed feedback]\n"
	)
