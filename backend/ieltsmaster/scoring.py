from __future__ import annotations
import math


BAND_MIN = 0.0
BAND_MAX = 9.0


def round_to_half(value: float) -> float:
	# Ties round up: 6.25 -> 6.5, 6.75 -> 7.0
	return math.floor(value * 2 + 0.5) / 2


def clamp_band(value: float, low: float = BAND_MIN, high: float = BAND_MAX) -> float:
	return min(high, max(low, value))


def overall_band(
	task_achievement: float,
	coherence_cohesion: float,
	lexical_resource: float,
	grammatical_range: float,
) -> float:
	"""Average the four criteria and round to the nearest half band.

	Inputs are trusted to already lie in [0, 9]; nothing is clamped here.
	"""
	total = task_achievement + coherence_cohesion + lexical_resource + grammatical_range
	return round_to_half(total / 4)
