"""Resolve a raw completion request into exactly one completion mode."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from ..schemas import CompleteTaskRequest, Task
from .scoring import normalize_percent, parse_optional_integer, parse_optional_non_negative_number


@dataclass(frozen=True)
class Scores:
	obtained: Optional[float]
	percent: Optional[float]


@dataclass(frozen=True)
class ExplicitAdvance:
	step: int
	scores: Scores


@dataclass(frozen=True)
class DeferredRoll:
	percent: float
	scores: Scores


@dataclass(frozen=True)
class ImmediateRoll:
	percent: float
	scores: Scores


@dataclass(frozen=True)
class DefaultStep:
	scores: Scores
	step: int = 1


CompletionMode = Union[ExplicitAdvance, DeferredRoll, ImmediateRoll, DefaultStep]


def read_scores(request: CompleteTaskRequest, task: Task) -> Scores:
	obtained = parse_optional_non_negative_number(request.score_obtained)
	percent_input = parse_optional_non_negative_number(request.score_percent)
	return Scores(obtained=obtained, percent=normalize_percent(obtained, task.points, percent_input))


def classify_completion(request: CompleteTaskRequest, task: Task) -> CompletionMode:
	scores = read_scores(request, task)
	advance_by = parse_optional_integer(request.advance_by)
	if advance_by is not None:
		return ExplicitAdvance(step=advance_by, scores=scores)
	if scores.percent is not None:
		if request.defer_roll:
			return DeferredRoll(percent=scores.percent, scores=scores)
		return ImmediateRoll(percent=scores.percent, scores=scores)
	return DefaultStep(scores=scores)
