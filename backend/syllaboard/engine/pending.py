from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..schemas import PendingCompletion
from .errors import NoPendingRoll, PendingRollConflict


@dataclass(frozen=True)
class TaskSnapshot:
	"""Task fields captured when it is scored, carried through to the roll."""
	task_index: int
	title: str
	points: Optional[float]
	score_obtained: Optional[float]
	score_percent: Optional[float]


def create_pending(existing: Optional[PendingCompletion], snapshot: TaskSnapshot, die_min: int) -> PendingCompletion:
	if existing is not None:
		raise PendingRollConflict(existing.task_index)
	return PendingCompletion(
		task_index=snapshot.task_index,
		title=snapshot.title,
		points=snapshot.points,
		score_obtained=snapshot.score_obtained,
		score_percent=snapshot.score_percent,
		die_min=die_min,
		created_at=datetime.utcnow(),
	)


def resolve(pending: Optional[PendingCompletion]) -> Tuple[int, TaskSnapshot]:
	# The caller clears the pending slot once the move is applied
	if pending is None:
		raise NoPendingRoll()
	snapshot = TaskSnapshot(
		task_index=pending.task_index,
		title=pending.title,
		points=pending.points,
		score_obtained=pending.score_obtained,
		score_percent=pending.score_percent,
	)
	return pending.die_min, snapshot
