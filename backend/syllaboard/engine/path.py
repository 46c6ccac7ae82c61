from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from ..schemas import PathCell, Task
from .scoring import parse_optional_non_negative_number


@dataclass(frozen=True)
class Move:
	new_position: int
	reward_gained: int


def _cell_reward(cell: Any) -> int:
	if cell is None:
		return 0
	raw = cell.get("reward") if isinstance(cell, dict) else getattr(cell, "reward", None)
	value = parse_optional_non_negative_number(raw)
	return int(value) if value is not None else 0


def advance(current_position: int, path_length: int, cells: Sequence[Any], step: int) -> Move:
	"""Move ``step`` cells (either direction) around a looped path.

	An empty path is not an error: the token stays put and earns nothing.
	"""
	if path_length <= 0:
		return Move(new_position=current_position, reward_gained=0)
	# Python's % is floored, so the result is in [0, path_length) for negative steps too
	new_position = (current_position + step) % path_length
	cell = cells[new_position] if new_position < len(cells) else None
	return Move(new_position=new_position, reward_gained=_cell_reward(cell))


def build_path_vector(
	tasks: Sequence[Task],
	cells_per_task: int = 3,
	reward_min: int = 1,
	reward_max: int = 20,
	rng: Optional[random.Random] = None,
) -> List[PathCell]:
	"""Lay out a board with ``cells_per_task`` cells per task and random rewards."""
	rng = rng or random.SystemRandom()
	lo = max(0, min(reward_min, reward_max))
	hi = max(0, reward_min, reward_max)
	cells: List[PathCell] = []
	count = len(tasks) * max(1, cells_per_task)
	for i in range(count):
		task = tasks[i % len(tasks)]
		name = task.title.strip() or f"{task.type.value} {i % len(tasks) + 1}"
		cells.append(PathCell(name=name, reward=rng.randint(lo, hi)))
	return cells
