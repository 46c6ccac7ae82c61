from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Optional

from ..schemas import CompletedTask, CompleteTaskRequest, Course, DieResult, Outcome, Student
from . import pending as pending_rolls
from .dice import DieRoller
from .errors import InvalidTaskIndex, PendingRollConflict
from .path import Move, advance
from .pending import TaskSnapshot
from .requests import (
	DefaultStep,
	DeferredRoll,
	ExplicitAdvance,
	ImmediateRoll,
	Scores,
	classify_completion,
)
from .scoring import minimum_face, parse_optional_integer

logger = logging.getLogger(__name__)


class ProgressionEngine:
	"""Turns task completions into board moves for the single student.

	The engine mutates the ``Student`` it is handed and returns an
	``Outcome``; persisting the student is the caller's job.
	"""

	def __init__(self, roller: Optional[DieRoller] = None) -> None:
		self.roller = roller or DieRoller()

	# ---- internals ----

	def _apply_step(self, course: Course, student: Student, step: int) -> Move:
		move = advance(student.current_position, course.path_length, course.path_vector, step)
		student.current_position = move.new_position
		student.total_reward += move.reward_gained
		student.updated_at = datetime.utcnow()
		return move

	def _outcome(self, kind: str, student: Student, message: str, move: Optional[Move] = None, **extra: Any) -> Outcome:
		return Outcome(
			kind=kind,
			message=message,
			reward_gained=move.reward_gained if move else 0,
			position=student.current_position,
			total_reward=student.total_reward,
			student=student,
			**extra,
		)

	@staticmethod
	def _snapshot(task_index: int, course: Course, scores: Scores) -> TaskSnapshot:
		task = course.tasks[task_index]
		return TaskSnapshot(
			task_index=task_index,
			title=task.title,
			points=task.points,
			score_obtained=scores.obtained,
			score_percent=scores.percent,
		)

	@staticmethod
	def _record(
		student: Student,
		snapshot: TaskSnapshot,
		move: Move,
		step: int,
		*,
		advance_by: Optional[int] = None,
		die_min: Optional[int] = None,
		die_roll: Optional[int] = None,
	) -> CompletedTask:
		entry = CompletedTask(
			task_index=snapshot.task_index,
			title=snapshot.title,
			points=snapshot.points,
			score_obtained=snapshot.score_obtained,
			score_percent=snapshot.score_percent,
			reward_gained=move.reward_gained,
			position=move.new_position,
			step_used=step,
			advance_by_used=advance_by,
			die_min_used=die_min,
			die_roll_used=die_roll,
			completed_at=datetime.utcnow(),
		)
		student.completed_tasks.append(entry)
		return entry

	# ---- operations ----

	def complete_task(self, task_index: int, course: Course, student: Student, request: CompleteTaskRequest) -> Outcome:
		if task_index < 0 or task_index >= len(course.tasks):
			raise InvalidTaskIndex(task_index, len(course.tasks))
		if student.has_completed(task_index):
			return self._outcome("already_completed", student, f"Task {task_index} is already completed")
		current_pending = student.pending_completion
		if current_pending is not None and current_pending.task_index == task_index:
			return self._outcome(
				"already_pending",
				student,
				f"Task {task_index} is waiting for its die roll",
				pending=current_pending,
			)

		mode = classify_completion(request, course.tasks[task_index])
		if request.defer_roll and current_pending is not None and not isinstance(mode, ExplicitAdvance):
			raise PendingRollConflict(current_pending.task_index)

		snapshot = self._snapshot(task_index, course, mode.scores)
		match mode:
			case ExplicitAdvance(step=step):
				move = self._apply_step(course, student, step)
				self._record(student, snapshot, move, step, advance_by=step)
				logger.info("task %s completed: advanced %s to %s (+%s)", task_index, step, move.new_position, move.reward_gained)
				return self._outcome("advanced", student, f"Advanced {step}", move)

			case DeferredRoll(percent=percent):
				die_min = minimum_face(percent)
				student.pending_completion = pending_rolls.create_pending(student.pending_completion, snapshot, die_min)
				student.updated_at = datetime.utcnow()
				logger.info("task %s scored %.1f%%: die pending with minimum %s", task_index, percent, die_min)
				return self._outcome(
					"pending",
					student,
					f"Die ready: minimum {die_min}",
					pending=student.pending_completion,
				)

			case ImmediateRoll(percent=percent):
				die_min = minimum_face(percent)
				rolled = self.roller.roll(die_min)
				move = self._apply_step(course, student, rolled)
				self._record(student, snapshot, move, rolled, die_min=die_min, die_roll=rolled)
				logger.info("task %s scored %.1f%%: rolled %s (min %s) to %s (+%s)", task_index, percent, rolled, die_min, move.new_position, move.reward_gained)
				return self._outcome("rolled", student, f"Rolled {rolled}", move, die=DieResult(min=die_min, roll=rolled))

			case DefaultStep(step=step):
				move = self._apply_step(course, student, step)
				self._record(student, snapshot, move, step)
				logger.info("task %s completed without score: stepped %s to %s", task_index, step, move.new_position)
				return self._outcome("stepped", student, f"Advanced {step}", move)

	def resolve_pending_roll(self, course: Course, student: Student) -> Outcome:
		die_min, snapshot = pending_rolls.resolve(student.pending_completion)
		rolled = self.roller.roll(die_min)
		move = self._apply_step(course, student, rolled)
		self._record(student, snapshot, move, rolled, die_min=die_min, die_roll=rolled)
		student.pending_completion = None
		logger.info("pending roll for task %s: rolled %s (min %s) to %s (+%s)", snapshot.task_index, rolled, die_min, move.new_position, move.reward_gained)
		return self._outcome("rolled", student, f"Rolled {rolled}", move, die=DieResult(min=die_min, roll=rolled))

	def move(self, course: Course, student: Student, advance_by: Any = None) -> Outcome:
		step = parse_optional_integer(advance_by)
		if step is None:
			step = 1
		move = self._apply_step(course, student, step)
		logger.info("moved %s to %s (+%s)", step, move.new_position, move.reward_gained)
		return self._outcome("moved", student, f"Moved {step}", move)
