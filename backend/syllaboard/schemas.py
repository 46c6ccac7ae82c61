from __future__ import annotations
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .engine.scoring import parse_optional_non_negative_number


class CamelModel(BaseModel):
	# Wire format is camelCase; Python code keeps snake_case names.
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskType(str, Enum):
	quiz = "quiz"
	midterm = "midterm"
	final = "final"
	assignment = "assignment"
	project = "project"
	participation = "participation"


_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d %B %Y", "%B %d, %Y", "%b %d, %Y", "%B %d %Y", "%b %d %Y")


def normalize_due_date(value: Any) -> str:
	"""Return ``YYYY-MM-DD`` for anything that reads as a date, else an empty string."""
	if value is None:
		return ""
	if isinstance(value, datetime):
		return value.date().isoformat()
	if isinstance(value, date):
		return value.isoformat()
	text = str(value).strip()
	if not text:
		return ""
	try:
		return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
	except ValueError:
		pass
	for fmt in _DATE_FORMATS:
		try:
			return datetime.strptime(text, fmt).date().isoformat()
		except ValueError:
			continue
	return ""


class Task(CamelModel):
	title: str = ""
	type: TaskType = TaskType.assignment
	due_date: str = ""
	# None means the task has no maximum; scores are then given as percentages
	points: Optional[float] = None
	description: str = ""

	@field_validator("title", "description", mode="before")
	@classmethod
	def _text(cls, v: Any) -> str:
		return "" if v is None else str(v)

	@field_validator("type", mode="before")
	@classmethod
	def _task_type(cls, v: Any) -> str:
		if isinstance(v, TaskType):
			return v.value
		value = str(v or "").strip().lower()
		if value not in TaskType.__members__:
			return TaskType.assignment.value
		return value

	@field_validator("due_date", mode="before")
	@classmethod
	def _due_date(cls, v: Any) -> str:
		return normalize_due_date(v)

	@field_validator("points", mode="before")
	@classmethod
	def _points(cls, v: Any) -> Optional[float]:
		return parse_optional_non_negative_number(v)


class PathCell(CamelModel):
	name: str = ""
	reward: int = Field(default=0, ge=0)

	@field_validator("reward", mode="before")
	@classmethod
	def _reward(cls, v: Any) -> int:
		value = parse_optional_non_negative_number(v)
		return int(value) if value is not None else 0


class Course(CamelModel):
	course_name: str = ""
	term: str = ""
	professor: str = ""
	tasks: List[Task] = Field(default_factory=list)
	path_vector: List[PathCell] = Field(default_factory=list)

	@property
	def path_length(self) -> int:
		return len(self.path_vector)


class CompletedTask(CamelModel):
	task_index: int
	title: str = ""
	points: Optional[float] = None
	score_obtained: Optional[float] = None
	score_percent: Optional[float] = None
	reward_gained: int = 0
	position: int = 0
	step_used: int = 0
	advance_by_used: Optional[int] = None
	die_min_used: Optional[int] = None
	die_roll_used: Optional[int] = None
	completed_at: datetime = Field(default_factory=datetime.utcnow)


class PendingCompletion(CamelModel):
	task_index: int
	title: str = ""
	points: Optional[float] = None
	score_obtained: Optional[float] = None
	score_percent: Optional[float] = None
	die_min: int
	created_at: datetime = Field(default_factory=datetime.utcnow)


class Student(CamelModel):
	current_position: int = 0
	total_reward: int = 0
	completed_tasks: List[CompletedTask] = Field(default_factory=list)
	pending_completion: Optional[PendingCompletion] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	def has_completed(self, task_index: int) -> bool:
		return any(c.task_index == task_index for c in self.completed_tasks)


# ---- Request bodies ----
# Numeric fields stay raw here; the engine coerces them so that junk input
# falls back to a default move instead of a 422.

class CompleteTaskRequest(CamelModel):
	task_index: int
	advance_by: Any = None
	score_obtained: Any = None
	score_percent: Any = None
	defer_roll: bool = False


class MoveRequest(CamelModel):
	advance_by: Any = None


# ---- Responses ----

class DieResult(CamelModel):
	min: int
	roll: int


class Outcome(CamelModel):
	kind: str
	message: str = ""
	reward_gained: int = 0
	position: int = 0
	total_reward: int = 0
	die: Optional[DieResult] = None
	pending: Optional[PendingCompletion] = None
	student: Student
