from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from .models import SINGLETON_ID, CourseRow, StudentRow
from .schemas import CompletedTask, Course, PathCell, PendingCompletion, Student, Task

logger = logging.getLogger(__name__)

# Every request's database work in this process goes through this lock. With
# in-memory SQLite all sessions share one connection, so the lock also covers
# handing the connection back to the pool.
_store_lock = threading.RLock()


@contextmanager
def serialized(db: Session) -> Iterator[Session]:
	"""Run one request's reads and writes under the store lock.

	The session is closed before the lock is released, so no transaction or
	pool reset on a shared connection can overlap another request's.
	"""
	with _store_lock:
		try:
			yield db
		finally:
			db.close()


_tasks_adapter = TypeAdapter(list[Task])
_cells_adapter = TypeAdapter(list[PathCell])
_completed_adapter = TypeAdapter(list[CompletedTask])


def _dump_list(adapter: TypeAdapter, items) -> str:
	return adapter.dump_json(items, by_alias=True).decode("utf-8")


class CourseStore:
	def __init__(self, db: Session) -> None:
		self.db = db

	def get(self) -> Optional[Course]:
		row = self.db.get(CourseRow, SINGLETON_ID)
		if row is None:
			return None
		return Course(
			course_name=row.course_name,
			term=row.term,
			professor=row.professor,
			tasks=_tasks_adapter.validate_json(row.tasks_json or "[]"),
			path_vector=_cells_adapter.validate_json(row.path_json or "[]"),
		)

	def save(self, course: Course) -> Course:
		row = self.db.get(CourseRow, SINGLETON_ID)
		if row is None:
			row = CourseRow(id=SINGLETON_ID)
			self.db.add(row)
		row.course_name = course.course_name
		row.term = course.term
		row.professor = course.professor
		row.tasks_json = _dump_list(_tasks_adapter, course.tasks)
		row.path_json = _dump_list(_cells_adapter, course.path_vector)
		row.updated_at = datetime.utcnow()
		self.db.commit()
		logger.info("course saved: %r, %s tasks, path length %s", course.course_name, len(course.tasks), course.path_length)
		return course


class StudentStore:
	def __init__(self, db: Session) -> None:
		self.db = db

	@staticmethod
	def _to_model(row: StudentRow) -> Student:
		pending = PendingCompletion.model_validate_json(row.pending_json) if row.pending_json else None
		return Student(
			current_position=row.current_position or 0,
			total_reward=row.total_reward or 0,
			completed_tasks=_completed_adapter.validate_json(row.completed_json or "[]"),
			pending_completion=pending,
			created_at=row.created_at,
			updated_at=row.updated_at,
		)

	@staticmethod
	def _write(row: StudentRow, student: Student) -> None:
		row.current_position = student.current_position
		row.total_reward = student.total_reward
		row.completed_json = _dump_list(_completed_adapter, student.completed_tasks)
		row.pending_json = student.pending_completion.model_dump_json(by_alias=True) if student.pending_completion else None
		row.updated_at = datetime.utcnow()

	def get(self) -> Optional[Student]:
		row = self.db.get(StudentRow, SINGLETON_ID)
		return self._to_model(row) if row is not None else None

	def ensure(self) -> Student:
		with _store_lock:
			row = self.db.get(StudentRow, SINGLETON_ID)
			if row is None:
				row = StudentRow(id=SINGLETON_ID)
				self._write(row, Student())
				self.db.add(row)
				self.db.commit()
				self.db.refresh(row)
				logger.info("student created")
			return self._to_model(row)

	def save(self, student: Student) -> Student:
		with _store_lock:
			row = self.db.get(StudentRow, SINGLETON_ID)
			if row is None:
				row = StudentRow(id=SINGLETON_ID)
				self.db.add(row)
			self._write(row, student)
			self.db.commit()
			self.db.refresh(row)
			return self._to_model(row)

	def reset(self) -> Student:
		with _store_lock:
			self.ensure()
			student = self.save(Student())
			logger.info("student reset")
			return student

	@contextmanager
	def mutate(self) -> Iterator[Student]:
		"""Hold the store lock for one read-modify-write.

		Saves on clean exit unless the student came back unchanged.
		"""
		with _store_lock:
			student = self.ensure()
			before = student.model_copy(deep=True)
			try:
				yield student
			except Exception:
				self.db.rollback()
				raise
			if student != before:
				self.save(student)
