from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text
from .db import Base


# Both tables hold exactly one row; the board has a single course and a single student.
SINGLETON_ID = 1


class CourseRow(Base):
	__tablename__ = "course"
	id = Column(Integer, primary_key=True, default=SINGLETON_ID)
	course_name = Column(String(256), default="", nullable=False)
	term = Column(String(128), default="", nullable=False)
	professor = Column(String(256), default="", nullable=False)
	tasks_json = Column(Text, nullable=False, default="[]")  # JSON list of tasks
	path_json = Column(Text, nullable=False, default="[]")  # JSON list of path cells
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class StudentRow(Base):
	__tablename__ = "student"
	id = Column(Integer, primary_key=True, default=SINGLETON_ID)
	current_position = Column(Integer, default=0, nullable=False)
	total_reward = Column(Integer, default=0, nullable=False)
	completed_json = Column(Text, nullable=False, default="[]")  # JSON list of completion records
	pending_json = Column(Text, nullable=True)  # JSON snapshot, NULL when no roll is pending
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
